"""Learned pattern domain entity."""

import uuid
from dataclasses import dataclass, replace
from datetime import datetime

DEFAULT_CATEGORY = "general"


@dataclass(frozen=True)
class LearnedPattern:
    """A question observed one or more times under a category.

    Every transition goes through ``dataclasses.replace``, so ``id`` is kept
    from creation on and ``added_to_training`` can only go False -> True.

    Attributes:
        id: Stable identifier assigned at creation
        question: Representative question text
        category: Free-form label
        frequency: Number of observed occurrences
        first_asked: First observation
        last_asked: Latest observation or revision
        added_to_training: Promoted into the curated answer set
        answer: Curated answer, set on promotion
    """

    id: str
    question: str
    category: str
    frequency: int
    first_asked: datetime
    last_asked: datetime
    added_to_training: bool = False
    answer: str | None = None

    @classmethod
    def create(
        cls,
        question: str,
        category: str,
        now: datetime,
        pattern_id: str | None = None,
    ) -> "LearnedPattern":
        """Build a pattern seen for the first time."""
        return cls(
            id=pattern_id or uuid.uuid4().hex,
            question=question,
            category=category or DEFAULT_CATEGORY,
            frequency=1,
            first_asked=now,
            last_asked=now,
        )

    def observed(self, now: datetime) -> "LearnedPattern":
        """Return a copy counting one more occurrence."""
        return replace(self, frequency=self.frequency + 1, last_asked=now)

    def promoted(self, answer: str) -> "LearnedPattern":
        """Return a copy promoted into training with ``answer``."""
        return replace(self, added_to_training=True, answer=answer)

    def revised(
        self,
        now: datetime,
        question: str | None = None,
        category: str | None = None,
        frequency: int | None = None,
        answer: str | None = None,
    ) -> "LearnedPattern":
        """Return a copy with the given fields overridden; None keeps the current value."""
        return replace(
            self,
            question=self.question if question is None else question,
            category=self.category if category is None else category,
            frequency=self.frequency if frequency is None else frequency,
            answer=self.answer if answer is None else answer,
            last_asked=now,
        )

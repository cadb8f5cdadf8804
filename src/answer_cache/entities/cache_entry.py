"""Cache entry domain entity."""

from dataclasses import dataclass, replace
from datetime import datetime


@dataclass(frozen=True)
class CacheEntry:
    """A question already answered by the LLM.

    Attributes:
        key: Normalized question, unique within the cache
        question: Question as first asked (trimmed), for display
        answer: Stored response text
        hits: Times this entry was served instead of calling the LLM
        created_at: When the entry was recorded
        last_used_at: Time of the latest hit, None until the first one
    """

    key: str
    question: str
    answer: str
    hits: int
    created_at: datetime
    last_used_at: datetime | None = None

    @classmethod
    def create(cls, key: str, question: str, answer: str, now: datetime) -> "CacheEntry":
        """Build a fresh, never-served entry."""
        return cls(key=key, question=question, answer=answer, hits=0, created_at=now)

    def with_hit(self, now: datetime) -> "CacheEntry":
        """Return a copy with one more hit, last used at ``now``."""
        return replace(self, hits=self.hits + 1, last_used_at=now)

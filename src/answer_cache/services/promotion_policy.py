"""Promotion eligibility, owned by the caller rather than the learner."""

from collections.abc import Iterable
from dataclasses import dataclass

from answer_cache.config import Settings, settings
from answer_cache.entities import LearnedPattern


@dataclass(frozen=True)
class PromotionPolicy:
    """A pattern is eligible once asked ``threshold`` times and not yet promoted."""

    threshold: int = 3

    def __post_init__(self) -> None:
        if self.threshold < 1:
            raise ValueError("threshold must be at least 1")

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> "PromotionPolicy":
        return cls(threshold=(config or settings).promotion_threshold)

    def is_eligible(self, pattern: LearnedPattern) -> bool:
        return not pattern.added_to_training and pattern.frequency >= self.threshold

    def candidates(self, patterns: Iterable[LearnedPattern]) -> list[LearnedPattern]:
        """Eligible patterns, in the order given."""
        return [pattern for pattern in patterns if self.is_eligible(pattern)]

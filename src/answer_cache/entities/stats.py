"""Read models computed on demand from the two stores.

None of these are persisted or cached.
"""

from dataclasses import dataclass, field
from datetime import datetime

from .cache_entry import CacheEntry
from .learned_pattern import LearnedPattern


@dataclass(frozen=True)
class EstimatedSavings:
    """LLM calls avoided by cache hits and their estimated cost."""

    api_calls: int
    dollars: float


@dataclass(frozen=True)
class CacheStatsSnapshot:
    """Aggregate view of the response cache."""

    total_entries: int
    total_hits: int
    used_entries: int
    avg_hits_per_entry: float
    estimated_savings: EstimatedSavings
    popular_entries: tuple[CacheEntry, ...] = ()


@dataclass(frozen=True)
class CategorySummary:
    """Per-category breakdown of the learner."""

    total: int
    frequent: int
    in_training: int
    top_questions: tuple[LearnedPattern, ...] = ()


@dataclass(frozen=True)
class LearningStatsSnapshot:
    """Aggregate view of the pattern learner."""

    total_patterns: int
    by_category: dict[str, int]
    total_frequent: int
    total_in_training: int
    threshold: int
    learning_rate: int
    pending_promotion: int
    categories: dict[str, CategorySummary] = field(default_factory=dict)


@dataclass(frozen=True)
class WindowCounts:
    """Items active within the last 24 hours, 7 days and 30 days."""

    last_24h: int
    last_7d: int
    last_30d: int


@dataclass(frozen=True)
class ActivitySnapshot:
    """Everything the admin dashboard shows on its activity page."""

    cache: CacheStatsSnapshot
    learning: LearningStatsSnapshot
    active_users: int
    documents: int
    cache_activity: WindowCounts
    learning_activity: WindowCounts
    generated_at: datetime

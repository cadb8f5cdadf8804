"""Domain entities for internal representation.

These are frozen dataclasses used by services and repositories. They are
NOT used for API contracts - use DTOs from the dto package for that, and
the repositories' document codecs for persistence.
"""

from .cache_entry import CacheEntry
from .learned_pattern import DEFAULT_CATEGORY, LearnedPattern
from .stats import (
    ActivitySnapshot,
    CacheStatsSnapshot,
    CategorySummary,
    EstimatedSavings,
    LearningStatsSnapshot,
    WindowCounts,
)

__all__ = [
    "DEFAULT_CATEGORY",
    "ActivitySnapshot",
    "CacheEntry",
    "CacheStatsSnapshot",
    "CategorySummary",
    "EstimatedSavings",
    "LearnedPattern",
    "LearningStatsSnapshot",
    "WindowCounts",
]

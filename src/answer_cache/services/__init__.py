"""Service layer for business logic.

Services depend on protocols (interfaces), not concrete storages, so the
tests run them over in-memory documents.

Architecture:
    Handler -> Service -> PersistedStore -> DocumentStorage
    (HTTP)  -> (Business) -> (State)     -> (Data Access)

Usage:
    ```python
    from answer_cache.repositories import JsonFileStorage
    from answer_cache.services import PatternLearner, ResponseCache, StatsAggregator

    cache = ResponseCache.create(JsonFileStorage("data/gpt-cache.json"))
    learner = PatternLearner.create(JsonFileStorage("data/learned-patterns.json"))
    stats = StatsAggregator(cache, learner)
    ```
"""

from .pattern_learner import PatternLearner
from .promotion_policy import PromotionPolicy
from .response_cache import ResponseCache
from .stats_aggregator import StatsAggregator, window_counts

__all__ = [
    "PatternLearner",
    "PromotionPolicy",
    "ResponseCache",
    "StatsAggregator",
    "window_counts",
]

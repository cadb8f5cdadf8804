"""Handler layer for HTTP endpoints.

This layer contains the HTTP request/response handlers.
Handlers depend on services (business logic), not directly on storages.

Architecture:
    Handler -> Service -> PersistedStore
    (HTTP)  -> (Business) -> (State)
"""

from .cache_handler import CacheHandler
from .learning_handler import LearningHandler
from .stats_handler import StatsHandler

__all__ = [
    "CacheHandler",
    "LearningHandler",
    "StatsHandler",
]

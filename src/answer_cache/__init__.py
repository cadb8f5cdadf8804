"""Answer Cache - response reuse and frequent-question learning for an LLM assistant.

This package provides a layered architecture:

Layers:
    - protocols: Interface contracts (DocumentStorage)
    - repositories: Durable storages and the PersistedStore
    - services: Business logic (ResponseCache, PatternLearner, StatsAggregator)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from answer_cache.repositories import JsonFileStorage
    from answer_cache.services import PatternLearner, ResponseCache

    cache = ResponseCache.create(JsonFileStorage("data/gpt-cache.json"))
    learner = PatternLearner.create(JsonFileStorage("data/learned-patterns.json"))
    ```

For HTTP API:
    ```python
    from answer_cache.api.app import app
    ```
"""

from answer_cache.config import configure_logging, settings
from answer_cache.entities import CacheEntry, LearnedPattern
from answer_cache.exceptions import (
    AnswerCacheError,
    InvalidInputError,
    NotFoundError,
    StorageUnavailableError,
)
from answer_cache.normalization import normalize_question
from answer_cache.protocols import DocumentStorage
from answer_cache.repositories import (
    InMemoryDocumentStorage,
    JsonFileStorage,
    PersistedStore,
    RedisDocumentStorage,
)
from answer_cache.services import PatternLearner, PromotionPolicy, ResponseCache, StatsAggregator

__all__ = [
    # Configuration
    "settings",
    "configure_logging",
    # Protocols (interfaces)
    "DocumentStorage",
    # Services (business logic)
    "ResponseCache",
    "PatternLearner",
    "PromotionPolicy",
    "StatsAggregator",
    # Repositories (data access)
    "PersistedStore",
    "JsonFileStorage",
    "RedisDocumentStorage",
    "InMemoryDocumentStorage",
    # Entities (domain models)
    "CacheEntry",
    "LearnedPattern",
    # Errors
    "AnswerCacheError",
    "InvalidInputError",
    "NotFoundError",
    "StorageUnavailableError",
    # Helpers
    "normalize_question",
]

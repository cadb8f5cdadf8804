"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services built once in the lifespan and stored in app.state
    - Dependency functions retrieve them from request.app.state
    - No global mutable state
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from answer_cache.config import Settings, configure_logging, settings
from answer_cache.handlers import CacheHandler, LearningHandler, StatsHandler
from answer_cache.protocols import DocumentStorage
from answer_cache.repositories import InMemoryDocumentStorage, JsonFileStorage, RedisDocumentStorage
from answer_cache.services import PatternLearner, PromotionPolicy, ResponseCache, StatsAggregator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Services:
    """Everything the app builds once per process."""

    cache: ResponseCache
    learner: PatternLearner
    policy: PromotionPolicy
    aggregator: StatsAggregator


def build_storage(config: Settings, name: str, path: Path) -> DocumentStorage:
    """Pick the durable backend configured by STORAGE_BACKEND.

    Args:
        config: Application settings.
        name: Store name, used as the Redis key suffix.
        path: Document path, used by the file backend.
    """
    if config.storage_backend == "redis":
        return RedisDocumentStorage.create(name, config)
    if config.storage_backend == "memory":
        return InMemoryDocumentStorage()
    return JsonFileStorage.create(path)


def build_services(config: Settings | None = None) -> Services:
    """Build the stores and services from settings."""
    config = config or settings
    cache = ResponseCache.create(
        build_storage(config, "cache", config.cache_path),
        per_call_cost=config.per_call_cost,
    )
    learner = PatternLearner.create(
        build_storage(config, "learning", config.learning_path),
        threshold=config.promotion_threshold,
        max_answer_length=config.max_answer_length,
    )
    return Services(
        cache=cache,
        learner=learner,
        policy=PromotionPolicy.from_settings(config),
        aggregator=StatsAggregator(cache, learner),
    )


def get_cache_handler(request: Request) -> CacheHandler:
    """Dependency injection for CacheHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "cache_handler", None)
    if handler is None:
        raise RuntimeError("CacheHandler not initialized. Check lifespan setup.")
    return handler


def get_learning_handler(request: Request) -> LearningHandler:
    """Dependency injection for LearningHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "learning_handler", None)
    if handler is None:
        raise RuntimeError("LearningHandler not initialized. Check lifespan setup.")
    return handler


def get_stats_handler(request: Request) -> StatsHandler:
    """Dependency injection for StatsHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "stats_handler", None)
    if handler is None:
        raise RuntimeError("StatsHandler not initialized. Check lifespan setup.")
    return handler


def get_services(request: Request) -> Services:
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise RuntimeError("Services not initialized. Check lifespan setup.")
    return services


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Reads ``app.state.settings`` (set by ``create_app``), builds the
    services and handlers and stores them in app.state. Stores hydrate
    here so a corrupt document is reported at startup.
    """
    config: Settings = getattr(app.state, "settings", None) or settings
    configure_logging(config.log_level)

    services = build_services(config)
    services.cache.entries()
    services.learner.list_patterns()

    app.state.services = services
    app.state.cache_handler = CacheHandler(cache=services.cache)
    app.state.learning_handler = LearningHandler(learner=services.learner, policy=services.policy)
    app.state.stats_handler = StatsHandler(aggregator=services.aggregator)

    logger.info("Answer cache initialized")
    logger.info("Cache storage: %s", services.cache.store.storage.describe())
    logger.info("Learning storage: %s", services.learner.store.storage.describe())
    logger.info("Promotion threshold: %d", services.policy.threshold)

    yield

    del app.state.stats_handler
    del app.state.learning_handler
    del app.state.cache_handler
    del app.state.services
    logger.info("Answer cache shut down")


# Type aliases for cleaner dependency injection
CacheHandlerDep = Annotated[CacheHandler, Depends(get_cache_handler)]
LearningHandlerDep = Annotated[LearningHandler, Depends(get_learning_handler)]
StatsHandlerDep = Annotated[StatsHandler, Depends(get_stats_handler)]
ServicesDep = Annotated[Services, Depends(get_services)]

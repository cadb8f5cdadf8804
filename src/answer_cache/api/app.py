from typing import Any

from fastapi import APIRouter, FastAPI, Query, Response, status
from fastapi.middleware.cors import CORSMiddleware

from answer_cache.api.dependencies import (
    CacheHandlerDep,
    LearningHandlerDep,
    ServicesDep,
    StatsHandlerDep,
    lifespan,
)
from answer_cache.config import Settings, settings
from answer_cache.dto import (
    ActivityResponse,
    CacheEntryItem,
    CacheLookupResponse,
    CacheStatsResponse,
    ClearResponse,
    DeleteResponse,
    HealthCheckResponse,
    LearningStatsResponse,
    ObserveRequest,
    PatternItem,
    PromoteRequest,
    QuestionRequest,
    StoreAnswerRequest,
    UpdatePatternRequest,
)

router = APIRouter()


@router.get("/")
async def root() -> dict[str, Any]:
    """Root endpoint with API information."""
    return {
        "name": "Answer Cache API",
        "version": "0.1.0",
        "description": "Response reuse cache and frequent-question learning",
        "endpoints": {
            "cache": "/cache",
            "learning": "/learning",
            "activity": "/stats/activity",
            "health": "/health",
            "docs": "/docs",
        },
    }


@router.get(
    "/health",
    response_model=HealthCheckResponse,
    responses={503: {"model": HealthCheckResponse, "description": "A storage backend is unreachable"}},
)
async def health(services: ServicesDep, response: Response) -> HealthCheckResponse:
    """Health check endpoint. 503 when a storage backend cannot be reached."""
    cache_store = services.cache.store
    learning_store = services.learner.store
    healthy = cache_store.is_healthy() and learning_store.is_healthy()
    if not healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthCheckResponse(
        status="healthy" if healthy else "unhealthy",
        cache_storage=cache_store.storage.describe(),
        learning_storage=learning_store.storage.describe(),
    )


# ---------------------------------------------------------------------
# Response cache
# ---------------------------------------------------------------------
@router.post("/cache/lookup", response_model=CacheLookupResponse)
async def lookup(request: QuestionRequest, handler: CacheHandlerDep) -> CacheLookupResponse:
    """Find a cached answer for a question (exact match after normalization)."""
    return await handler.lookup(request)


@router.post("/cache/store", response_model=CacheEntryItem)
async def store(request: StoreAnswerRequest, handler: CacheHandlerDep) -> CacheEntryItem:
    """Record an LLM exchange."""
    return await handler.store(request)


@router.post("/cache/hit", response_model=CacheEntryItem)
async def record_hit(request: QuestionRequest, handler: CacheHandlerDep) -> CacheEntryItem:
    """Count one reuse of a cached answer."""
    return await handler.record_hit(request)


@router.get("/cache/stats", response_model=CacheStatsResponse)
async def cache_stats(handler: CacheHandlerDep) -> CacheStatsResponse:
    """Get cache statistics and estimated savings."""
    return await handler.get_stats()


@router.post("/cache/clear", response_model=ClearResponse)
async def clear_cache(handler: CacheHandlerDep) -> ClearResponse:
    """Clear all entries from the cache."""
    return await handler.clear()


# ---------------------------------------------------------------------
# Pattern learning
# ---------------------------------------------------------------------
@router.post("/learning/observe", response_model=PatternItem)
async def observe(request: ObserveRequest, handler: LearningHandlerDep) -> PatternItem:
    """Count one occurrence of a question."""
    return await handler.observe(request)


@router.get("/learning/patterns", response_model=list[PatternItem])
async def list_patterns(
    handler: LearningHandlerDep,
    category: str | None = Query(None, description="Only patterns of this category"),
) -> list[PatternItem]:
    """List learned patterns, most frequent first."""
    return await handler.list_patterns(category)


@router.get("/learning/candidates", response_model=list[PatternItem])
async def promotion_candidates(handler: LearningHandlerDep) -> list[PatternItem]:
    """List patterns eligible for promotion."""
    return await handler.candidates()


@router.patch("/learning/patterns/{pattern_id}", response_model=PatternItem)
async def update_pattern(
    pattern_id: str, request: UpdatePatternRequest, handler: LearningHandlerDep
) -> PatternItem:
    """Revise a learned pattern."""
    return await handler.update(pattern_id, request)


@router.post("/learning/patterns/{pattern_id}/promote", response_model=PatternItem)
async def promote_pattern(
    pattern_id: str, request: PromoteRequest, handler: LearningHandlerDep
) -> PatternItem:
    """Promote a pattern into the curated answer set."""
    return await handler.promote(pattern_id, request)


@router.delete("/learning/patterns/{pattern_id}", response_model=DeleteResponse)
async def delete_pattern(pattern_id: str, handler: LearningHandlerDep) -> DeleteResponse:
    """Delete a learned pattern."""
    return await handler.remove(pattern_id)


@router.get("/learning/stats", response_model=LearningStatsResponse)
async def learning_stats(handler: LearningHandlerDep) -> LearningStatsResponse:
    """Get learning statistics."""
    return await handler.get_stats()


@router.post("/learning/reset", response_model=ClearResponse)
async def reset_learning(handler: LearningHandlerDep) -> ClearResponse:
    """Clear all learned patterns."""
    return await handler.reset()


# ---------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------
@router.get("/stats/activity", response_model=ActivityResponse)
async def activity(
    handler: StatsHandlerDep,
    active_users: int = Query(0, ge=0, description="Active users, from the user-profile store"),
    documents: int = Query(0, ge=0, description="Loaded documents, from the document store"),
) -> ActivityResponse:
    """Combined cache and learning activity for the admin dashboard."""
    return await handler.activity(active_users=active_users, documents=documents)


def create_app(config: Settings | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: Settings for storage and services. Defaults to settings.
    """
    app = FastAPI(
        title="Answer Cache API",
        description="Response reuse cache and frequent-question learning for the assistant",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = config or settings

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "answer_cache.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )

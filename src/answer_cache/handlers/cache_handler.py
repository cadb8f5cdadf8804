"""HTTP handlers for response cache operations.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes and error responses.
"""

from answer_cache.dto import (
    CacheEntryItem,
    CacheLookupResponse,
    CacheStatsResponse,
    ClearResponse,
    QuestionRequest,
    StoreAnswerRequest,
)
from answer_cache.services import ResponseCache

from .errors import to_http_error


class CacheHandler:
    """HTTP handlers for the response cache.

    Example:
        ```python
        handler = CacheHandler(cache=ResponseCache.create(storage))

        @app.post("/cache/lookup", response_model=CacheLookupResponse)
        async def lookup(request: QuestionRequest):
            return await handler.lookup(request)
        ```
    """

    def __init__(self, cache: ResponseCache) -> None:
        """Initialize the cache handler.

        Args:
            cache: The response cache service (required).
        """
        self._cache = cache

    async def lookup(self, request: QuestionRequest) -> CacheLookupResponse:
        """Handle POST /cache/lookup requests."""
        try:
            entry = self._cache.lookup(request.question)
        except Exception as e:
            raise to_http_error(e, "look up cache") from e

        return CacheLookupResponse(
            question=request.question,
            is_hit=entry is not None,
            entry=CacheEntryItem.model_validate(entry) if entry is not None else None,
        )

    async def store(self, request: StoreAnswerRequest) -> CacheEntryItem:
        """Handle POST /cache/store requests."""
        try:
            entry = self._cache.record(request.question, request.answer)
        except Exception as e:
            raise to_http_error(e, "store entry") from e
        return CacheEntryItem.model_validate(entry)

    async def record_hit(self, request: QuestionRequest) -> CacheEntryItem:
        """Handle POST /cache/hit requests. 404 when the question is not cached."""
        try:
            entry = self._cache.record_hit(request.question)
        except Exception as e:
            raise to_http_error(e, "record hit") from e
        return CacheEntryItem.model_validate(entry)

    async def get_stats(self) -> CacheStatsResponse:
        """Handle GET /cache/stats requests."""
        try:
            return CacheStatsResponse.model_validate(self._cache.stats())
        except Exception as e:
            raise to_http_error(e, "get stats") from e

    async def clear(self) -> ClearResponse:
        """Handle POST /cache/clear requests."""
        try:
            cleared = self._cache.reset()
        except Exception as e:
            raise to_http_error(e, "clear cache") from e
        return ClearResponse(cleared=cleared, message="Cache cleared successfully")

"""HTTP handlers for pattern learning operations."""

from fastapi import HTTPException, status

from answer_cache.dto import (
    ClearResponse,
    DeleteResponse,
    LearningStatsResponse,
    ObserveRequest,
    PatternItem,
    PromoteRequest,
    UpdatePatternRequest,
)
from answer_cache.services import PatternLearner, PromotionPolicy

from .errors import to_http_error


class LearningHandler:
    """HTTP handlers for the pattern learner and its promotion policy."""

    def __init__(self, learner: PatternLearner, policy: PromotionPolicy) -> None:
        self._learner = learner
        self._policy = policy

    async def observe(self, request: ObserveRequest) -> PatternItem:
        """Handle POST /learning/observe requests."""
        try:
            pattern = self._learner.observe(request.question, request.category)
        except Exception as e:
            raise to_http_error(e, "observe question") from e
        return PatternItem.model_validate(pattern)

    async def list_patterns(self, category: str | None = None) -> list[PatternItem]:
        """Handle GET /learning/patterns requests."""
        try:
            patterns = self._learner.list_patterns(category)
        except Exception as e:
            raise to_http_error(e, "list patterns") from e
        return [PatternItem.model_validate(p) for p in patterns]

    async def candidates(self) -> list[PatternItem]:
        """Handle GET /learning/candidates requests: patterns eligible for promotion."""
        try:
            patterns = self._policy.candidates(self._learner.list_patterns())
        except Exception as e:
            raise to_http_error(e, "list candidates") from e
        return [PatternItem.model_validate(p) for p in patterns]

    async def update(self, pattern_id: str, request: UpdatePatternRequest) -> PatternItem:
        """Handle PATCH /learning/patterns/{id} requests."""
        try:
            pattern = self._learner.update(
                pattern_id,
                question=request.question,
                category=request.category,
                frequency=request.frequency,
                answer=request.answer,
            )
        except Exception as e:
            raise to_http_error(e, "update pattern") from e
        return PatternItem.model_validate(pattern)

    async def promote(self, pattern_id: str, request: PromoteRequest) -> PatternItem:
        """Handle POST /learning/patterns/{id}/promote requests."""
        try:
            pattern = self._learner.promote(pattern_id, request.answer)
        except Exception as e:
            raise to_http_error(e, "promote pattern") from e
        return PatternItem.model_validate(pattern)

    async def remove(self, pattern_id: str) -> DeleteResponse:
        """Handle DELETE /learning/patterns/{id} requests."""
        try:
            removed = self._learner.remove(pattern_id)
        except Exception as e:
            raise to_http_error(e, "remove pattern") from e

        if not removed:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"pattern not found: {pattern_id!r}",
            )
        return DeleteResponse(ok=True)

    async def get_stats(self) -> LearningStatsResponse:
        """Handle GET /learning/stats requests."""
        try:
            return LearningStatsResponse.model_validate(self._learner.stats())
        except Exception as e:
            raise to_http_error(e, "get learning stats") from e

    async def reset(self) -> ClearResponse:
        """Handle POST /learning/reset requests."""
        try:
            cleared = self._learner.reset()
        except Exception as e:
            raise to_http_error(e, "reset learned patterns") from e
        return ClearResponse(cleared=cleared, message="Learned patterns cleared")

"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import (
    ObserveRequest,
    PromoteRequest,
    QuestionRequest,
    StoreAnswerRequest,
    UpdatePatternRequest,
)
from .responses import (
    ActivityResponse,
    CacheEntryItem,
    CacheLookupResponse,
    CacheStatsResponse,
    CategorySummaryItem,
    ClearResponse,
    DeleteResponse,
    EstimatedSavingsItem,
    HealthCheckResponse,
    LearningStatsResponse,
    PatternItem,
    WindowCountsItem,
)

__all__ = [
    "QuestionRequest",
    "StoreAnswerRequest",
    "ObserveRequest",
    "PromoteRequest",
    "UpdatePatternRequest",
    "ActivityResponse",
    "CacheEntryItem",
    "CacheLookupResponse",
    "CacheStatsResponse",
    "CategorySummaryItem",
    "ClearResponse",
    "DeleteResponse",
    "EstimatedSavingsItem",
    "HealthCheckResponse",
    "LearningStatsResponse",
    "PatternItem",
    "WindowCountsItem",
]

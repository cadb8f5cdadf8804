"""Response DTOs for API endpoints.

Built from entities with ``Model.model_validate(entity)``.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CacheEntryItem(BaseModel):
    """Single cached exchange."""

    model_config = ConfigDict(from_attributes=True)

    key: str = Field(..., description="Normalized question")
    question: str = Field(..., description="Question as first asked")
    answer: str = Field(..., description="Cached answer")
    hits: int = Field(..., description="Times served from cache", ge=0)
    created_at: datetime
    last_used_at: datetime | None = Field(None, description="Time of the latest hit")


class CacheLookupResponse(BaseModel):
    """Response DTO for cache lookup."""

    question: str
    is_hit: bool
    entry: CacheEntryItem | None = None


class EstimatedSavingsItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    api_calls: int = Field(..., ge=0)
    dollars: float = Field(..., ge=0.0)


class CacheStatsResponse(BaseModel):
    """Response DTO for cache statistics."""

    model_config = ConfigDict(from_attributes=True)

    total_entries: int = Field(..., ge=0)
    total_hits: int = Field(..., ge=0)
    used_entries: int = Field(..., description="Entries served at least once", ge=0)
    avg_hits_per_entry: float = Field(..., ge=0.0)
    estimated_savings: EstimatedSavingsItem
    popular_entries: list[CacheEntryItem] = Field(default_factory=list)


class ClearResponse(BaseModel):
    """Response DTO for administrative clear/reset."""

    cleared: int = Field(..., description="Number of items removed", ge=0)
    message: str


class PatternItem(BaseModel):
    """Single learned pattern."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    question: str
    category: str
    frequency: int = Field(..., ge=1)
    first_asked: datetime
    last_asked: datetime
    added_to_training: bool
    answer: str | None = None


class CategorySummaryItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total: int
    frequent: int
    in_training: int
    top_questions: list[PatternItem] = Field(default_factory=list)


class LearningStatsResponse(BaseModel):
    """Response DTO for learning statistics."""

    model_config = ConfigDict(from_attributes=True)

    total_patterns: int = Field(..., ge=0)
    by_category: dict[str, int]
    total_frequent: int = Field(..., ge=0)
    total_in_training: int = Field(..., ge=0)
    threshold: int = Field(..., ge=1)
    learning_rate: int = Field(..., description="Percent of patterns in training", ge=0, le=100)
    pending_promotion: int = Field(..., ge=0)
    categories: dict[str, CategorySummaryItem] = Field(default_factory=dict)


class DeleteResponse(BaseModel):
    ok: bool


class WindowCountsItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    last_24h: int
    last_7d: int
    last_30d: int


class ActivityResponse(BaseModel):
    """Response DTO for the dashboard activity snapshot."""

    model_config = ConfigDict(from_attributes=True)

    cache: CacheStatsResponse
    learning: LearningStatsResponse
    active_users: int = Field(..., ge=0)
    documents: int = Field(..., ge=0)
    cache_activity: WindowCountsItem
    learning_activity: WindowCountsItem
    generated_at: datetime


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    cache_storage: str = Field(..., description="Where the response cache is persisted")
    learning_storage: str = Field(..., description="Where the learned patterns are persisted")

"""Request DTOs for API endpoints."""

from pydantic import BaseModel, Field


class QuestionRequest(BaseModel):
    """Request DTO carrying a raw user question (lookup, hit)."""

    question: str = Field(..., description="The question as the user asked it", min_length=1)


class StoreAnswerRequest(BaseModel):
    """Request DTO for recording an LLM exchange in the cache."""

    question: str = Field(..., description="The original user question", min_length=1)
    answer: str = Field(..., description="The LLM answer to cache", min_length=1)


class ObserveRequest(BaseModel):
    """Request DTO for counting one occurrence of a question."""

    question: str = Field(..., description="The question as the user asked it", min_length=1)
    category: str = Field("general", description="Category detected by the router")


class PromoteRequest(BaseModel):
    """Request DTO for promoting a pattern into the curated answer set."""

    answer: str = Field(..., description="Curated answer for the pattern", min_length=1)


class UpdatePatternRequest(BaseModel):
    """Request DTO for revising a learned pattern. Omitted fields are kept."""

    question: str | None = Field(None, description="Representative question text", min_length=1)
    category: str | None = Field(None, description="Move the pattern to this category")
    frequency: int | None = Field(None, description="Reset the occurrence counter", ge=1)
    answer: str | None = Field(None, description="Curated answer", min_length=1)

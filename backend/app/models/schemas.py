"""Pydantic models for API requests and responses."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, model_validator
from pydantic.alias_generators import to_camel

from .categories import normalize_category
from .enums import RecordKind, Visibility


class CamelModel(BaseModel):
    """Base model speaking camelCase on the wire and snake_case in code."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Record Models
class RecordCreate(CamelModel):
    """Fields shared by every record creation request."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=2000)
    category: Optional[str] = Field(None, max_length=100)
    categories: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    visibility: Visibility = Visibility.PUBLIC
    shared_with: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _require_category(self):
        if normalize_category(self.category, self.categories) is None:
            raise ValueError("At least one category is required")
        return self


class PromptCreate(RecordCreate):
    """Request model for creating a prompt."""

    content: str = Field(..., min_length=1, max_length=20000)


class ToolCreate(RecordCreate):
    """Request model for creating a tool."""

    pricing: Optional[str] = Field(None, max_length=50)
    url: Optional[str] = Field(None, max_length=500)


class PromptUpdate(CamelModel):
    """Partial update of a prompt. Ownership, ids and ratings are not patchable."""

    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    categories: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    visibility: Optional[Visibility] = None
    shared_with: Optional[List[str]] = None
    content: Optional[str] = None


class ToolUpdate(CamelModel):
    """Partial update of a tool. Ownership, ids and ratings are not patchable."""

    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    categories: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    visibility: Optional[Visibility] = None
    shared_with: Optional[List[str]] = None
    pricing: Optional[str] = None
    url: Optional[str] = None


class RateRequest(CamelModel):
    """Request model for rating a record."""

    rating: StrictInt


class OwnerSummary(CamelModel):
    """Public projection of a record owner."""

    id: str
    username: Optional[str] = None
    email: Optional[str] = None


class RatingResponse(CamelModel):
    """One rater's rating."""

    user_id: str
    rating: int


class RecordResponse(CamelModel):
    """Response model for a prompt or tool."""

    id: str
    kind: RecordKind
    owner: OwnerSummary
    title: str
    description: str
    category: Optional[str] = None
    categories: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    visibility: Visibility
    shared_with: List[str] = Field(default_factory=list)
    ratings: List[RatingResponse] = Field(default_factory=list)
    average_rating: float = 0.0
    rating_count: int = 0
    content: Optional[str] = None
    pricing: Optional[str] = None
    url: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class RecordPage(CamelModel):
    """Response model for one page of records."""

    records: List[RecordResponse]
    total_pages: int
    total_count: int
    current_page: int


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str


# Category Models
class CategoryResponse(CamelModel):
    """Response model for a catalog category."""

    name: str
    slug: str
    description: str
    icon: str
    tool_count: int = 0
    featured_tools: List[str] = Field(default_factory=list)


class CategoryList(CamelModel):
    """Response model for the category catalog."""

    categories: List[CategoryResponse]
    total: int


# Health Check
class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str
    storage_mode: str
    version: str = "1.0.0"

from dataclasses import dataclass, field
from datetime import datetime

from app.models.categories import Category
from app.models.enums import RecordKind, Visibility


@dataclass
class RatingEntry:
    user_id: str
    rating: int


@dataclass
class StoredRecord:
    id: str
    kind: RecordKind
    owner_id: str
    title: str
    description: str
    category: Category | None
    visibility: Visibility
    created_at: datetime
    updated_at: datetime
    tags: list[str] = field(default_factory=list)
    shared_with: list[str] = field(default_factory=list)
    ratings: list[RatingEntry] = field(default_factory=list)
    average_rating: float = 0.0
    rating_count: int = 0
    content: str | None = None
    pricing: str | None = None
    url: str | None = None
    etag: str | None = None


@dataclass
class UserRecord:
    id: str
    username: str
    email: str


@dataclass
class CategoryRecord:
    name: str
    slug: str
    description: str
    icon: str
    tool_count: int
    featured_tools: list[str] = field(default_factory=list)

"""Models package."""

from .categories import (
    Category,
    MultipleCategories,
    SingleCategory,
    category_fields,
    category_names,
    normalize_category,
)
from .enums import RecordKind, Visibility
from .schemas import (
    CategoryList,
    CategoryResponse,
    HealthResponse,
    MessageResponse,
    OwnerSummary,
    PromptCreate,
    PromptUpdate,
    RateRequest,
    RatingResponse,
    RecordCreate,
    RecordPage,
    RecordResponse,
    ToolCreate,
    ToolUpdate,
)

__all__ = [
    # Enums
    "RecordKind",
    "Visibility",
    # Category values
    "Category",
    "SingleCategory",
    "MultipleCategories",
    "normalize_category",
    "category_names",
    "category_fields",
    # Record Models
    "RecordCreate",
    "PromptCreate",
    "ToolCreate",
    "PromptUpdate",
    "ToolUpdate",
    "RateRequest",
    "OwnerSummary",
    "RatingResponse",
    "RecordResponse",
    "RecordPage",
    "MessageResponse",
    # Category Models
    "CategoryResponse",
    "CategoryList",
    # Health
    "HealthResponse",
]

"""Services package."""

from .category_service import CategoryService
from .errors import (
    AccessDeniedError,
    AuthenticationRequiredError,
    RecordNotFoundError,
    RecordValidationError,
    RetrievalError,
)
from .query_builder import FilterSet
from .record_service import RecordService
from .storage_service import StorageService, get_storage_service

__all__ = [
    "StorageService",
    "get_storage_service",
    "RecordService",
    "CategoryService",
    "FilterSet",
    "RecordNotFoundError",
    "AccessDeniedError",
    "RecordValidationError",
    "RetrievalError",
    "AuthenticationRequiredError",
]

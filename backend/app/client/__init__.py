"""Python client for the directory API."""

from .api import ClientRecord, DirectoryApiClient, DirectoryClientError, PageResult
from .cache import PageCache, cache_key
from .state import LoadTicket, ToolFilters, ToolsState

__all__ = [
    "ClientRecord",
    "DirectoryApiClient",
    "DirectoryClientError",
    "PageResult",
    "PageCache",
    "cache_key",
    "LoadTicket",
    "ToolFilters",
    "ToolsState",
]

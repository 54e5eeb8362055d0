"""Page cache owned by the client state container."""

import json
from typing import Any, Optional

from .api import PageResult


def cache_key(filters: dict[str, Any], page: int) -> str:
    """Stable key for one filter combination and page."""
    return json.dumps({**filters, "page": page}, sort_keys=True)


class PageCache:
    """
    Fetched pages keyed by filters and page number.

    Entries never expire on their own; the owner clears the whole cache on
    logout and drops single entries on an explicit refresh.
    """

    def __init__(self):
        self._pages: dict[str, PageResult] = {}

    def get(self, key: str) -> Optional[PageResult]:
        return self._pages.get(key)

    def put(self, key: str, page: PageResult) -> None:
        self._pages[key] = page

    def invalidate(self, key: str) -> None:
        self._pages.pop(key, None)

    def clear(self) -> None:
        self._pages.clear()

    def __contains__(self, key: str) -> bool:
        return key in self._pages

    def __len__(self) -> int:
        return len(self._pages)

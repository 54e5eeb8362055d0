"""Client-side state container for browsing the tool catalog.

Holds the current filters and page, serves pages from an explicit cache,
derives facets from the loaded page, and applies a quick in-memory
filter/sort pass on top of the server's result.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, replace
from typing import Optional

from .api import ClientRecord, DirectoryApiClient, DirectoryClientError, PageResult
from .cache import PageCache, cache_key

logger = logging.getLogger(__name__)

ALL = "all"
PAGE_SIZE = 28  # 4 tools per row x 7 rows
LOAD_ERROR = "Failed to load tools. Please try again."

# Client sort names mapped to the server's sort keys.
SERVER_SORTS = {
    "rating-desc": "-rating",
    "rating-asc": "rating",
    "reviews-desc": "-reviews",
    "name-asc": "title",
    "name-desc": "-title",
}


@dataclass(frozen=True)
class ToolFilters:
    search: str = ""
    category: str = ALL
    pricing: str = ALL
    sort: str = "rating-desc"


@dataclass(frozen=True)
class LoadTicket:
    """Identifies one fetch; stale tickets are ignored on arrival."""

    key: str
    generation: int


class ToolsState:
    """State container for one catalog view."""

    def __init__(
        self,
        api: DirectoryApiClient,
        kind: str = "tool",
        page_size: int = PAGE_SIZE,
        cache: Optional[PageCache] = None,
    ):
        self.api = api
        self.kind = kind
        self.page_size = page_size
        self.cache = cache if cache is not None else PageCache()

        self.filters = ToolFilters()
        self.current_page = 1
        self.records: list[ClientRecord] = []
        self.total_pages = 1
        self.loading = False
        self.error: Optional[str] = None
        self._generation = 0

    @property
    def cache_key(self) -> str:
        return cache_key(asdict(self.filters), self.current_page)

    def set_filters(self, **changes) -> None:
        """Change filters and go back to the first page."""
        self.filters = replace(self.filters, **changes)
        self.current_page = 1
        self._generation += 1

    def set_page(self, page: int) -> None:
        if page < 1:
            raise ValueError("page must be at least 1")
        self.current_page = page
        self._generation += 1

    def begin_load(self) -> Optional[LoadTicket]:
        """
        Start loading the current filters and page.

        Returns:
            None when the page was served from the cache, otherwise a ticket
            to hand back to ``complete_load`` or ``fail_load``
        """
        self.error = None
        cached = self.cache.get(self.cache_key)
        if cached is not None:
            self._show(cached)
            self.loading = False
            return None
        self.loading = True
        return LoadTicket(key=self.cache_key, generation=self._generation)

    def request_params(self) -> dict:
        return {
            "category": self.filters.category if self.filters.category != ALL else None,
            "search": self.filters.search or None,
            "pricing": self.filters.pricing if self.filters.pricing != ALL else None,
            "sort": SERVER_SORTS.get(self.filters.sort),
            "page": self.current_page,
            "limit": self.page_size,
        }

    def complete_load(self, ticket: LoadTicket, page: PageResult) -> bool:
        """
        Store a fetched page; show it only if it is still the one wanted.

        Returns:
            False when the response was stale and not shown
        """
        self.cache.put(ticket.key, page)
        if ticket.generation != self._generation:
            logger.debug(f"Discarding stale response for {ticket.key}")
            return False
        self._show(page)
        self.loading = False
        return True

    def fail_load(self, ticket: LoadTicket, error: Exception) -> bool:
        """Report a failed fetch; cached pages are kept."""
        if ticket.generation != self._generation:
            return False
        logger.error(f"Error loading {self.kind}s: {error}")
        self.error = LOAD_ERROR
        self.loading = False
        return True

    def load(self) -> None:
        """Load the current page, from the cache when possible."""
        ticket = self.begin_load()
        if ticket is None:
            return
        try:
            page = self.api.list_records(self.kind, **self.request_params())
        except DirectoryClientError as e:
            self.fail_load(ticket, e)
            return
        self.complete_load(ticket, page)

    def refresh(self) -> None:
        """Drop the cached copy of the current page and fetch it again."""
        self.cache.invalidate(self.cache_key)
        self._generation += 1
        self.load()

    def logout(self) -> None:
        """Forget everything loaded for the previous identity."""
        self.cache.clear()
        self._generation += 1
        self.api.user_id = None
        self.records = []
        self.total_pages = 1
        self.error = None

    def _show(self, page: PageResult) -> None:
        self.records = list(page.records)
        self.total_pages = page.total_pages

    # Facets over the loaded page only.

    @property
    def categories(self) -> list[str]:
        names = {name for record in self.records for name in record.category_names}
        return sorted(names)

    @property
    def pricing_options(self) -> list[str]:
        return sorted({record.pricing for record in self.records if record.pricing})

    @property
    def category_stats(self) -> dict[str, int]:
        stats: dict[str, int] = {}
        for record in self.records:
            for name in record.category_names:
                stats[name] = stats.get(name, 0) + 1
        return stats

    def filtered_records(self) -> list[ClientRecord]:
        """Loaded records narrowed and ordered by the current filters."""
        search = self.filters.search.casefold()
        category = self.filters.category.casefold()
        pricing = self.filters.pricing.casefold()

        def matches(record: ClientRecord) -> bool:
            if search and search not in record.title.casefold() and search not in record.description.casefold():
                return False
            if category != ALL and category not in (n.casefold() for n in record.category_names):
                return False
            if pricing != ALL and (record.pricing or "").casefold() != pricing:
                return False
            return True

        selected = [record for record in self.records if matches(record)]
        return _sort_records(selected, self.filters.sort)


def _sort_records(records: list[ClientRecord], sort: str) -> list[ClientRecord]:
    if sort == "rating-desc":
        return sorted(records, key=lambda r: r.average_rating, reverse=True)
    if sort == "rating-asc":
        return sorted(records, key=lambda r: r.average_rating)
    if sort == "reviews-desc":
        return sorted(records, key=lambda r: r.rating_count, reverse=True)
    if sort == "name-asc":
        return sorted(records, key=lambda r: r.title.casefold())
    if sort == "name-desc":
        return sorted(records, key=lambda r: r.title.casefold(), reverse=True)
    return records

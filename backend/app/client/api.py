"""HTTP client for the directory listing endpoints."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import requests

from app.models.categories import Category, category_names, normalize_category

logger = logging.getLogger(__name__)


class DirectoryClientError(RuntimeError):
    """A listing request failed in transport or with an error status."""


@dataclass
class ClientRecord:
    """A listed record as the client sees it, category already normalized."""

    id: str
    title: str
    description: str
    category: Optional[Category]
    pricing: Optional[str] = None
    average_rating: float = 0.0
    rating_count: int = 0
    tags: list[str] = field(default_factory=list)

    @property
    def category_names(self) -> list[str]:
        return category_names(self.category)

    @classmethod
    def from_json(cls, item: dict[str, Any]) -> "ClientRecord":
        return cls(
            id=str(item.get("id", "")),
            title=item.get("title") or item.get("name") or "",
            description=item.get("description") or "",
            category=normalize_category(item.get("category"), item.get("categories")),
            pricing=item.get("pricing"),
            average_rating=float(item.get("averageRating") or 0.0),
            rating_count=int(item.get("ratingCount") or 0),
            tags=list(item.get("tags") or []),
        )


@dataclass
class PageResult:
    records: list[ClientRecord]
    total_pages: int
    total_count: int
    current_page: int


class DirectoryApiClient:
    """Thin wrapper over the ``/api/<kind>s`` listing endpoint."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        user_id: Optional[str] = None,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
        requester_header: str = "X-User-Id",
    ):
        self.base_url = base_url.rstrip("/")
        self.user_id = user_id
        self.timeout = timeout
        self.requester_header = requester_header
        self._session = session or requests.Session()

    def list_records(self, kind: str = "tool", **params: Any) -> PageResult:
        """
        Fetch one page of records.

        Args:
            kind: Record kind, ``tool`` or ``prompt``
            **params: Query parameters; None values are left out

        Returns:
            PageResult with the parsed records

        Raises:
            DirectoryClientError: On transport failure or a non-2xx status
        """
        url = f"{self.base_url}/api/{kind}s"
        query = {k: v for k, v in params.items() if v is not None}
        headers = {self.requester_header: self.user_id} if self.user_id else {}
        try:
            response = self._session.get(url, params=query, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            raise DirectoryClientError(f"Failed to list {kind}s: {e}") from e

        return PageResult(
            records=[ClientRecord.from_json(item) for item in data.get("records", [])],
            total_pages=int(data.get("totalPages", 1)),
            total_count=int(data.get("totalCount", 0)),
            current_page=int(data.get("currentPage", query.get("page", 1))),
        )

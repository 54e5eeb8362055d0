"""Translation of listing filters into a record predicate."""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Optional, Union

from ..models import Visibility
from ..repositories.predicates import (
    AnyElementEquals,
    AnyTextContains,
    ArrayContains,
    Equals,
    OneOf,
    Predicate,
    SortSpec,
    TextContains,
    all_of,
    any_of,
)
from .errors import RecordValidationError

DEFAULT_SORT = "-createdAt"

# Public sort names mapped to stored document fields.
SORT_FIELDS = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "rating": "average_rating",
    "reviews": "rating_count",
    "title": "title",
}


@dataclass(frozen=True)
class FilterSet:
    """Pagination and query constraints of one listing request."""

    page: int = 1
    limit: int = 12
    category: Optional[str] = None
    search: Optional[str] = None
    visibility: Union[Visibility, FrozenSet[Visibility], None] = None
    user_id: Optional[str] = None
    favorites: Optional[str] = None
    shared_with: Optional[str] = None
    accessible_by: Optional[str] = None
    pricing: Optional[str] = None
    sort: str = DEFAULT_SORT

    def __post_init__(self):
        if self.page < 1:
            raise RecordValidationError("page must be at least 1")
        if self.limit < 1:
            raise RecordValidationError("limit must be at least 1")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def parse_sort(sort: Optional[str]) -> SortSpec:
    """Parse ``[-]field`` into a SortSpec; a leading ``-`` sorts descending."""
    value = (sort or DEFAULT_SORT).strip()
    descending = value.startswith("-")
    name = value.lstrip("-+")
    if name not in SORT_FIELDS:
        raise RecordValidationError(
            f"Unknown sort field '{name}'. Expected one of: {', '.join(SORT_FIELDS)}"
        )
    return SortSpec(field=SORT_FIELDS[name], descending=descending)


def indexing_policy() -> dict:
    """Cosmos indexing policy with a composite index behind every listing sort.

    A composite index also serves the fully reversed order, so one entry per
    sort field covers both directions.
    """
    return {
        "indexingMode": "consistent",
        "includedPaths": [{"path": "/*"}],
        "excludedPaths": [{"path": '/"_etag"/?'}],
        "compositeIndexes": [
            SortSpec(field=field, descending=True).composite_index() for field in SORT_FIELDS.values()
        ],
    }


def readable_by(requester_id: Optional[str]) -> Predicate:
    """Records a requester may read: public, owned, or shared with them."""
    public = Equals("visibility", Visibility.PUBLIC.value)
    if not requester_id:
        return public
    return any_of(
        public,
        Equals("owner_id", requester_id),
        ArrayContains("shared_with", requester_id),
    )


def _visibility_predicate(visibility) -> Optional[Predicate]:
    if visibility is None:
        return None
    if isinstance(visibility, (set, frozenset, list, tuple)):
        values = sorted({Visibility(v).value for v in visibility})
        if not values:
            return None
        if len(values) == 1:
            return Equals("visibility", values[0])
        return OneOf("visibility", tuple(values))
    return Equals("visibility", Visibility(visibility).value)


def _search_predicate(search: str) -> Predicate:
    return any_of(
        TextContains("title", search),
        TextContains("description", search),
        AnyTextContains("tags", search),
    )


def build(filters: FilterSet, requester_id: Optional[str] = None) -> Predicate:
    """
    Compose the predicate for a listing request.

    Every filter that is present adds one conjunct. ``search`` and
    ``accessible_by`` each contribute an OR-group; when both are given the
    two groups are conjoined. The requester's readable set is always
    conjoined as well, so a listing never exposes a record that a detail
    fetch would refuse.

    Args:
        filters: Listing filters
        requester_id: Identity of the caller, None when anonymous

    Returns:
        Predicate matching exactly the records to list
    """
    parts: list[Predicate] = []

    visibility = _visibility_predicate(filters.visibility)
    if visibility is not None:
        parts.append(visibility)

    if filters.user_id:
        parts.append(Equals("owner_id", filters.user_id))

    if filters.favorites:
        parts.append(AnyElementEquals("ratings", "user_id", filters.favorites))

    if filters.shared_with:
        parts.append(ArrayContains("shared_with", filters.shared_with))

    if filters.accessible_by:
        parts.append(any_of(
            Equals("visibility", Visibility.PUBLIC.value),
            Equals("owner_id", filters.accessible_by),
            ArrayContains("shared_with", filters.accessible_by),
        ))

    if filters.category:
        parts.append(ArrayContains("categories", filters.category))

    if filters.pricing:
        parts.append(Equals("pricing", filters.pricing))

    if filters.search and filters.search.strip():
        parts.append(_search_predicate(filters.search.strip()))

    parts.append(readable_by(requester_id))
    return all_of(*parts)

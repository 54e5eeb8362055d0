"""Composable query predicates over stored record documents.

A predicate renders to a parameterized Cosmos DB SQL condition and can also
be evaluated against a document in memory. Field names always come from
code; user-provided values only ever travel as query parameters.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable


class SqlParameters:
    """Collects ``@pN`` parameters while a predicate is rendered."""

    def __init__(self):
        self._items: list[dict[str, Any]] = []

    def add(self, value: Any) -> str:
        name = f"@p{len(self._items)}"
        self._items.append({"name": name, "value": value})
        return name

    def as_list(self) -> list[dict[str, Any]]:
        return list(self._items)


class Predicate:
    """Base class for record predicates."""

    def to_sql(self, params: SqlParameters, alias: str = "c") -> str:
        raise NotImplementedError

    def matches(self, item: dict) -> bool:
        raise NotImplementedError


def _fold(value: Any) -> str:
    return str(value).casefold()


@dataclass(frozen=True)
class MatchAll(Predicate):
    def to_sql(self, params: SqlParameters, alias: str = "c") -> str:
        return "true"

    def matches(self, item: dict) -> bool:
        return True


@dataclass(frozen=True)
class Equals(Predicate):
    field: str
    value: Any

    def to_sql(self, params: SqlParameters, alias: str = "c") -> str:
        return f"{alias}.{self.field} = {params.add(self.value)}"

    def matches(self, item: dict) -> bool:
        return item.get(self.field) == self.value


@dataclass(frozen=True)
class OneOf(Predicate):
    field: str
    values: tuple

    def to_sql(self, params: SqlParameters, alias: str = "c") -> str:
        return f"ARRAY_CONTAINS({params.add(list(self.values))}, {alias}.{self.field})"

    def matches(self, item: dict) -> bool:
        return item.get(self.field) in self.values


@dataclass(frozen=True)
class ArrayContains(Predicate):
    field: str
    value: Any

    def to_sql(self, params: SqlParameters, alias: str = "c") -> str:
        return f"ARRAY_CONTAINS({alias}.{self.field}, {params.add(self.value)})"

    def matches(self, item: dict) -> bool:
        return self.value in (item.get(self.field) or [])


@dataclass(frozen=True)
class AnyElementEquals(Predicate):
    """An element of an array of objects has ``key == value``."""

    field: str
    key: str
    value: Any

    def to_sql(self, params: SqlParameters, alias: str = "c") -> str:
        return (
            f"EXISTS(SELECT VALUE e FROM e IN {alias}.{self.field} "
            f"WHERE e.{self.key} = {params.add(self.value)})"
        )

    def matches(self, item: dict) -> bool:
        return any(
            isinstance(e, dict) and e.get(self.key) == self.value
            for e in item.get(self.field) or []
        )


@dataclass(frozen=True)
class TextContains(Predicate):
    """Case-insensitive substring match on a string field."""

    field: str
    text: str

    def to_sql(self, params: SqlParameters, alias: str = "c") -> str:
        return f"CONTAINS({alias}.{self.field}, {params.add(self.text)}, true)"

    def matches(self, item: dict) -> bool:
        value = item.get(self.field)
        return isinstance(value, str) and _fold(self.text) in _fold(value)


@dataclass(frozen=True)
class AnyTextContains(Predicate):
    """Case-insensitive substring match on any string of an array field."""

    field: str
    text: str

    def to_sql(self, params: SqlParameters, alias: str = "c") -> str:
        return (
            f"EXISTS(SELECT VALUE t FROM t IN {alias}.{self.field} "
            f"WHERE CONTAINS(t, {params.add(self.text)}, true))"
        )

    def matches(self, item: dict) -> bool:
        needle = _fold(self.text)
        return any(isinstance(t, str) and needle in _fold(t) for t in item.get(self.field) or [])


@dataclass(frozen=True)
class And(Predicate):
    parts: tuple

    def to_sql(self, params: SqlParameters, alias: str = "c") -> str:
        return " AND ".join(f"({p.to_sql(params, alias)})" for p in self.parts)

    def matches(self, item: dict) -> bool:
        return all(p.matches(item) for p in self.parts)


@dataclass(frozen=True)
class Or(Predicate):
    parts: tuple

    def to_sql(self, params: SqlParameters, alias: str = "c") -> str:
        return " OR ".join(f"({p.to_sql(params, alias)})" for p in self.parts)

    def matches(self, item: dict) -> bool:
        return any(p.matches(item) for p in self.parts)


def all_of(*parts: Predicate) -> Predicate:
    """Conjoin predicates, dropping match-alls and flattening nested ANDs."""
    flat: list[Predicate] = []
    for part in parts:
        if isinstance(part, MatchAll):
            continue
        if isinstance(part, And):
            flat.extend(part.parts)
        else:
            flat.append(part)
    if not flat:
        return MatchAll()
    if len(flat) == 1:
        return flat[0]
    return And(tuple(flat))


def any_of(*parts: Predicate) -> Predicate:
    """Disjoin predicates. An OR containing a match-all matches everything."""
    if not parts or any(isinstance(p, MatchAll) for p in parts):
        return MatchAll()
    if len(parts) == 1:
        return parts[0]
    return Or(tuple(parts))


TIE_BREAK_FIELD = "id"


def _tie_key(item: dict) -> str:
    return str(item.get(TIE_BREAK_FIELD) or "")


@dataclass(frozen=True)
class SortSpec:
    """Stored field to order by, with ties broken by document id in the same direction.

    Cosmos needs a composite index on ``(field, id)`` to serve the two-key
    ORDER BY; see ``composite_index``.
    """

    field: str = "created_at"
    descending: bool = True

    def to_sql(self, alias: str = "c") -> str:
        direction = "DESC" if self.descending else "ASC"
        return f"ORDER BY {alias}.{self.field} {direction}, {alias}.{TIE_BREAK_FIELD} {direction}"

    def composite_index(self) -> list[dict]:
        order = "descending" if self.descending else "ascending"
        return [{"path": f"/{self.field}", "order": order}, {"path": f"/{TIE_BREAK_FIELD}", "order": order}]

    def apply(self, items: Iterable[dict]) -> list[dict]:
        items = list(items)
        present = [i for i in items if i.get(self.field) is not None]
        missing = [i for i in items if i.get(self.field) is None]
        ordered = sorted(
            present, key=lambda i: (i[self.field], _tie_key(i)), reverse=self.descending
        )
        missing.sort(key=_tie_key, reverse=self.descending)
        # Cosmos places undefined values first ascending and last descending.
        return ordered + missing if self.descending else missing + ordered

"""Category value of a record.

Legacy documents carry either ``category`` (a string) or ``categories`` (a
string or a list of strings). Both shapes are folded into one tagged union
when a record is ingested so that the rest of the code never branches on
the raw field types again.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Union


@dataclass(frozen=True)
class SingleCategory:
    name: str

    @property
    def names(self) -> tuple[str, ...]:
        return (self.name,)


@dataclass(frozen=True)
class MultipleCategories:
    names: tuple[str, ...]


Category = Union[SingleCategory, MultipleCategories]


def _clean(values: Iterable[object]) -> list[str]:
    seen: list[str] = []
    for value in values:
        if not isinstance(value, str):
            continue
        name = value.strip()
        if name and name not in seen:
            seen.append(name)
    return seen


def normalize_category(
    category: object = None, categories: object = None
) -> Optional[Category]:
    """Fold the raw ``category``/``categories`` fields into a Category.

    Args:
        category: Raw single-category field, usually a string
        categories: Raw multi-category field, a string or a list of strings

    Returns:
        SingleCategory when exactly one distinct name is present,
        MultipleCategories when several are, None when there is none
    """
    raw: list[object] = [category]
    if isinstance(categories, (set, frozenset)):
        raw.extend(sorted(categories, key=str))
    elif isinstance(categories, (list, tuple)):
        raw.extend(categories)
    else:
        raw.append(categories)

    names = _clean(raw)
    if not names:
        return None
    if len(names) == 1:
        return SingleCategory(names[0])
    return MultipleCategories(tuple(names))


def category_names(value: Optional[Category]) -> list[str]:
    """All names carried by a category value, in stored order."""
    if value is None:
        return []
    return list(value.names)


def category_fields(value: Optional[Category]) -> dict[str, object]:
    """Flatten a category value into its stored/wire fields."""
    if isinstance(value, SingleCategory):
        return {"category": value.name, "categories": [value.name]}
    if isinstance(value, MultipleCategories):
        return {"category": None, "categories": list(value.names)}
    return {"category": None, "categories": []}

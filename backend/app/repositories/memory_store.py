"""In-process repositories used when ``STORAGE_MODE=memory``.

They keep the same documents the Cosmos repositories write and evaluate the
same predicates, so listing behaves identically in both modes. A lock
around each map gives the per-document atomicity Cosmos provides natively.
"""

import copy
import threading
from typing import Callable

from app.repositories.documents import (
    category_from_document,
    category_to_document,
    document_id,
    record_from_document,
    record_to_document,
    user_from_document,
    user_to_document,
)
from app.repositories.predicates import Predicate, SortSpec
from app.repositories.types import CategoryRecord, StoredRecord, UserRecord


class MemoryRecordRepository:
    """Record repository backed by a dictionary of documents."""

    def __init__(self):
        self._items: dict[str, dict] = {}
        self._lock = threading.Lock()

    def get(self, kind: str, record_id: str) -> StoredRecord | None:
        with self._lock:
            item = self._items.get(document_id(kind, record_id))
            return record_from_document(item) if item else None

    def find(
        self,
        kind: str,
        predicate: Predicate,
        sort: SortSpec,
        offset: int = 0,
        limit: int | None = None,
    ) -> list[StoredRecord]:
        with self._lock:
            matching = [
                item for item in self._items.values()
                if item["kind"] == kind and predicate.matches(item)
            ]
        ordered = sort.apply(matching)
        end = None if limit is None else offset + limit
        return [record_from_document(item) for item in ordered[offset:end]]

    def count(self, kind: str, predicate: Predicate) -> int:
        with self._lock:
            return sum(
                1 for item in self._items.values()
                if item["kind"] == kind and predicate.matches(item)
            )

    def create(self, record: StoredRecord) -> StoredRecord:
        item = record_to_document(record)
        with self._lock:
            if item["id"] in self._items:
                raise ValueError(f"Record '{item['id']}' already exists")
            self._items[item["id"]] = item
        return record_from_document(item)

    def save_fields(self, record: StoredRecord, fields: list[str]) -> StoredRecord | None:
        document = record_to_document(record)
        with self._lock:
            item = self._items.get(document["id"])
            if item is None:
                return None
            updated = dict(item)
            for name in fields:
                updated[name] = copy.deepcopy(document[name])
            self._items[document["id"]] = updated
        return record_from_document(updated)

    def modify(
        self,
        kind: str,
        record_id: str,
        mutate: Callable[[StoredRecord], None],
    ) -> StoredRecord | None:
        key = document_id(kind, record_id)
        with self._lock:
            item = self._items.get(key)
            if item is None:
                return None
            record = record_from_document(item)
            mutate(record)
            updated = record_to_document(record)
            self._items[key] = updated
        return record_from_document(updated)

    def delete(self, kind: str, record_id: str) -> bool:
        with self._lock:
            return self._items.pop(document_id(kind, record_id), None) is not None


class MemoryUserRepository:
    """User repository backed by a dictionary."""

    def __init__(self):
        self._items: dict[str, dict] = {}

    def upsert(self, user: UserRecord) -> UserRecord:
        self._items[user.id] = user_to_document(user)
        return user

    def get(self, user_id: str) -> UserRecord | None:
        item = self._items.get(user_id)
        return user_from_document(item) if item else None

    def get_many(self, user_ids: list[str]) -> dict[str, UserRecord]:
        return {
            user_id: user_from_document(self._items[user_id])
            for user_id in set(user_ids)
            if user_id in self._items
        }


class MemoryCategoryRepository:
    """Category repository backed by a dictionary keyed by slug."""

    def __init__(self):
        self._items: dict[str, dict] = {}

    def replace_all(self, categories: list[CategoryRecord]) -> int:
        removed = len(self._items)
        self._items = {c.slug: category_to_document(c) for c in categories}
        return removed

    def list(self) -> list[CategoryRecord]:
        items = sorted(self._items.values(), key=lambda item: item["name"])
        return [category_from_document(item) for item in items]

    def get(self, slug: str) -> CategoryRecord | None:
        item = self._items.get(slug)
        return category_from_document(item) if item else None

import logging
from typing import Callable

from azure.core import MatchConditions
from azure.cosmos.exceptions import (
    CosmosAccessConditionFailedError,
    CosmosResourceNotFoundError,
)

from app.repositories.documents import document_id, record_from_document, record_to_document
from app.repositories.predicates import Predicate, SortSpec, SqlParameters
from app.repositories.types import StoredRecord

logger = logging.getLogger(__name__)

# Concurrent writers to one document are rare; a handful of ETag retries is plenty.
MAX_CONDITIONAL_ATTEMPTS = 5


class ConcurrentUpdateError(RuntimeError):
    """Raised when a conditional write keeps losing to concurrent writers."""


class CosmosRecordRepository:
    """Repository for prompt and tool records in Cosmos DB."""

    def __init__(self, container):
        """Initialize with Cosmos container.

        Args:
            container: Azure Cosmos DB container instance
        """
        self._container = container

    def get(self, kind: str, record_id: str) -> StoredRecord | None:
        """Get a record by ID.

        Returns:
            StoredRecord or None if not found
        """
        key = document_id(kind, record_id)
        try:
            item = self._container.read_item(item=key, partition_key=key)
        except CosmosResourceNotFoundError:
            return None
        return record_from_document(item)

    def find(
        self,
        kind: str,
        predicate: Predicate,
        sort: SortSpec,
        offset: int = 0,
        limit: int | None = None,
    ) -> list[StoredRecord]:
        """Find records of one kind matching a predicate.

        Args:
            kind: Record kind
            predicate: Filter to apply
            sort: Ordering of the results
            offset: Number of matching records to skip
            limit: Maximum number of records to return, None for all

        Returns:
            List of StoredRecord objects
        """
        params = SqlParameters()
        query = f"SELECT * FROM c WHERE {self._where(kind, predicate, params)} {sort.to_sql()}"
        if limit is not None:
            query += f" OFFSET {params.add(offset)} LIMIT {params.add(limit)}"
        items = self._container.query_items(
            query=query,
            parameters=params.as_list(),
            enable_cross_partition_query=True,
        )
        return [record_from_document(item) for item in items]

    def count(self, kind: str, predicate: Predicate) -> int:
        """Count records of one kind matching a predicate."""
        params = SqlParameters()
        query = f"SELECT VALUE COUNT(1) FROM c WHERE {self._where(kind, predicate, params)}"
        items = list(self._container.query_items(
            query=query,
            parameters=params.as_list(),
            enable_cross_partition_query=True,
        ))
        return int(items[0]) if items else 0

    def create(self, record: StoredRecord) -> StoredRecord:
        """Store a new record."""
        item = self._container.create_item(body=record_to_document(record))
        return record_from_document(item)

    def save_fields(self, record: StoredRecord, fields: list[str]) -> StoredRecord | None:
        """Write only the given document fields of a record in one patch.

        Fields that are not listed (notably the ratings) are left untouched,
        so a concurrent rating is never overwritten by an edit.

        Returns:
            The updated record or None if it no longer exists
        """
        document = record_to_document(record)
        operations = [
            {"op": "set", "path": f"/{name}", "value": document[name]} for name in fields
        ]
        key = document["id"]
        try:
            item = self._container.patch_item(
                item=key,
                partition_key=key,
                patch_operations=operations,
            )
        except CosmosResourceNotFoundError:
            return None
        return record_from_document(item)

    def modify(
        self,
        kind: str,
        record_id: str,
        mutate: Callable[[StoredRecord], None],
    ) -> StoredRecord | None:
        """Apply a read-modify-write to one record as a single atomic update.

        The write is conditional on the ETag that was read; when another
        writer got in first, the mutation is re-applied to the fresh copy.

        Returns:
            The updated record or None if not found
        """
        key = document_id(kind, record_id)
        for attempt in range(1, MAX_CONDITIONAL_ATTEMPTS + 1):
            try:
                item = self._container.read_item(item=key, partition_key=key)
            except CosmosResourceNotFoundError:
                return None
            record = record_from_document(item)
            mutate(record)
            try:
                saved = self._container.replace_item(
                    item=key,
                    body=record_to_document(record),
                    etag=item.get("_etag"),
                    match_condition=MatchConditions.IfNotModified,
                )
            except CosmosAccessConditionFailedError:
                logger.info(f"Concurrent update on {key}, attempt {attempt}")
                continue
            except CosmosResourceNotFoundError:
                return None
            return record_from_document(saved)
        raise ConcurrentUpdateError(f"Could not update {key} after {MAX_CONDITIONAL_ATTEMPTS} attempts")

    def delete(self, kind: str, record_id: str) -> bool:
        """Delete a record.

        Returns:
            True if deleted, False if it did not exist
        """
        key = document_id(kind, record_id)
        try:
            self._container.delete_item(item=key, partition_key=key)
            return True
        except CosmosResourceNotFoundError:
            return False

    @staticmethod
    def _where(kind: str, predicate: Predicate, params: SqlParameters) -> str:
        kind_param = params.add(kind)
        return f"c.kind = {kind_param} AND ({predicate.to_sql(params)})"

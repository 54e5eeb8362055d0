from azure.cosmos.exceptions import CosmosResourceNotFoundError

from app.repositories.documents import category_from_document, category_to_document, document_id
from app.repositories.types import CategoryRecord


class CosmosCategoryRepository:
    """Repository for the derived category catalog in Cosmos DB."""

    def __init__(self, container):
        """Initialize with Cosmos container.

        Args:
            container: Azure Cosmos DB container instance
        """
        self._container = container

    def replace_all(self, categories: list[CategoryRecord]) -> int:
        """Drop every stored category and write the given ones.

        Returns:
            Number of categories removed
        """
        existing = list(self._container.query_items(
            query="SELECT c.id FROM c WHERE c.kind = 'category'",
            enable_cross_partition_query=True,
        ))
        for item in existing:
            self._container.delete_item(item=item["id"], partition_key=item["id"])
        for category in categories:
            self._container.upsert_item(category_to_document(category))
        return len(existing)

    def list(self) -> list[CategoryRecord]:
        """List all categories ordered by name."""
        query = "SELECT * FROM c WHERE c.kind = 'category' ORDER BY c.name ASC"
        items = self._container.query_items(query=query, enable_cross_partition_query=True)
        return [category_from_document(item) for item in items]

    def get(self, slug: str) -> CategoryRecord | None:
        key = document_id("category", slug)
        try:
            item = self._container.read_item(item=key, partition_key=key)
        except CosmosResourceNotFoundError:
            return None
        return category_from_document(item)

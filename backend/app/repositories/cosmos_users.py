from azure.cosmos.exceptions import CosmosResourceNotFoundError

from app.repositories.documents import document_id, user_from_document, user_to_document
from app.repositories.types import UserRecord


class CosmosUserRepository:
    """Repository for user profiles in Cosmos DB."""

    def __init__(self, container):
        self._container = container

    def upsert(self, user: UserRecord) -> UserRecord:
        self._container.upsert_item(user_to_document(user))
        return user

    def get(self, user_id: str) -> UserRecord | None:
        key = document_id("user", user_id)
        try:
            item = self._container.read_item(item=key, partition_key=key)
        except CosmosResourceNotFoundError:
            return None
        return user_from_document(item)

    def get_many(self, user_ids: list[str]) -> dict[str, UserRecord]:
        """Look up several users in one query.

        Args:
            user_ids: IDs to resolve, duplicates allowed

        Returns:
            Mapping of user ID to UserRecord for the IDs that exist
        """
        ids = sorted(set(user_ids))
        if not ids:
            return {}
        query = "SELECT * FROM c WHERE c.kind = 'user' AND ARRAY_CONTAINS(@ids, c.user_id)"
        params = [{"name": "@ids", "value": ids}]
        items = self._container.query_items(
            query=query,
            parameters=params,
            enable_cross_partition_query=True,
        )
        users = [user_from_document(item) for item in items]
        return {user.id: user for user in users}

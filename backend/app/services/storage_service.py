"""Record store wiring for the configured storage mode."""

import logging
from typing import Optional

from ..config import settings
from ..repositories.memory_store import (
    MemoryCategoryRepository,
    MemoryRecordRepository,
    MemoryUserRepository,
)

logger = logging.getLogger(__name__)


class StorageService:
    """Holds the record, user and category repositories of one store."""

    def __init__(self):
        """Initialize the repositories for ``settings.storage_mode``."""
        self.storage_mode = settings.storage_mode
        if settings.is_cosmos_mode:
            self._init_cosmos_repositories()
        else:
            self._init_memory_repositories()
        logger.info(f"Record store initialized in {self.storage_mode} mode")

    def _init_memory_repositories(self):
        self.records = MemoryRecordRepository()
        self.users = MemoryUserRepository()
        self.categories = MemoryCategoryRepository()

    def _init_cosmos_repositories(self):
        from azure.cosmos import CosmosClient

        from ..repositories.cosmos_categories import CosmosCategoryRepository
        from ..repositories.cosmos_records import CosmosRecordRepository
        from ..repositories.cosmos_users import CosmosUserRepository

        client = CosmosClient(settings.cosmos_endpoint, credential=settings.cosmos_key)
        database = client.get_database_client(settings.cosmos_database)
        container = database.get_container_client(settings.cosmos_container)

        self.records = CosmosRecordRepository(container)
        self.users = CosmosUserRepository(container)
        self.categories = CosmosCategoryRepository(container)


_storage_service_instance: Optional[StorageService] = None


def get_storage_service() -> StorageService:
    """Return the process-wide storage service, creating it on first use."""
    global _storage_service_instance
    if _storage_service_instance is None:
        _storage_service_instance = StorageService()
    return _storage_service_instance

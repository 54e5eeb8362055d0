"""Pytest configuration for backend tests."""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from app.models import RecordKind, SingleCategory, Visibility
from app.repositories.types import StoredRecord, UserRecord
from app.services.storage_service import StorageService

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)

USERS = [
    UserRecord(id="u-owner", username="owner", email="owner@example.com"),
    UserRecord(id="u-friend", username="friend", email="friend@example.com"),
    UserRecord(id="u-stranger", username="stranger", email="stranger@example.com"),
]


@pytest.fixture
def storage():
    """Memory-backed storage service with a few known users."""
    with patch("app.services.storage_service.settings") as mock_settings:
        mock_settings.storage_mode = "memory"
        mock_settings.is_cosmos_mode = False
        svc = StorageService()
    for user in USERS:
        svc.users.upsert(user)
    return svc


@pytest.fixture
def make_record():
    """Factory for stored records; every call gets a later creation time."""
    counter = {"n": 0}

    def _make(**overrides) -> StoredRecord:
        counter["n"] += 1
        created = BASE_TIME + timedelta(minutes=counter["n"])
        values = dict(
            id=f"rec-{counter['n']}",
            kind=RecordKind.TOOL,
            owner_id="u-owner",
            title=f"Record {counter['n']}",
            description="A record",
            category=SingleCategory("Code"),
            visibility=Visibility.PUBLIC,
            created_at=created,
            updated_at=created,
        )
        values.update(overrides)
        return StoredRecord(**values)

    return _make

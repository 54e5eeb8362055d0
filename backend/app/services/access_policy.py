"""Read and mutate authorization for directory records."""

from typing import Optional

from ..models import Visibility
from ..repositories.types import StoredRecord


def can_read(record: StoredRecord, requester_id: Optional[str]) -> bool:
    """Public records are readable by anyone; others only by the owner and
    the identities they are shared with."""
    if Visibility(record.visibility) is Visibility.PUBLIC:
        return True
    if not requester_id:
        return False
    return requester_id == record.owner_id or requester_id in record.shared_with


def can_mutate(record: StoredRecord, requester_id: Optional[str]) -> bool:
    """Only the owner may change or delete a record, whatever its visibility."""
    return bool(requester_id) and requester_id == record.owner_id

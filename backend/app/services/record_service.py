"""Listing, retrieval and mutation of prompts and tools."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, Optional

from pydantic import BaseModel, ValidationError

from ..models import (
    OwnerSummary,
    PromptCreate,
    RatingResponse,
    RecordCreate,
    RecordKind,
    RecordPage,
    RecordResponse,
    SingleCategory,
    ToolCreate,
    category_fields,
    category_names,
    normalize_category,
)
from ..repositories.types import StoredRecord, UserRecord
from ..utils import total_pages
from . import query_builder
from .access_policy import can_mutate, can_read
from .errors import (
    AccessDeniedError,
    AuthenticationRequiredError,
    RecordNotFoundError,
    RecordValidationError,
    RetrievalError,
)
from .rating import apply_rating, validate_rating

logger = logging.getLogger(__name__)

CREATE_MODELS = {
    RecordKind.PROMPT: PromptCreate,
    RecordKind.TOOL: ToolCreate,
}

# Fields each kind carries beyond the common ones.
KIND_FIELDS = {
    RecordKind.PROMPT: ("content",),
    RecordKind.TOOL: ("pricing", "url"),
}

COMMON_FIELDS = ("title", "description", "tags", "visibility", "shared_with")


class RecordService:
    """Service for one kind of directory record."""

    def __init__(self, kind: RecordKind, records, users):
        """
        Initialize the record service.

        Args:
            kind: Record kind served by this instance
            records: Record repository (Cosmos or memory)
            users: User repository used to project owners
        """
        self.kind = RecordKind(kind)
        self._records = records
        self._users = users

    @property
    def label(self) -> str:
        return self.kind.value

    def list_records(
        self, filters: query_builder.FilterSet, requester_id: Optional[str] = None
    ) -> RecordPage:
        """
        List one page of records visible to the requester.

        Args:
            filters: Listing filters and pagination
            requester_id: Identity of the caller, None when anonymous

        Returns:
            RecordPage with the records and pagination metadata

        Raises:
            RecordValidationError: If the sort key is unknown
            RetrievalError: If the record store fails
        """
        predicate = query_builder.build(filters, requester_id)
        sort = query_builder.parse_sort(filters.sort)

        try:
            records = self._records.find(
                self.label, predicate, sort, offset=filters.offset, limit=filters.limit
            )
            total_count = self._records.count(self.label, predicate)
            owners = self._users.get_many([r.owner_id for r in records])
        except Exception as e:
            logger.exception(f"Error listing {self.label}s")
            raise RetrievalError(f"Error fetching {self.label}s") from e

        return RecordPage(
            records=[self._to_response(r, owners) for r in records],
            total_pages=total_pages(total_count, filters.limit),
            total_count=total_count,
            current_page=filters.page,
        )

    def get_record(self, record_id: str, requester_id: Optional[str] = None) -> RecordResponse:
        """
        Fetch one record the requester may read.

        Raises:
            RecordNotFoundError: If the ID does not resolve
            AccessDeniedError: If the record is not readable by the requester
        """
        record = self._require(record_id)
        if not can_read(record, requester_id):
            raise AccessDeniedError("Access denied")
        return self._to_response(record, self._users.get_many([record.owner_id]))

    def create_record(self, payload: RecordCreate, requester_id: Optional[str]) -> RecordResponse:
        """
        Create a record owned by the requester.

        Args:
            payload: Validated creation request of this service's kind
            requester_id: Identity of the caller, becomes the owner

        Returns:
            RecordResponse of the stored record
        """
        if not requester_id:
            raise AuthenticationRequiredError("Authentication required")
        if not isinstance(payload, CREATE_MODELS[self.kind]):
            raise RecordValidationError(f"Expected a {self.label} payload")

        now = datetime.now(timezone.utc)
        record = StoredRecord(
            id=uuid.uuid4().hex,
            kind=self.kind,
            owner_id=requester_id,
            title=payload.title,
            description=payload.description,
            category=normalize_category(payload.category, payload.categories),
            visibility=payload.visibility,
            created_at=now,
            updated_at=now,
            tags=list(payload.tags),
            shared_with=list(payload.shared_with),
        )
        for name in KIND_FIELDS[self.kind]:
            setattr(record, name, getattr(payload, name))

        saved = self._records.create(record)
        logger.info(f"Created {self.label} {saved.id} for {requester_id}")
        return self._to_response(saved, self._users.get_many([saved.owner_id]))

    def update_record(
        self, record_id: str, requester_id: Optional[str], patch: BaseModel
    ) -> RecordResponse:
        """
        Apply a partial update on behalf of the owner.

        Ownership is checked against the stored record before anything is
        written. The patched record is validated as a whole and only the
        patched fields are written back.

        Raises:
            RecordNotFoundError: If the ID does not resolve
            AccessDeniedError: If the requester is not the owner
            RecordValidationError: If the resulting record is invalid
        """
        record = self._require(record_id)
        if not can_mutate(record, requester_id):
            raise AccessDeniedError(f"Not authorized to update this {self.label}")

        changes = patch.model_dump(exclude_unset=True)
        merged = self._editable_fields(record)
        if "category" in changes or "categories" in changes:
            merged["category"] = changes.pop("category", None)
            merged["categories"] = changes.pop("categories", None) or []
        merged.update(changes)

        try:
            validated = CREATE_MODELS[self.kind].model_validate(merged)
        except ValidationError as e:
            raise RecordValidationError(str(e)) from e

        fields = ["updated_at"]
        for name in COMMON_FIELDS + KIND_FIELDS[self.kind]:
            if name in merged and name in patch.model_fields_set:
                setattr(record, name, getattr(validated, name))
                fields.append(name)
        if "category" in patch.model_fields_set or "categories" in patch.model_fields_set:
            record.category = normalize_category(validated.category, validated.categories)
            fields.extend(category_fields(record.category))
        record.updated_at = datetime.now(timezone.utc)

        saved = self._records.save_fields(record, fields)
        if saved is None:
            raise RecordNotFoundError(f"{self.label.capitalize()} not found")
        logger.info(f"Updated {self.label} {record_id}: {', '.join(fields)}")
        return self._to_response(saved, self._users.get_many([saved.owner_id]))

    def delete_record(self, record_id: str, requester_id: Optional[str]) -> None:
        """
        Permanently delete a record on behalf of the owner.

        Raises:
            RecordNotFoundError: If the ID does not resolve
            AccessDeniedError: If the requester is not the owner
        """
        record = self._require(record_id)
        if not can_mutate(record, requester_id):
            raise AccessDeniedError(f"Not authorized to delete this {self.label}")
        if not self._records.delete(self.label, record_id):
            raise RecordNotFoundError(f"{self.label.capitalize()} not found")
        logger.info(f"Deleted {self.label} {record_id}")

    def rate_record(self, record_id: str, requester_id: Optional[str], rating) -> RecordResponse:
        """
        Rate a readable record as the requester.

        Raises:
            AuthenticationRequiredError: If the requester is anonymous
            RecordNotFoundError: If the ID does not resolve
            AccessDeniedError: If the record is not readable by the requester
            RecordValidationError: If the rating is not an integer in [1, 5]
        """
        if not requester_id:
            raise AuthenticationRequiredError("Authentication required")
        record = self._require(record_id)
        if not can_read(record, requester_id):
            raise AccessDeniedError("Access denied")
        value = validate_rating(rating)

        updated = self._records.modify(
            self.label, record_id, lambda r: apply_rating(r, requester_id, value)
        )
        if updated is None:
            raise RecordNotFoundError(f"{self.label.capitalize()} not found")
        logger.info(f"{requester_id} rated {self.label} {record_id}: {value}")
        return self._to_response(updated, self._users.get_many([updated.owner_id]))

    def _require(self, record_id: str) -> StoredRecord:
        record = self._records.get(self.label, record_id)
        if record is None:
            raise RecordNotFoundError(f"{self.label.capitalize()} not found")
        return record

    def _editable_fields(self, record: StoredRecord) -> dict:
        fields = {name: getattr(record, name) for name in COMMON_FIELDS + KIND_FIELDS[self.kind]}
        fields["category"] = record.category.name if isinstance(record.category, SingleCategory) else None
        fields["categories"] = category_names(record.category)
        return fields

    def _to_response(self, record: StoredRecord, owners: Dict[str, UserRecord]) -> RecordResponse:
        owner = owners.get(record.owner_id)
        flat = category_fields(record.category)
        return RecordResponse(
            id=record.id,
            kind=record.kind,
            owner=OwnerSummary(
                id=record.owner_id,
                username=owner.username if owner else None,
                email=owner.email if owner else None,
            ),
            title=record.title,
            description=record.description,
            category=flat["category"],
            categories=flat["categories"],
            tags=record.tags,
            visibility=record.visibility,
            shared_with=record.shared_with,
            ratings=[RatingResponse(user_id=r.user_id, rating=r.rating) for r in record.ratings],
            average_rating=record.average_rating,
            rating_count=record.rating_count,
            content=record.content,
            pricing=record.pricing,
            url=record.url,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )

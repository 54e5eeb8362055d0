"""Conversion between stored documents and repository records.

Every record kind lives in one container, told apart by ``kind`` and keyed
by ``<kind>:<record id>``. The memory store keeps the very same documents so
that predicates behave identically in both modes.
"""

from datetime import datetime

from app.models.categories import category_fields, normalize_category
from app.models.enums import RecordKind, Visibility
from app.repositories.types import CategoryRecord, RatingEntry, StoredRecord, UserRecord


def document_id(kind: str, record_id: str) -> str:
    return f"{kind}:{record_id}"


def record_to_document(record: StoredRecord) -> dict:
    """Serialize a record into its stored document."""
    kind = RecordKind(record.kind).value
    item = {
        "id": document_id(kind, record.id),
        "kind": kind,
        "record_id": record.id,
        "owner_id": record.owner_id,
        "title": record.title,
        "description": record.description,
        "tags": list(record.tags),
        "visibility": Visibility(record.visibility).value,
        "shared_with": list(record.shared_with),
        "ratings": [{"user_id": r.user_id, "rating": r.rating} for r in record.ratings],
        "average_rating": record.average_rating,
        "rating_count": record.rating_count,
        "content": record.content,
        "pricing": record.pricing,
        "url": record.url,
        "created_at": record.created_at.isoformat(),
        "updated_at": record.updated_at.isoformat(),
    }
    item.update(category_fields(record.category))
    return item


def record_from_document(item: dict) -> StoredRecord:
    """Build a record from a stored document, normalizing legacy fields."""
    ratings = [
        RatingEntry(user_id=str(r["user_id"]), rating=int(r["rating"]))
        for r in item.get("ratings") or []
    ]
    created_at = datetime.fromisoformat(item["created_at"])
    return StoredRecord(
        id=item["record_id"],
        kind=RecordKind(item["kind"]),
        owner_id=item["owner_id"],
        title=item.get("title") or "",
        description=item.get("description") or "",
        category=normalize_category(item.get("category"), item.get("categories")),
        visibility=Visibility(item.get("visibility") or Visibility.PUBLIC.value),
        created_at=created_at,
        updated_at=datetime.fromisoformat(item["updated_at"]) if item.get("updated_at") else created_at,
        tags=list(item.get("tags") or []),
        shared_with=list(item.get("shared_with") or []),
        ratings=ratings,
        average_rating=float(item.get("average_rating") or 0.0),
        rating_count=int(item.get("rating_count") or len(ratings)),
        content=item.get("content"),
        pricing=item.get("pricing"),
        url=item.get("url"),
        etag=item.get("_etag"),
    )


def user_to_document(user: UserRecord) -> dict:
    return {
        "id": document_id("user", user.id),
        "kind": "user",
        "user_id": user.id,
        "username": user.username,
        "email": user.email,
    }


def user_from_document(item: dict) -> UserRecord:
    return UserRecord(id=item["user_id"], username=item["username"], email=item["email"])


def category_to_document(category: CategoryRecord) -> dict:
    return {
        "id": document_id("category", category.slug),
        "kind": "category",
        "name": category.name,
        "slug": category.slug,
        "description": category.description,
        "icon": category.icon,
        "tool_count": category.tool_count,
        "featured_tools": list(category.featured_tools),
    }


def category_from_document(item: dict) -> CategoryRecord:
    return CategoryRecord(
        name=item["name"],
        slug=item["slug"],
        description=item.get("description") or "",
        icon=item.get("icon") or "",
        tool_count=int(item.get("tool_count") or 0),
        featured_tools=list(item.get("featured_tools") or []),
    )

"""Tests for stored document conversion and category normalization."""

from datetime import datetime, timezone

import pytest

from app.models import MultipleCategories, RecordKind, SingleCategory, Visibility
from app.models.categories import category_fields, category_names, normalize_category
from app.repositories.documents import record_from_document, record_to_document


def _legacy_document(**fields):
    item = {
        "id": "tool:t1",
        "kind": "tool",
        "record_id": "t1",
        "owner_id": "u1",
        "title": "Legacy",
        "description": "Imported",
        "created_at": datetime(2023, 5, 1, tzinfo=timezone.utc).isoformat(),
    }
    item.update(fields)
    return item


@pytest.mark.parametrize("category,categories,expected", [
    ("Code", None, SingleCategory("Code")),
    (None, "Code", SingleCategory("Code")),
    (None, ["Code"], SingleCategory("Code")),
    ("Code", ["Code", "Docs"], MultipleCategories(("Code", "Docs"))),
    (None, [" Art ", "", "Art", 3], SingleCategory("Art")),
    (None, [], None),
    ("  ", None, None),
])
def test_normalize_category_shapes(category, categories, expected):
    assert normalize_category(category, categories) == expected


def test_category_fields_flatten_both_shapes():
    assert category_fields(SingleCategory("Code")) == {"category": "Code", "categories": ["Code"]}
    assert category_fields(MultipleCategories(("A", "B"))) == {"category": None, "categories": ["A", "B"]}
    assert category_fields(None) == {"category": None, "categories": []}
    assert category_names(MultipleCategories(("A", "B"))) == ["A", "B"]


def test_legacy_document_with_string_categories_is_normalized():
    record = record_from_document(_legacy_document(categories="Writing"))

    assert record.category == SingleCategory("Writing")
    assert record.visibility is Visibility.PUBLIC
    assert record.updated_at == record.created_at
    assert record.ratings == []


def test_rating_count_falls_back_to_ratings_list():
    record = record_from_document(_legacy_document(
        ratings=[{"user_id": "u2", "rating": 4}, {"user_id": "u3", "rating": "2"}],
        average_rating=3.0,
    ))
    assert record.rating_count == 2
    assert record.ratings[1].rating == 2


def test_document_carries_both_category_fields(make_record):
    item = record_to_document(make_record(id="x", category=MultipleCategories(("Art", "Code"))))

    assert item["id"] == "tool:x"
    assert item["kind"] == RecordKind.TOOL.value
    assert item["category"] is None
    assert item["categories"] == ["Art", "Code"]
    assert item["visibility"] == "public"

"""Tests for RecordService against the memory store."""

from unittest.mock import MagicMock

import pytest

from app.models import (
    MultipleCategories,
    PromptCreate,
    PromptUpdate,
    RecordKind,
    SingleCategory,
    ToolCreate,
    ToolUpdate,
    Visibility,
)
from app.repositories.types import RatingEntry
from app.services import (
    AccessDeniedError,
    AuthenticationRequiredError,
    FilterSet,
    RecordNotFoundError,
    RecordService,
    RecordValidationError,
    RetrievalError,
)


@pytest.fixture
def tools(storage):
    return RecordService(RecordKind.TOOL, storage.records, storage.users)


@pytest.fixture
def prompts(storage):
    return RecordService(RecordKind.PROMPT, storage.records, storage.users)


def _tool(**overrides) -> ToolCreate:
    values = dict(title="Linter", description="Finds bugs", category="Code", pricing="Free")
    values.update(overrides)
    return ToolCreate(**values)


def test_create_sets_owner_and_projects_user(tools):
    created = tools.create_record(_tool(), "u-owner")

    assert created.kind == RecordKind.TOOL
    assert created.owner.id == "u-owner"
    assert created.owner.username == "owner"
    assert created.category == "Code"
    assert created.categories == ["Code"]
    assert created.pricing == "Free"
    assert created.rating_count == 0


def test_create_requires_identity(tools):
    with pytest.raises(AuthenticationRequiredError):
        tools.create_record(_tool(), None)


def test_create_rejects_payload_of_other_kind(tools):
    payload = PromptCreate(title="P", description="D", category="Code", content="Say hi")
    with pytest.raises(RecordValidationError):
        tools.create_record(payload, "u-owner")


def test_kinds_do_not_see_each_other(tools, prompts):
    created = prompts.create_record(
        PromptCreate(title="P", description="D", category="Code", content="Say hi"), "u-owner"
    )
    with pytest.raises(RecordNotFoundError):
        tools.get_record(created.id, "u-owner")
    assert tools.list_records(FilterSet(), "u-owner").total_count == 0


def test_private_record_fetch_is_forbidden_to_strangers(tools):
    created = tools.create_record(_tool(visibility=Visibility.PRIVATE), "u-owner")

    assert tools.get_record(created.id, "u-owner").id == created.id
    with pytest.raises(AccessDeniedError):
        tools.get_record(created.id, "u-stranger")
    with pytest.raises(AccessDeniedError):
        tools.get_record(created.id, None)


def test_shared_record_is_readable_by_listed_user(tools):
    created = tools.create_record(
        _tool(visibility=Visibility.SHARED, shared_with=["u-friend"]), "u-owner"
    )
    assert tools.get_record(created.id, "u-friend").shared_with == ["u-friend"]


def test_get_missing_record_raises_not_found(tools):
    with pytest.raises(RecordNotFoundError):
        tools.get_record("nope", "u-owner")


def test_listing_never_exposes_unreadable_records(tools, storage, make_record):
    storage.records.create(make_record(id="pub"))
    storage.records.create(make_record(id="priv", visibility=Visibility.PRIVATE))
    storage.records.create(make_record(id="shared", visibility=Visibility.SHARED, shared_with=["u-friend"]))

    anonymous = {r.id for r in tools.list_records(FilterSet()).records}
    friend = {r.id for r in tools.list_records(FilterSet(), "u-friend").records}
    owner = {r.id for r in tools.list_records(FilterSet(), "u-owner").records}
    stranger_private = tools.list_records(FilterSet(visibility=Visibility.PRIVATE), "u-stranger")

    assert anonymous == {"pub"}
    assert friend == {"pub", "shared"}
    assert owner == {"pub", "priv", "shared"}
    assert stranger_private.total_count == 0


@pytest.mark.parametrize("count,limit,pages", [(0, 12, 1), (12, 12, 1), (13, 12, 2), (25, 10, 3)])
def test_total_pages(tools, storage, make_record, count, limit, pages):
    for _ in range(count):
        storage.records.create(make_record())

    page = tools.list_records(FilterSet(limit=limit))

    assert page.total_count == count
    assert page.total_pages == pages
    assert page.current_page == 1
    assert len(page.records) == min(count, limit)


def test_pages_do_not_overlap(tools, storage, make_record):
    for _ in range(5):
        storage.records.create(make_record())

    first = [r.id for r in tools.list_records(FilterSet(page=1, limit=2)).records]
    second = [r.id for r in tools.list_records(FilterSet(page=2, limit=2)).records]
    third = [r.id for r in tools.list_records(FilterSet(page=3, limit=2)).records]

    assert first == ["rec-5", "rec-4"]
    assert second == ["rec-3", "rec-2"]
    assert third == ["rec-1"]


def test_category_and_search_conjunction(tools, storage, make_record):
    storage.records.create(make_record(id="a", title="PyLint helper", category=SingleCategory("Code")))
    storage.records.create(make_record(id="b", title="Formatter", category=SingleCategory("Code")))
    storage.records.create(make_record(id="c", title="Lint art", category=SingleCategory("Art")))
    storage.records.create(make_record(
        id="d", title="Lint everything", category=MultipleCategories(("Art", "Code"))
    ))

    page = tools.list_records(FilterSet(category="Code", search="lint"))

    assert {r.id for r in page.records} == {"a", "d"}


def test_accessible_by_returns_union_without_duplicates(tools, storage, make_record):
    storage.records.create(make_record(id="public-by-u42", owner_id="U42"))
    storage.records.create(make_record(id="private-by-u42", owner_id="U42", visibility=Visibility.PRIVATE))
    storage.records.create(make_record(id="shared-to-u42", visibility=Visibility.SHARED, shared_with=["U42"]))
    storage.records.create(make_record(id="other-private", visibility=Visibility.PRIVATE))

    page = tools.list_records(FilterSet(accessible_by="U42"), "U42")
    ids = [r.id for r in page.records]

    assert sorted(ids) == ["private-by-u42", "public-by-u42", "shared-to-u42"]
    assert page.total_count == 3


def test_sort_by_rating(tools, storage, make_record):
    storage.records.create(make_record(id="low", average_rating=2.0))
    storage.records.create(make_record(id="high", average_rating=4.5))
    storage.records.create(make_record(id="none"))

    page = tools.list_records(FilterSet(sort="-rating"))

    assert [r.id for r in page.records] == ["high", "low", "none"]


def test_unknown_sort_is_a_validation_error(tools):
    with pytest.raises(RecordValidationError):
        tools.list_records(FilterSet(sort="-secret"))


def test_store_failure_becomes_retrieval_error(storage):
    records = MagicMock()
    records.find.side_effect = RuntimeError("connection reset")
    service = RecordService(RecordKind.TOOL, records, storage.users)

    with pytest.raises(RetrievalError, match="Error fetching tools"):
        service.list_records(FilterSet())


def test_update_by_non_owner_is_forbidden_and_changes_nothing(tools):
    created = tools.create_record(_tool(), "u-owner")

    with pytest.raises(AccessDeniedError):
        tools.update_record(created.id, "u-stranger", ToolUpdate(title="Hijacked"))

    assert tools.get_record(created.id).title == "Linter"


def test_update_only_touches_patched_fields(tools):
    created = tools.create_record(_tool(tags=["py"]), "u-owner")
    tools.rate_record(created.id, "u-friend", 4)

    updated = tools.update_record(created.id, "u-owner", ToolUpdate(title="Linter Pro"))

    assert updated.title == "Linter Pro"
    assert updated.tags == ["py"]
    assert updated.rating_count == 1
    assert updated.average_rating == 4.0
    assert updated.updated_at >= created.updated_at


def test_update_categories_rewrites_both_fields(tools):
    created = tools.create_record(_tool(), "u-owner")

    updated = tools.update_record(created.id, "u-owner", ToolUpdate(categories=["Code", "Docs"]))

    assert updated.category is None
    assert updated.categories == ["Code", "Docs"]
    listed = tools.list_records(FilterSet(category="Docs"))
    assert [r.id for r in listed.records] == [created.id]


def test_update_rejects_invalid_result(tools):
    created = tools.create_record(_tool(), "u-owner")

    with pytest.raises(RecordValidationError):
        tools.update_record(created.id, "u-owner", ToolUpdate(title=""))
    with pytest.raises(RecordValidationError):
        tools.update_record(created.id, "u-owner", ToolUpdate(category=None))


def test_update_prompt_content(prompts):
    created = prompts.create_record(
        PromptCreate(title="P", description="D", category="Writing", content="v1"), "u-owner"
    )
    updated = prompts.update_record(created.id, "u-owner", PromptUpdate(content="v2"))
    assert updated.content == "v2"


def test_delete_by_owner_removes_record(tools):
    created = tools.create_record(_tool(), "u-owner")

    tools.delete_record(created.id, "u-owner")

    with pytest.raises(RecordNotFoundError):
        tools.get_record(created.id, "u-owner")


def test_delete_by_non_owner_is_forbidden(tools):
    created = tools.create_record(_tool(), "u-owner")
    with pytest.raises(AccessDeniedError):
        tools.delete_record(created.id, "u-friend")
    assert tools.get_record(created.id).id == created.id


def test_delete_missing_record_raises_not_found(tools):
    with pytest.raises(RecordNotFoundError):
        tools.delete_record("missing", "u-owner")


def test_rating_twice_keeps_one_entry_per_rater(tools):
    created = tools.create_record(_tool(), "u-owner")

    tools.rate_record(created.id, "u-friend", 2)
    tools.rate_record(created.id, "u-stranger", 3)
    rated = tools.rate_record(created.id, "u-friend", 5)

    assert sorted((r.user_id, r.rating) for r in rated.ratings) == [("u-friend", 5), ("u-stranger", 3)]
    assert rated.rating_count == 2
    assert rated.average_rating == 4.0


@pytest.mark.parametrize("value", [0, 6])
def test_out_of_range_rating_changes_nothing(tools, value):
    created = tools.create_record(_tool(), "u-owner")
    tools.rate_record(created.id, "u-friend", 3)

    with pytest.raises(RecordValidationError):
        tools.rate_record(created.id, "u-friend", value)

    record = tools.get_record(created.id)
    assert record.average_rating == 3.0
    assert record.rating_count == 1


def test_rating_requires_read_access(tools):
    created = tools.create_record(_tool(visibility=Visibility.PRIVATE), "u-owner")
    with pytest.raises(AccessDeniedError):
        tools.rate_record(created.id, "u-stranger", 5)


def test_rating_requires_identity(tools):
    created = tools.create_record(_tool(), "u-owner")
    with pytest.raises(AuthenticationRequiredError):
        tools.rate_record(created.id, None, 5)


def test_rating_missing_record_raises_not_found(tools):
    with pytest.raises(RecordNotFoundError):
        tools.rate_record("missing", "u-friend", 5)


def test_favorites_lists_records_rated_by_user(tools, storage, make_record):
    storage.records.create(make_record(id="liked", ratings=[RatingEntry("u-friend", 5)], rating_count=1))
    storage.records.create(make_record(id="ignored"))

    page = tools.list_records(FilterSet(favorites="u-friend"), "u-friend")

    assert [r.id for r in page.records] == ["liked"]

from unittest.mock import MagicMock

import pytest
from azure.core import MatchConditions
from azure.cosmos.exceptions import (
    CosmosAccessConditionFailedError,
    CosmosResourceNotFoundError,
)

from app.models import Visibility
from app.repositories.cosmos_records import (
    MAX_CONDITIONAL_ATTEMPTS,
    ConcurrentUpdateError,
    CosmosRecordRepository,
)
from app.repositories.documents import record_to_document
from app.repositories.predicates import Equals, MatchAll, SortSpec
from app.services.rating import apply_rating


def _not_found(*args, **kwargs):
    raise CosmosResourceNotFoundError(status_code=404, message="Not found")


@pytest.fixture
def mock_cosmos_container():
    """Mock Cosmos DB container."""
    container = MagicMock()
    container.read_item = MagicMock(side_effect=_not_found)
    container.query_items = MagicMock(return_value=[])
    return container


def _stored(record, etag="etag-1"):
    item = record_to_document(record)
    item["_etag"] = etag
    return item


def test_get_reads_by_kind_prefixed_id(mock_cosmos_container, make_record):
    mock_cosmos_container.read_item = MagicMock(return_value=_stored(make_record(id="abc")))
    repo = CosmosRecordRepository(mock_cosmos_container)

    record = repo.get("tool", "abc")

    assert record.id == "abc"
    assert record.etag == "etag-1"
    mock_cosmos_container.read_item.assert_called_once_with(item="tool:abc", partition_key="tool:abc")


def test_get_returns_none_when_missing(mock_cosmos_container):
    repo = CosmosRecordRepository(mock_cosmos_container)
    assert repo.get("tool", "missing") is None


def test_find_builds_parameterized_query(mock_cosmos_container, make_record):
    mock_cosmos_container.query_items = MagicMock(return_value=[_stored(make_record(id="x"))])
    repo = CosmosRecordRepository(mock_cosmos_container)

    records = repo.find("tool", Equals("visibility", "public"), SortSpec("average_rating", True), offset=24, limit=12)

    assert [r.id for r in records] == ["x"]
    kwargs = mock_cosmos_container.query_items.call_args.kwargs
    assert kwargs["query"] == (
        "SELECT * FROM c WHERE c.kind = @p0 AND (c.visibility = @p1) "
        "ORDER BY c.average_rating DESC, c.id DESC OFFSET @p2 LIMIT @p3"
    )
    assert [p["value"] for p in kwargs["parameters"]] == ["tool", "public", 24, 12]
    assert kwargs["enable_cross_partition_query"] is True


def test_find_without_limit_has_no_offset_clause(mock_cosmos_container):
    repo = CosmosRecordRepository(mock_cosmos_container)
    repo.find("prompt", MatchAll(), SortSpec())
    query = mock_cosmos_container.query_items.call_args.kwargs["query"]
    assert "OFFSET" not in query
    assert "(true)" in query


def test_count_uses_value_count(mock_cosmos_container):
    mock_cosmos_container.query_items = MagicMock(return_value=iter([7]))
    repo = CosmosRecordRepository(mock_cosmos_container)

    assert repo.count("tool", MatchAll()) == 7
    assert mock_cosmos_container.query_items.call_args.kwargs["query"].startswith("SELECT VALUE COUNT(1)")


def test_create_writes_document(mock_cosmos_container, make_record):
    mock_cosmos_container.create_item = MagicMock(side_effect=lambda body: body)
    repo = CosmosRecordRepository(mock_cosmos_container)

    repo.create(make_record(id="new"))

    body = mock_cosmos_container.create_item.call_args.kwargs["body"]
    assert body["id"] == "tool:new"
    assert body["kind"] == "tool"
    assert body["categories"] == ["Code"]


def test_save_fields_patches_only_listed_fields(mock_cosmos_container, make_record):
    record = make_record(id="abc", title="New title")
    mock_cosmos_container.patch_item = MagicMock(return_value=_stored(record))
    repo = CosmosRecordRepository(mock_cosmos_container)

    repo.save_fields(record, ["updated_at", "title"])

    kwargs = mock_cosmos_container.patch_item.call_args.kwargs
    assert kwargs["item"] == "tool:abc"
    assert kwargs["patch_operations"] == [
        {"op": "set", "path": "/updated_at", "value": record.updated_at.isoformat()},
        {"op": "set", "path": "/title", "value": "New title"},
    ]


def test_save_fields_returns_none_when_missing(mock_cosmos_container, make_record):
    mock_cosmos_container.patch_item = MagicMock(side_effect=_not_found)
    repo = CosmosRecordRepository(mock_cosmos_container)
    assert repo.save_fields(make_record(), ["title"]) is None


def test_modify_replaces_conditionally_on_etag(mock_cosmos_container, make_record):
    mock_cosmos_container.read_item = MagicMock(return_value=_stored(make_record(id="abc"), "etag-7"))
    mock_cosmos_container.replace_item = MagicMock(side_effect=lambda **kw: kw["body"])
    repo = CosmosRecordRepository(mock_cosmos_container)

    updated = repo.modify("tool", "abc", lambda r: apply_rating(r, "u1", 4))

    assert updated.rating_count == 1
    kwargs = mock_cosmos_container.replace_item.call_args.kwargs
    assert kwargs["etag"] == "etag-7"
    assert kwargs["match_condition"] == MatchConditions.IfNotModified
    assert kwargs["body"]["ratings"] == [{"user_id": "u1", "rating": 4}]


def test_modify_reapplies_mutation_after_precondition_failure(mock_cosmos_container, make_record):
    stale = _stored(make_record(id="abc"), "etag-1")
    fresh_record = make_record(id="abc")
    apply_rating(fresh_record, "u2", 2)
    fresh = _stored(fresh_record, "etag-2")
    mock_cosmos_container.read_item = MagicMock(side_effect=[stale, fresh])

    def replace(**kwargs):
        if kwargs["etag"] != "etag-2":
            raise CosmosAccessConditionFailedError(status_code=412, message="Precondition failed")
        return kwargs["body"]

    mock_cosmos_container.replace_item = MagicMock(side_effect=replace)
    repo = CosmosRecordRepository(mock_cosmos_container)

    calls = []
    repo.modify("tool", "abc", lambda r: calls.append(apply_rating(r, "u1", 4)))

    assert len(calls) == 2
    second = mock_cosmos_container.replace_item.call_args_list[1].kwargs
    assert second["etag"] == "etag-2"
    assert {r["user_id"] for r in second["body"]["ratings"]} == {"u1", "u2"}


def test_modify_gives_up_after_bounded_attempts(mock_cosmos_container, make_record):
    mock_cosmos_container.read_item = MagicMock(return_value=_stored(make_record(id="abc")))
    mock_cosmos_container.replace_item = MagicMock(
        side_effect=CosmosAccessConditionFailedError(status_code=412, message="Precondition failed")
    )
    repo = CosmosRecordRepository(mock_cosmos_container)

    with pytest.raises(ConcurrentUpdateError):
        repo.modify("tool", "abc", lambda r: None)
    assert mock_cosmos_container.replace_item.call_count == MAX_CONDITIONAL_ATTEMPTS


def test_modify_returns_none_when_missing(mock_cosmos_container):
    repo = CosmosRecordRepository(mock_cosmos_container)
    assert repo.modify("tool", "missing", lambda r: None) is None


def test_delete_reports_missing(mock_cosmos_container):
    mock_cosmos_container.delete_item = MagicMock(side_effect=_not_found)
    repo = CosmosRecordRepository(mock_cosmos_container)
    assert repo.delete("tool", "missing") is False


def test_delete_existing(mock_cosmos_container):
    mock_cosmos_container.delete_item = MagicMock(return_value=None)
    repo = CosmosRecordRepository(mock_cosmos_container)
    assert repo.delete("tool", "abc") is True
    mock_cosmos_container.delete_item.assert_called_once_with(item="tool:abc", partition_key="tool:abc")


def test_private_visibility_round_trips(mock_cosmos_container, make_record):
    mock_cosmos_container.read_item = MagicMock(
        return_value=_stored(make_record(id="abc", visibility=Visibility.PRIVATE))
    )
    repo = CosmosRecordRepository(mock_cosmos_container)
    assert repo.get("tool", "abc").visibility is Visibility.PRIVATE

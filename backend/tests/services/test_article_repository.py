"""Article Repository — CRUD semantics over the fake store.

Invariants:
    - create then get_by_id returns the exact inputs with createdAt == updatedAt
    - update_by_id moves updatedAt to the current clock, never backwards, and keeps createdAt
    - delete_by_id then get_by_id is NotFound
    - list() after N creates returns N distinct ids, newest update first
    - Driver failures surface as StoreError, validation failures before any store call
"""

from datetime import datetime, timedelta, timezone

import pytest
from bson import ObjectId
from pymongo.errors import AutoReconnect

from article_desk.core.errors import (
    InputValidationError, ResourceNotFoundError, StoreError,
)


async def test_create_then_get_returns_exact_values(repo):
    created = await repo.create("  Spaced title ", "<p>Hello <b>world</b></p>")
    fetched = await repo.get_by_id(created["id"])

    assert fetched == created
    assert fetched["title"] == "  Spaced title "
    assert fetched["content"] == "<p>Hello <b>world</b></p>"
    assert fetched["createdAt"] == fetched["updatedAt"]


async def test_title_boundary(repo):
    await repo.create("A" * 200, "x")
    with pytest.raises(InputValidationError):
        await repo.create("A" * 201, "x")


async def test_invalid_create_writes_nothing(repo, articles_collection):
    with pytest.raises(InputValidationError):
        await repo.create("", "x")
    with pytest.raises(InputValidationError):
        await repo.create("T", "   ")
    assert articles_collection.docs == {}


async def test_non_string_fields_rejected_before_store(repo, articles_collection):
    with pytest.raises(InputValidationError):
        await repo.create(123, "c")
    with pytest.raises(InputValidationError):
        await repo.create("T", None)
    assert articles_collection.docs == {}


async def test_list_empty(repo):
    assert await repo.list() == []


async def test_list_after_n_creates(repo):
    for i in range(4):
        await repo.create(f"Title {i}", f"<p>{i}</p>")
    articles = await repo.list()
    assert len(articles) == 4
    assert len({a["id"] for a in articles}) == 4


async def test_list_orders_by_updated_at_desc(repo, articles_collection):
    base = datetime(2026, 1, 1, tzinfo=timezone.utc)
    for offset, title in [(1, "middle"), (2, "newest"), (0, "oldest")]:
        stamp = base + timedelta(minutes=offset)
        await articles_collection.insert_one({
            "title": title, "content": "c",
            "createdAt": stamp, "updatedAt": stamp,
        })
    titles = [a["title"] for a in await repo.list()]
    assert titles == ["newest", "middle", "oldest"]


async def test_list_ties_broken_by_id(repo, articles_collection):
    stamp = datetime(2026, 1, 1, tzinfo=timezone.utc)
    ids = [ObjectId() for _ in range(3)]
    for oid in ids:
        await articles_collection.insert_one({
            "_id": oid, "title": "t", "content": "c",
            "createdAt": stamp, "updatedAt": stamp,
        })
    listed = [a["id"] for a in await repo.list()]
    assert listed == [str(oid) for oid in sorted(ids, reverse=True)]


async def test_update_replaces_fields_and_refreshes_timestamp(repo):
    created = await repo.create("Old", "<p>old</p>")
    updated = await repo.update_by_id(created["id"], "New", "<p>new</p>")

    assert updated["id"] == created["id"]
    assert updated["title"] == "New"
    assert updated["content"] == "<p>new</p>"
    assert updated["createdAt"] == created["createdAt"]
    assert updated["updatedAt"] >= created["updatedAt"]
    assert await repo.get_by_id(created["id"]) == updated


async def test_update_moves_updated_at_to_current_clock(repo, monkeypatch):
    created = await repo.create("Old", "<p>old</p>")
    later = datetime.fromisoformat(created["updatedAt"]) + timedelta(seconds=5)
    monkeypatch.setattr(
        "article_desk.services.article_repository.utc_now", lambda: later,
    )

    updated = await repo.update_by_id(created["id"], "New", "<p>new</p>")

    assert updated["updatedAt"] > created["updatedAt"]
    assert updated["updatedAt"] == later.isoformat(timespec="milliseconds")
    assert updated["createdAt"] == created["createdAt"]


async def test_update_never_moves_updated_at_backwards(repo, articles_collection):
    future = datetime(2999, 1, 1, tzinfo=timezone.utc)
    result = await articles_collection.insert_one({
        "title": "t", "content": "c", "createdAt": future, "updatedAt": future,
    })
    updated = await repo.update_by_id(str(result.inserted_id), "t2", "c2")
    assert updated["updatedAt"] == "2999-01-01T00:00:00.000+00:00"
    assert updated["title"] == "t2"


async def test_update_validates_fields(repo):
    created = await repo.create("T", "c")
    with pytest.raises(InputValidationError):
        await repo.update_by_id(created["id"], "", "c")
    assert (await repo.get_by_id(created["id"]))["title"] == "T"


async def test_update_missing_is_not_found(repo):
    with pytest.raises(ResourceNotFoundError):
        await repo.update_by_id(str(ObjectId()), "T", "c")


async def test_get_missing_is_not_found(repo):
    with pytest.raises(ResourceNotFoundError) as exc:
        await repo.get_by_id(str(ObjectId()))
    assert exc.value.http_status == 404


async def test_malformed_id_is_validation_error(repo, mongo_server):
    for op in (
        repo.get_by_id("nope"),
        repo.update_by_id("nope", "T", "c"),
        repo.delete_by_id("nope"),
    ):
        with pytest.raises(InputValidationError):
            await op
    # rejected before the store was ever touched
    assert mongo_server.clients == []


async def test_delete_then_get_is_not_found(repo):
    created = await repo.create("T", "c")
    await repo.delete_by_id(created["id"])
    with pytest.raises(ResourceNotFoundError):
        await repo.get_by_id(created["id"])


async def test_delete_twice_is_not_found(repo):
    created = await repo.create("T", "c")
    await repo.delete_by_id(created["id"])
    with pytest.raises(ResourceNotFoundError):
        await repo.delete_by_id(created["id"])


async def test_driver_failure_is_store_error(repo, articles_collection):
    await repo.create("T", "c")
    articles_collection.fail_with = AutoReconnect("connection reset")
    with pytest.raises(StoreError) as exc:
        await repo.list()
    assert exc.value.operation == "find"
    with pytest.raises(StoreError):
        await repo.create("T", "c")


async def test_connection_failure_recovers_on_next_call(repo, mongo_server):
    mongo_server.connect_failures = 1
    with pytest.raises(StoreError):
        await repo.list()
    assert await repo.list() == []

import pytest

from core import db
from rest import service
from rest.dependencies import RestOptions
from rest.errors import ConflictError, NotFoundError, StorageError
from rest.keys import PrimaryKeyResolver

RESOLVER = PrimaryKeyResolver({"quizzes": "slug"})


def test_split_query_separates_controls_from_filters():
    controls, filters = service.split_query(
        [("limit", "5"), ("tag", "a"), ("limit", "9"), ("tag", "b"), ("order", "desc")]
    )
    assert controls == {"limit": "5", "order": "desc"}
    assert filters == [("tag", "a"), ("tag", "b")]


@pytest.mark.asyncio
async def test_read_collection_paginated(fake_db):
    fake_db.all_results = [[{"id": 11, "price": 3.5}]]
    fake_db.one_results = [{"total": 47}]

    body = await service.read(
        fake_db,
        RESOLVER,
        RestOptions(),
        "items",
        None,
        [("limit", "10"), ("page", "3"), ("color", "red")],
    )

    assert body["success"] is True
    assert body["pagination"] == {"total_items": 47, "total_pages": 5, "current_page": 3, "limit": 10}
    (_, select_sql, select_params), (_, count_sql, count_params) = fake_db.calls
    assert select_params == ["red", 10, 20]
    assert count_sql == "SELECT COUNT(*) AS total FROM items WHERE color::text = $1"
    assert count_params == ["red"]


@pytest.mark.asyncio
async def test_read_collection_unpaginated_skips_count(fake_db):
    fake_db.all_results = [[{"id": 5}, {"id": 6}]]

    body = await service.read(fake_db, RESOLVER, RestOptions(), "items", None, [])

    assert len(fake_db.calls) == 1
    assert body["pagination"] == {"total_items": 2, "total_pages": 1, "current_page": 1, "limit": 2}


@pytest.mark.asyncio
async def test_read_one_applies_column_types(fake_db):
    fake_db.one_results = [{"slug": "intro", "score": 1, "published": 1}]
    options = RestOptions(column_types={"quizzes": {"score": "raw"}})

    body = await service.read(fake_db, RESOLVER, options, "quizzes", "intro", [])

    assert body == {"success": True, "result": {"slug": "intro", "score": 1, "published": True}}
    assert fake_db.calls[0][1] == "SELECT * FROM quizzes WHERE slug::text = $1"


@pytest.mark.asyncio
async def test_read_one_missing(fake_db):
    with pytest.raises(NotFoundError):
        await service.read(fake_db, RESOLVER, RestOptions(), "items", "404", [])


@pytest.mark.asyncio
async def test_create_prefers_payload_identifier(fake_db):
    fake_db.one_results = [{"id": 3, "slug": "intro"}]
    body = await service.create(fake_db, RESOLVER, "quizzes", {"slug": "intro", "title": "Intro"})
    assert body == {"success": True, "message": "quizzes created successfully", "id": "intro"}


@pytest.mark.asyncio
async def test_create_falls_back_to_engine_identifier(fake_db):
    fake_db.one_results = [{"id": 42, "name": "x"}]
    body = await service.create(fake_db, RESOLVER, "items", {"name": "x"})
    assert body["id"] == 42


@pytest.mark.asyncio
async def test_create_translates_unique_violation(fake_db):
    fake_db.error = db.DatabaseError('duplicate key value violates unique constraint "quizzes_slug_key"')
    with pytest.raises(ConflictError) as excinfo:
        await service.create(fake_db, RESOLVER, "quizzes", {"slug": "intro"})
    assert "duplicate key" not in excinfo.value.message


@pytest.mark.asyncio
async def test_create_passes_other_engine_errors_through(fake_db):
    fake_db.error = db.DatabaseError('relation "nope" does not exist')
    with pytest.raises(StorageError, match='relation "nope" does not exist'):
        await service.create(fake_db, RESOLVER, "nope", {"a": 1})


@pytest.mark.asyncio
async def test_update_without_match_still_succeeds(fake_db):
    fake_db.execute_results = [0]
    body = await service.update(fake_db, RESOLVER, RestOptions(), "items", "7", {"price": 9.99})
    assert body == {
        "success": True,
        "message": "Resource updated successfully",
        "result": {"price": 9.99},
        "affected_rows": 0,
    }


@pytest.mark.asyncio
async def test_update_can_require_a_match(fake_db):
    fake_db.execute_results = [0]
    with pytest.raises(NotFoundError):
        await service.update(
            fake_db, RESOLVER, RestOptions(update_requires_match=True), "items", "7", {"price": 9.99}
        )


@pytest.mark.asyncio
async def test_delete_checks_affected_rows(fake_db):
    fake_db.execute_results = [0, 1]
    with pytest.raises(NotFoundError):
        await service.delete(fake_db, RESOLVER, "items", "999")
    body = await service.delete(fake_db, RESOLVER, "items", "3")
    assert body == {"success": True, "message": "Resource deleted successfully"}

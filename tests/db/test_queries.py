"""Tests for query helpers."""

import pytest

from mentor_chat.db.queries import (
    get_entries,
    get_entry,
    insert_course,
    insert_lesson,
    list_lesson_titles,
    next_resource_id,
)
from mentor_chat.models.resource import ResourceCategory


@pytest.mark.asyncio
async def test_next_resource_id_increments(db):
    assert await next_resource_id(db) == "res-00001"
    assert await next_resource_id(db) == "res-00002"


@pytest.mark.asyncio
async def test_get_entry_missing(db):
    assert await get_entry(db, "res-99999") is None


@pytest.mark.asyncio
async def test_malformed_tags_read_as_empty(db, resource_store):
    entry = await resource_store.create_resource(title="Broken tags", tags=["a"])
    await db.execute("UPDATE resources SET tags = ? WHERE id = ?", ("{not json", entry.id))
    await db.commit()

    loaded = await get_entry(db, entry.id)
    assert loaded is not None
    assert loaded.tags == []


@pytest.mark.asyncio
async def test_non_list_tags_read_as_empty(db, resource_store):
    entry = await resource_store.create_resource(title="Object tags")
    await db.execute("UPDATE resources SET tags = ? WHERE id = ?", ('{"a": 1}', entry.id))
    await db.commit()

    loaded = await get_entry(db, entry.id)
    assert loaded.tags == []


@pytest.mark.asyncio
async def test_get_entries_skips_inactive_and_missing(db, resource_store):
    a = await resource_store.create_resource(title="Active")
    b = await resource_store.create_resource(title="Inactive")
    await db.execute("UPDATE resources SET is_active = 0 WHERE id = ?", (b.id,))
    await db.commit()

    found = await get_entries(db, [a.id, b.id, "res-99999"])
    assert set(found) == {a.id}
    assert found[a.id].category == ResourceCategory.SOS


@pytest.mark.asyncio
async def test_get_entries_empty(db):
    assert await get_entries(db, []) == {}


@pytest.mark.asyncio
async def test_list_lesson_titles_ordered_and_capped(db):
    await insert_course(db, "c2", "Second course", position=2)
    await insert_course(db, "c1", "First course", position=1)
    await insert_lesson(db, "l3", "c2", "Lesson C", position=0)
    await insert_lesson(db, "l2", "c1", "Lesson B", position=1)
    await insert_lesson(db, "l1", "c1", "Lesson A", position=0)

    items = await list_lesson_titles(db, limit=2)
    assert [(i.title, i.group_name) for i in items] == [
        ("Lesson A", "First course"),
        ("Lesson B", "First course"),
    ]

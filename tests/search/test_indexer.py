"""Tests for the embedding backfill."""

import pytest

from mentor_chat.errors import EmbeddingUnavailable
from mentor_chat.models.resource import ResourceCategory
from mentor_chat.search.indexer import index_resources
from tests.conftest import FakeEmbedder, add_resource


@pytest.mark.asyncio
async def test_indexes_missing_only(resource_store, fake_embedder):
    await add_resource(resource_store, fake_embedder, "Already", similarity=0.9)
    todo = await resource_store.create_resource(title="Todo", description="Needs a vector")
    await resource_store.create_resource(title="Book", category=ResourceCategory.BOOK)

    report = await index_resources(resource_store, fake_embedder)
    assert report.total == 1
    assert report.processed == 1
    assert report.errors == []
    assert (await resource_store.get_resource(todo.id)).has_embedding is True
    assert fake_embedder.calls == ["Title: Todo\nDescription: Needs a vector"]


@pytest.mark.asyncio
async def test_force_reindexes_category(resource_store, fake_embedder):
    await add_resource(resource_store, fake_embedder, "Already", similarity=0.9)
    await resource_store.create_resource(title="Todo")

    report = await index_resources(resource_store, fake_embedder, force=True)
    assert report.total == 2
    assert report.processed == 2


class FlakyEmbedder(FakeEmbedder):
    """Fails for one specific title."""

    async def embed(self, text):
        if "Broken" in text:
            raise EmbeddingUnavailable("Embedding service error: HTTP 429")
        return await super().embed(text)


@pytest.mark.asyncio
async def test_one_failure_does_not_stop_batch(db, resource_store):
    embedder = FlakyEmbedder(db)
    await resource_store.create_resource(title="Broken")
    ok = await resource_store.create_resource(title="Fine")

    report = await index_resources(resource_store, embedder)
    assert report.total == 2
    assert report.processed == 1
    assert len(report.errors) == 1
    assert "Broken" in report.errors[0]
    assert (await resource_store.get_resource(ok.id)).has_embedding is True


def test_embedding_text_includes_all_fields():
    from mentor_chat.models.resource import KnowledgeEntry

    entry = KnowledgeEntry(
        id="res-00001", title="Grief", description="Desc", author="Ana", tags=["a", "b"]
    )
    assert entry.embedding_text == "Title: Grief\nDescription: Desc\nAuthor: Ana\nTags: a, b"


@pytest.mark.asyncio
async def test_force_without_category_covers_all(resource_store, fake_embedder):
    await add_resource(resource_store, fake_embedder, "Crisis", similarity=0.9)
    await add_resource(
        resource_store, fake_embedder, "Book", similarity=0.8, category=ResourceCategory.BOOK
    )
    await resource_store.create_resource(title="Song", category=ResourceCategory.MUSIC)

    report = await index_resources(resource_store, fake_embedder, None, force=True)
    assert report.total == 3
    assert report.processed == 3


@pytest.mark.asyncio
async def test_missing_without_category_covers_all(resource_store, fake_embedder):
    await resource_store.create_resource(title="Crisis")
    await resource_store.create_resource(title="Song", category=ResourceCategory.MUSIC)

    report = await index_resources(resource_store, fake_embedder, None)
    assert report.total == 2

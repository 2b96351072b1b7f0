"""Shared test fixtures."""

import math

import pytest
import pytest_asyncio

from mentor_chat.db.connection import create_connection
from mentor_chat.db.queries import set_has_embedding
from mentor_chat.errors import CompletionError, EmbeddingUnavailable
from mentor_chat.store.prompt_store import PromptStore
from mentor_chat.store.resource_store import ResourceStore

TEST_DIM = 4

# Every query embeds to this vector unless a test maps it elsewhere
QUERY_VECTOR = [1.0, 0.0, 0.0, 0.0]


def vector_with_similarity(similarity: float) -> list[float]:
    """A unit vector whose cosine similarity to QUERY_VECTOR is ``similarity``."""
    return [similarity, math.sqrt(1.0 - similarity * similarity), 0.0, 0.0]


@pytest_asyncio.fixture
async def db():
    """In-memory database with full schema and a small vec0 table."""
    conn = await create_connection(":memory:", embedding_dim=TEST_DIM)
    yield conn
    await conn.close()


@pytest_asyncio.fixture
async def resource_store(db):
    """Resource store backed by in-memory DB."""
    return ResourceStore(db)


@pytest_asyncio.fixture
async def prompt_store(db):
    """Prompt store backed by in-memory DB."""
    return PromptStore(db)


class FakeEmbedder:
    """Deterministic fake embedder for testing.

    Texts listed in ``vectors`` get their mapped vector; anything else gets
    QUERY_VECTOR. Set ``fail`` to simulate the service being down.
    """

    def __init__(self, db, vectors: dict[str, list[float]] | None = None):
        self.db = db
        self.vectors = dict(vectors or {})
        self.fail = False
        self.calls: list[str] = []

    async def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        if self.fail:
            raise EmbeddingUnavailable("Embedding request timed out")
        return self.vectors.get(text, QUERY_VECTOR)

    async def store_embedding(self, resource_id: str, embedding: list[float]) -> None:
        async with self.db.transaction():
            await self.db.vector_store(resource_id, embedding)
            await set_has_embedding(self.db, resource_id, True)

    async def close(self) -> None:
        pass


class FakeCompletion:
    """Controllable fake completion backend."""

    def __init__(self, response: str = "Peace be with you.", error: Exception | None = None):
        self.response = response
        self.error = error
        self.configuration_error: Exception | None = None
        self.calls: list[tuple[str, list]] = []

    def ensure_configured(self) -> None:
        if self.configuration_error is not None:
            raise self.configuration_error

    async def complete(self, system_instruction: str, turns: list) -> str:
        self.calls.append((system_instruction, list(turns)))
        if self.error is not None:
            raise self.error
        return self.response

    async def close(self) -> None:
        pass


@pytest_asyncio.fixture
async def fake_embedder(db):
    """Fake embedding client for tests."""
    return FakeEmbedder(db)


@pytest.fixture
def fake_completion():
    """Fake completion backend that succeeds."""
    return FakeCompletion()


@pytest.fixture
def failing_completion():
    """Fake completion backend that fails like an upstream outage."""
    return FakeCompletion(error=CompletionError("Text generation service unreachable"))


@pytest.fixture
def api_key(monkeypatch):
    """Configure a dummy API key and base URL."""
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("MENTOR_OPENAI_URL", "https://llm.test/v1")
    return "sk-test"


async def add_resource(
    store: ResourceStore,
    embedder: FakeEmbedder | None,
    title: str,
    similarity: float | None = None,
    **fields,
):
    """Create a resource, embedding it at ``similarity`` to the query when given."""
    entry = await store.create_resource(title=title, **fields)
    if similarity is not None and embedder is not None:
        await embedder.store_embedding(entry.id, vector_with_similarity(similarity))
    return entry

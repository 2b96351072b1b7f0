"""Process-wide wiring: database, HTTP clients, stores and the pipeline."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from functools import partial
from pathlib import Path
from typing import Any

from mentor_chat.config import get_db_path, get_embedding_dim
from mentor_chat.context.auxiliary import fetch_auxiliary
from mentor_chat.db.backend import Database
from mentor_chat.db.connection import create_connection
from mentor_chat.llm.completion import CompletionClient
from mentor_chat.llm.provider import CompletionProvider
from mentor_chat.pipeline import MentorPipeline
from mentor_chat.search.embeddings import EmbeddingClient
from mentor_chat.search.matcher import ResourceMatcher
from mentor_chat.store.prompt_store import (
    DEFAULT_MENTOR_PROMPT,
    MENTOR_PROMPT_DESCRIPTION,
    MENTOR_PROMPT_KEY,
    PromptStore,
)
from mentor_chat.store.resource_store import ResourceStore

logger = logging.getLogger(__name__)


def build_pipeline(
    db: Database, embedder: EmbeddingClient, completion: CompletionProvider
) -> MentorPipeline:
    """Wire a pipeline from a database, an embedder and a completion backend."""
    store = ResourceStore(db)
    return MentorPipeline(
        prompt_store=PromptStore(db),
        matcher=ResourceMatcher(store, embedder),
        fetch_auxiliary=partial(fetch_auxiliary, db),
        completion=completion,
    )


class Runtime:
    """Owns the long-lived resources shared by all requests.

    ``open`` is idempotent, so the MCP lifespan and the HTTP route can both
    call it regardless of which starts first. Lifespans enter through
    ``hold``; the runtime stays open until the last of them exits.
    """

    def __init__(self, db_path: Path | str | None = None) -> None:
        """Initialize without connecting."""
        self.db_path = db_path
        self.db: Database | None = None
        self.embedder: EmbeddingClient | None = None
        self.completion: CompletionClient | None = None
        self.prompt_store: PromptStore | None = None
        self.resource_store: ResourceStore | None = None
        self._pipeline: MentorPipeline | None = None
        self._lock = asyncio.Lock()
        self._holders = 0

    @property
    def is_open(self) -> bool:
        """True once ``open`` has completed and until ``close``."""
        return self._pipeline is not None

    async def open(self) -> "Runtime":
        """Connect to the database and create clients, once."""
        async with self._lock:
            if self._pipeline is not None:
                return self
            db_path = self.db_path or get_db_path()
            logger.info("Opening database at %s", db_path)
            db = await create_connection(db_path, embedding_dim=get_embedding_dim())

            prompt_store = PromptStore(db)
            await prompt_store.ensure_default(
                MENTOR_PROMPT_KEY, DEFAULT_MENTOR_PROMPT, MENTOR_PROMPT_DESCRIPTION
            )

            self.db = db
            self.embedder = EmbeddingClient(db)
            self.completion = CompletionClient()
            self.prompt_store = prompt_store
            self.resource_store = ResourceStore(db)
            self._pipeline = build_pipeline(db, self.embedder, self.completion)
        return self

    @asynccontextmanager
    async def hold(self) -> AsyncIterator["Runtime"]:
        """Keep the runtime open for the block. The last holder to leave closes it."""
        await self.open()
        self._holders += 1
        try:
            yield self
        finally:
            self._holders -= 1
            if self._holders == 0:
                await self.close()

    async def pipeline(self) -> MentorPipeline:
        """The shared pipeline, opening the runtime on first use."""
        await self.open()
        if self._pipeline is None:
            raise RuntimeError("Runtime failed to open")
        return self._pipeline

    def lifespan_context(self) -> dict[str, Any]:
        """Objects exposed to MCP tools through ``ctx.lifespan_context``."""
        return {
            "db": self.db,
            "prompt_store": self.prompt_store,
            "resource_store": self.resource_store,
            "embedder": self.embedder,
            "pipeline": self._pipeline,
        }

    async def close(self) -> None:
        """Release HTTP clients and the database connection."""
        async with self._lock:
            if self.completion is not None:
                await self.completion.close()
            if self.embedder is not None:
                await self.embedder.close()
            if self.db is not None:
                await self.db.close()
                logger.info("Database connection closed")
            self.db = None
            self.embedder = None
            self.completion = None
            self.prompt_store = None
            self.resource_store = None
            self._pipeline = None

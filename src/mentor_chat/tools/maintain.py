"""rebuild_embeddings MCP tool: editor-only embedding backfill."""

import logging
from typing import Annotated

from fastmcp import FastMCP
from fastmcp.server.context import Context
from pydantic import Field

from mentor_chat.models.resource import ResourceCategory
from mentor_chat.search.embeddings import EmbeddingClient
from mentor_chat.search.indexer import index_resources
from mentor_chat.store.resource_store import ResourceStore
from mentor_chat.tools.formatters import format_index_report

logger = logging.getLogger(__name__)


def register_maintain(mcp: FastMCP) -> None:
    """Register the rebuild_embeddings tool with the MCP server."""

    @mcp.tool()
    async def rebuild_embeddings(
        category: Annotated[
            ResourceCategory, Field(description="Resource category to embed")
        ] = ResourceCategory.SOS,
        force: Annotated[
            bool, Field(description="Re-embed every resource, not only those missing one")
        ] = False,
        ctx: Context | None = None,
    ) -> str:
        """Compute embeddings so resources can be found by similarity."""
        if ctx is None:
            raise RuntimeError("Context not injected")
        lifespan = ctx.lifespan_context
        store: ResourceStore = lifespan["resource_store"]
        embedder: EmbeddingClient = lifespan["embedder"]

        report = await index_resources(store, embedder, category, force=force)
        logger.info("Embedding rebuild: %d/%d processed", report.processed, report.total)
        return format_index_report(report, force)

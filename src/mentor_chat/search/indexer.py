"""Embedding backfill for knowledge base resources."""

import logging

from pydantic import BaseModel, Field

from mentor_chat.models.resource import ResourceCategory
from mentor_chat.search.embeddings import EmbeddingClient
from mentor_chat.store.resource_store import ResourceStore

logger = logging.getLogger(__name__)


class IndexReport(BaseModel):
    """Outcome of an indexing run."""

    processed: int = 0
    total: int = 0
    errors: list[str] = Field(default_factory=list)


async def index_resources(
    store: ResourceStore,
    embedder: EmbeddingClient,
    category: ResourceCategory | None = ResourceCategory.SOS,
    *,
    force: bool = False,
) -> IndexReport:
    """Embed resources of a category (all categories for None).

    force=True re-embeds every active resource, otherwise only those missing one.

    A failure on one resource is recorded and the run continues.
    """
    if force:
        resource_ids = await store.resource_ids_in_category(category)
    else:
        resource_ids = await store.resources_without_embeddings(category)

    report = IndexReport(total=len(resource_ids))
    for resource_id in resource_ids:
        entry = await store.get_resource(resource_id)
        if entry is None:
            continue
        try:
            embedding = await embedder.embed(entry.embedding_text)
            await embedder.store_embedding(resource_id, embedding)
        except Exception as exc:
            report.errors.append(f"Error processing {entry.title}: {exc}")
            logger.warning("Failed to embed %s", resource_id, exc_info=True)
            continue
        report.processed += 1
        logger.info("Embedded resource %s: %s", resource_id, entry.title)

    return report

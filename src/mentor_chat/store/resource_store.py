"""CRUD and read access for knowledge base resources."""

import logging
from datetime import UTC, datetime

from mentor_chat.db.backend import Database
from mentor_chat.db.queries import (
    get_entries,
    get_entry,
    insert_entry,
    list_entries_by_category,
    next_resource_id,
    update_entry,
)
from mentor_chat.models.resource import KnowledgeEntry, ResourceCategory

logger = logging.getLogger(__name__)

# Fields that feed embedding_text; changing any of them makes the stored vector stale
_EMBEDDED_FIELDS = ("title", "description", "author", "tags")


class ResourceStore:
    """Read access to resources for retrieval, plus the writes seeding needs."""

    def __init__(self, db: Database):
        """Initialize with a database connection."""
        self.db = db

    async def create_resource(
        self,
        title: str,
        description: str | None = None,
        category: ResourceCategory = ResourceCategory.SOS,
        tags: list[str] | None = None,
        author: str | None = None,
    ) -> KnowledgeEntry:
        """Create a new resource without an embedding."""
        now = datetime.now(UTC)
        async with self.db.transaction():
            resource_id = await next_resource_id(self.db)
            entry = KnowledgeEntry(
                id=resource_id,
                title=title,
                description=description,
                category=category,
                tags=tags or [],
                author=author,
                created_at=now,
                updated_at=now,
            )
            await insert_entry(self.db, entry)
        logger.info("Created resource %s: %s", resource_id, title)
        return entry

    async def update_resource(self, resource_id: str, **changes: object) -> KnowledgeEntry:
        """Update a resource.

        Touching an embedded field, or deactivating the resource, drops its
        embedding. A reactivated resource is picked up by the next backfill.
        """
        async with self.db.transaction():
            existing = await get_entry(self.db, resource_id)
            if existing is None:
                raise ValueError(f"Resource {resource_id} not found")

            update = dict(changes)
            stale = any(
                field in update and update[field] != getattr(existing, field)
                for field in _EMBEDDED_FIELDS
            )
            deactivated = existing.is_active and update.get("is_active") is False
            if stale or deactivated:
                update["has_embedding"] = False
                await self.db.vector_delete(resource_id)

            updated = KnowledgeEntry.model_validate({**existing.model_dump(), **update})
            await update_entry(self.db, updated)
        logger.info(
            "Updated resource %s%s",
            resource_id,
            " (embedding reset)" if stale or deactivated else "",
        )
        return updated

    async def get_resource(self, resource_id: str) -> KnowledgeEntry | None:
        """Get a single resource by ID."""
        return await get_entry(self.db, resource_id)

    async def get_many(self, resource_ids: list[str]) -> dict[str, KnowledgeEntry]:
        """Get active resources keyed by ID."""
        return await get_entries(self.db, resource_ids)

    async def list_by_category(
        self, category: ResourceCategory, limit: int
    ) -> list[KnowledgeEntry]:
        """List up to ``limit`` active resources of a category."""
        return await list_entries_by_category(self.db, category, limit)

    async def resources_without_embeddings(
        self, category: ResourceCategory | None = None, limit: int = 1000
    ) -> list[str]:
        """Get IDs of active resources that need an embedding."""
        sql = "SELECT id FROM resources WHERE has_embedding = 0 AND is_active = 1"
        params: list[object] = []
        if category is not None:
            sql += " AND category = ?"
            params.append(category.value)
        sql += " ORDER BY id LIMIT ?"
        params.append(limit)
        cursor = await self.db.execute(sql, params)
        return [row["id"] for row in await cursor.fetchall()]

    async def resource_ids_in_category(self, category: ResourceCategory | None) -> list[str]:
        """Get IDs of all active resources of a category, or of every category for None."""
        sql = "SELECT id FROM resources WHERE is_active = 1"
        params: list[object] = []
        if category is not None:
            sql += " AND category = ?"
            params.append(category.value)
        cursor = await self.db.execute(sql + " ORDER BY id", params)
        return [row["id"] for row in await cursor.fetchall()]

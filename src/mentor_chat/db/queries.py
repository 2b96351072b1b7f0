"""Query helpers for common database operations."""

import json
from datetime import UTC, datetime

from mentor_chat.db.backend import Database, Row
from mentor_chat.models.match import AuxiliaryItem
from mentor_chat.models.resource import KnowledgeEntry, ResourceCategory


async def next_resource_id(db: Database) -> str:
    """Get and increment the next resource ID."""
    cursor = await db.execute("SELECT next_id FROM resource_id_seq")
    row = await cursor.fetchone()
    if row is None:
        raise RuntimeError("resource_id_seq table is empty")
    next_id = row[0]
    await db.execute("UPDATE resource_id_seq SET next_id = ?", (next_id + 1,))
    return f"res-{next_id:05d}"


def row_to_entry(row: Row) -> KnowledgeEntry:
    """Convert a database row to a KnowledgeEntry. Tags are coerced by the model."""
    return KnowledgeEntry(
        id=row["id"],
        title=row["title"],
        description=row["description"],
        tags=row["tags"],
        category=ResourceCategory(row["category"]),
        author=row["author"],
        has_embedding=bool(row["has_embedding"]),
        is_active=bool(row["is_active"]),
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


async def insert_entry(db: Database, entry: KnowledgeEntry) -> None:
    """Insert a new resource."""
    await db.execute(
        """INSERT INTO resources
        (id, title, description, tags, category, author, has_embedding, is_active,
         created_at, updated_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
        (
            entry.id,
            entry.title,
            entry.description,
            json.dumps(entry.tags),
            entry.category.value,
            entry.author,
            int(entry.has_embedding),
            int(entry.is_active),
            entry.created_at.isoformat() if entry.created_at else _now_iso(),
            entry.updated_at.isoformat() if entry.updated_at else _now_iso(),
        ),
    )
    await db.commit()


async def update_entry(db: Database, entry: KnowledgeEntry) -> None:
    """Update an existing resource."""
    await db.execute(
        """UPDATE resources SET
        title=?, description=?, tags=?, category=?, author=?, has_embedding=?,
        is_active=?, updated_at=?
        WHERE id=?""",
        (
            entry.title,
            entry.description,
            json.dumps(entry.tags),
            entry.category.value,
            entry.author,
            int(entry.has_embedding),
            int(entry.is_active),
            _now_iso(),
            entry.id,
        ),
    )
    await db.commit()


async def get_entry(db: Database, resource_id: str) -> KnowledgeEntry | None:
    """Get a single resource by ID."""
    cursor = await db.execute("SELECT * FROM resources WHERE id = ?", (resource_id,))
    row = await cursor.fetchone()
    return row_to_entry(row) if row else None


async def get_entries(db: Database, resource_ids: list[str]) -> dict[str, KnowledgeEntry]:
    """Get active resources by ID, keyed by ID. Missing IDs are simply absent."""
    if not resource_ids:
        return {}
    placeholders = ",".join("?" for _ in resource_ids)
    cursor = await db.execute(
        "SELECT * FROM resources WHERE is_active = 1 AND id IN ("  # noqa: S608
        + placeholders
        + ")",
        list(resource_ids),
    )
    return {row["id"]: row_to_entry(row) for row in await cursor.fetchall()}


async def list_entries_by_category(
    db: Database, category: ResourceCategory, limit: int
) -> list[KnowledgeEntry]:
    """List active resources of one category. Order is not part of the contract."""
    cursor = await db.execute(
        "SELECT * FROM resources WHERE category = ? AND is_active = 1 LIMIT ?",
        (category.value, limit),
    )
    return [row_to_entry(row) for row in await cursor.fetchall()]


async def set_has_embedding(db: Database, resource_id: str, has_embedding: bool) -> None:
    """Flag whether a resource currently has a stored embedding."""
    await db.execute(
        "UPDATE resources SET has_embedding = ? WHERE id = ?",
        (int(has_embedding), resource_id),
    )
    await db.commit()


async def list_lesson_titles(db: Database, limit: int) -> list[AuxiliaryItem]:
    """Lesson titles with their course title, in course then lesson order."""
    cursor = await db.execute(
        """SELECT l.title AS title, c.title AS group_name
        FROM lessons l JOIN courses c ON c.id = l.course_id
        ORDER BY c.position, l.position, l.id
        LIMIT ?""",
        (limit,),
    )
    return [
        AuxiliaryItem(title=row["title"], group_name=row["group_name"])
        for row in await cursor.fetchall()
    ]


async def insert_course(db: Database, course_id: str, title: str, position: int = 0) -> None:
    """Insert a course row."""
    await db.execute(
        "INSERT INTO courses (id, title, position) VALUES (?, ?, ?)",
        (course_id, title, position),
    )
    await db.commit()


async def insert_lesson(
    db: Database, lesson_id: str, course_id: str, title: str, position: int = 0
) -> None:
    """Insert a lesson row."""
    await db.execute(
        "INSERT INTO lessons (id, course_id, title, position) VALUES (?, ?, ?, ?)",
        (lesson_id, course_id, title, position),
    )
    await db.commit()


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()

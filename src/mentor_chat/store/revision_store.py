"""Template revision history operations."""

from datetime import datetime

from mentor_chat.db.backend import Database, Row
from mentor_chat.models.prompt import TemplateRevision

_SELECT = """SELECT id, setting_key, old_value, new_value, changed_by, changed_at
FROM prompt_revisions WHERE setting_key = ?"""


def _row_to_revision(row: Row) -> TemplateRevision:
    return TemplateRevision(
        id=row["id"],
        key=row["setting_key"],
        old_text=row["old_value"],
        new_text=row["new_value"],
        changed_by=row["changed_by"],
        changed_at=datetime.fromisoformat(row["changed_at"]),
    )


class RevisionStore:
    """Read access to template revision history."""

    def __init__(self, db: Database):
        """Initialize with a database connection."""
        self.db = db

    async def list_revisions(self, key: str, limit: int = 20) -> list[TemplateRevision]:
        """Get the most recent revisions of a key, newest first."""
        cursor = await self.db.execute(
            _SELECT + " ORDER BY changed_at DESC, id DESC LIMIT ?",
            (key, limit),
        )
        return [_row_to_revision(row) for row in await cursor.fetchall()]

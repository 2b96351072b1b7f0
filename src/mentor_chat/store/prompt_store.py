"""Operator-editable instruction templates with append-only history."""

import logging
from datetime import UTC, datetime

from mentor_chat.db.backend import Database
from mentor_chat.models.prompt import InstructionTemplate, TemplateRevision
from mentor_chat.store.revision_store import RevisionStore

logger = logging.getLogger(__name__)

MENTOR_PROMPT_KEY = "mentor_system_prompt"

MENTOR_PROMPT_DESCRIPTION = "System prompt used by the AI mentor"

DEFAULT_MENTOR_PROMPT = """\
You are a wise and compassionate Christian spiritual mentor in the Metanoia Hub app. Your role is to:
- Offer guidance grounded in biblical principles
- Be empathetic and welcoming
- Answer clearly and practically
- Use scripture when appropriate
- Encourage spiritual growth
- Never judge, always welcome

When you receive context about relevant resources, use it to enrich your answers.
Keep answers concise but meaningful (three paragraphs at most).
Always close with a word of encouragement or a relevant verse."""


class PromptStore:
    """Current template per key plus its revision history.

    Every save snapshots the previous value into ``prompt_revisions`` inside
    the same transaction, before the template row is written.
    """

    def __init__(self, db: Database):
        """Initialize with a database connection."""
        self.db = db
        self.revisions = RevisionStore(db)

    async def ensure_default(self, key: str, text: str, description: str = "") -> None:
        """Create the template row with its hard-coded default if it does not exist yet."""
        async with self.db.transaction():
            cursor = await self.db.execute(
                """INSERT INTO prompt_settings (key, value, description, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(key) DO NOTHING""",
                (key, text, description, _now_iso()),
            )
        if cursor.rowcount > 0:
            logger.info("Created default template for %s", key)

    async def get_template(self, key: str) -> InstructionTemplate | None:
        """Get the full template row for a key."""
        cursor = await self.db.execute(
            "SELECT key, value, description, updated_at, updated_by"
            " FROM prompt_settings WHERE key = ?",
            (key,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return InstructionTemplate(
            key=row["key"],
            text=row["value"],
            description=row["description"],
            updated_at=datetime.fromisoformat(row["updated_at"]),
            updated_by=row["updated_by"],
        )

    async def get_current(self, key: str) -> str | None:
        """Get the current template text for a key."""
        template = await self.get_template(key)
        return template.text if template else None

    async def set_current(self, key: str, new_text: str, editor_id: str) -> TemplateRevision:
        """Overwrite the template, recording exactly one revision with the pre-write value."""
        if not editor_id:
            raise ValueError("editor_id is required to change a template")

        # Snapshot and overwrite share one write transaction
        async with self.db.transaction():
            cursor = await self.db.execute(
                "SELECT value FROM prompt_settings WHERE key = ?", (key,)
            )
            row = await cursor.fetchone()
            old_text = row["value"] if row else None
            now = _now_iso()

            await self.db.execute(
                """INSERT INTO prompt_revisions
                (setting_key, old_value, new_value, changed_by, changed_at)
                VALUES (?, ?, ?, ?, ?)""",
                (key, old_text, new_text, editor_id, now),
            )
            revision_cursor = await self.db.execute("SELECT last_insert_rowid()")
            revision_row = await revision_cursor.fetchone()

            await self.db.execute(
                """INSERT INTO prompt_settings (key, value, description, updated_at, updated_by)
                VALUES (?, ?, '', ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at,
                    updated_by = excluded.updated_by""",
                (key, new_text, now, editor_id),
            )

        logger.info("Template %s updated by %s", key, editor_id)
        return TemplateRevision(
            id=revision_row[0] if revision_row else 0,
            key=key,
            old_text=old_text,
            new_text=new_text,
            changed_by=editor_id,
            changed_at=datetime.fromisoformat(now),
        )

    async def list_revisions(self, key: str, limit: int = 20) -> list[TemplateRevision]:
        """Get the most recent revisions of a key, newest first."""
        return await self.revisions.list_revisions(key, limit)


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()

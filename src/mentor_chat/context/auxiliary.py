"""Best-effort auxiliary content: curated lesson titles."""

import logging
from dataclasses import dataclass, field

from mentor_chat.db.backend import Database
from mentor_chat.db.queries import list_lesson_titles
from mentor_chat.models.match import AuxiliaryItem

logger = logging.getLogger(__name__)

AUXILIARY_LIMIT = 10


@dataclass(frozen=True)
class AuxiliaryFetch:
    """Either the fetched items or the error that prevented fetching them."""

    items: list[AuxiliaryItem] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        """True when the fetch succeeded."""
        return self.error is None

    def or_empty(self) -> list[AuxiliaryItem]:
        """The items, or an empty list when the fetch failed."""
        return self.items if self.ok else []


async def load_auxiliary(db: Database, limit: int = AUXILIARY_LIMIT) -> AuxiliaryFetch:
    """Fetch up to ``limit`` lesson titles, capturing any error in the result."""
    try:
        items = await list_lesson_titles(db, limit)
    except Exception as exc:
        logger.warning("Auxiliary content unavailable", exc_info=True)
        return AuxiliaryFetch(error=str(exc) or type(exc).__name__)
    return AuxiliaryFetch(items=items[:limit])


async def fetch_auxiliary(db: Database, limit: int = AUXILIARY_LIMIT) -> list[AuxiliaryItem]:
    """Lesson titles for the prompt. Empty on any retrieval error."""
    return (await load_auxiliary(db, limit)).or_empty()

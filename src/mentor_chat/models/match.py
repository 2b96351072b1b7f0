"""Retrieval result models. Produced per request, never persisted."""

from pydantic import BaseModel, Field

from mentor_chat.models.resource import KnowledgeEntry


class ScoredEntry(BaseModel):
    """A resource with the similarity it was selected by, if any."""

    entry: KnowledgeEntry
    similarity: float | None = Field(default=None, ge=0.0, le=1.0)


class MatchResult(BaseModel):
    """Resources chosen for a query. ``ranked`` is True only on the similarity path."""

    entries: list[ScoredEntry] = Field(default_factory=list)
    ranked: bool = False


class AuxiliaryItem(BaseModel):
    """A curated lesson title and the course it belongs to."""

    title: str
    group_name: str

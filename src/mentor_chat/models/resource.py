"""Knowledge base resource models."""

import json
import logging
from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)


class ResourceCategory(StrEnum):
    """Classification of knowledge base resources."""

    SOS = "sos"
    DEVOTIONAL = "devotional"
    STUDY = "study"
    SUPPORT = "support"
    BOOK = "book"
    MUSIC = "music"
    SERMON = "sermon"
    PLAYBOOK = "playbook"


class KnowledgeEntry(BaseModel):
    """A single retrievable resource."""

    id: str
    title: str
    description: str | None = None
    tags: list[str] = Field(default_factory=list)
    category: ResourceCategory = ResourceCategory.SOS
    author: str | None = None
    has_embedding: bool = False
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: object) -> list[str]:
        """Accept stored JSON text; anything that is not a list of strings reads as no tags."""
        if value is None:
            return []
        if isinstance(value, str):
            try:
                value = json.loads(value) if value.strip() else []
            except json.JSONDecodeError:
                logger.warning("Ignoring malformed tags value: %r", value[:80])
                return []
        if not isinstance(value, list):
            logger.warning("Ignoring non-list tags value of type %s", type(value).__name__)
            return []
        return [str(tag).strip() for tag in value if isinstance(tag, str) and tag.strip()]

    @property
    def embedding_text(self) -> str:
        """Text used for generating embeddings."""
        lines = [f"Title: {self.title}"]
        if self.description:
            lines.append(f"Description: {self.description}")
        if self.author:
            lines.append(f"Author: {self.author}")
        if self.tags:
            lines.append(f"Tags: {', '.join(self.tags)}")
        return "\n".join(lines)

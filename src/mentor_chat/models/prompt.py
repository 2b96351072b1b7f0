"""Instruction template and revision models."""

from datetime import datetime

from pydantic import BaseModel


class InstructionTemplate(BaseModel):
    """The current operator-editable instruction text for a key."""

    key: str
    text: str
    description: str = ""
    updated_at: datetime | None = None
    updated_by: str | None = None


class TemplateRevision(BaseModel):
    """An append-only snapshot written on every template save."""

    id: int
    key: str
    old_text: str | None = None
    new_text: str
    changed_by: str
    changed_at: datetime

"""Conversation and inbound request/response models."""

from typing import Literal

from pydantic import BaseModel, Field


class ConversationTurn(BaseModel):
    """One message of the caller's conversation, passed through unmodified."""

    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    """Inbound chat body: ``{"messages": [...]}``."""

    messages: list[ConversationTurn] = Field(min_length=1)


class ChatReply(BaseModel):
    """Successful reply from the generation service."""

    reply: str


class ChatError(BaseModel):
    """The single error message returned when a reply could not be produced."""

    error: str

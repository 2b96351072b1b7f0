"""Completion provider protocol for pluggable text-generation backends."""

from typing import Protocol, runtime_checkable

from mentor_chat.models.chat import ConversationTurn


@runtime_checkable
class CompletionProvider(Protocol):
    """Protocol for chat-completion backends."""

    def ensure_configured(self) -> None:
        """Raise ConfigurationError if the backend cannot be called at all."""
        ...

    async def complete(self, system_instruction: str, turns: list[ConversationTurn]) -> str:
        """Return the generated reply. Raises CompletionError on failure."""
        ...

    async def close(self) -> None:
        """Release resources."""
        ...

"""Text-generation clients."""

from mentor_chat.llm.completion import CompletionClient
from mentor_chat.llm.provider import CompletionProvider

__all__ = ["CompletionClient", "CompletionProvider"]

"""Mentor chat pipeline: template + matched resources + lessons -> completion."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from mentor_chat.context.assembler import assemble
from mentor_chat.errors import MentorError
from mentor_chat.llm.provider import CompletionProvider
from mentor_chat.models.chat import ChatError, ChatReply, ConversationTurn
from mentor_chat.models.match import AuxiliaryItem
from mentor_chat.search.matcher import ResourceMatcher
from mentor_chat.store.prompt_store import DEFAULT_MENTOR_PROMPT, MENTOR_PROMPT_KEY, PromptStore

logger = logging.getLogger(__name__)

AuxiliaryFetcher = Callable[[], Awaitable[list[AuxiliaryItem]]]


def latest_user_utterance(turns: list[ConversationTurn]) -> str:
    """Content of the last user turn, or "" when the caller sent none."""
    for turn in reversed(turns):
        if turn.role == "user":
            return turn.content
    return ""


class MentorPipeline:
    """Request-scoped assembly and completion. Holds no per-request state."""

    def __init__(
        self,
        prompt_store: PromptStore,
        matcher: ResourceMatcher,
        fetch_auxiliary: AuxiliaryFetcher,
        completion: CompletionProvider,
        *,
        template_key: str = MENTOR_PROMPT_KEY,
    ):
        """Initialize with the collaborators for each step."""
        self.prompt_store = prompt_store
        self.matcher = matcher
        self.fetch_auxiliary = fetch_auxiliary
        self.completion = completion
        self.template_key = template_key

    async def load_template(self) -> str:
        """Current template text; the built-in default when unset, blank or unreadable."""
        try:
            text = await self.prompt_store.get_current(self.template_key)
        except Exception:
            logger.warning(
                "Could not read template %s; using default", self.template_key, exc_info=True
            )
            return DEFAULT_MENTOR_PROMPT
        if not text or not text.strip():
            return DEFAULT_MENTOR_PROMPT
        return text

    async def build_instruction(self, turns: list[ConversationTurn]) -> str:
        """Assemble the system instruction for this conversation.

        Resource matching and the auxiliary fetch run concurrently; assembly
        waits for both.
        """
        template = await self.load_template()
        query = latest_user_utterance(turns)

        async with asyncio.TaskGroup() as tg:
            match_task = tg.create_task(self.matcher.match(query))
            auxiliary_task = tg.create_task(self.fetch_auxiliary())

        match = match_task.result()
        logger.info(
            "Matched %d resource(s) (%s)",
            len(match.entries),
            "ranked" if match.ranked else "fallback",
        )
        return assemble(template, match, auxiliary_task.result())

    async def handle_chat(self, turns: list[ConversationTurn]) -> ChatReply | ChatError:
        """Produce a reply or a single error message. Never raises."""
        try:
            self.completion.ensure_configured()
            instruction = await self.build_instruction(turns)
            reply = await self.completion.complete(instruction, turns)
        except MentorError as exc:
            logger.error("Mentor chat failed: %s", exc)
            return ChatError(error=str(exc))
        except Exception:
            logger.exception("Unexpected error in mentor chat")
            return ChatError(error="Unexpected error while generating a reply")
        return ChatReply(reply=reply)

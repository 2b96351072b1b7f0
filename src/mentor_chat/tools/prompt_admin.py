"""Instruction template tools: read, history, and (editor mode) write."""

import logging
from typing import Annotated

from fastmcp import FastMCP
from fastmcp.server.context import Context
from pydantic import Field

from mentor_chat.store.prompt_store import DEFAULT_MENTOR_PROMPT, MENTOR_PROMPT_KEY, PromptStore
from mentor_chat.tools.formatters import format_revision, format_revision_list, format_template

logger = logging.getLogger(__name__)


def register_prompt_read_tools(mcp: FastMCP) -> None:
    """Register prompt_get and prompt_history."""

    @mcp.tool()
    async def prompt_get(ctx: Context | None = None) -> str:
        """Show the mentor's current instruction template."""
        if ctx is None:
            raise RuntimeError("Context not injected")
        prompt_store: PromptStore = ctx.lifespan_context["prompt_store"]

        template = await prompt_store.get_template(MENTOR_PROMPT_KEY)
        if template is None:
            return f"No template stored for {MENTOR_PROMPT_KEY}; the built-in default is used."
        return format_template(template)

    @mcp.tool()
    async def prompt_history(
        limit: Annotated[int, Field(description="Revisions to show (1-100)", ge=1, le=100)] = 10,
        ctx: Context | None = None,
    ) -> str:
        """List recent changes to the mentor's instruction template, newest first."""
        if ctx is None:
            raise RuntimeError("Context not injected")
        prompt_store: PromptStore = ctx.lifespan_context["prompt_store"]

        revisions = await prompt_store.list_revisions(MENTOR_PROMPT_KEY, limit)
        return format_revision_list(revisions)


def register_prompt_edit_tools(mcp: FastMCP) -> None:
    """Register prompt_set and prompt_reset."""

    @mcp.tool()
    async def prompt_set(
        text: Annotated[str, Field(description="New instruction template text")],
        editor_id: Annotated[str, Field(description="ID of the person making the change")],
        ctx: Context | None = None,
    ) -> str:
        """Replace the mentor's instruction template. The previous text is kept in history."""
        if ctx is None:
            raise RuntimeError("Context not injected")
        if not text.strip():
            return "Error: template text must not be empty"
        if not editor_id.strip():
            return "Error: editor_id is required"
        prompt_store: PromptStore = ctx.lifespan_context["prompt_store"]

        revision = await prompt_store.set_current(MENTOR_PROMPT_KEY, text, editor_id)
        return f"Template updated.\n{format_revision(revision)}"

    @mcp.tool()
    async def prompt_reset(
        editor_id: Annotated[str, Field(description="ID of the person making the change")],
        ctx: Context | None = None,
    ) -> str:
        """Restore the built-in default template. Recorded in history like any other save."""
        if ctx is None:
            raise RuntimeError("Context not injected")
        if not editor_id.strip():
            return "Error: editor_id is required"
        prompt_store: PromptStore = ctx.lifespan_context["prompt_store"]

        revision = await prompt_store.set_current(
            MENTOR_PROMPT_KEY, DEFAULT_MENTOR_PROMPT, editor_id
        )
        return f"Template reset to default.\n{format_revision(revision)}"

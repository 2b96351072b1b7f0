"""FastMCP server with lifespan management, tool and route registration."""

import logging
import sys
from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Any

from fastmcp import FastMCP

from mentor_chat.config import get_log_level, get_openai_api_key, is_editor_mode
from mentor_chat.runtime import Runtime
from mentor_chat.tools.maintain import register_maintain
from mentor_chat.tools.mentor_chat import register_chat_route, register_mentor_chat
from mentor_chat.tools.prompt_admin import register_prompt_edit_tools, register_prompt_read_tools


def configure_logging() -> None:
    """Log to stderr (stdout is the MCP stdio transport)."""
    logging.basicConfig(
        level=getattr(logging, get_log_level(), logging.WARNING),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )


def make_lifespan(
    runtime: Runtime,
) -> Callable[[FastMCP], AbstractAsyncContextManager[dict[str, Any]]]:
    """Build a lifespan that holds the shared runtime open while it runs."""

    @asynccontextmanager
    async def lifespan(server: FastMCP) -> AsyncIterator[dict[str, Any]]:
        configure_logging()
        logger = logging.getLogger(__name__)

        async with runtime.hold():
            if get_openai_api_key() is None:
                logger.warning(
                    "OPENAI_API_KEY not set; mentor chat will return configuration errors"
                )
            else:
                logger.info("Mentor chat ready")
            yield runtime.lifespan_context()

    return lifespan


_INSTRUCTIONS = """\
AI mentor for a discipleship community. The mentor answers with biblical, \
practical guidance and points people to the community's resources.

- mentor_chat: Send the conversation (oldest first). Resources relevant to \
the latest user message are picked by similarity; when nothing matches, a \
general list of support resources is offered instead.
- prompt_get / prompt_history: Inspect the operator-editable instruction \
template and its change history.

Editor mode adds prompt_set, prompt_reset and rebuild_embeddings.
"""


def create_server(runtime: Runtime | None = None) -> FastMCP:
    """Create and configure the MCP server with all tools and the chat route."""
    runtime = runtime or Runtime()
    mcp = FastMCP(
        "mentor-chat",
        instructions=_INSTRUCTIONS,
        lifespan=make_lifespan(runtime),
    )

    register_mentor_chat(mcp)
    register_prompt_read_tools(mcp)
    register_chat_route(mcp, runtime.pipeline)

    if is_editor_mode():
        register_prompt_edit_tools(mcp)
        register_maintain(mcp)

    return mcp

"""mentor_chat MCP tool and the /mentor-chat HTTP route."""

import logging
from collections.abc import Awaitable, Callable
from typing import Annotated

from fastmcp import FastMCP
from fastmcp.server.context import Context
from pydantic import Field, ValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from mentor_chat.models.chat import ChatError, ChatRequest, ConversationTurn
from mentor_chat.pipeline import MentorPipeline

logger = logging.getLogger(__name__)

CHAT_ROUTE = "/mentor-chat"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}

_INVALID_BODY = "Request body must be JSON with a non-empty 'messages' list"

PipelineGetter = Callable[[], Awaitable[MentorPipeline]]


async def handle_chat_request(request: Request, get_pipeline: PipelineGetter) -> Response:
    """Translate an HTTP request into handle_chat and its result into JSON."""
    if request.method == "OPTIONS":
        return Response(status_code=204, headers=CORS_HEADERS)

    try:
        chat_request = ChatRequest.model_validate(await request.json())
    except (ValueError, ValidationError):
        logger.warning("Rejected chat request with invalid body")
        return JSONResponse({"error": _INVALID_BODY}, status_code=400, headers=CORS_HEADERS)

    logger.info("Received %d message(s)", len(chat_request.messages))
    try:
        pipeline = await get_pipeline()
    except Exception:
        logger.exception("Mentor pipeline unavailable")
        return JSONResponse(
            {"error": "Mentor service unavailable"}, status_code=500, headers=CORS_HEADERS
        )

    result = await pipeline.handle_chat(chat_request.messages)
    status = 500 if isinstance(result, ChatError) else 200
    return JSONResponse(result.model_dump(), status_code=status, headers=CORS_HEADERS)


def register_chat_route(mcp: FastMCP, get_pipeline: PipelineGetter) -> None:
    """Register the JSON chat endpoint on the server's HTTP app."""

    @mcp.custom_route(CHAT_ROUTE, methods=["POST", "OPTIONS"])
    async def mentor_chat_http(request: Request) -> Response:
        return await handle_chat_request(request, get_pipeline)


def register_mentor_chat(mcp: FastMCP) -> None:
    """Register the mentor_chat tool with the MCP server."""

    @mcp.tool()
    async def mentor_chat(
        messages: Annotated[
            list[ConversationTurn],
            Field(
                description="Conversation so far, oldest first; the last user turn is the question"
            ),
        ],
        ctx: Context | None = None,
    ) -> str:
        """Ask the AI mentor. Returns the reply, or a line starting with "Error:".

        Relevant resources are selected by similarity to the latest user message
        (or a general list of support resources when none match) and combined
        with the operator's instruction template and curated lesson titles.
        """
        if ctx is None:
            raise RuntimeError("Context not injected")
        pipeline: MentorPipeline = ctx.lifespan_context["pipeline"]

        result = await pipeline.handle_chat(messages)
        if isinstance(result, ChatError):
            return f"Error: {result.error}"
        return result.reply

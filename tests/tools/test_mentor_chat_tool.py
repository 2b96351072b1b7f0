"""Tests for the mentor_chat tool and the /mentor-chat HTTP route."""

import json

import pytest

from mentor_chat.errors import UpstreamStatusError
from mentor_chat.runtime import build_pipeline
from mentor_chat.tools.mentor_chat import (
    CHAT_ROUTE,
    CORS_HEADERS,
    handle_chat_request,
    register_chat_route,
    register_mentor_chat,
)
from tests.conftest import FakeCompletion
from tests.tools.conftest import make_ctx


class FakeRequest:
    def __init__(self, method="POST", body=None, raw=None):
        self.method = method
        self._body = body
        self._raw = raw

    async def json(self):
        if self._raw is not None:
            return json.loads(self._raw)
        return self._body


def _getter(pipeline):
    async def get_pipeline():
        return pipeline

    return get_pipeline


def _body(response) -> dict:
    return json.loads(response.body)


def _assert_cors(response):
    for name, value in CORS_HEADERS.items():
        assert response.headers[name] == value


@pytest.fixture
def pipeline(db, fake_embedder, fake_completion):
    return build_pipeline(db, fake_embedder, fake_completion)


# --- HTTP route ---


@pytest.mark.asyncio
async def test_options_preflight(pipeline, fake_completion):
    response = await handle_chat_request(FakeRequest("OPTIONS"), _getter(pipeline))
    assert response.status_code == 204
    _assert_cors(response)
    assert fake_completion.calls == []


@pytest.mark.asyncio
async def test_post_success(pipeline):
    request = FakeRequest(body={"messages": [{"role": "user", "content": "hello"}]})
    response = await handle_chat_request(request, _getter(pipeline))

    assert response.status_code == 200
    assert _body(response) == {"reply": "Peace be with you."}
    _assert_cors(response)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "request_",
    [
        FakeRequest(raw="{not json"),
        FakeRequest(body={"messages": []}),
        FakeRequest(body={"prompt": "hello"}),
        FakeRequest(body={"messages": [{"role": "system", "content": "x"}]}),
        FakeRequest(body=["hello"]),
    ],
)
async def test_invalid_body(pipeline, fake_completion, request_):
    response = await handle_chat_request(request_, _getter(pipeline))

    assert response.status_code == 400
    assert "error" in _body(response)
    _assert_cors(response)
    assert fake_completion.calls == []


@pytest.mark.asyncio
async def test_generation_failure_is_500(db, fake_embedder):
    completion = FakeCompletion(error=UpstreamStatusError(503, "down"))
    pipeline = build_pipeline(db, fake_embedder, completion)
    request = FakeRequest(body={"messages": [{"role": "user", "content": "hello"}]})

    response = await handle_chat_request(request, _getter(pipeline))

    assert response.status_code == 500
    assert _body(response) == {"error": "Text generation service error: HTTP 503"}
    _assert_cors(response)


@pytest.mark.asyncio
async def test_pipeline_unavailable_is_500():
    async def get_pipeline():
        raise OSError("disk gone")

    request = FakeRequest(body={"messages": [{"role": "user", "content": "hello"}]})
    response = await handle_chat_request(request, get_pipeline)

    assert response.status_code == 500
    assert "error" in _body(response)
    _assert_cors(response)


@pytest.mark.asyncio
async def test_route_registration(mcp, pipeline):
    register_chat_route(mcp, _getter(pipeline))

    handler, methods = mcp.routes[CHAT_ROUTE]
    assert set(methods) == {"POST", "OPTIONS"}
    response = await handler(FakeRequest("OPTIONS"))
    assert response.status_code == 204


# --- MCP tool ---


@pytest.mark.asyncio
async def test_tool_returns_reply(mcp, pipeline):
    from mentor_chat.models.chat import ConversationTurn

    register_mentor_chat(mcp)
    reply = await mcp.tools["mentor_chat"](
        [ConversationTurn(role="user", content="hello")], ctx=make_ctx(pipeline=pipeline)
    )
    assert reply == "Peace be with you."


@pytest.mark.asyncio
async def test_tool_returns_error_line(mcp, db, fake_embedder, failing_completion):
    from mentor_chat.models.chat import ConversationTurn

    pipeline = build_pipeline(db, fake_embedder, failing_completion)
    register_mentor_chat(mcp)
    reply = await mcp.tools["mentor_chat"](
        [ConversationTurn(role="user", content="hello")], ctx=make_ctx(pipeline=pipeline)
    )
    assert reply == "Error: Text generation service unreachable"


@pytest.mark.asyncio
async def test_tool_requires_context(mcp):
    register_mentor_chat(mcp)
    with pytest.raises(RuntimeError):
        await mcp.tools["mentor_chat"]([])

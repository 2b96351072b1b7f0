"""Tests for CompletionClient (mocked HTTP)."""

import json

import httpx
import pytest

from mentor_chat.errors import CompletionError, ConfigurationError, UpstreamStatusError
from mentor_chat.llm.completion import CompletionClient
from mentor_chat.models.chat import ConversationTurn

TURNS = [
    ConversationTurn(role="user", content="I feel anxious"),
    ConversationTurn(role="assistant", content="Tell me more."),
    ConversationTurn(role="user", content="About my exams"),
]


def _reply(content="Peace be with you.") -> httpx.Response:
    return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})


def _client(handler) -> CompletionClient:
    transport = httpx.MockTransport(handler)
    return CompletionClient(http_client=httpx.AsyncClient(transport=transport))


@pytest.mark.asyncio
async def test_complete_success(api_key):
    client = _client(lambda req: _reply())
    try:
        assert await client.complete("Be kind.", TURNS) == "Peace be with you."
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_request_payload(api_key, monkeypatch):
    monkeypatch.setenv("MENTOR_CHAT_MODEL", "chat-small")
    monkeypatch.setenv("MENTOR_TEMPERATURE", "0.3")
    monkeypatch.setenv("MENTOR_MAX_TOKENS", "256")
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return _reply()

    client = _client(handler)
    try:
        await client.complete("Be kind.", TURNS)
    finally:
        await client.close()

    assert len(captured) == 1
    request = captured[0]
    assert request.url.path == "/v1/chat/completions"
    assert request.headers["authorization"] == "Bearer sk-test"
    body = json.loads(request.content)
    assert body["model"] == "chat-small"
    assert body["temperature"] == pytest.approx(0.3)
    assert body["max_tokens"] == 256
    assert body["messages"] == [
        {"role": "system", "content": "Be kind."},
        {"role": "user", "content": "I feel anxious"},
        {"role": "assistant", "content": "Tell me more."},
        {"role": "user", "content": "About my exams"},
    ]


@pytest.mark.asyncio
async def test_upstream_error_status(api_key):
    client = _client(lambda req: httpx.Response(500, text="overloaded"))
    try:
        with pytest.raises(UpstreamStatusError) as excinfo:
            await client.complete("Be kind.", TURNS)
    finally:
        await client.close()

    assert excinfo.value.status_code == 500
    assert "HTTP 500" in str(excinfo.value)


@pytest.mark.asyncio
async def test_malformed_body(api_key):
    client = _client(lambda req: httpx.Response(200, json={"choices": []}))
    try:
        with pytest.raises(CompletionError, match="Malformed"):
            await client.complete("Be kind.", TURNS)
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_non_string_content(api_key):
    client = _client(lambda req: _reply(content=None))
    try:
        with pytest.raises(CompletionError, match="Malformed"):
            await client.complete("Be kind.", TURNS)
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_timeout(api_key):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    client = _client(handler)
    try:
        with pytest.raises(CompletionError, match="timed out"):
            await client.complete("Be kind.", TURNS)
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_unreachable(api_key):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    client = _client(handler)
    try:
        with pytest.raises(CompletionError, match="unreachable"):
            await client.complete("Be kind.", TURNS)
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_missing_key_makes_no_request(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return _reply()

    client = _client(handler)
    try:
        with pytest.raises(ConfigurationError):
            client.ensure_configured()
        with pytest.raises(ConfigurationError):
            await client.complete("Be kind.", TURNS)
    finally:
        await client.close()
    assert captured == []


def test_upstream_error_keeps_short_body():
    exc = UpstreamStatusError(502, "x" * 2000)
    assert exc.status_code == 502
    assert len(exc.body) == 500

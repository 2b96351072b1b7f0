"""OpenAI-compatible chat completion client."""

import logging

import httpx

from mentor_chat.config import (
    get_chat_model,
    get_completion_timeout,
    get_max_tokens,
    get_openai_api_key,
    get_openai_url,
    get_temperature,
)
from mentor_chat.errors import CompletionError, ConfigurationError, UpstreamStatusError
from mentor_chat.models.chat import ConversationTurn

logger = logging.getLogger(__name__)


class CompletionClient:
    """Sends the system instruction and conversation to /chat/completions.

    One attempt per call. Missing credentials fail before any network I/O.
    """

    def __init__(self, http_client: httpx.AsyncClient | None = None) -> None:
        """Initialize with an optional HTTP client."""
        self._http = http_client

    def ensure_configured(self) -> None:
        """Raise ConfigurationError when the API key is missing."""
        if get_openai_api_key() is None:
            raise ConfigurationError("OPENAI_API_KEY is not configured")

    def build_payload(
        self, system_instruction: str, turns: list[ConversationTurn]
    ) -> dict[str, object]:
        """Request body: system message first, then the turns unmodified."""
        messages = [{"role": "system", "content": system_instruction}]
        messages.extend(turn.model_dump() for turn in turns)
        return {
            "model": get_chat_model(),
            "messages": messages,
            "temperature": get_temperature(),
            "max_tokens": get_max_tokens(),
        }

    async def complete(self, system_instruction: str, turns: list[ConversationTurn]) -> str:
        """Generate the assistant reply for the conversation."""
        self.ensure_configured()
        api_key = get_openai_api_key()

        logger.info("Requesting completion for %d message(s)", len(turns))
        try:
            resp = await self._get_client().post(
                f"{get_openai_url()}/chat/completions",
                json=self.build_payload(system_instruction, turns),
                headers={"Authorization": f"Bearer {api_key}"},
                timeout=get_completion_timeout(),
            )
        except httpx.TimeoutException as exc:
            logger.error("Text generation request timed out")
            raise CompletionError("Text generation service timed out") from exc
        except httpx.HTTPError as exc:
            logger.error("Text generation service unreachable: %s", exc)
            raise CompletionError("Text generation service unreachable") from exc

        if not resp.is_success:
            logger.error("Text generation API error: %s %s", resp.status_code, resp.text[:500])
            raise UpstreamStatusError(resp.status_code, resp.text)

        try:
            content = resp.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            logger.error("Malformed text generation response", exc_info=True)
            raise CompletionError("Malformed response from text generation service") from exc
        if not isinstance(content, str):
            raise CompletionError("Malformed response from text generation service")

        logger.info("Response generated successfully")
        return content

    def _get_client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient()
        return self._http

    async def close(self) -> None:
        """Close the HTTP client if open."""
        if self._http is not None:
            await self._http.aclose()
            self._http = None

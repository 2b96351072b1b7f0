"""OpenAI-compatible embedding client. Failures surface as EmbeddingUnavailable."""

import logging

import httpx

from mentor_chat.config import (
    get_embedding_model,
    get_embedding_timeout,
    get_openai_api_key,
    get_openai_url,
)
from mentor_chat.db.backend import Database
from mentor_chat.db.queries import set_has_embedding
from mentor_chat.errors import EmbeddingUnavailable

logger = logging.getLogger(__name__)


class EmbeddingClient:
    """Generates embeddings via the embeddings endpoint and stores them in sqlite-vec.

    Stateless per call: no caching and no retries. Any failure of a single
    call is reported as EmbeddingUnavailable so the caller can fall back.
    """

    def __init__(self, db: Database, http_client: httpx.AsyncClient | None = None):
        """Initialize with a database connection and optional HTTP client."""
        self.db = db
        self._http = http_client

    async def embed(self, text: str) -> list[float]:
        """Generate an embedding vector for the given text."""
        if not text or not text.strip():
            raise EmbeddingUnavailable("Cannot embed empty text")
        api_key = get_openai_api_key()
        if api_key is None:
            raise EmbeddingUnavailable("OPENAI_API_KEY not set; embeddings disabled")

        try:
            resp = await self._get_client().post(
                f"{get_openai_url()}/embeddings",
                json={"model": get_embedding_model(), "input": text},
                headers={"Authorization": f"Bearer {api_key}"},
                timeout=get_embedding_timeout(),
            )
        except httpx.TimeoutException as exc:
            logger.warning("Embedding request timed out")
            raise EmbeddingUnavailable("Embedding request timed out") from exc
        except httpx.HTTPError as exc:
            logger.warning("Embedding service unreachable", exc_info=True)
            raise EmbeddingUnavailable("Embedding service unreachable") from exc

        if not resp.is_success:
            logger.warning("Embedding service error: %s %s", resp.status_code, resp.text[:200])
            raise EmbeddingUnavailable(f"Embedding service error: HTTP {resp.status_code}")

        try:
            # {"data": [{"embedding": [...]}]}
            vector = resp.json()["data"][0]["embedding"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            logger.warning("Malformed embedding response", exc_info=True)
            raise EmbeddingUnavailable("Malformed embedding response") from exc

        if (
            not isinstance(vector, list)
            or not vector
            or not all(isinstance(v, int | float) and not isinstance(v, bool) for v in vector)
        ):
            logger.warning("Embedding response did not contain a numeric vector")
            raise EmbeddingUnavailable("Malformed embedding response")
        return [float(v) for v in vector]

    async def store_embedding(self, resource_id: str, embedding: list[float]) -> None:
        """Store an embedding in the vec0 table and flag the resource as embedded."""
        async with self.db.transaction():
            await self.db.vector_store(resource_id, embedding)
            await set_has_embedding(self.db, resource_id, True)

    def _get_client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient()
        return self._http

    async def close(self) -> None:
        """Close the HTTP client if open."""
        if self._http is not None:
            await self._http.aclose()
            self._http = None

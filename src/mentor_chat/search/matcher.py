"""Resource matcher: similarity ranking with a category fallback ladder."""

import logging
from collections.abc import Awaitable, Callable

from mentor_chat.errors import EmbeddingUnavailable
from mentor_chat.models.match import MatchResult, ScoredEntry
from mentor_chat.models.resource import ResourceCategory
from mentor_chat.search.embeddings import EmbeddingClient
from mentor_chat.search.vector import search_by_similarity
from mentor_chat.store.resource_store import ResourceStore

logger = logging.getLogger(__name__)

MATCH_THRESHOLD = 0.5
MATCH_LIMIT = 5
FALLBACK_LIMIT = 20
FALLBACK_CATEGORY = ResourceCategory.SOS

MatchRung = Callable[[str], Awaitable[MatchResult | None]]


class ResourceMatcher:
    """Selects the resources to show the generator for one query.

    ``match`` walks an ordered list of rungs and returns the first non-None
    result. Each rung is a plain coroutine so it can be tested on its own.
    """

    def __init__(
        self,
        store: ResourceStore,
        embedder: EmbeddingClient,
        *,
        threshold: float = MATCH_THRESHOLD,
        limit: int = MATCH_LIMIT,
        fallback_category: ResourceCategory = FALLBACK_CATEGORY,
        fallback_limit: int = FALLBACK_LIMIT,
    ):
        """Initialize with the resource store, an embedder and policy values."""
        self.store = store
        self.embedder = embedder
        self.threshold = threshold
        self.limit = limit
        self.fallback_category = fallback_category
        self.fallback_limit = fallback_limit

    @property
    def rungs(self) -> list[MatchRung]:
        """Strategies in the order they are attempted."""
        return [self.ranked_matches, self.category_fallback]

    async def match(self, query: str) -> MatchResult:
        """Return ranked matches, else the fallback category. Never raises."""
        for rung in self.rungs:
            try:
                result = await rung(query)
            except Exception:
                logger.warning("Match strategy %s failed", rung.__name__, exc_info=True)
                continue
            if result is not None:
                return result
        return MatchResult(ranked=False)

    # -- Rung 1: similarity --

    async def ranked_matches(self, query: str) -> MatchResult | None:
        """Resources above the similarity threshold, or None if there are none."""
        vector = await self.embed_query(query)
        if vector is None:
            return None
        hits = await self.similar_ids(vector)
        if not hits:
            logger.info("No resource above %.2f similarity; using fallback", self.threshold)
            return None
        return await self.annotate(hits)

    async def embed_query(self, query: str) -> list[float] | None:
        """Embed the query, or None when there is nothing to embed or the service failed."""
        if not query.strip():
            return None
        try:
            return await self.embedder.embed(query)
        except EmbeddingUnavailable as exc:
            logger.info("Embedding unavailable (%s); using fallback", exc)
            return None

    async def similar_ids(self, vector: list[float]) -> list[tuple[str, float]]:
        """Run the similarity search. A search error counts as no hits."""
        try:
            return await search_by_similarity(
                self.store.db, vector, threshold=self.threshold, limit=self.limit
            )
        except Exception:
            logger.warning("Similarity search failed; using fallback", exc_info=True)
            return []

    async def annotate(self, hits: list[tuple[str, float]]) -> MatchResult | None:
        """Load records for the hits and attach each one's own score, keeping search order."""
        records = await self.store.get_many([resource_id for resource_id, _ in hits])
        entries = [
            ScoredEntry(entry=records[resource_id], similarity=similarity)
            for resource_id, similarity in hits
            if resource_id in records
        ]
        if not entries:
            return None
        return MatchResult(entries=entries, ranked=True)

    # -- Rung 2: category --

    async def category_fallback(self, query: str) -> MatchResult:
        """Unranked resources of the fallback category."""
        entries = await self.store.list_by_category(self.fallback_category, self.fallback_limit)
        return MatchResult(entries=[ScoredEntry(entry=e) for e in entries], ranked=False)

"""KNN similarity search via cosine distance."""

import logging

from mentor_chat.db.backend import Database

logger = logging.getLogger(__name__)


async def search_by_similarity(
    db: Database,
    vector: list[float],
    threshold: float,
    limit: int,
) -> list[tuple[str, float]]:
    """Return (resource_id, similarity) pairs with similarity >= threshold, best first.

    Similarity is ``1 - cosine distance`` clamped to [0, 1]. Only resources
    with a stored embedding can appear. Errors propagate to the caller.
    """
    hits = await db.vector_search(vector, limit=limit)
    results: list[tuple[str, float]] = []
    for resource_id, distance in hits:
        similarity = min(1.0, max(0.0, 1.0 - distance))
        if similarity >= threshold:
            results.append((resource_id, similarity))
    logger.debug("Similarity search: %d hit(s), %d above %.2f", len(hits), len(results), threshold)
    return results

#!/usr/bin/env python3
"""Compute embeddings for knowledge base resources.

Usage:
    python scripts/generate_embeddings.py [--category sos|all] [--force] [--db PATH]

Only resources without an embedding are processed unless --force is given.
A failure on one resource is reported and the run continues.
"""

import argparse
import asyncio
import sys

from mentor_chat.db.connection import create_connection
from mentor_chat.models.resource import ResourceCategory
from mentor_chat.search.embeddings import EmbeddingClient
from mentor_chat.search.indexer import index_resources
from mentor_chat.store.resource_store import ResourceStore


async def main() -> int:
    """Run the backfill."""
    parser = argparse.ArgumentParser(description="Generate resource embeddings")
    parser.add_argument(
        "--category",
        choices=[c.value for c in ResourceCategory] + ["all"],
        default=ResourceCategory.SOS.value,
        help="Resource category to embed, or all (default: sos)",
    )
    parser.add_argument("--force", action="store_true", help="Re-embed every resource")
    parser.add_argument("--db", default=None, help="Database path (default: MENTOR_DB_PATH)")
    args = parser.parse_args()

    category = None if args.category == "all" else ResourceCategory(args.category)

    db = await create_connection(args.db)
    embedder = EmbeddingClient(db)
    try:
        report = await index_resources(
            ResourceStore(db), embedder, category, force=args.force
        )
    finally:
        await embedder.close()
        await db.close()

    print(f"Processed {report.processed} of {report.total} resource(s)")
    for error in report.errors:
        print(f"  {error}")
    return 1 if report.errors else 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))

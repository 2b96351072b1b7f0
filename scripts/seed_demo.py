#!/usr/bin/env python3
"""Load demo resources, courses and lessons from a JSON file.

Usage:
    python scripts/seed_demo.py [--file scripts/demo_seed.json] [--db PATH]

Expected shape:
    {"resources": [{"title": ..., "description": ..., "category": ..., "tags": [...]}],
     "courses": [{"id": ..., "title": ..., "lessons": ["Lesson title", ...]}]}
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from mentor_chat.db.connection import create_connection
from mentor_chat.db.queries import insert_course, insert_lesson
from mentor_chat.models.resource import ResourceCategory
from mentor_chat.store.resource_store import ResourceStore


async def main() -> int:
    """Insert the seed data."""
    parser = argparse.ArgumentParser(description="Seed demo data")
    parser.add_argument(
        "--file",
        default=str(Path(__file__).with_name("demo_seed.json")),
        help="Seed JSON file",
    )
    parser.add_argument("--db", default=None, help="Database path (default: MENTOR_DB_PATH)")
    args = parser.parse_args()

    data = json.loads(Path(args.file).read_text(encoding="utf-8"))

    db = await create_connection(args.db)
    try:
        store = ResourceStore(db)
        for item in data.get("resources", []):
            await store.create_resource(
                title=item["title"],
                description=item.get("description"),
                category=ResourceCategory(item.get("category", "sos")),
                tags=item.get("tags", []),
                author=item.get("author"),
            )
        for position, course in enumerate(data.get("courses", [])):
            await insert_course(db, course["id"], course["title"], position)
            for lesson_pos, title in enumerate(course.get("lessons", [])):
                lesson_id = f"{course['id']}-{lesson_pos + 1}"
                await insert_lesson(db, lesson_id, course["id"], title, lesson_pos)
    finally:
        await db.close()

    print(
        f"Seeded {len(data.get('resources', []))} resource(s)"
        f" and {len(data.get('courses', []))} course(s)."
        " Run scripts/generate_embeddings.py to index them."
    )
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))

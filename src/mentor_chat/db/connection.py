"""Database connection management with sqlite-vec."""

import logging
from pathlib import Path

import aiosqlite
import sqlite_vec

from mentor_chat.config import get_db_path, get_embedding_dim
from mentor_chat.db.backend import Database
from mentor_chat.db.sqlite_backend import SQLiteBackend

logger = logging.getLogger(__name__)


async def create_connection(
    db_path: Path | str | None = None, *, embedding_dim: int | None = None
) -> Database:
    """Create and initialize a database connection.

    For in-memory databases, pass ":memory:".
    """
    db_path = str(db_path or get_db_path())
    dim = embedding_dim or get_embedding_dim()

    if db_path != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(db_path)
    conn.row_factory = aiosqlite.Row

    # WAL for concurrent readers while an editor saves a template
    await conn.execute("PRAGMA journal_mode=WAL")
    await conn.execute("PRAGMA foreign_keys=ON")

    vector_enabled = True
    try:
        await conn.enable_load_extension(True)
        await conn.load_extension(sqlite_vec.loadable_path())
        await conn.enable_load_extension(False)
        logger.debug("sqlite-vec extension loaded")
    except Exception:
        logger.warning("sqlite-vec extension not available; vector search disabled")
        vector_enabled = False

    db = SQLiteBackend(conn, vector_enabled=vector_enabled)
    await db.apply_schema(embedding_dim=dim)
    return db

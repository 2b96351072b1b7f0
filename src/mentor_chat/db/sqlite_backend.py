"""SQLite implementation of the Database protocol.

Thin wrapper around aiosqlite.Connection, plus the sqlite-vec operations
used for resource embeddings.
"""

from __future__ import annotations

import asyncio
import logging
import struct
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import aiosqlite

    from mentor_chat.db.backend import Cursor, Row

logger = logging.getLogger(__name__)


def _serialize_f32(vec: list[float]) -> bytes:
    """Serialize a list of floats to a compact binary format for sqlite-vec."""
    return struct.pack(f"{len(vec)}f", *vec)


class SQLiteCursor:
    """Wraps aiosqlite.Cursor to satisfy the Cursor protocol."""

    def __init__(self, cursor: aiosqlite.Cursor) -> None:
        """Initialize with an aiosqlite cursor."""
        self._cursor = cursor

    @property
    def rowcount(self) -> int:
        """Number of rows affected by the last operation."""
        rc = self._cursor.rowcount
        return rc if rc is not None else -1

    async def fetchone(self) -> Row | None:
        """Fetch the next row, or None if exhausted."""
        return await self._cursor.fetchone()

    async def fetchall(self) -> list[Row]:
        """Fetch all remaining rows."""
        return list(await self._cursor.fetchall())


class SQLiteBackend:
    """SQLite implementation of the Database protocol.

    Passes all calls through to the underlying aiosqlite.Connection.
    ``vector_enabled`` is False when sqlite-vec could not be loaded; vector
    calls then raise instead of silently returning nothing, so callers can
    tell "no match" from "no index".

    One connection is shared by every request, so writes that span several
    statements run inside ``transaction()``, which serializes them.
    """

    def __init__(self, conn: aiosqlite.Connection, *, vector_enabled: bool = True) -> None:
        """Initialize with an aiosqlite connection."""
        self._conn = conn
        self.vector_enabled = vector_enabled
        self._write_lock = asyncio.Lock()
        self._in_transaction: ContextVar[bool] = ContextVar(
            f"sqlite_transaction_{id(self)}", default=False
        )

    async def execute(self, sql: str, params: tuple[Any, ...] | list[Any] = ()) -> Cursor:
        """Execute a single SQL statement and return a cursor."""
        cursor = await self._conn.execute(sql, params)
        return SQLiteCursor(cursor)

    async def executescript(self, sql: str) -> None:
        """Execute multiple SQL statements (DDL, migrations)."""
        await self._conn.executescript(sql)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Run the enclosed statements as one ``BEGIN IMMEDIATE`` transaction.

        Holds the write lock until commit or rollback. Inside the block
        ``commit()`` is deferred to the end, and a nested ``transaction()``
        from the same task joins the outer one.
        """
        if self._in_transaction.get():
            yield
            return

        async with self._write_lock:
            token = self._in_transaction.set(True)
            try:
                await self._conn.execute("BEGIN IMMEDIATE")
                try:
                    yield
                except BaseException:
                    await self._conn.rollback()
                    raise
                await self._conn.commit()
            finally:
                self._in_transaction.reset(token)

    async def commit(self) -> None:
        """Commit the current transaction.

        Deferred when called inside ``transaction()``. Otherwise waits for any
        open transaction to finish first.
        """
        if self._in_transaction.get():
            return
        async with self._write_lock:
            await self._conn.commit()

    async def rollback(self) -> None:
        """Roll back the current transaction."""
        await self._conn.rollback()

    async def close(self) -> None:
        """Close the database connection."""
        await self._conn.close()

    # -- Vector operations (sqlite-vec) --

    def _require_vec(self) -> None:
        if not self.vector_enabled:
            raise RuntimeError("sqlite-vec is not loaded; vector operations disabled")

    async def vector_store(self, resource_id: str, embedding: list[float]) -> None:
        """Upsert an embedding in the vec0 table."""
        self._require_vec()
        blob = _serialize_f32(embedding)
        # vec0 doesn't support ON CONFLICT; delete then insert
        await self._conn.execute(
            "DELETE FROM resource_vec WHERE resource_id = ?", (resource_id,)
        )
        await self._conn.execute(
            "INSERT INTO resource_vec (resource_id, embedding) VALUES (?, ?)",
            (resource_id, blob),
        )

    async def vector_search(
        self, embedding: list[float], limit: int = 20
    ) -> list[tuple[str, float]]:
        """KNN search via sqlite-vec cosine distance. Returns (resource_id, distance) pairs."""
        self._require_vec()
        blob = _serialize_f32(embedding)
        cursor = await self._conn.execute(
            """SELECT resource_id, distance
            FROM resource_vec
            WHERE embedding MATCH ?
            ORDER BY distance
            LIMIT ?""",
            (blob, limit),
        )
        rows = await cursor.fetchall()
        return [(row[0], row[1]) for row in rows]

    async def vector_delete(self, resource_id: str) -> None:
        """Delete embedding for a resource."""
        if not self.vector_enabled:
            return
        await self._conn.execute(
            "DELETE FROM resource_vec WHERE resource_id = ?", (resource_id,)
        )

    # -- Schema --

    async def apply_schema(self, *, embedding_dim: int = 1536) -> None:
        """Apply all SQLite DDL: tables, seed sequence, vec0."""
        from mentor_chat.db.schema import apply_schema, apply_vec_schema

        await apply_schema(self)

        if not self.vector_enabled:
            return
        try:
            await apply_vec_schema(self, dim=embedding_dim)
        except Exception:
            logger.warning("sqlite-vec schema not applied; vector search disabled", exc_info=True)
            self.vector_enabled = False

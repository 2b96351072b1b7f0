"""Database backend protocol: thin abstraction over async DB connections.

Application code programs against these protocols so stores and search
helpers can be exercised against an in-memory SQLite database in tests.
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Row(Protocol):
    """A database row supporting both named and positional access."""

    def __getitem__(self, key: str | int) -> Any:
        """Get a column value by name or position."""
        ...

    def keys(self) -> Any:
        """Return column names."""
        ...


@runtime_checkable
class Cursor(Protocol):
    """Async cursor returned by Database.execute()."""

    @property
    def rowcount(self) -> int:
        """Number of rows affected by the last operation."""
        ...

    async def fetchone(self) -> Row | None:
        """Fetch the next row, or None if exhausted."""
        ...

    async def fetchall(self) -> list[Row]:
        """Fetch all remaining rows."""
        ...


@runtime_checkable
class Database(Protocol):
    """Async database backend. All application SQL uses ``?`` placeholders."""

    async def execute(self, sql: str, params: tuple[Any, ...] | list[Any] = ()) -> Cursor:
        """Execute a single SQL statement and return a cursor."""
        ...

    async def executescript(self, sql: str) -> None:
        """Execute multiple SQL statements (DDL, migrations)."""
        ...

    def transaction(self) -> AbstractAsyncContextManager[None]:
        """Serialized write transaction, committed on exit, rolled back on error."""
        ...

    async def commit(self) -> None:
        """Commit the current transaction."""
        ...

    async def rollback(self) -> None:
        """Roll back the current transaction."""
        ...

    async def vector_store(self, resource_id: str, embedding: list[float]) -> None:
        """Upsert the embedding for a resource."""
        ...

    async def vector_search(
        self, embedding: list[float], limit: int = 20
    ) -> list[tuple[str, float]]:
        """KNN search. Returns (resource_id, cosine distance) pairs, nearest first."""
        ...

    async def vector_delete(self, resource_id: str) -> None:
        """Delete the embedding for a resource."""
        ...

    async def close(self) -> None:
        """Close the database connection."""
        ...

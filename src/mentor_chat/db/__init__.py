"""Database connection and schema management."""

from mentor_chat.db.backend import Cursor, Database, Row
from mentor_chat.db.sqlite_backend import SQLiteBackend

__all__ = ["Cursor", "Database", "Row", "SQLiteBackend"]

"""Table store backends: SQLite and in-memory."""

from shared.db.connection import Database
from shared.db.memory_store import InMemoryTableStore
from shared.db.table_store import SqliteTableStore

__all__ = [
    "Database",
    "InMemoryTableStore",
    "SqliteTableStore",
]

"""SQLite database connection and schema management."""

import os
import sqlite3
from pathlib import Path

import structlog

from shared.errors import StorageUnavailableError

logger = structlog.get_logger()

_DB_FILE_PERMISSIONS = 0o600

# One physical table hosts every logical table; table_name keeps them apart.
# The composite primary key gives atomic insert-with-conflict per row, and
# its index serves ordered partition scans.
_SCHEMA_SQL = """\
CREATE TABLE IF NOT EXISTS table_entities (
    table_name TEXT NOT NULL,
    partition_key TEXT NOT NULL,
    row_key TEXT NOT NULL,
    data TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    PRIMARY KEY (table_name, partition_key, row_key)
) WITHOUT ROWID;
"""


class Database:
    """SQLite database wrapper with schema management."""

    def __init__(self, path: str | Path) -> None:
        self._path = str(path)
        self._conn: sqlite3.Connection | None = None

    @property
    def path(self) -> str:
        return self._path

    @property
    def connection(self) -> sqlite3.Connection:
        """Return the active connection or raise if disconnected."""
        if self._conn is None:
            raise StorageUnavailableError("Database is not connected")
        return self._conn

    @property
    def is_connected(self) -> bool:
        return self._conn is not None

    def connect(self) -> None:
        """Open the database, apply pragmas, create schema, and harden file permissions."""
        conn = None
        try:
            Path(self._path).parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self._path, check_same_thread=False)
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA busy_timeout=5000")
            conn.executescript(_SCHEMA_SQL)
        except (OSError, sqlite3.Error) as exc:
            if conn is not None:
                conn.close()
            raise StorageUnavailableError(f"Failed to open database at {self._path}") from exc
        self._conn = conn
        self._harden_permissions()
        logger.info("database connected", path=self._path)

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _harden_permissions(self) -> None:
        """Restrict the DB file and its WAL/SHM siblings to the owner (POSIX, best effort)."""
        if os.name != "posix":  # pragma: no cover
            return
        for suffix in ("", "-wal", "-shm"):
            p = Path(self._path + suffix)
            if p.exists():
                try:
                    p.chmod(_DB_FILE_PERMISSIONS)
                except OSError:
                    logger.warning("could not set file permissions", permissions=oct(_DB_FILE_PERMISSIONS), path=str(p))

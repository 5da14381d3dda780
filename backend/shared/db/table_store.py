"""SQLite-backed table store."""

from __future__ import annotations

import asyncio
import contextlib
import json
import sqlite3
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog

from shared.dal.table_store import Row, TableStore, check_limit
from shared.errors import EntityExistsError, StorageUnavailableError

if TYPE_CHECKING:
    from shared.db.connection import Database

logger = structlog.get_logger()


class SqliteTableStore(TableStore):
    """SQLite implementation of TableStore for one logical table.

    Rows are stored as JSON in the shared ``table_entities`` table. Writes go
    through a single INSERT/UPSERT under an asyncio lock and rely on the
    primary key for conflict detection; IntegrityError maps to
    EntityExistsError and every other sqlite3.Error to StorageUnavailableError.
    """

    def __init__(self, db: Database, table_name: str) -> None:
        self._db = db
        self._table = table_name
        self._lock = asyncio.Lock()

    @property
    def table_name(self) -> str:
        return self._table

    async def insert(self, partition_key: str, row_key: str, data: Row) -> None:
        async with self._lock:
            conn = self._db.connection
            try:
                conn.execute(
                    "INSERT INTO table_entities (table_name, partition_key, row_key, data, updated_at) "
                    "VALUES (?, ?, ?, ?, ?)",
                    (self._table, partition_key, row_key, json.dumps(data), _now_iso()),
                )
                conn.commit()
            except sqlite3.IntegrityError as exc:
                _rollback(conn)
                raise EntityExistsError(partition_key, row_key) from exc
            except sqlite3.Error as exc:
                _rollback(conn)
                raise self._unavailable("insert", exc) from exc

    async def upsert(self, partition_key: str, row_key: str, data: Row) -> None:
        async with self._lock:
            conn = self._db.connection
            try:
                conn.execute(
                    "INSERT INTO table_entities (table_name, partition_key, row_key, data, updated_at) "
                    "VALUES (?, ?, ?, ?, ?) "
                    "ON CONFLICT (table_name, partition_key, row_key) "
                    "DO UPDATE SET data = excluded.data, updated_at = excluded.updated_at",
                    (self._table, partition_key, row_key, json.dumps(data), _now_iso()),
                )
                conn.commit()
            except sqlite3.Error as exc:
                _rollback(conn)
                raise self._unavailable("upsert", exc) from exc

    async def get(self, partition_key: str, row_key: str) -> Row | None:
        try:
            row = self._db.connection.execute(
                "SELECT data FROM table_entities WHERE table_name = ? AND partition_key = ? AND row_key = ?",
                (self._table, partition_key, row_key),
            ).fetchone()
        except sqlite3.Error as exc:
            raise self._unavailable("get", exc) from exc
        if row is None:
            return None
        return json.loads(row[0])

    async def scan(self, partition_key: str, limit: int | None = None) -> list[Row]:
        check_limit(limit)
        # LIMIT -1 means "no limit" in SQLite
        try:
            rows = self._db.connection.execute(
                "SELECT data FROM table_entities WHERE table_name = ? AND partition_key = ? "
                "ORDER BY row_key ASC LIMIT ?",
                (self._table, partition_key, -1 if limit is None else limit),
            ).fetchall()
        except sqlite3.Error as exc:
            raise self._unavailable("scan", exc) from exc
        return [json.loads(row[0]) for row in rows]

    async def delete(self, partition_key: str, row_key: str) -> bool:
        async with self._lock:
            conn = self._db.connection
            try:
                cursor = conn.execute(
                    "DELETE FROM table_entities WHERE table_name = ? AND partition_key = ? AND row_key = ?",
                    (self._table, partition_key, row_key),
                )
                conn.commit()
            except sqlite3.Error as exc:
                _rollback(conn)
                raise self._unavailable("delete", exc) from exc
        if cursor.rowcount == 0:
            logger.warning("delete had no effect (not found)", table=self._table, partition_key=partition_key, row_key=row_key)
            return False
        return True

    async def count(self, partition_key: str) -> int:
        try:
            row = self._db.connection.execute(
                "SELECT COUNT(*) FROM table_entities WHERE table_name = ? AND partition_key = ?",
                (self._table, partition_key),
            ).fetchone()
        except sqlite3.Error as exc:
            raise self._unavailable("count", exc) from exc
        return row[0]

    async def ping(self) -> None:
        try:
            self._db.connection.execute("SELECT 1").fetchone()
        except sqlite3.Error as exc:
            raise self._unavailable("ping", exc) from exc

    def _unavailable(self, operation: str, exc: sqlite3.Error) -> StorageUnavailableError:
        logger.warning("table store operation failed", table=self._table, operation=operation, error=str(exc))
        return StorageUnavailableError(f"Table '{self._table}' {operation} failed: {exc}")


def _now_iso() -> str:
    return datetime.now(tz=UTC).isoformat()


def _rollback(conn: sqlite3.Connection) -> None:
    # The connection may already be unusable; the original error is the one to report.
    with contextlib.suppress(sqlite3.Error):
        conn.rollback()

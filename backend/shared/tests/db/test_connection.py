"""Tests for Database connection and schema."""

from __future__ import annotations

import os
import sqlite3
import stat
import sys
from typing import TYPE_CHECKING
from unittest.mock import MagicMock, patch

import pytest

from shared.db.connection import Database
from shared.errors import StorageUnavailableError

if TYPE_CHECKING:
    from pathlib import Path


class TestConnect:
    def test_creates_schema_and_connects(self, tmp_path: Path) -> None:
        db = Database(tmp_path / "test.db")
        db.connect()

        tables = db.connection.execute("SELECT name FROM sqlite_master WHERE type='table'").fetchall()
        assert "table_entities" in [t[0] for t in tables]
        assert db.is_connected
        db.close()

    def test_reconnect_after_close_keeps_data(self, tmp_path: Path) -> None:
        db = Database(tmp_path / "test.db")
        db.connect()
        db.connection.execute(
            "INSERT INTO table_entities VALUES ('HighScores', 'Default', 'k1', '{}', '2025-01-15T12:00:00+00:00')",
        )
        db.connection.commit()
        db.close()
        db.connect()

        row = db.connection.execute("SELECT COUNT(*) FROM table_entities").fetchone()
        assert row[0] == 1
        db.close()

    def test_connection_raises_when_disconnected(self, tmp_path: Path) -> None:
        db = Database(tmp_path / "test.db")
        with pytest.raises(StorageUnavailableError, match="not connected"):
            _ = db.connection

    def test_connection_raises_after_close(self, tmp_path: Path) -> None:
        db = Database(tmp_path / "test.db")
        db.connect()
        db.close()
        assert not db.is_connected
        with pytest.raises(StorageUnavailableError, match="not connected"):
            _ = db.connection

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        db = Database(tmp_path / "nested" / "dir" / "test.db")
        db.connect()
        assert (tmp_path / "nested" / "dir" / "test.db").exists()
        db.close()

    def test_unopenable_path_raises_storage_unavailable(self, tmp_path: Path) -> None:
        # A directory where the database file should be cannot be opened.
        target = tmp_path / "occupied.db"
        target.mkdir()
        db = Database(target)
        with pytest.raises(StorageUnavailableError, match="Failed to open database"):
            db.connect()

    def test_uncreatable_parent_raises_storage_unavailable(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        db = Database(blocker / "test.db")
        with pytest.raises(StorageUnavailableError, match="Failed to open database"):
            db.connect()
        assert not db.is_connected

    def test_failed_schema_setup_closes_connection(self, tmp_path: Path) -> None:
        conn = MagicMock()
        conn.execute.side_effect = sqlite3.OperationalError("disk I/O error")
        db = Database(tmp_path / "test.db")
        with (
            patch("shared.db.connection.sqlite3.connect", return_value=conn),
            pytest.raises(StorageUnavailableError, match="Failed to open database"),
        ):
            db.connect()
        conn.close.assert_called_once()
        assert not db.is_connected

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions only")
    def test_database_file_is_owner_only(self, tmp_path: Path) -> None:
        db = Database(tmp_path / "test.db")
        db.connect()

        mode = stat.S_IMODE(os.stat(tmp_path / "test.db").st_mode)
        assert mode == 0o600
        db.close()

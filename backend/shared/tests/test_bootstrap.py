"""Tests for create_services wiring and the storage health check."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from shared.bootstrap import create_services
from shared.db import InMemoryTableStore, SqliteTableStore
from shared.settings import ScoresSettings, StorageBackend

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture(autouse=True)
def _cleanup_root_logger():
    """create_services installs a stdout handler; drop it after each test."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)


def _settings(tmp_path: Path, **overrides) -> ScoresSettings:
    values = {"database_path": str(tmp_path / "scores.db"), "log_dir": None} | overrides
    return ScoresSettings(**values)


class TestCreateServices:
    async def test_sqlite_backend_end_to_end(self, tmp_path: Path) -> None:
        services = create_services(_settings(tmp_path, storage_backend=StorageBackend.SQLITE))
        try:
            assert isinstance(services.leaderboard_table, SqliteTableStore)
            await services.leaderboard.submit("Default", "abc", 1200)
            await services.stats.record_session("abc", 1200, 10, 60)

            top = await services.leaderboard.get_top_scores("Default", 5)
            stats = await services.stats.get_stats("ABC")
        finally:
            services.close()

        assert [e.score for e in top] == [1200]
        assert stats is not None
        assert stats.total_games == 1
        assert (tmp_path / "scores.db").exists()

    async def test_memory_backend(self, tmp_path: Path) -> None:
        services = create_services(_settings(tmp_path, storage_backend=StorageBackend.MEMORY))

        assert isinstance(services.stats_table, InMemoryTableStore)
        assert services.database is None
        assert not (tmp_path / "scores.db").exists()
        services.close()

    async def test_passes_table_size_to_leaderboard(self, tmp_path: Path) -> None:
        services = create_services(
            _settings(tmp_path, storage_backend=StorageBackend.MEMORY, high_score_table_size=3),
        )

        assert services.leaderboard.high_score_table_size == 3

    async def test_can_skip_logging_setup(self, tmp_path: Path) -> None:
        services = create_services(
            _settings(tmp_path, storage_backend=StorageBackend.MEMORY),
            configure_logging=False,
        )

        assert services.leaderboard is not None


class TestCheckHealth:
    async def test_healthy(self, tmp_path: Path) -> None:
        services = create_services(_settings(tmp_path, storage_backend=StorageBackend.MEMORY))

        report = await services.check_health()

        assert report["status"] == "healthy"
        assert report["storage"] == {"leaderboard": {"status": "healthy"}, "stats": {"status": "healthy"}}
        assert "version" in report
        assert "commit" in report

    async def test_degraded_when_database_closed(self, tmp_path: Path) -> None:
        services = create_services(_settings(tmp_path, storage_backend=StorageBackend.SQLITE))
        services.close()

        report = await services.check_health()

        assert report["status"] == "degraded"
        assert report["storage"]["leaderboard"]["status"] == "unhealthy"
        assert "not connected" in report["storage"]["stats"]["error"]

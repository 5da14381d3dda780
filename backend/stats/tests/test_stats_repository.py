"""Tests for PlayerStatsRepository over the SQLite backend."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest

from shared.db import Database, SqliteTableStore
from stats.models import PlayerStats
from stats.repository import STATS_PARTITION, PlayerStatsRepository

if TYPE_CHECKING:
    from pathlib import Path

NOW = datetime(2025, 1, 15, 12, 0, 0, tzinfo=UTC)


def _stats(initials: str = "ABC", **overrides) -> PlayerStats:
    return PlayerStats(initials=initials, first_played=NOW, last_played=NOW, **overrides)


@pytest.fixture
def table(tmp_path: Path):
    db = Database(tmp_path / "test.db")
    db.connect()
    yield SqliteTableStore(db, "GameStats")
    db.close()


@pytest.fixture
def repo(table):
    return PlayerStatsRepository(table)


class TestPlayerStatsRepository:
    async def test_get_unknown_returns_none(self, repo):
        assert await repo.get("ZZZ") is None

    async def test_upsert_and_get_round_trip(self, repo):
        stats = _stats(
            total_games=3,
            highest_score=420,
            average_score=210.5,
            score_distribution={"100-199": 2, "400-499": 1},
            percentile_rank=66.7,
        )
        await repo.upsert(stats)

        assert await repo.get("ABC") == stats

    async def test_distribution_stored_as_flat_string(self, repo, table):
        await repo.upsert(_stats(score_distribution={"0-99": 5, "100-199": 2}))

        row = await table.get(STATS_PARTITION, "ABC")
        assert row is not None
        assert row["score_distribution"] == "0-99:5,100-199:2"

    async def test_upsert_replaces(self, repo):
        await repo.upsert(_stats(total_games=1))
        await repo.upsert(_stats(total_games=2))

        stored = await repo.get("ABC")
        assert stored is not None
        assert stored.total_games == 2

    async def test_get_all(self, repo):
        await repo.upsert(_stats("BBB"))
        await repo.upsert(_stats("AAA"))

        assert [s.initials for s in await repo.get_all()] == ["AAA", "BBB"]

    async def test_timestamps_stay_timezone_aware(self, repo):
        await repo.upsert(_stats())

        stored = await repo.get("ABC")
        assert stored is not None
        assert stored.first_played == NOW
        assert stored.first_played.tzinfo is not None

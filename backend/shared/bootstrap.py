"""Wire settings, logging, storage and services into one object."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog

from leaderboard.service import LeaderboardService
from leaderboard.store import LeaderboardStore
from shared.build_info import APP_VERSION, GIT_COMMIT
from shared.db import Database, InMemoryTableStore, SqliteTableStore
from shared.errors import StorageUnavailableError
from shared.logging import setup_logging
from shared.settings import ScoresSettings, StorageBackend
from stats.aggregator import StatsAggregator
from stats.repository import PlayerStatsRepository

if TYPE_CHECKING:
    from shared.dal.table_store import TableStore

logger = structlog.get_logger()


@dataclass
class ScoreServices:
    """Everything the transport layer needs to serve scores and statistics."""

    leaderboard: LeaderboardService
    stats: StatsAggregator
    leaderboard_table: TableStore
    stats_table: TableStore
    database: Database | None = None

    async def check_health(self) -> dict[str, Any]:
        """Probe both tables. Degraded, not raising, when storage is down."""
        storage: dict[str, Any] = {}
        status = "healthy"
        for name, table in (("leaderboard", self.leaderboard_table), ("stats", self.stats_table)):
            try:
                await table.ping()
            except StorageUnavailableError as exc:
                logger.warning("storage health check failed", table=name, error=str(exc))
                storage[name] = {"status": "unhealthy", "error": str(exc)}
                status = "degraded"
            else:
                storage[name] = {"status": "healthy"}
        return {"status": status, "version": APP_VERSION, "commit": GIT_COMMIT, "storage": storage}

    def close(self) -> None:
        if self.database is not None:
            self.database.close()


def create_services(settings: ScoresSettings | None = None, *, configure_logging: bool = True) -> ScoreServices:
    """Build the storage backend and both services from settings."""
    s = settings or ScoresSettings()
    if configure_logging:
        setup_logging(log_dir=s.log_dir, log_format=s.log_format, level=s.log_level)

    database: Database | None = None
    if s.storage_backend == StorageBackend.SQLITE:
        database = Database(s.database_path)
        database.connect()
        leaderboard_table: TableStore = SqliteTableStore(database, s.leaderboard_table)
        stats_table: TableStore = SqliteTableStore(database, s.stats_table)
    else:
        leaderboard_table = InMemoryTableStore()
        stats_table = InMemoryTableStore()

    logger.info(
        "score services created",
        storage_backend=s.storage_backend,
        high_score_table_size=s.high_score_table_size,
    )
    return ScoreServices(
        leaderboard=LeaderboardService(
            LeaderboardStore(leaderboard_table),
            high_score_table_size=s.high_score_table_size,
            default_top_count=s.default_top_count,
        ),
        stats=StatsAggregator(PlayerStatsRepository(stats_table)),
        leaderboard_table=leaderboard_table,
        stats_table=stats_table,
        database=database,
    )

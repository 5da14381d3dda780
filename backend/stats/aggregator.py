"""Incremental per-player statistics, updated once per game session."""

from __future__ import annotations

import asyncio
import contextlib
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog

from shared.validators import check_initials, check_non_negative, check_score, ensure_valid, normalize_initials
from stats.models import PlayerStats, add_to_distribution

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from stats.repository import PlayerStatsRepository

logger = structlog.get_logger()

SOLE_PLAYER_PERCENTILE = 100.0


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


class StatsAggregator:
    """Maintain one statistics record per player.

    Each session is a read-modify-write of a single row. Sessions for the
    same initials are serialized with a per-player asyncio.Lock so running
    totals and the mean never lose an update; sessions for different
    players proceed concurrently. Percentile ranks are a point-in-time
    snapshot and may lag writes from other players.

    Recording is not idempotent: replaying a session counts it twice.

    Limitation: locks are process-local, so only one writer process may
    share a store.
    """

    def __init__(
        self,
        repository: PlayerStatsRepository,
        *,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._repository = repository
        self._clock = clock
        self._player_locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}  # initials -> tasks holding or waiting

    async def record_session(
        self,
        initials: str,
        score: int,
        circles_tapped: int,
        playtime_seconds: int,
    ) -> PlayerStats:
        """Fold one finished game into the player's statistics and persist them."""
        ensure_valid(
            check_initials(initials),
            check_score(score),
            check_non_negative("Circles tapped", circles_tapped),
            check_non_negative("Playtime seconds", playtime_seconds),
        )
        key = normalize_initials(initials)

        async with self._player_lock(key):
            now = self._clock()
            current = await self._repository.get(key)
            if current is None:
                current = PlayerStats(initials=key, first_played=now, last_played=now)
                logger.info("creating player stats", initials=key)

            total_games = current.total_games + 1
            updated = current.model_copy(
                update={
                    "total_games": total_games,
                    "total_circles_tapped": current.total_circles_tapped + circles_tapped,
                    "total_playtime_seconds": current.total_playtime_seconds + playtime_seconds,
                    "last_played": now,
                    "highest_score": max(current.highest_score, score),
                    "average_score": (current.average_score * (total_games - 1) + score) / total_games,
                    "score_distribution": add_to_distribution(current.score_distribution, score),
                },
            )
            updated = updated.model_copy(update={"percentile_rank": await self._percentile_rank(updated)})
            await self._repository.upsert(updated)

        logger.info(
            "game session recorded",
            initials=key,
            score=score,
            total_games=updated.total_games,
            percentile_rank=updated.percentile_rank,
        )
        return updated

    async def get_stats(self, initials: str) -> PlayerStats | None:
        """Return the player's record, or None if they never played."""
        key = normalize_initials(initials)
        if not key:
            return None
        return await self._repository.get(key)

    async def get_all_stats(self) -> list[PlayerStats]:
        """All player records. Scans every row; treat as expensive."""
        return await self._repository.get_all()

    async def _percentile_rank(self, player: PlayerStats) -> float:
        """Share of players with a strictly lower best score, 0-100, one decimal.

        The player's own (possibly not yet persisted) record counts towards
        the population. A lone player is at 100 by convention.
        """
        others = [s for s in await self._repository.get_all() if s.initials != player.initials]
        if not others:
            return SOLE_PLAYER_PERCENTILE
        population = len(others) + 1
        lower = sum(1 for s in others if s.highest_score < player.highest_score)
        return round(lower / population * 100, 1)

    @contextlib.asynccontextmanager
    async def _player_lock(self, initials: str) -> AsyncIterator[None]:
        """Hold the lock for ``initials``; drop it once nobody holds or waits on it."""
        lock = self._player_locks.get(initials)
        if lock is None:
            lock = asyncio.Lock()
            self._player_locks[initials] = lock
        self._lock_users[initials] = self._lock_users.get(initials, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[initials] -= 1
            if self._lock_users[initials] == 0:
                del self._lock_users[initials]
                del self._player_locks[initials]

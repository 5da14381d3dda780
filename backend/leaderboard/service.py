"""Leaderboard semantics on top of LeaderboardStore."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog

from leaderboard.keys import encode_sort_key, new_unique_id
from leaderboard.models import LeaderboardEntry
from shared.errors import EntityExistsError, PersistenceConflictError
from shared.validators import (
    DEFAULT_GAME_MODE,
    check_game_mode,
    check_initials,
    check_score,
    ensure_valid,
    normalize_initials,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from leaderboard.store import LeaderboardStore

logger = structlog.get_logger()

DEFAULT_HIGH_SCORE_TABLE_SIZE = 10
DEFAULT_TOP_COUNT = 10

# First attempt plus one regeneration with millisecond precision.
MAX_SUBMIT_ATTEMPTS = 2


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


class LeaderboardService:
    """Submit scores and answer ranking questions per game mode.

    Store failures propagate unchanged (StorageUnavailableError); nothing
    here turns an outage into an empty leaderboard.
    """

    def __init__(
        self,
        store: LeaderboardStore,
        *,
        high_score_table_size: int = DEFAULT_HIGH_SCORE_TABLE_SIZE,
        default_top_count: int = DEFAULT_TOP_COUNT,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        if high_score_table_size < 1:
            raise ValueError("high_score_table_size must be at least 1")
        if default_top_count < 1:
            raise ValueError("default_top_count must be at least 1")
        self._store = store
        self._table_size = high_score_table_size
        self._default_top_count = default_top_count
        self._clock = clock

    @property
    def high_score_table_size(self) -> int:
        return self._table_size

    async def submit(self, game_mode: str | None, player_initials: str, score: int) -> LeaderboardEntry:
        """Validate and store a score, regenerating the row key once on collision.

        Raises ValidationError before touching the store, and
        PersistenceConflictError if the regenerated key collides too. A missing
        game mode files the score under DEFAULT_GAME_MODE.
        """
        if game_mode is None:
            game_mode = DEFAULT_GAME_MODE
        ensure_valid(check_game_mode(game_mode), check_initials(player_initials), check_score(score))
        initials = normalize_initials(player_initials)
        scored_at = self._clock()

        for attempt in range(1, MAX_SUBMIT_ATTEMPTS + 1):
            precise = attempt > 1
            key_time = self._clock() if precise else scored_at
            entry = LeaderboardEntry(
                game_mode=game_mode,
                player_initials=initials,
                score=score,
                score_date=scored_at,
                sort_key=encode_sort_key(score, key_time, new_unique_id(), precise=precise),
            )
            try:
                await self._store.insert(entry)
            except EntityExistsError:
                logger.warning(
                    "sort key collision",
                    game_mode=game_mode,
                    sort_key=entry.sort_key,
                    attempt=attempt,
                )
                continue
            logger.info("score saved", game_mode=game_mode, initials=initials, score=score)
            return entry

        raise PersistenceConflictError(
            f"Could not store score {score} for {initials} in '{game_mode}' after {MAX_SUBMIT_ATTEMPTS} attempts",
        )

    async def get_top_scores(self, game_mode: str, count: int = DEFAULT_TOP_COUNT) -> list[LeaderboardEntry]:
        """Best ``count`` entries, highest first. Non-positive counts use the default."""
        if count <= 0:
            count = self._default_top_count
        entries = await self._store.scan_ascending(game_mode, count)
        logger.debug("top scores loaded", game_mode=game_mode, requested=count, returned=len(entries))
        return entries

    async def is_high_score(self, game_mode: str, score: int) -> bool:
        """True when the table is not full yet or ``score`` beats its last entry."""
        entries = await self._store.scan_ascending(game_mode, self._table_size)
        if len(entries) < self._table_size:
            return True
        return score > entries[-1].score

    async def get_rank(self, game_mode: str, score: int) -> int:
        """1-based position ``score`` would take; ties place it ahead of existing entries.

        Scans the whole partition.
        """
        entries = await self._store.scan_ascending(game_mode)
        for position, entry in enumerate(entries, start=1):
            if entry.score <= score:
                return position
        return len(entries) + 1

    async def count_scores(self, game_mode: str) -> int:
        return await self._store.count(game_mode)

    async def delete_score(self, game_mode: str, sort_key: str) -> bool:
        """Admin removal of a single entry. Returns False if it did not exist."""
        deleted = await self._store.delete(game_mode, sort_key)
        if deleted:
            logger.info("score deleted", game_mode=game_mode, sort_key=sort_key)
        return deleted

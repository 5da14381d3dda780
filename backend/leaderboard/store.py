"""Leaderboard rows on top of a generic table store, one partition per game mode."""

from __future__ import annotations

from typing import TYPE_CHECKING

from leaderboard.models import LeaderboardEntry

if TYPE_CHECKING:
    from shared.dal.table_store import TableStore


class LeaderboardStore:
    """Typed access to leaderboard rows.

    Partition key is the game mode, row key is the entry's sort key, so an
    ascending scan is already highest-score-first.
    """

    def __init__(self, table: TableStore) -> None:
        self._table = table

    async def insert(self, entry: LeaderboardEntry) -> None:
        """Store a new entry. Raises EntityExistsError if the sort key is taken."""
        await self._table.insert(entry.game_mode, entry.sort_key, entry.model_dump(mode="json"))

    async def scan_ascending(self, game_mode: str, limit: int | None = None) -> list[LeaderboardEntry]:
        rows = await self._table.scan(game_mode, limit)
        return [LeaderboardEntry.model_validate(row) for row in rows]

    async def delete(self, game_mode: str, sort_key: str) -> bool:
        return await self._table.delete(game_mode, sort_key)

    async def count(self, game_mode: str) -> int:
        return await self._table.count(game_mode)

"""Player statistics rows on top of a generic table store."""

from __future__ import annotations

from typing import TYPE_CHECKING

from stats.models import PlayerStats, format_distribution, parse_distribution

if TYPE_CHECKING:
    from shared.dal.table_store import Row, TableStore

# Every stats record shares one partition; the row key is the initials.
STATS_PARTITION = "GameStats"


class PlayerStatsRepository:
    """Typed access to player statistics.

    The score histogram is flattened to ``"label:count,..."`` only at this
    storage boundary.
    """

    def __init__(self, table: TableStore) -> None:
        self._table = table

    async def get(self, initials: str) -> PlayerStats | None:
        row = await self._table.get(STATS_PARTITION, initials)
        if row is None:
            return None
        return _from_row(row)

    async def upsert(self, stats: PlayerStats) -> None:
        await self._table.upsert(STATS_PARTITION, stats.initials, _to_row(stats))

    async def get_all(self) -> list[PlayerStats]:
        """Every player record. Scans the whole partition."""
        return [_from_row(row) for row in await self._table.scan(STATS_PARTITION)]


def _to_row(stats: PlayerStats) -> Row:
    row = stats.model_dump(mode="json")
    row["score_distribution"] = format_distribution(stats.score_distribution)
    return row


def _from_row(row: Row) -> PlayerStats:
    data = dict(row)
    data["score_distribution"] = parse_distribution(data.get("score_distribution") or "")
    return PlayerStats.model_validate(data)

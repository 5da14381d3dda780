"""Per-player statistics: running totals, histogram and percentile rank."""

from stats.aggregator import StatsAggregator
from stats.models import PlayerStats, score_bucket
from stats.repository import STATS_PARTITION, PlayerStatsRepository

__all__ = [
    "STATS_PARTITION",
    "PlayerStats",
    "PlayerStatsRepository",
    "StatsAggregator",
    "score_bucket",
]

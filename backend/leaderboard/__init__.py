"""Leaderboard: rank-preserving keys, storage and ranking queries."""

from leaderboard.keys import MAX_SCORE, DecodedSortKey, decode_sort_key, encode_sort_key
from leaderboard.models import LeaderboardEntry
from leaderboard.service import LeaderboardService
from leaderboard.store import LeaderboardStore

__all__ = [
    "MAX_SCORE",
    "DecodedSortKey",
    "LeaderboardEntry",
    "LeaderboardService",
    "LeaderboardStore",
    "decode_sort_key",
    "encode_sort_key",
]

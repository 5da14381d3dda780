"""Leaderboard persistence models."""

from datetime import datetime

from pydantic import BaseModel, Field


class LeaderboardEntry(BaseModel, frozen=True):
    """One submitted score. Never mutated after it is stored."""

    game_mode: str  # partition; scores only compete within a mode
    player_initials: str  # upper-cased, 3 alphanumerics
    score: int = Field(ge=0)
    score_date: datetime  # UTC
    sort_key: str  # row key, see leaderboard.keys

"""Per-player statistics model and score histogram helpers."""

from datetime import datetime

from pydantic import BaseModel, Field

BUCKET_WIDTH = 100


class PlayerStats(BaseModel, frozen=True):
    """Cumulative statistics for one player, keyed by initials."""

    initials: str
    total_games: int = Field(default=0, ge=0)
    total_circles_tapped: int = Field(default=0, ge=0)
    total_playtime_seconds: int = Field(default=0, ge=0)
    highest_score: int = Field(default=0, ge=0)
    average_score: float = 0.0  # running mean, never recomputed from history
    # bucket label ("200-299") -> games scored in that range, ordered by bucket
    score_distribution: dict[str, int] = Field(default_factory=dict)
    percentile_rank: float = Field(default=0.0, ge=0.0, le=100.0)
    first_played: datetime
    last_played: datetime


def score_bucket(score: int) -> str:
    lower = (score // BUCKET_WIDTH) * BUCKET_WIDTH
    return f"{lower}-{lower + BUCKET_WIDTH - 1}"


def _bucket_lower_bound(label: str) -> int:
    head = label.split("-", 1)[0]
    return int(head) if head.isdigit() else 0


def add_to_distribution(distribution: dict[str, int], score: int) -> dict[str, int]:
    """Return a copy of ``distribution`` with the score's bucket incremented."""
    updated = dict(distribution)
    bucket = score_bucket(score)
    updated[bucket] = updated.get(bucket, 0) + 1
    return dict(sorted(updated.items(), key=lambda item: _bucket_lower_bound(item[0])))


def format_distribution(distribution: dict[str, int]) -> str:
    """Flatten to the stored form, e.g. ``"0-99:5,100-199:2"``."""
    return ",".join(f"{label}:{count}" for label, count in distribution.items())


def parse_distribution(text: str) -> dict[str, int]:
    """Parse the stored form. Empty text and malformed segments are skipped."""
    buckets: dict[str, int] = {}
    for segment in text.split(","):
        label, sep, count = segment.strip().partition(":")
        if not sep or not label or not count.isdigit():
            continue
        buckets[label] = int(count)
    return dict(sorted(buckets.items(), key=lambda item: _bucket_lower_bound(item[0])))

"""Rank-preserving row keys for leaderboard entries.

A key looks like ``000001499_20250115120000000_<hex>``: the score inverted
against MAX_SCORE and zero-padded, a fixed-width UTC timestamp, and a
uniqueness token. Ascending key order is therefore highest score first,
then earliest submission, then token order.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import NamedTuple
from uuid import uuid4

from shared.errors import ValidationError
from shared.validators import MAX_SCORE, check_score

SCORE_WIDTH = len(str(MAX_SCORE))
KEY_SEPARATOR = "_"

# Always 17 digits: seconds-precision keys carry "000" milliseconds so both
# precisions sort against each other by actual time.
_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"
_TIMESTAMP_WIDTH = 17


class DecodedSortKey(NamedTuple):
    score: int
    timestamp: datetime
    unique_id: str


def new_unique_id() -> str:
    return uuid4().hex


def encode_sort_key(score: int, timestamp: datetime, unique_id: str, *, precise: bool = False) -> str:
    """Build the row key for a score.

    ``precise`` keeps millisecond resolution; it is used when regenerating a
    key after a collision. Naive timestamps are taken to be UTC.
    """
    problems = check_score(score)
    if problems:
        raise ValidationError(problems)
    if not unique_id or KEY_SEPARATOR in unique_id:
        raise ValidationError("Unique id must be non-empty and must not contain '_'")

    ts = timestamp.replace(tzinfo=UTC) if timestamp.tzinfo is None else timestamp.astimezone(UTC)
    millis = ts.microsecond // 1000 if precise else 0
    stamp = f"{ts.strftime(_TIMESTAMP_FORMAT)}{millis:03d}"
    return f"{MAX_SCORE - score:0{SCORE_WIDTH}d}{KEY_SEPARATOR}{stamp}{KEY_SEPARATOR}{unique_id}"


def decode_sort_key(key: str) -> DecodedSortKey:
    """Split a row key back into score, UTC timestamp and token."""
    parts = key.split(KEY_SEPARATOR, 2)
    if len(parts) != 3:
        raise ValueError(f"Malformed sort key: {key!r}")
    inverted, stamp, unique_id = parts
    if len(inverted) != SCORE_WIDTH or not inverted.isdigit():
        raise ValueError(f"Malformed score field in sort key: {key!r}")
    if len(stamp) != _TIMESTAMP_WIDTH or not stamp.isdigit() or not unique_id:
        raise ValueError(f"Malformed sort key: {key!r}")

    try:
        timestamp = datetime.strptime(stamp[:14], _TIMESTAMP_FORMAT).replace(
            microsecond=int(stamp[14:]) * 1000,
            tzinfo=UTC,
        )
    except ValueError as exc:
        raise ValueError(f"Malformed timestamp in sort key: {key!r}") from exc
    return DecodedSortKey(score=MAX_SCORE - int(inverted), timestamp=timestamp, unique_id=unique_id)

"""Input validation shared by leaderboard submissions and session recording.

Each check returns a list of human-readable problems so callers can report
everything wrong with a request at once. ``ensure_valid`` turns a non-empty
list into a single ValidationError.
"""

import re

from shared.errors import ValidationError

INITIALS_LENGTH = 3
MAX_SCORE = 999_999_999
GAME_MODE_MAX_LENGTH = 50
DEFAULT_GAME_MODE = "Default"

_GAME_MODE_PATTERN = re.compile(r"[A-Za-z0-9_-]+")


def normalize_initials(initials: str | None) -> str:
    return (initials or "").strip().upper()


def check_initials(initials: str | None) -> list[str]:
    """Initials must be exactly three letters or digits."""
    value = normalize_initials(initials)
    if not value:
        return ["Player initials cannot be empty"]
    if len(value) != INITIALS_LENGTH:
        return [f"Player initials must be exactly {INITIALS_LENGTH} characters"]
    if not value.isalnum():
        return ["Player initials must contain only letters and numbers"]
    return []


def check_score(score: int) -> list[str]:
    if isinstance(score, bool) or not isinstance(score, int):
        return ["Score must be an integer"]
    if score < 0:
        return ["Score cannot be negative"]
    if score > MAX_SCORE:
        return ["Score exceeds maximum allowed value"]
    return []


def check_game_mode(game_mode: str | None) -> list[str]:
    if game_mode is None or not game_mode.strip():
        return ["Game mode cannot be empty"]
    if len(game_mode) > GAME_MODE_MAX_LENGTH:
        return [f"Game mode cannot exceed {GAME_MODE_MAX_LENGTH} characters"]
    if not _GAME_MODE_PATTERN.fullmatch(game_mode):
        return ["Game mode can only contain letters, numbers, underscores, and hyphens"]
    return []


def check_non_negative(name: str, value: int) -> list[str]:
    if isinstance(value, bool) or not isinstance(value, int):
        return [f"{name} must be an integer"]
    if value < 0:
        return [f"{name} cannot be negative"]
    return []


def ensure_valid(*problems: list[str]) -> None:
    """Raise ValidationError carrying every collected problem, if any."""
    errors = [message for group in problems for message in group]
    if errors:
        raise ValidationError(errors)

"""Score service configuration via environment variables."""

from enum import StrEnum

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

_VALID_LOG_FORMATS = {"json", "console", ""}
_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class StorageBackend(StrEnum):
    SQLITE = "sqlite"
    MEMORY = "memory"


class ScoresSettings(BaseSettings):
    model_config = {"env_prefix": "SCORES_"}

    storage_backend: StorageBackend = StorageBackend.SQLITE
    database_path: str = "backend/scores.db"
    log_dir: str | None = "backend/logs/scores"
    log_format: str = ""  # "json" for log aggregation, "console" or unset for readable output
    log_level: str = "INFO"

    leaderboard_table: str = Field(default="HighScores", min_length=1)
    stats_table: str = Field(default="GameStats", min_length=1)

    # Leaderboard size a score must break into to count as a high score
    high_score_table_size: int = Field(default=10, ge=1)
    # Fallback used when a caller asks for a non-positive number of top scores
    default_top_count: int = Field(default=10, ge=1)

    @field_validator("log_format", mode="before")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        value = v.strip().lower()
        if value not in _VALID_LOG_FORMATS:
            raise ValueError(f"Invalid log format {v!r}. Must be 'json', 'console', or empty.")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        value = v.strip().upper()
        if value not in _VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level {v!r}. Must be one of {', '.join(sorted(_VALID_LOG_LEVELS))}.")
        return value

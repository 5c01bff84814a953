# app/core/config.py
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Global application configuration.

    Values are loaded from environment variables at runtime.

    Besides the usual service settings (DB connection, logging), this holds
    every threshold used by the attendance engine, one value each:
    - GAP_TOLERANCE_MINUTES     -> reconnection noise ignored between sessions
    - ABSENCE_TOLERANCE_MINUTES -> cumulative absence still counted as present
    - HOURLY_DWELL_MINUTES      -> minutes needed to be present for one hour
    - HOUR_DERIVATION_MINUTES   -> minutes of activity that make an hour "taught"
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    APP_NAME: str = "Lesson Attendance"
    APP_ENV: str = Field("local", description="Environment name: local/dev/stage/prod")

    DB_URL: str = Field(
        "sqlite+aiosqlite:///./lesson_attendance.db",
        description="SQLAlchemy-compatible database URL",
    )

    LOG_LEVEL: str = Field("INFO", description="Log level for the 'app' logger.")
    LOG_FILE: str | None = Field(
        default=None,
        description="Optional path of a rotating log file. Logs go to stderr when unset.",
    )

    # --- Attendance thresholds ---
    GAP_TOLERANCE_MINUTES: float = Field(
        default=1.5,
        description="Gaps between two sessions up to this many minutes are ignored.",
    )
    ABSENCE_TOLERANCE_MINUTES: int = Field(
        default=15,
        description="Participants with at most this many absence minutes are present.",
    )
    HOURLY_DWELL_MINUTES: float = Field(
        default=30.0,
        description="Minutes of presence within a clock hour needed to be present for it.",
    )
    HOUR_DERIVATION_MINUTES: float = Field(
        default=15.0,
        description="Minutes of activity within a clock hour needed to count it as taught.",
    )
    ABSENCE_SENTINEL_MINUTES: int = Field(
        default=999,
        description="Absence value meaning 'no measurable attendance data'.",
    )

    # --- Lesson windows ---
    MORNING_START_HOUR: int = Field(default=9, ge=0, le=23)
    MORNING_END_HOUR: int = Field(default=12, ge=0, le=23)
    AFTERNOON_START_HOUR: int = Field(default=14, ge=0, le=23)
    AFTERNOON_END_HOUR: int = Field(default=18, ge=0, le=23)
    BREAK_HOUR: int = Field(
        default=13,
        ge=0,
        le=23,
        description="Lunch break hour, never part of the derived lesson hours.",
    )
    DEFAULT_MORNING_HOURS: list[int] = Field(
        default=[9, 10, 11, 12],
        description="Fallback morning schedule when no hour can be derived from activity.",
    )
    DEFAULT_AFTERNOON_HOURS: list[int] = Field(
        default=[14, 15, 16, 17],
        description="Fallback afternoon schedule when no hour can be derived from activity.",
    )

    # --- Output boundary ---
    ROSTER_SLOT_CAP: int = Field(
        default=5,
        description="Number of participant slots available in the attendance document.",
    )
    ABSENT_MARKER: str = Field(
        default="ASSENTE",
        description="Literal written in the document for absent participants.",
    )
    PRESENT_MARKER: str = Field(
        default="PRESENTE",
        description="Literal written in the document presence column for present participants.",
    )
    NO_CONNECTIONS_TEXT: str = Field(
        default="Nessuna connessione",
        description="Connection summary used when a participant has no sessions.",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Cached accessor for application settings.

    Using LRU cache ensures settings are read and validated only once,
    while still being easily importable across the app.
    """
    return Settings()

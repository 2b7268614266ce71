"""
Settings for the insight engine.

Scoring constants, report windows, Postgres credentials and Telegram
delivery all live on the `settings` instance created at the bottom of this
file. Values come from the environment (or `.env`) and fall back to the
defaults declared on the class.
"""

import os
from urllib.parse import quote_plus
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Typed knobs for scoring, report windows and backends.

    Field names double as environment variable names (case-insensitive);
    unknown variables are ignored.
    """
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore", case_sensitive=False)

    # --- CORE SETTINGS ---
    PROJECT_ROOT: Path = Path(__file__).parent.parent.resolve()
    ENVIRONMENT: str = "development"

    # --- TELEGRAM (optional delivery of reports) ---
    TELEGRAM_TOKEN: Optional[str] = None
    TELEGRAM_CHAT_ID: Optional[str] = None

    # --- DATABASE (from environment) ---
    POSTGRES_USER: Optional[str] = None
    POSTGRES_PASSWORD: Optional[str] = None
    POSTGRES_HOST: Optional[str] = None
    POSTGRES_PORT: Optional[int] = 5432
    POSTGRES_DB: Optional[str] = None
    DATABASE_URL: Optional[str] = Field(None, validate_default=True)

    # --- PATTERN WINDOW ---
    PATTERN_DAYS: int = 7
    MAX_PATTERN_DAYS: int = 90

    # --- DAILY SCORING ---
    NEUTRAL_SCORE: int = 50
    POSITIVE_MOOD_SCORE: int = 80
    NEGATIVE_MOOD_SCORE: int = 30
    COMMITMENT_BOOST: float = 20.0  # max focus boost when every commitment is completed
    LIFE_AREA_COUNT: int = 12

    # --- INSIGHT THRESHOLDS ---
    HIGH_FULFILLMENT: int = 80
    LOW_FULFILLMENT: int = 60

    # --- PATTERN RECOGNITION ---
    RECOGNITION_WINDOW_DAYS: int = 90

    def __init__(self, **values):
        super().__init__(**values)
        # An explicit host override wins over POSTGRES_HOST
        db_host = os.getenv("DB_HOST_OVERRIDE", self.POSTGRES_HOST)
        if self.POSTGRES_USER and self.POSTGRES_PASSWORD and db_host and self.POSTGRES_DB:
            # URL-encode user/pass to support special characters like @ and #
            user_enc = quote_plus(self.POSTGRES_USER)
            pass_enc = quote_plus(self.POSTGRES_PASSWORD)
            self.DATABASE_URL = (
                f"postgresql://{user_enc}:{pass_enc}@{db_host}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
            )

    # --- FILE PATHS (derived from PROJECT_ROOT) ---
    @property
    def log_path(self) -> Path:
        return self.PROJECT_ROOT / "summaries/logs/insights_history.log"

    @property
    def data_path(self) -> Path:
        return self.PROJECT_ROOT / "knowledge/data"


# Create a single, importable instance of the settings
settings = Settings()

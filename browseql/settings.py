from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration for the terminal browser.

    Values are loaded from environment variables and `.env`.

    Notes:
    - The log directory is kept out of the working directory by default so the
      browser never litters next to the database it opens.
    - CLI options override these values for a single run.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Data loading
    BROWSEQL_ROW_LIMIT: int = Field(default=100, ge=1)
    BROWSEQL_MAX_COLUMN_WIDTH: int = Field(default=30, ge=1)

    # Logging (diagnostic; written to a file because the terminal belongs to the UI)
    BROWSEQL_LOG_DIR: Path = Field(default=Path("~/.cache/browseql"))
    BROWSEQL_LOG_LEVEL: str = Field(default="INFO")
    # Timed rotation retention count (days).
    BROWSEQL_LOG_BACKUP_COUNT: int = Field(default=7, ge=0)


def load_settings() -> Settings:
    s = Settings()
    s.BROWSEQL_LOG_DIR = s.BROWSEQL_LOG_DIR.expanduser()
    return s

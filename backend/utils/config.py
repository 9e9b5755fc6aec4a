"""
DocMirror Configuration Module.

Centralizes all configuration settings using Pydantic Settings.
Requires Python 3.11+.
"""

import codecs
import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file into os.environ at module import time
# This ensures nested BaseSettings classes can read the values
_env_file = Path(__file__).parent.parent / ".env"
if _env_file.exists():
    load_dotenv(_env_file)
else:
    # Try current working directory
    load_dotenv()


_ESCAPED_SEPARATORS = {
    "\\n": "\n",
    "\\r\\n": "\r\n",
    "\\r": "\r",
}


class WatcherSettings(BaseSettings):
    """Watch loop and notifier settings."""

    model_config = SettingsConfigDict(env_prefix="WATCHER_")

    poll_interval_seconds: float = Field(
        default=1.0, gt=0.0, le=3600.0, description="Sleep between loop iterations"
    )
    recursive: bool = Field(
        default=False, description="Watch subdirectories with the notifier"
    )


class PublishSettings(BaseSettings):
    """Publish cycle settings."""

    model_config = SettingsConfigDict(env_prefix="PUBLISH_")

    fallback_encoding: str = Field(
        default="utf-8",
        description="Encoding used when a file carries no byte-order mark",
    )
    line_separator: str = Field(
        default=os.linesep,
        description="Terminator written after each non-directive line",
    )

    @field_validator("fallback_encoding")
    @classmethod
    def validate_fallback_encoding(cls, v: str) -> str:
        """Reject codec names Python does not know."""
        try:
            return codecs.lookup(v).name
        except LookupError as e:
            raise ValueError(f"unknown encoding: {v}") from e

    @field_validator("line_separator", mode="before")
    @classmethod
    def parse_line_separator(cls, v: str) -> str:
        """Accept escaped separators such as '\\r\\n' from the environment."""
        if isinstance(v, str):
            v = _ESCAPED_SEPARATORS.get(v, v)
            if v not in ("\n", "\r\n", "\r"):
                raise ValueError("line_separator must be one of \\n, \\r\\n, \\r")
        return v


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO")
    format: str = Field(default="console")  # "json" or "console"
    file_path: Path | None = Field(default=None)


class Settings(BaseSettings):
    """Main application settings aggregating all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="DocMirror")
    app_version: str = Field(default="0.1.0")
    environment: str = Field(default="development")

    # Sub-settings
    watcher: WatcherSettings = Field(default_factory=WatcherSettings)
    publish: PublishSettings = Field(default_factory=PublishSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() in ("development", "dev", "local")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns singleton instance of Settings for performance.
    """
    return Settings()

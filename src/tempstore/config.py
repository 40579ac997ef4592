"""
Configuration management using pydantic-settings.

Loads configuration from TEMPSTORE_-prefixed environment variables and .env
files. Every setting is optional; explicit constructor arguments passed to a
provider always take precedence over what is configured here.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Store settings loaded from environment variables.

    Optional:
        TEMPSTORE_DATABASE_PATH: Default backing file for JSONProvider
        TEMPSTORE_ENCODING: "tagged" (recursive entries) or "legacy" (raw containers)
        TEMPSTORE_LOG_LEVEL: Logging level
        TEMPSTORE_LOG_FILE: JSON Lines log file
    """

    model_config = SettingsConfigDict(
        env_prefix="TEMPSTORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    DATABASE_PATH: Path = Field(
        default=Path("tempstore.json"),
        description="Default backing file for the JSON provider",
    )

    ENCODING: Literal["tagged", "legacy"] = Field(
        default="tagged",
        description="Container encoding: tagged elements or raw JSON (legacy)",
    )

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    LOG_FILE: Path | None = Field(default=None, description="JSON Lines log file")

    @property
    def recursive_encoding(self) -> bool:
        """Whether container elements are encoded as tagged entries."""
        return self.ENCODING == "tagged"

    @field_validator("DATABASE_PATH")
    @classmethod
    def validate_database_path(cls, v: Path) -> Path:
        """Reject empty paths and paths that name a directory."""
        if not str(v).strip() or v == Path("."):
            raise ValueError("DATABASE_PATH must name a file")
        if v.is_dir():
            raise ValueError(f"DATABASE_PATH points at a directory: {v}")
        return v

    @model_validator(mode="after")
    def validate_log_file_is_not_database(self) -> Settings:
        """Ensure the log file never overwrites the backing file."""
        if self.LOG_FILE is not None and self.LOG_FILE == self.DATABASE_PATH:
            raise ValueError("LOG_FILE must differ from DATABASE_PATH")
        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton.

    Returns:
        Settings instance loaded from environment.

    Raises:
        ValidationError: If a configured setting is invalid.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()

"""
Application configuration settings.

Central configuration module using Pydantic BaseSettings with environment variable support.
Loads from .env file and environment variables.
"""
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file if it exists (python-dotenv)
env_path = Path(".env")
if env_path.exists():
    load_dotenv(dotenv_path=env_path)


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    APP_NAME: str = "EXP Config Auditor"

    # Logging
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    LOG_FILE: Optional[str] = Field(
        default=None,
        description="Path of a rotating log file. Leave empty to log to stdout only.",
    )

    # Risk engine
    FIRMWARE_MAX_AGE_MONTHS: int = Field(
        default=6,
        description="Firmware builds older than this many months are reported as outdated",
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Upper-case the level name so 'debug' and 'DEBUG' both work."""
        return v.strip().upper()

    @field_validator("FIRMWARE_MAX_AGE_MONTHS")
    @classmethod
    def validate_firmware_age(cls, v: int) -> int:
        """Reject non-positive ages."""
        if v < 1:
            raise ValueError("FIRMWARE_MAX_AGE_MONTHS must be at least 1")
        return v

    def has_log_file(self) -> bool:
        """Check if a log file path is configured and not empty."""
        return self.LOG_FILE is not None and self.LOG_FILE.strip() != ""


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()

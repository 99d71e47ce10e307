"""
Configuration settings for WordMemo.

Uses Pydantic Settings for environment variable management with .env file support.
All variables are prefixed with ``WORDMEMO_`` (e.g. ``WORDMEMO_LOG_LEVEL=DEBUG``).
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DATA_DIR = Path.home() / ".wordmemo"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="WORDMEMO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Database
    # ========================================
    database_url: str = Field(
        default=f"sqlite:///{DATA_DIR / 'wordmemo.db'}",
        description="SQLAlchemy connection string for the word store",
    )

    # ========================================
    # Study
    # ========================================
    due_threshold: float = Field(
        default=90.0,
        ge=0.0,
        le=100.0,
        description="Entries below this proficiency are due for study",
    )
    seed_sample_data: bool = Field(
        default=True,
        description="Create a sample list on first run when the store is empty",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging verbosity level",
    )

    def get_study_config(self) -> dict[str, float]:
        """Get study session configuration as a dictionary."""
        return {"due_threshold": self.due_threshold}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

"""
Configuration settings for the formcraft service.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="FORMCRAFT_",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Storage
    # ========================================
    storage_backend: Literal["sql", "json"] = Field(
        default="sql",
        description="Where forms and responses are persisted",
    )
    database_url: str = Field(
        default="sqlite:///formcraft.db",
        description="SQLAlchemy connection string (sql backend)",
    )
    data_dir: Path = Field(
        default=Path.home() / ".formcraft",
        description="Root directory for JSON records (json backend)",
    )

    # ========================================
    # Validation
    # ========================================
    validation_policy: Literal["legacy", "strict"] = Field(
        default="legacy",
        description=(
            "legacy: only categorize/cloze/comprehension must be non-empty; "
            "strict: every required question must be fully answered"
        ),
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    # ========================================
    # API Server
    # ========================================
    api_host: str = Field(
        default="127.0.0.1",
        description="API server host",
    )
    api_port: int = Field(
        default=8001,
        description="API server port",
    )
    api_base_url: str = Field(
        default="http://127.0.0.1:8001",
        description="Base URL used by FormsClient",
    )
    api_timeout_seconds: float = Field(
        default=30.0,
        description="Per-request timeout for FormsClient calls",
    )

    def is_strict(self) -> bool:
        return self.validation_policy == "strict"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

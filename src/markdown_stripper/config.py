# -*- coding: utf-8 -*-
"""
Process-level configuration using Pydantic BaseSettings.

These settings only drive logging and diagnostics. Stripping behaviour is
controlled per call through StripOptions.
"""
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Configuration loaded from environment variables (or a .env file).
    """

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # A stage taking longer than this (in milliseconds) logs a warning
    SLOW_STAGE_THRESHOLD_MS: float = 250.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Global configuration instance
settings = Settings()

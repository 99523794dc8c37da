"""
Configuration Management for Cashbook

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Each concern gets its own settings class with its own env prefix,
so a partially configured environment still loads the parts it can.
"""

import re
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Keys double as file names for the file backend
STORAGE_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


def is_valid_storage_key(key: str) -> bool:
    return bool(STORAGE_KEY_PATTERN.match(key)) and key not in (".", "..")


class StorageSettings(BaseSettings):
    """Backing store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="CASHBOOK_STORAGE_",
        extra="ignore"
    )

    backend: Literal["file", "memory"] = Field(
        default="file",
        description="Which key-value backend holds the ledger"
    )
    data_dir: Path = Field(
        default=Path("cashbook_data"),
        description="Directory used by the local file backend"
    )

    # Keys within the backing store
    transactions_key: str = Field(
        default="cashbook_transactions",
        description="Key under which the transaction collection is stored"
    )
    notes_key: str = Field(
        default="cashbook_notes",
        description="Key under which the free-text notes are stored"
    )

    @field_validator('transactions_key', 'notes_key')
    @classmethod
    def validate_key(cls, v: str) -> str:
        """Letters, digits, dot, dash and underscore only."""
        if not is_valid_storage_key(v):
            raise ValueError(f"Invalid storage key: {v!r}")
        return v


class CalculatorSettings(BaseSettings):
    """Calculator configuration."""

    model_config = SettingsConfigDict(
        env_prefix="CASHBOOK_CALCULATOR_",
        extra="ignore"
    )

    max_input_length: int = Field(
        default=12,
        ge=1,
        le=32,
        description="Maximum number of characters accepted while typing digits"
    )
    result_decimal_places: int = Field(
        default=8,
        ge=0,
        le=16,
        description="Results are rounded to this many decimal places"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    debug_mode: bool = Field(
        default=False,
        description="Log at DEBUG with the console renderer, whatever log_level and log_json say"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Log level name for the stdlib root logger"
    )
    log_json: bool = Field(
        default=True,
        description="Render log lines as JSON (console renderer otherwise)"
    )
    audit_history_size: int = Field(
        default=200,
        ge=0,
        le=10000,
        description="How many audit events to keep in memory"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only accept standard level names."""
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Note: These are loaded lazily to allow partial configuration

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def calculator(self) -> CalculatorSettings:
        return CalculatorSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with an
    additional "<name>_error" entry for each section that failed.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "calculator", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results

"""Configuration package."""

from cashbook.config.settings import (
    AppSettings,
    CalculatorSettings,
    Settings,
    StorageSettings,
    get_settings,
    is_valid_storage_key,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "CalculatorSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "is_valid_storage_key",
    "validate_all_settings",
]

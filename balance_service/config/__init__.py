"""Configuration package."""

from balance_service.config.settings import (
    AppSettings,
    CurrencySettings,
    NotificationSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "CurrencySettings",
    "NotificationSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]

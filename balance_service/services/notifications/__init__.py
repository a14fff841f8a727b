"""Notification services package."""

from balance_service.services.notifications.notifier import (
    ConsoleLowBalanceNotifier,
    LowBalanceNotifierInterface,
)

__all__ = ["ConsoleLowBalanceNotifier", "LowBalanceNotifierInterface"]

"""Services package."""

from balance_service.services.currency import (
    CurrencyConverterInterface,
    FixedRateCurrencyConverter,
    UnsupportedCurrencyError,
)
from balance_service.services.notifications import (
    ConsoleLowBalanceNotifier,
    LowBalanceNotifierInterface,
)
from balance_service.services.storage import (
    AuditStorageInterface,
    BalanceStoreInterface,
    InMemoryAuditStorage,
    InMemoryBalanceStore,
    InMemoryTransactionRecorder,
    StorageError,
    TransactionRecorderInterface,
)

__all__ = [
    # Currency
    "CurrencyConverterInterface",
    "FixedRateCurrencyConverter",
    "UnsupportedCurrencyError",
    # Notifications
    "ConsoleLowBalanceNotifier",
    "LowBalanceNotifierInterface",
    # Storage
    "AuditStorageInterface",
    "BalanceStoreInterface",
    "InMemoryAuditStorage",
    "InMemoryBalanceStore",
    "InMemoryTransactionRecorder",
    "StorageError",
    "TransactionRecorderInterface",
]

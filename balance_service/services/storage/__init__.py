"""
Storage Services Package

Provides abstract interfaces and in-memory implementations for balances,
transaction history and the audit log.
"""

from balance_service.services.storage.interface import (
    AuditStorageInterface,
    BalanceStoreInterface,
    StorageError,
    TransactionRecorderInterface,
)
from balance_service.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryBalanceStore,
    InMemoryTransactionRecorder,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "BalanceStoreInterface",
    "TransactionRecorderInterface",
    # Exceptions
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryBalanceStore",
    "InMemoryTransactionRecorder",
]

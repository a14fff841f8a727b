"""
Abstract Storage Interfaces

DESIGN DECISION: We define abstract interfaces for storage operations.
This allows us to:
1. Use in-memory storage for the demo and for testing
2. Swap in a durable store later without touching the processor
3. Keep business logic decoupled from storage implementation

The interfaces are intentionally narrow - just the operations the
transaction processor needs.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from uuid import UUID

from balance_service.models.audit import AuditEvent
from balance_service.models.transaction import TransactionRecord, TransactionType


class BalanceStoreInterface(ABC):
    """
    Abstract interface for per-user balance storage.
    
    Balances are base-currency Decimals keyed by user id.
    """
    
    @abstractmethod
    async def get_balance(self, user_id: int) -> Decimal:
        """
        Get a user's current balance.
        
        Args:
            user_id: The account's identifier
            
        Returns:
            The stored balance, or zero for a user never seen before
        """
        pass
    
    @abstractmethod
    async def set_balance(self, user_id: int, balance: Decimal) -> None:
        """
        Replace a user's balance.
        
        Args:
            user_id: The account's identifier
            balance: The new balance in base currency
            
        Raises:
            StorageError: If the write fails
        """
        pass


class TransactionRecorderInterface(ABC):
    """
    Abstract interface for transaction history.
    
    History is append-only - we never delete or modify records.
    """
    
    @abstractmethod
    async def append(
        self,
        user_id: int,
        transaction_type: TransactionType,
        amount: Decimal,
    ) -> TransactionRecord:
        """
        Append a transaction to a user's history.
        
        Args:
            user_id: The account's identifier
            transaction_type: Credit or debit
            amount: Amount in base currency
            
        Returns:
            The record that was appended
            
        Raises:
            StorageError: If the append fails
        """
        pass
    
    @abstractmethod
    async def get_records(self, user_id: int) -> list[TransactionRecord]:
        """
        Get a user's history in insertion order.
        
        Returns an empty list for a user with no history.
        """
        pass
    
    @abstractmethod
    async def get_log(self, user_id: int) -> list[str]:
        """
        Get a user's history rendered as report lines.
        
        Each line looks like "Credit 7500 RUB".
        Returns an empty list for a user with no history.
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.
    
    Audit logs are append-only - we never delete or modify them.
    """
    
    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.
        
        Returns:
            True if logged successfully
        """
        pass
    
    @abstractmethod
    async def get_events_by_correlation_id(self, correlation_id: UUID) -> list[AuditEvent]:
        """Get all events of one transaction in chronological order."""
        pass
    
    @abstractmethod
    async def get_events_by_user(self, user_id: int) -> list[AuditEvent]:
        """Get all events for one account in chronological order."""
        pass
    
    @abstractmethod
    async def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        """Get the most recent audit events (newest first)."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass

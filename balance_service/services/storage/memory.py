"""
In-Memory Storage Implementation

Process-local dictionaries behind the storage interfaces.

TRADEOFFS:
- Nothing survives a restart
- Not shared between processes
- Fine for the demo harness and for tests

Per-user serialization of read-modify-write is the processor's job;
these classes only guarantee that each single call is consistent.
"""

from collections import defaultdict
from decimal import Decimal
from typing import Optional
from uuid import UUID

from balance_service.models.audit import AuditEvent
from balance_service.models.transaction import TransactionRecord, TransactionType
from balance_service.services.storage.interface import (
    AuditStorageInterface,
    BalanceStoreInterface,
    TransactionRecorderInterface,
)


class InMemoryBalanceStore(BalanceStoreInterface):
    """Balances kept in a dict; unknown users read as zero."""
    
    def __init__(self, initial: Optional[dict[int, Decimal]] = None):
        self._balances: dict[int, Decimal] = dict(initial or {})
    
    async def get_balance(self, user_id: int) -> Decimal:
        return self._balances.get(user_id, Decimal("0"))
    
    async def set_balance(self, user_id: int, balance: Decimal) -> None:
        self._balances[user_id] = balance


class InMemoryTransactionRecorder(TransactionRecorderInterface):
    """
    Per-user lists of TransactionRecord.
    
    Rendering needs the base currency code because records themselves
    carry no currency.
    """
    
    def __init__(self, base_currency: str = "RUB"):
        self._base_currency = base_currency
        self._records: dict[int, list[TransactionRecord]] = defaultdict(list)
    
    async def append(
        self,
        user_id: int,
        transaction_type: TransactionType,
        amount: Decimal,
    ) -> TransactionRecord:
        record = TransactionRecord(transaction_type=transaction_type, amount=amount)
        self._records[user_id].append(record)
        return record
    
    async def get_records(self, user_id: int) -> list[TransactionRecord]:
        # Copy so callers cannot mutate the history; .get avoids creating empty entries
        return list(self._records.get(user_id, []))
    
    async def get_log(self, user_id: int) -> list[str]:
        return [
            record.render(self._base_currency)
            for record in self._records.get(user_id, [])
        ]


class InMemoryAuditStorage(AuditStorageInterface):
    """Audit events kept in a single list in arrival order."""
    
    def __init__(self):
        self._events: list[AuditEvent] = []
    
    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True
    
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return [e for e in self._events if e.correlation_id == correlation_id]
    
    async def get_events_by_user(self, user_id: int) -> list[AuditEvent]:
        return [e for e in self._events if e.user_id == user_id]
    
    async def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]

"""Shared fixtures: in-memory collaborators that remember what was done to them."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from balance_service.audit import AuditLogger
from balance_service.models.transaction import TransactionType
from balance_service.processor import TransactionProcessor
from balance_service.services.currency import FixedRateCurrencyConverter
from balance_service.services.notifications import LowBalanceNotifierInterface
from balance_service.services.storage import (
    InMemoryAuditStorage,
    InMemoryBalanceStore,
    InMemoryTransactionRecorder,
)


BASE_CURRENCY = "RUB"
RATES = {"USD": Decimal("75"), "EUR": Decimal("100")}


class SpyBalanceStore(InMemoryBalanceStore):
    """InMemoryBalanceStore that records every write."""
    
    def __init__(self):
        super().__init__()
        self.writes: list[tuple[int, Decimal]] = []
    
    def seed(self, user_id: int, balance) -> None:
        """Set a starting balance without counting it as a write."""
        self._balances[user_id] = Decimal(balance)
    
    async def set_balance(self, user_id: int, balance: Decimal) -> None:
        self.writes.append((user_id, balance))
        await super().set_balance(user_id, balance)


class SpyRecorder(InMemoryTransactionRecorder):
    """InMemoryTransactionRecorder that records every append call."""
    
    def __init__(self):
        super().__init__(base_currency=BASE_CURRENCY)
        self.appends: list[tuple[int, TransactionType, Decimal]] = []
    
    async def append(self, user_id, transaction_type, amount):
        self.appends.append((user_id, transaction_type, amount))
        return await super().append(user_id, transaction_type, amount)


@pytest.fixture
def balance_store() -> SpyBalanceStore:
    return SpyBalanceStore()


@pytest.fixture
def recorder() -> SpyRecorder:
    return SpyRecorder()


@pytest.fixture
def converter() -> FixedRateCurrencyConverter:
    return FixedRateCurrencyConverter(rates=RATES, base_currency=BASE_CURRENCY)


@pytest.fixture
def notifier() -> AsyncMock:
    return AsyncMock(spec=LowBalanceNotifierInterface)


@pytest.fixture
def audit_storage() -> InMemoryAuditStorage:
    return InMemoryAuditStorage()


@pytest.fixture
def processor(balance_store, recorder, converter, notifier, audit_storage) -> TransactionProcessor:
    return TransactionProcessor(
        balance_store=balance_store,
        recorder=recorder,
        converter=converter,
        notifier=notifier,
        base_currency=BASE_CURRENCY,
        low_balance_threshold=Decimal("100"),
        audit_logger=AuditLogger(audit_storage),
    )

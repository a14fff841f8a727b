"""
Transaction Processor

This module ties the collaborators together and defines the
end-to-end flow of one balance transaction:

    validate → convert → load → guard → apply → commit → notify

DESIGN DECISION: The processor enforces the boundaries:
- Nothing is read or written before the input is valid
- Amounts are in base currency before the balance is looked at
- Balance write and history append succeed together or not at all
- Transactions for the same user never interleave

Business failures (bad input, unknown currency, insufficient balance)
come back as TransactionResult values. Anything else a collaborator
raises propagates to the caller.
"""

import asyncio
import decimal
from contextlib import asynccontextmanager
from decimal import Decimal
from typing import Any, AsyncIterator, Optional, TextIO
from uuid import UUID, uuid4

import structlog

from balance_service.audit import AuditLogger
from balance_service.config import Settings, get_settings
from balance_service.errors import UnsupportedCurrencyError
from balance_service.models.transaction import (
    TransactionErrorKind,
    TransactionResult,
    TransactionType,
)
from balance_service.services.currency import (
    CurrencyConverterInterface,
    FixedRateCurrencyConverter,
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
    TransactionRecorderInterface,
)
from balance_service.validation import TransactionValidator


class TransactionProcessor:
    """
    Applies credit/debit transactions to per-user balances.
    
    Flow for process():
    1. Validate → reject with INVALID_INPUT, nothing else runs
    2. Convert → foreign amounts go through the converter
    3. Load → current balance (zero for unseen users)
    4. Guard → a debit larger than the balance is rejected
    5. Apply → compute the new balance
    6. Commit → write balance, then append history
    7. Notify → alert if the new balance is under the threshold
    
    Steps 3-6 run under a per-user lock.
    """
    
    def __init__(
        self,
        balance_store: BalanceStoreInterface,
        recorder: TransactionRecorderInterface,
        converter: CurrencyConverterInterface,
        notifier: LowBalanceNotifierInterface,
        base_currency: str = "RUB",
        low_balance_threshold: Decimal = Decimal("100"),
        validator: Optional[TransactionValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._balance_store = balance_store
        self._recorder = recorder
        self._converter = converter
        self._notifier = notifier
        self._base_currency = base_currency.strip().upper()
        self._low_balance_threshold = Decimal(low_balance_threshold)
        self._validator = validator or TransactionValidator()
        self._audit_logger = audit_logger
        self._logger = structlog.get_logger(__name__)
        # Per-user lock and the number of tasks holding or waiting on it.
        # An entry is dropped once its count reaches zero.
        self._locks: dict[int, asyncio.Lock] = {}
        self._lock_users: dict[int, int] = {}
    
    @property
    def base_currency(self) -> str:
        return self._base_currency
    
    @property
    def low_balance_threshold(self) -> Decimal:
        return self._low_balance_threshold
    
    async def process(
        self,
        user_id: int,
        transaction_type: Any,
        amount: Any,
        currency: Optional[str] = None,
    ) -> TransactionResult:
        """
        Apply one transaction.
        
        Args:
            user_id: Account to apply it to (must be > 0)
            transaction_type: TransactionType or its name ("credit", "DEBIT"...)
            amount: Amount in currency (must be > 0)
            currency: Currency code of amount; defaults to the base currency
            
        Returns:
            TransactionResult; check success / error
        """
        transaction_id = uuid4()
        if currency is None:
            currency = self._base_currency
        
        # Step 1: Validate
        validation = self._validator.validate(user_id, transaction_type, amount, currency)
        if not validation.is_valid:
            return await self._reject(
                transaction_id,
                TransactionErrorKind.INVALID_INPUT,
                f"Invalid input: {validation.summary}",
            )
        
        user_id = validation.user_id
        transaction_type = validation.transaction_type
        amount = validation.amount
        currency = validation.currency
        
        # Step 2: Normalize to base currency
        if currency == self._base_currency:
            converted_amount = amount
        else:
            try:
                converted_amount = await self._converter.convert(
                    amount, currency, self._base_currency
                )
            except UnsupportedCurrencyError as e:
                supported = ", ".join(self._converter.supported_currencies())
                return await self._reject(
                    transaction_id,
                    TransactionErrorKind.UNSUPPORTED_CURRENCY,
                    f"{e} (supported: {supported})",
                    user_id=user_id,
                    transaction_type=transaction_type,
                    original_amount=amount,
                    currency=currency,
                )
            except decimal.Overflow:
                return await self._reject(
                    transaction_id,
                    TransactionErrorKind.INVALID_INPUT,
                    f"Invalid input: {amount} {currency} is out of range after conversion",
                    user_id=user_id,
                    transaction_type=transaction_type,
                    original_amount=amount,
                    currency=currency,
                )
        
        async with self._user_lock(user_id):
            # Step 3: Load
            current_balance = await self._balance_store.get_balance(user_id)
            
            # Step 4: Guard
            if transaction_type is TransactionType.DEBIT and current_balance < converted_amount:
                return await self._reject(
                    transaction_id,
                    TransactionErrorKind.INSUFFICIENT_BALANCE,
                    (
                        f"Insufficient balance: {current_balance} {self._base_currency} "
                        f"available, {converted_amount} {self._base_currency} requested"
                    ),
                    user_id=user_id,
                    transaction_type=transaction_type,
                    original_amount=amount,
                    currency=currency,
                    converted_amount=converted_amount,
                    previous_balance=current_balance,
                )
            
            # Step 5: Apply
            try:
                if transaction_type is TransactionType.CREDIT:
                    new_balance = current_balance + converted_amount
                else:
                    new_balance = current_balance - converted_amount
            except decimal.Overflow:
                return await self._reject(
                    transaction_id,
                    TransactionErrorKind.INVALID_INPUT,
                    "Invalid input: resulting balance is out of range",
                    user_id=user_id,
                    transaction_type=transaction_type,
                    original_amount=amount,
                    currency=currency,
                    converted_amount=converted_amount,
                    previous_balance=current_balance,
                )
            
            # Step 6: Commit
            await self._commit(
                transaction_id,
                user_id,
                transaction_type,
                converted_amount,
                current_balance,
                new_balance,
            )
        
        if self._audit_logger:
            await self._audit_logger.log_transaction_applied(
                user_id=user_id,
                transaction_type=transaction_type.value,
                amount=converted_amount,
                new_balance=new_balance,
                correlation_id=transaction_id,
            )
        
        # Step 7: Notify
        notified = False
        if new_balance < self._low_balance_threshold:
            notified = await self._send_low_balance_alert(
                transaction_id, user_id, new_balance
            )
        
        return TransactionResult(
            transaction_id=transaction_id,
            success=True,
            message=f"{transaction_type.label} of {converted_amount} {self._base_currency} applied",
            user_id=user_id,
            transaction_type=transaction_type,
            original_amount=amount,
            currency=currency,
            converted_amount=converted_amount,
            previous_balance=current_balance,
            new_balance=new_balance,
            notified=notified,
        )
    
    async def report(self, user_id: int) -> str:
        """
        Render a user's transaction history.
        
        The header is always present. With no history nothing follows it.
        """
        header = f"Transaction report for user {user_id}:"
        lines = await self._recorder.get_log(user_id)
        if not lines:
            return header
        return "\n".join([header, *lines])
    
    async def get_balance(self, user_id: int) -> Decimal:
        """Current balance in base currency (zero for unseen users)."""
        return await self._balance_store.get_balance(user_id)
    
    @asynccontextmanager
    async def _user_lock(self, user_id: int) -> AsyncIterator[None]:
        """
        Hold the lock for one user.
        
        Locks live only while some task holds or waits on them, so a lock
        never outlives the event loop it was used on.
        """
        lock = self._locks.get(user_id)
        if lock is None:
            lock = self._locks[user_id] = asyncio.Lock()
        self._lock_users[user_id] = self._lock_users.get(user_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[user_id] -= 1
            if self._lock_users[user_id] == 0:
                del self._lock_users[user_id]
                del self._locks[user_id]
    
    async def _commit(
        self,
        transaction_id: UUID,
        user_id: int,
        transaction_type: TransactionType,
        converted_amount: Decimal,
        previous_balance: Decimal,
        new_balance: Decimal,
    ) -> None:
        """
        Write the balance, then append history.
        
        If the append fails the previous balance is written back
        and the append error is re-raised.
        """
        try:
            await self._balance_store.set_balance(user_id, new_balance)
        except Exception as e:
            if self._audit_logger:
                await self._audit_logger.log_error(
                    error_type="balance_write_failed",
                    error_message=str(e),
                    details={"user_id": user_id},
                    correlation_id=transaction_id,
                )
            raise
        
        try:
            await self._recorder.append(user_id, transaction_type, converted_amount)
        except Exception as e:
            await self._balance_store.set_balance(user_id, previous_balance)
            if self._audit_logger:
                await self._audit_logger.log_balance_restored(
                    user_id=user_id,
                    balance=previous_balance,
                    error_message=str(e),
                    correlation_id=transaction_id,
                )
            raise
    
    async def _send_low_balance_alert(
        self,
        transaction_id: UUID,
        user_id: int,
        balance: Decimal,
    ) -> bool:
        """
        Fire the low-balance alert.
        
        The transaction is already committed, so a failing notifier
        is logged and reported as notified=False instead of raised.
        """
        try:
            await self._notifier.notify(user_id, balance)
        except Exception as e:
            if self._audit_logger:
                await self._audit_logger.log_notification_failed(
                    user_id=user_id,
                    balance=balance,
                    error_message=str(e),
                    correlation_id=transaction_id,
                )
            else:
                self._logger.error(
                    "low_balance_notification_failed",
                    user_id=user_id,
                    balance=str(balance),
                    error=str(e),
                )
            return False
        
        if self._audit_logger:
            await self._audit_logger.log_low_balance_notified(
                user_id=user_id,
                balance=balance,
                correlation_id=transaction_id,
            )
        return True
    
    async def _reject(
        self,
        transaction_id: UUID,
        error: TransactionErrorKind,
        message: str,
        **fields: Any,
    ) -> TransactionResult:
        if self._audit_logger:
            await self._audit_logger.log_transaction_rejected(
                user_id=fields.get("user_id"),
                error_kind=error.value,
                reason=message,
                correlation_id=transaction_id,
            )
        return TransactionResult(
            transaction_id=transaction_id,
            success=False,
            error=error,
            message=message,
            **fields,
        )


def create_processor(
    settings: Optional[Settings] = None,
    alert_stream: Optional[TextIO] = None,
    audit_storage: Optional[AuditStorageInterface] = None,
) -> TransactionProcessor:
    """
    Factory function wiring a processor to in-memory collaborators.
    
    Args:
        settings: Source of base currency, rates and threshold.
                  Defaults to get_settings().
        alert_stream: Where low-balance alerts are written (stdout if None)
        audit_storage: Audit backend; an in-memory one is used if None
        
    Returns:
        A ready-to-use TransactionProcessor
    """
    settings = settings or get_settings()
    currency_settings = settings.currency
    base_currency = currency_settings.base_currency
    
    return TransactionProcessor(
        balance_store=InMemoryBalanceStore(),
        recorder=InMemoryTransactionRecorder(base_currency=base_currency),
        converter=FixedRateCurrencyConverter(
            rates=currency_settings.rates,
            base_currency=base_currency,
        ),
        notifier=ConsoleLowBalanceNotifier(
            base_currency=base_currency,
            stream=alert_stream,
        ),
        base_currency=base_currency,
        low_balance_threshold=settings.notifications.low_balance_threshold,
        validator=TransactionValidator(max_amount=settings.app.max_transaction_amount),
        audit_logger=AuditLogger(audit_storage or InMemoryAuditStorage()),
    )

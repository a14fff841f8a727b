"""Tests for AuditLogger."""

import asyncio
from decimal import Decimal
from uuid import uuid4

from balance_service.audit import AuditLogger
from balance_service.models.audit import AuditEventBuilder, AuditEventType
from balance_service.services.storage import InMemoryAuditStorage, StorageError


def run(coro):
    return asyncio.run(coro)


class BrokenAuditStorage(InMemoryAuditStorage):
    async def append_event(self, event):
        raise StorageError("disk full")


class TestAuditLogger:
    
    def test_events_reach_storage(self):
        storage = InMemoryAuditStorage()
        logger = AuditLogger(storage)
        correlation_id = uuid4()
        
        run(logger.log_transaction_applied(
            user_id=1,
            transaction_type="credit",
            amount=Decimal("10"),
            new_balance=Decimal("10"),
            correlation_id=correlation_id,
        ))
        
        events = run(storage.get_events_by_correlation_id(correlation_id))
        assert [e.event_type for e in events] == [AuditEventType.TRANSACTION_APPLIED]
    
    def test_without_storage_logs_locally(self):
        logger = AuditLogger()
        
        ok = run(logger.log(_rejection()))
        
        assert ok is True
    
    def test_storage_failure_is_not_raised(self):
        logger = AuditLogger(BrokenAuditStorage())
        
        ok = run(logger.log(_rejection()))
        
        assert ok is False
    
    def test_log_error(self):
        storage = InMemoryAuditStorage()
        
        run(AuditLogger(storage).log_error("balance_write_failed", "read-only"))
        
        events = run(storage.get_recent_events())
        assert events[0].event_type == AuditEventType.SYSTEM_ERROR
        assert events[0].error_message == "read-only"


def _rejection():
    return AuditEventBuilder.transaction_rejected(
        user_id=1,
        error_kind="invalid_input",
        reason="Amount must be positive, got 0",
        correlation_id=uuid4(),
    )

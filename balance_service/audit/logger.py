"""
Audit Logger

DESIGN DECISION: Every transaction outcome is logged.
This provides:
1. Traceability of every balance change and rejection
2. A record of every low-balance alert
3. Debugging capability when a collaborator misbehaves

The audit logger:
- Is an optional collaborator; the processor works the same without it
- Gracefully handles failures (a broken audit store never breaks a transaction)
- Uses the transaction id as correlation id to trace related events
"""

import logging
import sys
from decimal import Decimal
from typing import Optional
from uuid import UUID

import structlog

from balance_service.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from balance_service.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """
    Route stdlib logging (and therefore structlog) to stderr.
    
    Only needed by entry points; libraries should not call this.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
    )


class AuditLogger:
    """
    Central audit logging service.
    
    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage, when one is configured
    """
    
    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.
        
        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger(__name__)
    
    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.
        
        Always logs locally. Persists to storage if available.
        
        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()
        
        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)
        
        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False
        
        return True
    
    async def log_transaction_applied(
        self,
        user_id: int,
        transaction_type: str,
        amount: Decimal,
        new_balance: Decimal,
        correlation_id: UUID,
    ) -> None:
        """Log a committed transaction."""
        event = AuditEventBuilder.transaction_applied(
            user_id=user_id,
            transaction_type=transaction_type,
            amount=amount,
            new_balance=new_balance,
            correlation_id=correlation_id,
        )
        await self.log(event)
    
    async def log_transaction_rejected(
        self,
        user_id: Optional[int],
        error_kind: str,
        reason: str,
        correlation_id: UUID,
    ) -> None:
        """Log a rejected transaction."""
        event = AuditEventBuilder.transaction_rejected(
            user_id=user_id,
            error_kind=error_kind,
            reason=reason,
            correlation_id=correlation_id,
        )
        await self.log(event)
    
    async def log_balance_restored(
        self,
        user_id: int,
        balance: Decimal,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        """Log a compensating balance write."""
        event = AuditEventBuilder.balance_restored(
            user_id=user_id,
            balance=balance,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)
    
    async def log_low_balance_notified(
        self,
        user_id: int,
        balance: Decimal,
        correlation_id: UUID,
    ) -> None:
        """Log a delivered low-balance alert."""
        event = AuditEventBuilder.low_balance_notified(
            user_id=user_id,
            balance=balance,
            correlation_id=correlation_id,
        )
        await self.log(event)
    
    async def log_notification_failed(
        self,
        user_id: int,
        balance: Decimal,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        """Log a low-balance alert that raised."""
        event = AuditEventBuilder.notification_failed(
            user_id=user_id,
            balance=balance,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)
    
    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        await self.log(event)

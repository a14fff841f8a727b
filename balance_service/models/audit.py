"""
Audit Models for Balance Service

Every transaction outcome is logged for audit purposes.
This provides:
1. Traceability of every balance change
2. Debugging information when a transaction is rejected
3. A record of every low-balance alert that was sent

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Transactions
    TRANSACTION_APPLIED = "transaction_applied"
    TRANSACTION_REJECTED = "transaction_rejected"
    
    # Commit compensation
    BALANCE_RESTORED = "balance_restored"
    
    # Alerts
    LOW_BALANCE_NOTIFIED = "low_balance_notified"
    NOTIFICATION_FAILED = "notification_failed"
    
    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.
    
    This is the core unit of our audit trail.
    """
    
    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )
    
    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )
    
    # Context - which account is this about?
    user_id: Optional[int] = Field(
        default=None,
        description="Account the event relates to"
    )
    
    # Correlation - the transaction that produced the event
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="Transaction id shared by all events of one process call"
    )
    
    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    
    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None
    
    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "user_id": self.user_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.
    
    Usage:
        event = AuditEventBuilder.transaction_applied(...)
        event = AuditEventBuilder.low_balance_notified(user_id, balance, correlation_id)
    """
    
    @staticmethod
    def transaction_applied(
        user_id: int,
        transaction_type: str,
        amount: Decimal,
        new_balance: Decimal,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_APPLIED,
            user_id=user_id,
            correlation_id=correlation_id,
            description=f"{transaction_type.capitalize()} of {amount} applied",
            details={
                "transaction_type": transaction_type,
                "amount": str(amount),
                "new_balance": str(new_balance),
            },
        )
    
    @staticmethod
    def transaction_rejected(
        user_id: Optional[int],
        error_kind: str,
        reason: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_REJECTED,
            severity=AuditSeverity.WARNING,
            user_id=user_id,
            correlation_id=correlation_id,
            description=f"Transaction rejected: {error_kind}",
            error_code=error_kind,
            error_message=reason,
        )
    
    @staticmethod
    def balance_restored(
        user_id: int,
        balance: Decimal,
        error_message: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BALANCE_RESTORED,
            severity=AuditSeverity.ERROR,
            user_id=user_id,
            correlation_id=correlation_id,
            description="History append failed, balance restored",
            details={
                "restored_balance": str(balance),
            },
            error_message=error_message,
        )
    
    @staticmethod
    def low_balance_notified(
        user_id: int,
        balance: Decimal,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOW_BALANCE_NOTIFIED,
            user_id=user_id,
            correlation_id=correlation_id,
            description=f"Low balance alert sent ({balance})",
            details={
                "balance": str(balance),
            },
        )
    
    @staticmethod
    def notification_failed(
        user_id: int,
        balance: Decimal,
        error_message: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.NOTIFICATION_FAILED,
            severity=AuditSeverity.ERROR,
            user_id=user_id,
            correlation_id=correlation_id,
            description="Low balance alert could not be sent",
            details={
                "balance": str(balance),
            },
            error_message=error_message,
        )
    
    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )

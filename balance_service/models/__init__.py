"""
Data Models Package

This package contains all Pydantic models used in the Balance Service.
"""

from balance_service.models.transaction import (
    TransactionErrorKind,
    TransactionRecord,
    TransactionResult,
    TransactionType,
    ValidationIssue,
    ValidationResult,
)
from balance_service.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Transaction models
    "TransactionErrorKind",
    "TransactionRecord",
    "TransactionResult",
    "TransactionType",
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]

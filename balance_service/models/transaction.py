"""
Transaction Models for Balance Service

These models define the schemas for everything that flows through
the transaction processor.

DESIGN DECISION: Money is always Decimal. Stored balances and recorded
amounts carry no currency tag; they are implicitly in the base currency.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from balance_service.errors import (
    InsufficientBalanceError,
    InvalidInputError,
    TransactionError,
    UnsupportedCurrencyError,
)


# =============================================================================
# ENUMS
# =============================================================================

class TransactionType(str, Enum):
    """Direction of a transaction."""
    CREDIT = "credit"
    DEBIT = "debit"
    
    @classmethod
    def _missing_(cls, value):
        # Accept "CREDIT", "Debit", etc.
        if isinstance(value, str):
            lookup = value.strip().lower()
            for member in cls:
                if member.value == lookup:
                    return member
        return None
    
    @property
    def label(self) -> str:
        """Name used in rendered history lines ("Credit", "Debit")."""
        return self.value.capitalize()


class TransactionErrorKind(str, Enum):
    """Why a transaction was rejected."""
    INVALID_INPUT = "invalid_input"
    UNSUPPORTED_CURRENCY = "unsupported_currency"
    INSUFFICIENT_BALANCE = "insufficient_balance"


_ERROR_CLASSES: dict[TransactionErrorKind, type[TransactionError]] = {
    TransactionErrorKind.INVALID_INPUT: InvalidInputError,
    TransactionErrorKind.UNSUPPORTED_CURRENCY: UnsupportedCurrencyError,
    TransactionErrorKind.INSUFFICIENT_BALANCE: InsufficientBalanceError,
}


# =============================================================================
# HISTORY
# =============================================================================

class TransactionRecord(BaseModel):
    """
    One entry in a user's transaction history.
    
    Append-only: records are frozen and never mutated or removed.
    """
    model_config = ConfigDict(frozen=True)
    
    transaction_type: TransactionType
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Amount in base currency"
    )
    recorded_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the record was appended (UTC)"
    )
    
    def render(self, base_currency: str) -> str:
        """Render as a report line, e.g. 'Credit 7500 RUB'."""
        return f"{self.transaction_type.label} {self.amount} {base_currency}"


# =============================================================================
# VALIDATION
# =============================================================================

class ValidationIssue(BaseModel):
    """A single problem found in transaction input."""
    
    field: str = Field(..., description="Which input the issue is about")
    issue_type: str = Field(..., description="Issue type (e.g., 'not_positive')")
    message: str = Field(..., description="Human-readable description")


class ValidationResult(BaseModel):
    """
    Outcome of input validation.
    
    The normalized values are only set when is_valid is True.
    """
    
    is_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)
    user_id: Optional[int] = None
    transaction_type: Optional[TransactionType] = None
    amount: Optional[Decimal] = None
    currency: Optional[str] = None
    
    @property
    def summary(self) -> str:
        return "; ".join(issue.message for issue in self.issues)


# =============================================================================
# PROCESSING RESULT
# =============================================================================

class TransactionResult(BaseModel):
    """
    Outcome of a single TransactionProcessor.process call.
    
    On failure, error is set and no balance or history change happened.
    Fields that were not reached before the failure stay None.
    """
    
    transaction_id: UUID = Field(default_factory=uuid4)
    success: bool
    error: Optional[TransactionErrorKind] = None
    message: str = ""
    
    user_id: Optional[int] = None
    transaction_type: Optional[TransactionType] = None
    original_amount: Optional[Decimal] = None
    currency: Optional[str] = None
    converted_amount: Optional[Decimal] = None
    previous_balance: Optional[Decimal] = None
    new_balance: Optional[Decimal] = None
    notified: bool = False
    
    def raise_for_error(self) -> None:
        """Raise the exception matching error, if any."""
        if self.error is None:
            return
        if self.error is TransactionErrorKind.UNSUPPORTED_CURRENCY:
            raise UnsupportedCurrencyError(self.currency or "", self.message)
        raise _ERROR_CLASSES[self.error](self.message)

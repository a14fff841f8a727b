"""
Transaction Input Validation

DESIGN DECISION: Validation runs before any collaborator is called.
It never fixes input silently. It collects every problem it finds so the
caller sees all of them at once, not just the first.

Checks:
- user id is a positive integer
- amount is a finite, positive decimal no larger than the configured limit
- transaction type is credit or debit
- currency code is present
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from balance_service.models.transaction import (
    TransactionType,
    ValidationIssue,
    ValidationResult,
)


# Default upper bound on a single amount; keeps conversion and balance
# arithmetic well inside the decimal context's exponent range
MAX_TRANSACTION_AMOUNT = Decimal("1E+15")


class TransactionValidator:
    """Validates and normalizes the inputs of one transaction."""
    
    def __init__(self, max_amount: Optional[Decimal] = MAX_TRANSACTION_AMOUNT):
        """
        Args:
            max_amount: Largest accepted amount, in the currency it is given in.
                        None disables the check.
        """
        self._max_amount = max_amount
    
    def _validate_user_id(self, user_id: Any) -> tuple[Optional[int], list[ValidationIssue]]:
        # bool is an int subclass; True must not pass as user 1
        if isinstance(user_id, bool) or not isinstance(user_id, int):
            return None, [ValidationIssue(
                field="user_id",
                issue_type="invalid_type",
                message=f"User id must be an integer, got {user_id!r}",
            )]
        if user_id <= 0:
            return None, [ValidationIssue(
                field="user_id",
                issue_type="not_positive",
                message=f"User id must be positive, got {user_id}",
            )]
        return user_id, []
    
    def _validate_amount(self, amount: Any) -> tuple[Optional[Decimal], list[ValidationIssue]]:
        if isinstance(amount, bool):
            value = None
        else:
            try:
                # Through str so 0.1 stays 0.1 instead of its binary expansion
                value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
            except (InvalidOperation, ValueError, TypeError):
                value = None
        
        if value is None or not value.is_finite():
            return None, [ValidationIssue(
                field="amount",
                issue_type="invalid_type",
                message=f"Amount must be a number, got {amount!r}",
            )]
        if value <= 0:
            return None, [ValidationIssue(
                field="amount",
                issue_type="not_positive",
                message=f"Amount must be positive, got {value}",
            )]
        if self._max_amount is not None and value > self._max_amount:
            return None, [ValidationIssue(
                field="amount",
                issue_type="too_large",
                message=f"Amount must not exceed {self._max_amount}, got {value}",
            )]
        return value, []
    
    def _validate_type(
        self,
        transaction_type: Any,
    ) -> tuple[Optional[TransactionType], list[ValidationIssue]]:
        try:
            return TransactionType(transaction_type), []
        except ValueError:
            return None, [ValidationIssue(
                field="transaction_type",
                issue_type="unknown_type",
                message=f"Transaction type must be credit or debit, got {transaction_type!r}",
            )]
    
    def _validate_currency(self, currency: Any) -> tuple[Optional[str], list[ValidationIssue]]:
        if not isinstance(currency, str) or not currency.strip():
            return None, [ValidationIssue(
                field="currency",
                issue_type="missing",
                message=f"Currency code must be a non-empty string, got {currency!r}",
            )]
        return currency.strip().upper(), []
    
    def validate(
        self,
        user_id: Any,
        transaction_type: Any,
        amount: Any,
        currency: Any,
    ) -> ValidationResult:
        """
        Validate the inputs of one transaction.
        
        Returns:
            ValidationResult; normalized values are set only when valid
        """
        issues: list[ValidationIssue] = []
        
        normalized_user_id, user_issues = self._validate_user_id(user_id)
        issues.extend(user_issues)
        
        normalized_amount, amount_issues = self._validate_amount(amount)
        issues.extend(amount_issues)
        
        normalized_type, type_issues = self._validate_type(transaction_type)
        issues.extend(type_issues)
        
        normalized_currency, currency_issues = self._validate_currency(currency)
        issues.extend(currency_issues)
        
        if issues:
            return ValidationResult(is_valid=False, issues=issues)
        
        return ValidationResult(
            is_valid=True,
            user_id=normalized_user_id,
            transaction_type=normalized_type,
            amount=normalized_amount,
            currency=normalized_currency,
        )

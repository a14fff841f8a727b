"""
Transaction Errors

One exception per failure kind a transaction can end with.
The processor reports these as TransactionResult values; callers that
prefer exceptions can call TransactionResult.raise_for_error().
"""


class TransactionError(Exception):
    """Base exception for rejected transactions."""
    pass


class InvalidInputError(TransactionError):
    """User id or amount failed validation."""
    pass


class UnsupportedCurrencyError(TransactionError):
    """The source currency has no known conversion to the base currency."""
    
    def __init__(self, currency: str, message: str = ""):
        self.currency = currency
        super().__init__(message or f"Unsupported currency: {currency}")


class InsufficientBalanceError(TransactionError):
    """A debit is larger than the current balance."""
    pass

"""Validation package."""

from balance_service.validation.validator import TransactionValidator

__all__ = ["TransactionValidator"]

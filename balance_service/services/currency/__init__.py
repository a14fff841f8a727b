"""Currency services package."""

from balance_service.errors import UnsupportedCurrencyError
from balance_service.services.currency.converter import (
    CurrencyConverterInterface,
    FixedRateCurrencyConverter,
)

__all__ = [
    "CurrencyConverterInterface",
    "FixedRateCurrencyConverter",
    "UnsupportedCurrencyError",
]

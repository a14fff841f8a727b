"""
Currency Conversion

DESIGN DECISION: The processor never does rate arithmetic itself.
It asks a converter for the base-currency amount, so a live rate source
can replace the fixed table without changing the processor.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional

from balance_service.config import get_settings
from balance_service.errors import UnsupportedCurrencyError


class CurrencyConverterInterface(ABC):
    """Abstract interface for converting amounts between currencies."""
    
    @abstractmethod
    async def convert(
        self,
        amount: Decimal,
        from_currency: str,
        to_currency: str,
    ) -> Decimal:
        """
        Convert an amount from one currency to another.
        
        Args:
            amount: Amount in from_currency
            from_currency: Source currency code
            to_currency: Target currency code
            
        Returns:
            The amount in to_currency
            
        Raises:
            UnsupportedCurrencyError: If from_currency is not recognized
        """
        pass
    
    @abstractmethod
    def supported_currencies(self) -> list[str]:
        """Currency codes this converter accepts as a source."""
        pass


class FixedRateCurrencyConverter(CurrencyConverterInterface):
    """
    Converts using a static rate table.
    
    Each rate is the number of base-currency units per one unit of the
    foreign currency. Only conversion into the base currency is supported.
    """
    
    def __init__(
        self,
        rates: Optional[dict[str, Decimal]] = None,
        base_currency: Optional[str] = None,
    ):
        if rates is None or base_currency is None:
            settings = get_settings().currency
            rates = settings.rates if rates is None else rates
            base_currency = settings.base_currency if base_currency is None else base_currency
        self._rates = {code.upper(): Decimal(rate) for code, rate in rates.items()}
        self._base_currency = base_currency.upper()
    
    async def convert(
        self,
        amount: Decimal,
        from_currency: str,
        to_currency: str,
    ) -> Decimal:
        source = from_currency.strip().upper()
        target = to_currency.strip().upper()
        
        if target != self._base_currency:
            raise UnsupportedCurrencyError(
                target,
                f"Conversion target must be {self._base_currency}, got {target}",
            )
        if source == self._base_currency:
            return amount
        
        rate = self._rates.get(source)
        if rate is None:
            raise UnsupportedCurrencyError(source)
        return amount * rate
    
    def supported_currencies(self) -> list[str]:
        return sorted({self._base_currency, *self._rates})

"""
Low Balance Notifications

Fire-and-forget alerts sent after a transaction leaves a balance
under the configured threshold.
"""

import sys
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional, TextIO

import structlog


class LowBalanceNotifierInterface(ABC):
    """Abstract interface for low-balance alerts."""
    
    @abstractmethod
    async def notify(self, user_id: int, balance: Decimal) -> None:
        """
        Tell the user their balance is low.
        
        Args:
            user_id: The account's identifier
            balance: The balance after the transaction, in base currency
        """
        pass


class ConsoleLowBalanceNotifier(LowBalanceNotifierInterface):
    """Writes alerts to a text stream (stdout by default)."""
    
    def __init__(
        self,
        base_currency: str = "RUB",
        stream: Optional[TextIO] = None,
    ):
        self._base_currency = base_currency
        self._stream = stream
        self._logger = structlog.get_logger(__name__)
    
    def format_alert(self, user_id: int, balance: Decimal) -> str:
        return f"ALERT: User {user_id} has low balance ({balance} {self._base_currency})"
    
    async def notify(self, user_id: int, balance: Decimal) -> None:
        # Resolve stdout at call time so redirected streams are honored
        stream = self._stream or sys.stdout
        print(self.format_alert(user_id, balance), file=stream)
        self._logger.debug("low_balance_alert_written", user_id=user_id, balance=str(balance))

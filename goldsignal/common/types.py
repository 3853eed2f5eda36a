"""Common type definitions for the signal bot.

This module contains shared enums used across different components
of the system.
"""

from enum import Enum, auto
from typing import Awaitable, Callable

# Sends one text message to the signal channel
Notifier = Callable[[str], Awaitable[None]]


class TradeSide(Enum):
    """Trading signal direction."""

    BUY = "BUY"
    SELL = "SELL"

    def __str__(self) -> str:
        """Return string representation."""
        return self.value


class PendingReplyKind(Enum):
    """Kind of free-text value the operator was asked to type."""

    LIMIT_ENTRY = auto()     # Entry price for a limit signal
    TP_SL_OVERRIDE = auto()  # "TP SL" pair for the active trade
    LOT_SIZE = auto()        # "Balance Risk%" pair for the lot calculator

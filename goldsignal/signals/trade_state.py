"""Trade state module.

This module implements the TradeState class which holds the single
active gold trade and enforces its lifecycle:
- Opening a trade with computed take profit / stop loss
- Manual take profit / stop loss overrides
- Milestone recording with breakeven and auto-close
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import FrozenSet, Optional, Set

import structlog

from goldsignal.common.types import TradeSide
from .calculator import (
    BREAKEVEN_MILESTONE,
    MILESTONES,
    TAKE_PROFIT_MILESTONE,
    Number,
    compute_tp_sl,
    to_decimal,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Trade:
    """Point-in-time copy of the trade state."""
    active: bool
    side: Optional[TradeSide]
    entry: Optional[Decimal]
    take_profit: Optional[Decimal]
    stop_loss: Optional[Decimal]
    milestones_reached: FrozenSet[int] = field(default_factory=frozenset)


class TradeState:
    """Holds the one trade the bot is currently tracking.

    Opening a new trade always replaces the previous one; there is never
    more than one trade in flight.
    """

    def __init__(self) -> None:
        self.active = False
        self.side: Optional[TradeSide] = None
        self.entry: Optional[Decimal] = None
        self.take_profit: Optional[Decimal] = None
        self.stop_loss: Optional[Decimal] = None
        self.milestones_reached: Set[int] = set()

    def open(self, side: TradeSide, entry: Number) -> Trade:
        """Open a trade, overwriting whatever was tracked before.

        Args:
            side: Trade direction
            entry: Entry price

        Returns:
            Snapshot of the new trade
        """
        entry = to_decimal(entry)
        take_profit, stop_loss = compute_tp_sl(entry, side)

        if self.active:
            logger.info(
                "trade_replaced",
                previous_side=str(self.side),
                previous_entry=str(self.entry),
                milestones_discarded=sorted(self.milestones_reached)
            )

        self.active = True
        self.side = side
        self.entry = entry
        self.take_profit = take_profit
        self.stop_loss = stop_loss
        self.milestones_reached = set()

        logger.info(
            "trade_opened",
            side=str(side),
            entry=str(entry),
            take_profit=str(take_profit),
            stop_loss=str(stop_loss)
        )
        return self.snapshot()

    def override_tp_sl(self, take_profit: Number, stop_loss: Number) -> bool:
        """Set take profit and stop loss directly.

        Returns:
            bool indicating if the override was applied (False when no
            trade is active)
        """
        if not self.active:
            logger.warning("tp_sl_override_without_trade")
            return False

        self.take_profit = to_decimal(take_profit)
        self.stop_loss = to_decimal(stop_loss)
        logger.info(
            "tp_sl_overridden",
            take_profit=str(self.take_profit),
            stop_loss=str(self.stop_loss)
        )
        return True

    def record_milestone(self, milestone: int) -> bool:
        """Record a reached milestone and apply its side effects.

        Any milestone from BREAKEVEN_MILESTONE up moves the stop loss to
        the entry price. TAKE_PROFIT_MILESTONE closes the trade.

        Args:
            milestone: Pip threshold from MILESTONES

        Returns:
            bool indicating if the milestone was newly recorded

        Raises:
            ValueError: If milestone is not on the ladder
        """
        if milestone not in MILESTONES:
            raise ValueError(f"Unknown milestone: {milestone}")

        if milestone in self.milestones_reached:
            return False

        self.milestones_reached.add(milestone)

        if milestone >= BREAKEVEN_MILESTONE:
            self.stop_loss = self.entry

        if milestone == TAKE_PROFIT_MILESTONE:
            self.active = False
            logger.info("trade_closed_at_take_profit", entry=str(self.entry))

        return True

    def reset(self) -> None:
        """Deactivate the trade; remaining fields are left for the next open."""
        self.active = False
        self.milestones_reached = set()
        logger.info("trade_reset")

    @property
    def is_active(self) -> bool:
        """Check if a trade is currently open."""
        return self.active

    def snapshot(self) -> Trade:
        """Return an immutable copy of the current state."""
        return Trade(
            active=self.active,
            side=self.side,
            entry=self.entry,
            take_profit=self.take_profit,
            stop_loss=self.stop_loss,
            milestones_reached=frozenset(self.milestones_reached)
        )

"""Signal service for the gold trade lifecycle.

This module provides the operations the command layer drives:
- Opening market and limit signals
- Manual take profit / stop loss updates
- Lot size suggestions and live price checks
- Resetting the tracked trade
"""

import asyncio
from decimal import Decimal
from typing import Optional

import structlog

from goldsignal.common.types import Notifier, TradeSide
from goldsignal.pricing.price_source import PriceQuote, PriceSource
from .calculator import Number, compute_lot_suggestion, to_decimal
from .messages import lot_message, price_message, signal_message, tp_sl_update_message
from .trade_state import Trade, TradeState

logger = structlog.get_logger(__name__)

DEFAULT_PAIR = "XAUUSD (Gold)"


class SignalService:
    """Owns the trade state and posts signal updates through the notifier.

    Every path that mutates the trade runs under ``lock``; the milestone
    watcher takes the same lock for its ticks.
    """

    def __init__(
        self,
        price_source: PriceSource,
        notify: Notifier,
        pair: str = DEFAULT_PAIR,
        trade_state: Optional[TradeState] = None
    ):
        """Initialize signal service.

        Args:
            price_source: Live gold price source
            notify: Coroutine sending text to the signal channel
            pair: Display name of the traded pair
            trade_state: Trade state to drive, a fresh one when omitted
        """
        self.price_source = price_source
        self.notify = notify
        self.pair = pair
        self.trade_state = trade_state or TradeState()
        self.lock = asyncio.Lock()

    async def open_signal(self, side: TradeSide, entry: Optional[Number] = None) -> Trade:
        """Open a signal and post it to the channel.

        Args:
            side: Trade direction
            entry: Entry price; the live price is used when omitted

        Returns:
            Snapshot of the opened trade
        """
        quote = await self.price_source.fetch_price()
        entry_price = to_decimal(entry) if entry is not None else quote.price

        async with self.lock:
            trade = self.trade_state.open(side, entry_price)
            await self.notify(signal_message(
                pair=self.pair,
                side=side,
                entry=trade.entry,
                take_profit=trade.take_profit,
                stop_loss=trade.stop_loss,
                change_percent=quote.change_percent
            ))

        logger.info(
            "signal_posted",
            side=str(side),
            entry=str(trade.entry),
            limit=entry is not None,
            fallback_price=quote.is_fallback
        )
        return trade

    async def override_tp_sl(self, take_profit: Number, stop_loss: Number) -> bool:
        """Replace take profit and stop loss of the active trade.

        Returns:
            bool indicating if a trade was active and got updated
        """
        async with self.lock:
            if not self.trade_state.override_tp_sl(take_profit, stop_loss):
                return False
            await self.notify(tp_sl_update_message(
                self.trade_state.take_profit,
                self.trade_state.stop_loss
            ))
        return True

    def compute_lot_suggestion(self, balance: Number, risk_percent: Number) -> Decimal:
        """Suggest a lot size, see calculator.compute_lot_suggestion."""
        return compute_lot_suggestion(balance, risk_percent)

    async def post_lot_suggestion(self, balance: Number, risk_percent: Number) -> Decimal:
        """Compute a lot suggestion and post it to the channel."""
        lot = self.compute_lot_suggestion(balance, risk_percent)
        await self.notify(lot_message(balance, risk_percent, lot))
        logger.info("lot_suggestion_posted", balance=str(balance), risk_percent=str(risk_percent), lot=str(lot))
        return lot

    async def get_live_price(self) -> PriceQuote:
        """Fetch the current gold quote."""
        return await self.price_source.fetch_price()

    async def post_live_price(self) -> PriceQuote:
        """Post the current gold quote to the channel."""
        quote = await self.get_live_price()
        await self.notify(price_message(quote.price, quote.change_percent))
        return quote

    async def post_text(self, text: str) -> None:
        """Post a free-form message to the channel."""
        await self.notify(text)

    async def reset(self) -> None:
        """Stop tracking the current trade."""
        async with self.lock:
            self.trade_state.reset()

    def snapshot(self) -> Trade:
        """Return a copy of the tracked trade."""
        return self.trade_state.snapshot()

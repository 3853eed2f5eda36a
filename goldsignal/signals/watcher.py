"""Milestone watcher module.

This module implements the MilestoneWatcher class which handles:
- Polling the gold price while a trade is active
- Recording 20/40/60/80/100 pip milestones
- Posting one progress update per crossed milestone
"""

import asyncio
from typing import List, Optional

import structlog

from goldsignal.common.types import Notifier
from goldsignal.pricing.price_source import PriceSource
from .calculator import MILESTONES, pips_moved
from .messages import milestone_message
from .trade_state import TradeState

logger = structlog.get_logger(__name__)

DEFAULT_CHECK_INTERVAL = 30.0


class MilestoneWatcher:
    """Watches the active trade and reports milestone progress."""

    def __init__(
        self,
        trade_state: TradeState,
        price_source: PriceSource,
        notify: Notifier,
        lock: Optional[asyncio.Lock] = None,
        check_interval: float = DEFAULT_CHECK_INTERVAL
    ):
        """Initialize milestone watcher.

        Args:
            trade_state: Trade state to advance
            price_source: Live gold price source
            notify: Coroutine sending text to the signal channel
            lock: Lock guarding trade state mutations
            check_interval: Interval in seconds between price checks
        """
        self.trade_state = trade_state
        self.price_source = price_source
        self.notify = notify
        self.lock = lock or asyncio.Lock()
        self.check_interval = check_interval
        self.running = False
        self._task: Optional[asyncio.Task] = None

    async def start(self):
        """Start watching."""
        if self.running:
            logger.warning("milestone_watcher_already_running")
            return

        self.running = True
        self._task = asyncio.create_task(self._watch_loop())
        logger.info("milestone_watcher_started", check_interval=self.check_interval)

    async def stop(self):
        """Stop watching."""
        if not self.running:
            return

        self.running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        logger.info("milestone_watcher_stopped")

    async def _watch_loop(self):
        """Main watch loop."""
        while self.running:
            await asyncio.sleep(self.check_interval)
            await self.tick()

    async def tick(self) -> List[int]:
        """Run one check, logging instead of raising on failure.

        Returns:
            Milestones reached during this tick
        """
        try:
            return await self.check_trade()
        except Exception as e:
            logger.error(
                "milestone_watcher_error",
                error=str(e),
                error_type=type(e).__name__
            )
            return []

    async def check_trade(self) -> List[int]:
        """Check the active trade against the milestone ladder.

        Every milestone the price has crossed and that is not yet recorded
        gets recorded under the lock, then announced lowest first once the
        lock is released.

        Returns:
            Milestones reached during this check
        """
        reached: List[int] = []
        messages: List[str] = []

        async with self.lock:
            if not self.trade_state.is_active:
                return reached

            quote = await self.price_source.fetch_price()
            trade = self.trade_state.snapshot()
            moved = pips_moved(trade.entry, quote.price, trade.side)
            logger.debug(
                "trade_checked",
                side=str(trade.side),
                entry=str(trade.entry),
                price=str(quote.price),
                pips=moved,
                fallback_price=quote.is_fallback
            )

            for milestone in MILESTONES:
                if moved < milestone:
                    break
                if not self.trade_state.record_milestone(milestone):
                    continue

                reached.append(milestone)
                logger.info(
                    "milestone_reached",
                    milestone=milestone,
                    pips=moved,
                    stop_loss=str(self.trade_state.stop_loss),
                    active=self.trade_state.is_active
                )
                messages.append(milestone_message(trade.side, trade.entry, quote.price, milestone))

        for message in messages:
            await self.notify(message)
        return reached

#!/usr/bin/env python3
"""
GoldSignal: Telegram gold signal bot
Main application entry point.
"""

import asyncio
import logging
import sys
from typing import Optional

import structlog

from goldsignal.api.server import HealthServer
from goldsignal.config import AppConfig, load_config
from goldsignal.pricing.price_source import PriceSource
from goldsignal.signals.service import SignalService
from goldsignal.signals.watcher import MilestoneWatcher
from goldsignal.telegram.client import BotClient
from goldsignal.telegram.commands import CommandRouter
from goldsignal.telegram.pending_replies import PendingReplies

logger = structlog.get_logger(__name__)


def setup_logging(level: str = "INFO", log_format: str = "json") -> None:
    """Configure structured logging."""
    renderer = (
        structlog.processors.JSONRenderer()
        if log_format == "json"
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        cache_logger_on_first_use=True,
    )


class GoldSignal:
    """Main application class for the gold signal bot.

    This class wires the components together:
    - Price source and signal service
    - Milestone watcher
    - Telegram bot client and command router
    - Liveness endpoint
    """

    def __init__(self, config: AppConfig):
        """Initialize the application.

        Args:
            config: Validated application configuration
        """
        self.config = config
        self.bot: Optional[BotClient] = None
        self.service: Optional[SignalService] = None
        self.watcher: Optional[MilestoneWatcher] = None
        self.health_server: Optional[HealthServer] = None

    def _build(self) -> None:
        """Create all components."""
        telegram = self.config.telegram
        quote = self.config.quote

        self.bot = BotClient(
            api_id=telegram.api_id,
            api_hash=telegram.api_hash,
            bot_token=telegram.bot_token,
            channel_id=telegram.channel_id,
            session_path=telegram.session_path
        )
        price_source = PriceSource(
            api_key=quote.api_key,
            url=quote.url,
            timeout=quote.timeout_seconds,
            fallback_price=quote.fallback_price
        )
        self.service = SignalService(
            price_source=price_source,
            notify=self.bot.notify,
            pair=self.config.pair
        )
        self.watcher = MilestoneWatcher(
            trade_state=self.service.trade_state,
            price_source=price_source,
            notify=self.bot.notify,
            lock=self.service.lock,
            check_interval=self.config.watcher.check_interval_seconds
        )
        self.bot.attach(CommandRouter(
            service=self.service,
            sender=self.bot,
            pending_replies=PendingReplies(ttl_seconds=self.config.pending_replies.ttl_seconds)
        ))
        self.health_server = HealthServer(
            host=self.config.health.host,
            port=self.config.health.port
        )

        if not quote.api_key:
            logger.warning("quote_api_key_not_set", fallback_price=str(quote.fallback_price))

    async def start(self) -> None:
        """Start the bot and run until Telegram disconnects."""
        self._build()
        try:
            await self.health_server.start()
            await self.bot.connect()
            await self.watcher.start()
            logger.info("gold_signal_started", pair=self.config.pair)
            await self.bot.run_until_disconnected()
        finally:
            await self.stop()

    async def stop(self) -> None:
        """Stop all components, watcher first."""
        if self.watcher:
            await self.watcher.stop()
        if self.bot:
            try:
                await self.bot.disconnect()
            except Exception as e:
                logger.error("bot_disconnect_failed", error=str(e))
        if self.health_server:
            await self.health_server.stop()
        logger.info("gold_signal_stopped")


def main() -> None:
    """Application entry point."""
    try:
        config = load_config()
    except ValueError as e:
        setup_logging()
        logger.error("config_invalid", error=str(e))
        sys.exit(1)

    setup_logging(config.logging.level, config.logging.format)

    missing = config.missing_required()
    if missing:
        logger.error("missing_required_config", missing=missing)
        sys.exit(1)

    app = GoldSignal(config)
    try:
        asyncio.run(app.start())
    except KeyboardInterrupt:
        logger.info("shutdown_requested")


if __name__ == "__main__":
    main()

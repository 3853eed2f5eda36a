"""Shared types for the GoldSignal package."""

from .types import Notifier, TradeSide, PendingReplyKind

__all__ = ["Notifier", "TradeSide", "PendingReplyKind"]

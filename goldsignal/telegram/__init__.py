"""Telegram module for the control panel and channel posts.

This module provides functionality for:
- Connecting to Telegram as a bot
- Routing button presses and prompt replies
- Tracking prompts that wait for an operator reply
"""

from .client import BotClient
from .commands import CommandRouter
from .pending_replies import PendingReplies, PendingReply
from .input_parser import parse_pair, parse_price

__all__ = [
    'BotClient',
    'CommandRouter',
    'PendingReplies',
    'PendingReply',
    'parse_pair',
    'parse_price'
]

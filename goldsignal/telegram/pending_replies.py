"""Pending reply registry.

Tracks prompts the bot sent with a forced reply, so the operator's answer
can be matched back to the flow that asked for it.
"""

import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

import structlog

from goldsignal.common.types import PendingReplyKind, TradeSide

logger = structlog.get_logger(__name__)


@dataclass
class PendingReply:
    """A value the bot is waiting for."""
    kind: PendingReplyKind
    side: Optional[TradeSide] = None
    created_at: float = field(default_factory=time.monotonic)


class PendingReplies:
    """Maps prompt message ids to the reply they are waiting for.

    Entries are removed when taken. Without a TTL they never expire, so a
    prompt stays answerable until it is used or the process restarts.
    """

    def __init__(
        self,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        """Initialize the registry.

        Args:
            ttl_seconds: Optional lifetime of a pending prompt
            clock: Monotonic time source
        """
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._pending: Dict[int, PendingReply] = {}

    def put(self, message_id: int, reply: PendingReply) -> None:
        """Register a pending reply for a prompt."""
        reply.created_at = self._clock()
        self._pending[message_id] = reply
        logger.debug("pending_reply_registered", message_id=message_id, kind=reply.kind.name)

    def take(self, message_id: int) -> Optional[PendingReply]:
        """Remove and return the pending reply for a prompt, if any."""
        reply = self._pending.pop(message_id, None)
        if reply is None:
            return None

        if self.ttl_seconds is not None and self._clock() - reply.created_at > self.ttl_seconds:
            logger.info("pending_reply_expired", message_id=message_id, kind=reply.kind.name)
            return None

        return reply

    def clear(self) -> None:
        """Drop all pending replies."""
        self._pending.clear()

    def __len__(self) -> int:
        return len(self._pending)

    def __contains__(self, message_id: int) -> bool:
        return message_id in self._pending

"""Command router for the control panel.

This module maps operator input onto the signal service:
- /start and /help show the button panel
- Button presses open signals, ask for values or post canned messages
- Replies to prompts deliver limit prices, TP/SL pairs and lot inputs
"""

from typing import Awaitable, Callable, Dict, List, Optional, Protocol, Tuple

import structlog

from goldsignal.common.types import PendingReplyKind, TradeSide
from goldsignal.signals.messages import fmt
from goldsignal.signals.service import SignalService
from . import texts
from .input_parser import parse_pair, parse_price
from .pending_replies import PendingReplies, PendingReply

logger = structlog.get_logger(__name__)

Keyboard = List[List[Tuple[str, str]]]


class MessageSender(Protocol):
    """Outbound chat capability provided by the transport."""

    async def send_message(
        self,
        chat_id: int,
        text: str,
        keyboard: Optional[Keyboard] = None,
        force_reply: bool = False
    ) -> int:
        """Send a message to a chat and return its message id."""


class CommandRouter:
    """Routes control panel events to the signal service."""

    def __init__(
        self,
        service: SignalService,
        sender: MessageSender,
        pending_replies: Optional[PendingReplies] = None
    ):
        """Initialize the router.

        Args:
            service: Signal service driving the trade
            sender: Transport used to answer in the operator's chat
            pending_replies: Registry of prompts awaiting an answer
        """
        self.service = service
        self.sender = sender
        self.pending_replies = pending_replies if pending_replies is not None else PendingReplies()

        self._actions: Dict[str, Callable[[int], Awaitable[Optional[str]]]] = {
            "buy": lambda chat_id: self._market(TradeSide.BUY, "BUY sent"),
            "sell": lambda chat_id: self._market(TradeSide.SELL, "SELL sent"),
            "again_buy": lambda chat_id: self._market(TradeSide.BUY, "Again BUY sent"),
            "again_sell": lambda chat_id: self._market(TradeSide.SELL, "Again SELL sent"),
            "limit_buy": lambda chat_id: self._ask_limit(chat_id, TradeSide.BUY),
            "limit_sell": lambda chat_id: self._ask_limit(chat_id, TradeSide.SELL),
            "update_tpsl": lambda chat_id: self._ask(
                chat_id, texts.TP_SL_PROMPT, PendingReply(PendingReplyKind.TP_SL_OVERRIDE)
            ),
            "calc_lot": lambda chat_id: self._ask(
                chat_id, texts.LOT_PROMPT, PendingReply(PendingReplyKind.LOT_SIZE)
            ),
            "price": lambda chat_id: self._price(),
            "reset": lambda chat_id: self._reset(),
        }
        for action, (text, answer) in texts.CANNED_POSTS.items():
            self._actions[action] = self._canned(text, answer)

    @property
    def actions(self) -> List[str]:
        """Action ids the router understands."""
        return list(self._actions)

    async def handle_start(self, chat_id: int) -> None:
        """Show the control panel."""
        await self.sender.send_message(chat_id, texts.CONTROL_PANEL_TITLE, keyboard=texts.CONTROL_PANEL)

    async def handle_action(self, chat_id: int, action: str) -> Optional[str]:
        """Handle a button press.

        Args:
            chat_id: Chat the button was pressed in
            action: Action id carried by the button

        Returns:
            Short text for the button press acknowledgement, if any
        """
        handler = self._actions.get(action)
        if handler is None:
            logger.warning("unknown_action", action=action, chat_id=chat_id)
            return None

        try:
            answer = await handler(chat_id)
            logger.info("action_handled", action=action, chat_id=chat_id)
            return answer
        except Exception as e:
            logger.error(
                "action_failed",
                action=action,
                chat_id=chat_id,
                error=str(e),
                error_type=type(e).__name__
            )
            return None

    async def handle_reply(self, chat_id: int, reply_to_id: int, text: str) -> bool:
        """Handle a reply to one of the bot's prompts.

        The pending prompt is consumed whether or not the reply is valid.

        Args:
            chat_id: Chat the reply was sent in
            reply_to_id: Message id of the prompt being answered
            text: Reply text

        Returns:
            bool indicating if the reply matched a pending prompt
        """
        pending = self.pending_replies.take(reply_to_id)
        if pending is None:
            return False

        try:
            if pending.kind == PendingReplyKind.LIMIT_ENTRY:
                await self._limit_reply(chat_id, pending.side, text)
            elif pending.kind == PendingReplyKind.TP_SL_OVERRIDE:
                await self._tp_sl_reply(chat_id, text)
            elif pending.kind == PendingReplyKind.LOT_SIZE:
                await self._lot_reply(chat_id, text)
        except Exception as e:
            logger.error(
                "reply_failed",
                kind=pending.kind.name,
                chat_id=chat_id,
                error=str(e),
                error_type=type(e).__name__
            )
        return True

    async def _market(self, side: TradeSide, answer: str) -> str:
        await self.service.open_signal(side)
        return answer

    async def _ask_limit(self, chat_id: int, side: TradeSide) -> None:
        prompt = texts.LIMIT_PROMPT.format(side=side)
        await self._ask(chat_id, prompt, PendingReply(PendingReplyKind.LIMIT_ENTRY, side=side))

    async def _ask(self, chat_id: int, prompt: str, reply: PendingReply) -> None:
        message_id = await self.sender.send_message(chat_id, prompt, force_reply=True)
        self.pending_replies.put(message_id, reply)

    def _canned(self, text: str, answer: str) -> Callable[[int], Awaitable[str]]:
        async def post(chat_id: int) -> str:
            await self.service.post_text(text)
            return answer
        return post

    async def _price(self) -> str:
        await self.service.post_live_price()
        return "Price sent"

    async def _reset(self) -> str:
        await self.service.reset()
        return "Reset done"

    async def _limit_reply(self, chat_id: int, side: TradeSide, text: str) -> None:
        try:
            price = parse_price(text)
        except ValueError:
            await self.sender.send_message(chat_id, texts.INVALID_PRICE)
            return

        await self.service.open_signal(side, price)
        await self.sender.send_message(chat_id, texts.LIMIT_POSTED.format(side=side, price=fmt(price)))

    async def _tp_sl_reply(self, chat_id: int, text: str) -> None:
        try:
            take_profit, stop_loss = parse_pair(text)
        except ValueError:
            await self.sender.send_message(chat_id, texts.INVALID_TP_SL)
            return

        if not await self.service.override_tp_sl(take_profit, stop_loss):
            await self.sender.send_message(chat_id, texts.NO_ACTIVE_SIGNAL)

    async def _lot_reply(self, chat_id: int, text: str) -> None:
        try:
            balance, risk_percent = parse_pair(text)
        except ValueError:
            await self.sender.send_message(chat_id, texts.INVALID_LOT)
            return

        await self.service.post_lot_suggestion(balance, risk_percent)

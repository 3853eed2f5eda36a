"""
Telegram bot client for GoldSignal.
Connects as a bot using Telethon, delivers control panel events to the
command router and posts channel notifications.
"""

from typing import Optional, Union

import structlog
from telethon import Button, TelegramClient as TelethonClient, events

from .commands import CommandRouter, Keyboard

logger = structlog.get_logger(__name__)

START_PATTERN = r"^/(start|help)(@\w+)?\b"


def parse_channel_id(channel_id: Union[str, int]) -> Union[str, int]:
    """Convert a configured channel id to what Telethon expects.

    Numeric ids such as -1003010980066 become ints, usernames stay strings.
    """
    if isinstance(channel_id, int):
        return channel_id
    value = str(channel_id).strip()
    if value.lstrip("-").isdigit():
        return int(value)
    return value


class BotClient:
    """Manages the Telegram bot connection and its event handlers."""

    def __init__(
        self,
        api_id: int,
        api_hash: str,
        bot_token: str,
        channel_id: Union[str, int],
        session_path: Optional[str] = None,
    ) -> None:
        """Initialize the bot client.

        Args:
            api_id: Telegram API ID from https://my.telegram.org
            api_hash: Telegram API hash from https://my.telegram.org
            bot_token: Token issued by @BotFather
            channel_id: Channel receiving signals, -100xxxxxxxxxx or username
            session_path: Optional session file; in-memory session when omitted
        """
        self.api_id = api_id
        self.api_hash = api_hash
        self.bot_token = bot_token
        self.channel_id = parse_channel_id(channel_id)
        self.session_path = session_path
        self.router: Optional[CommandRouter] = None
        self.client: Optional[TelethonClient] = None
        self._is_connected = False

    def attach(self, router: CommandRouter) -> None:
        """Set the router receiving control panel events."""
        self.router = router

    async def connect(self) -> None:
        """Log in as the bot and register event handlers."""
        if self._is_connected:
            logger.warning("already_connected")
            return
        if self.router is None:
            raise RuntimeError("Command router not attached")

        self.client = TelethonClient(
            self.session_path,
            self.api_id,
            self.api_hash,
            device_model="GoldSignal",
            system_version="Python",
            app_version="1.0.0",
        )
        await self.client.start(bot_token=self.bot_token)

        self.client.add_event_handler(self._on_start, events.NewMessage(pattern=START_PATTERN))
        self.client.add_event_handler(self._on_callback, events.CallbackQuery())
        self.client.add_event_handler(self._on_message, events.NewMessage(incoming=True))

        self._is_connected = True
        logger.info("telegram_connected", channel_id=self.channel_id)

    async def disconnect(self) -> None:
        """Safely disconnect from Telegram."""
        if not self._is_connected or not self.client:
            return

        try:
            await self.client.disconnect()
            self._is_connected = False
            logger.info("telegram_disconnected")
        except Exception as e:
            logger.error("disconnect_error", error=str(e))
            raise

    async def run_until_disconnected(self) -> None:
        """Block until the client disconnects."""
        if not self.client:
            raise RuntimeError("Client not initialized")
        await self.client.run_until_disconnected()

    async def notify(self, text: str) -> None:
        """Post a message to the signal channel.

        Send failures are logged and dropped.
        """
        if not self.client:
            logger.error("notify_without_client")
            return
        try:
            await self.client.send_message(self.channel_id, text)
            logger.debug("channel_message_sent", channel_id=self.channel_id)
        except Exception as e:
            logger.error(
                "channel_message_failed",
                channel_id=self.channel_id,
                error=str(e),
                error_type=type(e).__name__
            )

    async def send_message(
        self,
        chat_id: int,
        text: str,
        keyboard: Optional[Keyboard] = None,
        force_reply: bool = False
    ) -> int:
        """Send a message to a chat.

        Args:
            chat_id: Destination chat
            text: Message text
            keyboard: Optional inline keyboard rows of (label, action id)
            force_reply: Ask the client to open a reply to this message

        Returns:
            Id of the sent message
        """
        if not self.client:
            raise RuntimeError("Client not initialized")

        buttons = None
        if keyboard:
            buttons = [
                [Button.inline(label, data=action.encode()) for label, action in row]
                for row in keyboard
            ]
        elif force_reply:
            buttons = Button.force_reply()

        message = await self.client.send_message(chat_id, text, buttons=buttons)
        return message.id

    async def _on_start(self, event: events.NewMessage.Event) -> None:
        try:
            await self.router.handle_start(event.chat_id)
        except Exception as e:
            logger.error("start_handler_error", error=str(e), chat_id=event.chat_id)

    async def _on_callback(self, event: events.CallbackQuery.Event) -> None:
        action = event.data.decode(errors="replace") if event.data else ""
        try:
            answer = await self.router.handle_action(event.chat_id, action)
            await event.answer(answer)
        except Exception as e:
            logger.error("callback_handler_error", error=str(e), action=action, chat_id=event.chat_id)

    async def _on_message(self, event: events.NewMessage.Event) -> None:
        reply_to_id = event.message.reply_to_msg_id if event.message else None
        if not reply_to_id:
            return

        try:
            await self.router.handle_reply(event.chat_id, reply_to_id, event.raw_text or "")
        except Exception as e:
            logger.error(
                "reply_handler_error",
                error=str(e),
                message_id=getattr(event.message, "id", "unknown")
            )

    @property
    def is_connected(self) -> bool:
        """Check if the bot is connected to Telegram."""
        return self._is_connected

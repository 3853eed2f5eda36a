"""Tests for the control panel command router."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from goldsignal.common.types import PendingReplyKind, TradeSide
from goldsignal.signals.service import SignalService
from goldsignal.telegram import texts
from goldsignal.telegram.commands import CommandRouter
from goldsignal.telegram.pending_replies import PendingReplies

CHAT_ID = 555


@pytest.fixture
def sender():
    """Mock transport returning increasing message ids."""
    sender = AsyncMock()
    sender.send_message = AsyncMock(side_effect=range(1000, 2000))
    return sender


@pytest.fixture
def service(price_source, notify):
    """Create a signal service with mocked price and notifier."""
    return SignalService(price_source=price_source, notify=notify)


@pytest.fixture
def router(service, sender):
    """Create a command router."""
    return CommandRouter(service=service, sender=sender, pending_replies=PendingReplies())


def last_chat_text(sender):
    """Text of the last message sent to the operator chat."""
    return sender.send_message.await_args.args[1]


@pytest.mark.asyncio
async def test_start_shows_control_panel(router, sender):
    """Test /start sends the 14 button panel."""
    await router.handle_start(CHAT_ID)

    args, kwargs = sender.send_message.await_args
    assert args == (CHAT_ID, texts.CONTROL_PANEL_TITLE)
    buttons = [action for row in kwargs["keyboard"] for _, action in row]
    assert len(buttons) == 14
    assert set(buttons) == set(router.actions)


@pytest.mark.asyncio
@pytest.mark.parametrize("action,side,answer", [
    ("buy", TradeSide.BUY, "BUY sent"),
    ("sell", TradeSide.SELL, "SELL sent"),
    ("again_buy", TradeSide.BUY, "Again BUY sent"),
    ("again_sell", TradeSide.SELL, "Again SELL sent"),
])
async def test_market_actions_open_signal(router, service, notify, action, side, answer):
    """Market buttons open a signal at the live price."""
    assert await router.handle_action(CHAT_ID, action) == answer

    snapshot = service.snapshot()
    assert snapshot.active
    assert snapshot.side == side
    assert snapshot.entry == Decimal("3375.00")
    notify.assert_awaited_once()


@pytest.mark.asyncio
async def test_limit_flow(router, service, sender, notify):
    """Limit button prompts for a price and the reply opens the signal."""
    assert await router.handle_action(CHAT_ID, "limit_sell") is None

    args, kwargs = sender.send_message.await_args
    assert args == (CHAT_ID, "✏️ Send limit entry price for SELL (e.g., 1930.50)")
    assert kwargs["force_reply"] is True
    prompt_id = 1000

    assert await router.handle_reply(CHAT_ID, prompt_id, "1930.5") is True

    snapshot = service.snapshot()
    assert snapshot.side == TradeSide.SELL
    assert snapshot.entry == Decimal("1930.5")
    notify.assert_awaited_once()
    assert last_chat_text(sender) == "⏳ Limit SELL signal posted at 1930.50"


@pytest.mark.asyncio
async def test_limit_reply_invalid_price(router, service, sender, notify):
    """Invalid prices are rejected without touching the trade."""
    await router.handle_action(CHAT_ID, "limit_buy")

    await router.handle_reply(CHAT_ID, 1000, "abc")

    assert last_chat_text(sender) == texts.INVALID_PRICE
    assert not service.snapshot().active
    notify.assert_not_called()


@pytest.mark.asyncio
async def test_prompt_consumed_by_invalid_reply(router, sender):
    """A prompt answers once, even when the answer was invalid."""
    await router.handle_action(CHAT_ID, "limit_buy")

    assert await router.handle_reply(CHAT_ID, 1000, "abc") is True
    assert await router.handle_reply(CHAT_ID, 1000, "1930") is False


@pytest.mark.asyncio
async def test_reply_to_unknown_message(router, sender, notify):
    """Replies to other messages are ignored."""
    assert await router.handle_reply(CHAT_ID, 99, "1930") is False
    sender.send_message.assert_not_called()
    notify.assert_not_called()


@pytest.mark.asyncio
async def test_tp_sl_flow(router, service, sender, notify):
    """Update TP/SL applies a typed pair to the active trade."""
    await router.handle_action(CHAT_ID, "buy")
    notify.reset_mock()

    await router.handle_action(CHAT_ID, "update_tpsl")
    assert last_chat_text(sender) == texts.TP_SL_PROMPT
    assert router.pending_replies.take(1000).kind == PendingReplyKind.TP_SL_OVERRIDE

    await router.handle_action(CHAT_ID, "update_tpsl")
    await router.handle_reply(CHAT_ID, 1001, "3390.50 3370.25")

    assert service.trade_state.take_profit == Decimal("3390.50")
    assert service.trade_state.stop_loss == Decimal("3370.25")
    notify.assert_awaited_once()


@pytest.mark.asyncio
async def test_tp_sl_without_active_signal(router, service, sender, notify):
    """Test TP/SL update with nothing open."""
    await router.handle_action(CHAT_ID, "update_tpsl")
    await router.handle_reply(CHAT_ID, 1000, "3390 3370")

    assert last_chat_text(sender) == texts.NO_ACTIVE_SIGNAL
    notify.assert_not_called()


@pytest.mark.asyncio
async def test_tp_sl_malformed(router, service, sender):
    """Test malformed TP/SL input leaves the trade unchanged."""
    await router.handle_action(CHAT_ID, "buy")
    await router.handle_action(CHAT_ID, "update_tpsl")
    await router.handle_reply(CHAT_ID, 1000, "3390")

    assert last_chat_text(sender) == texts.INVALID_TP_SL
    assert service.trade_state.take_profit == Decimal("3385.00")
    assert service.trade_state.stop_loss == Decimal("3365.00")


@pytest.mark.asyncio
async def test_lot_flow(router, sender, notify):
    """Calculate Lot posts the suggestion to the channel."""
    await router.handle_action(CHAT_ID, "calc_lot")
    assert last_chat_text(sender) == texts.LOT_PROMPT

    await router.handle_reply(CHAT_ID, 1000, "10000 1")

    message = notify.await_args.args[0]
    assert "Lot Calculation" in message
    assert "Suggested Lot: 0.01" in message


@pytest.mark.asyncio
async def test_lot_malformed(router, sender, notify):
    """Test malformed lot input."""
    await router.handle_action(CHAT_ID, "calc_lot")
    await router.handle_reply(CHAT_ID, 1000, "1000")

    assert last_chat_text(sender) == texts.INVALID_LOT
    notify.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize("action", ["morning", "psych", "daily", "weekly"])
async def test_canned_posts(router, notify, action):
    """Canned buttons post their text to the channel."""
    text, answer = texts.CANNED_POSTS[action]

    assert await router.handle_action(CHAT_ID, action) == answer
    notify.assert_awaited_once_with(text)


@pytest.mark.asyncio
async def test_price_check(router, notify):
    """Test the price check button."""
    assert await router.handle_action(CHAT_ID, "price") == "Price sent"
    notify.assert_awaited_once_with("💰 XAUUSD Live Price: 3375.00")


@pytest.mark.asyncio
async def test_reset(router, service):
    """Test the reset button."""
    await router.handle_action(CHAT_ID, "sell")
    service.trade_state.record_milestone(20)

    assert await router.handle_action(CHAT_ID, "reset") == "Reset done"

    snapshot = service.snapshot()
    assert not snapshot.active
    assert snapshot.milestones_reached == frozenset()


@pytest.mark.asyncio
async def test_unknown_action(router, sender, notify):
    """Unknown buttons are ignored."""
    assert await router.handle_action(CHAT_ID, "nope") is None
    sender.send_message.assert_not_called()
    notify.assert_not_called()


@pytest.mark.asyncio
async def test_action_errors_are_contained(router, price_source):
    """Unexpected failures are logged, not raised."""
    price_source.fetch_price.side_effect = RuntimeError("boom")

    assert await router.handle_action(CHAT_ID, "buy") is None


@pytest.mark.asyncio
async def test_reply_errors_are_contained(router, service, notify):
    """Unexpected failures in reply handling are logged, not raised."""
    await router.handle_action(CHAT_ID, "calc_lot")
    notify.side_effect = RuntimeError("send failed")

    assert await router.handle_reply(CHAT_ID, 1000, "1000 2") is True

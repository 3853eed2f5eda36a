"""Channel message templates for signals and milestone updates."""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from goldsignal.common.types import TradeSide
from .calculator import MILESTONES, Number, to_decimal

DIVIDER = "─" * 28

MONEY_MANAGEMENT_GUIDE = (
    "💰 Money Management Guide",
    "▫ $100 = 0.01 lot",
    "▫ $200 = 0.02 lot",
    "▫ $300 = 0.03 lot",
    "▫ $500 = 0.05 lot",
    "▫ $1000 = 0.10 lot",
)

RISK_DISCLAIMER = (
    "⚠️ Risk Disclaimer",
    "Trading carries high risk. Invest only what you can afford to lose.",
    "Proper risk management is the key to long-term success.",
)


@dataclass(frozen=True)
class MilestoneStage:
    """Icon and headline for one rung of the milestone ladder."""
    icon: str
    text: str


# One stage per milestone, stage N belongs to MILESTONES[N - 1]
MILESTONE_STAGES = (
    MilestoneStage("✅", "Stay strong!"),
    MilestoneStage("🚀", "SL moved to breakeven 🛡️"),
    MilestoneStage("💎", "Risk-free trade 🎉"),
    MilestoneStage("⚡", "Trailing SL secured 🔒"),
    MilestoneStage("🏆", "Take Profit Reached! 💰🔥"),
)


def fmt(value: Number) -> str:
    """Format a price with two decimals."""
    return str(to_decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def signal_message(
    pair: str,
    side: TradeSide,
    entry: Number,
    take_profit: Number,
    stop_loss: Number,
    change_percent: Optional[Decimal] = None
) -> str:
    """Render the premium signal post."""
    move = f"{change_percent}%" if change_percent is not None else "—"
    side_icon = "🟢" if side == TradeSide.BUY else "🔴"
    lines = [
        "🚀 Premium Trading Signal 🚀",
        DIVIDER,
        "",
        f"📊 Pair: {pair}",
        f"{side_icon} Type: {side}",
        f"💲 Entry: {fmt(entry)}",
        f"🎯 Take Profit (TP): {fmt(take_profit)}",
        f"🛑 Stop Loss (SL): {fmt(stop_loss)}",
        f"📈 Move Potential: {move}",
        "",
        DIVIDER,
        *MONEY_MANAGEMENT_GUIDE,
        "",
        DIVIDER,
        *RISK_DISCLAIMER,
    ]
    return "\n".join(lines)


def milestone_stage(milestone: int) -> int:
    """Return the 1-based stage index of a milestone on the ladder."""
    return MILESTONES.index(milestone) + 1


def milestone_message(side: TradeSide, entry: Number, price: Number, milestone: int) -> str:
    """Render the progress update for a crossed milestone.

    Args:
        side: Trade direction
        entry: Entry price
        price: Price that crossed the milestone
        milestone: Pip threshold crossed

    Returns:
        Message text; each stage has its own wording
    """
    stage = milestone_stage(milestone)
    info = MILESTONE_STAGES[stage - 1]
    trend = "📈" if side == TradeSide.BUY else "📉"

    lines = [
        f"{info.icon} Price moved +{milestone} pips {trend}",
        f"Entry: {fmt(entry)} → Now: {fmt(price)}",
        info.text,
    ]
    if stage == 2:
        lines.append(f"🛑 New SL: {fmt(entry)}")
    if stage == len(MILESTONE_STAGES):
        lines.append(f"Total Gain: +{milestone} pips")
        lines.append("Trade closed ✅")
    return "\n".join(lines)


def tp_sl_update_message(take_profit: Number, stop_loss: Number) -> str:
    """Render the manual TP/SL update post."""
    return f"✏️ Update TP/SL:\n🎯 TP: {fmt(take_profit)}\n🛑 SL: {fmt(stop_loss)}"


def lot_message(balance: Number, risk_percent: Number, lot: Number) -> str:
    """Render the lot calculation post."""
    lot = to_decimal(lot).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return "\n".join([
        "📊 Lot Calculation",
        f"💵 Balance: ${balance}",
        f"⚖️ Risk: {risk_percent}%",
        f"🎯 Suggested Lot: {lot}",
    ])


def price_message(price: Number, change_percent: Optional[Decimal] = None) -> str:
    """Render the live price check post."""
    text = f"💰 XAUUSD Live Price: {fmt(price)}"
    if change_percent is not None:
        text += f" ({change_percent}%)"
    return text

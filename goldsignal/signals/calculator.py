"""Signal calculator module.

Pure price arithmetic for the gold signal:
- Take profit / stop loss levels from an entry price
- Pip movement between entry and current price
- Lot size suggestion from balance and risk
"""

from decimal import Decimal, ROUND_FLOOR
from typing import Tuple, Union

from goldsignal.common.types import TradeSide

Number = Union[Decimal, float, int, str]

PIP_VALUE = Decimal("0.1")  # 3375.0 -> 3376.0 is 10 pips
TP_SL_DISTANCE_PIPS = 100
MILESTONES: Tuple[int, ...] = (20, 40, 60, 80, 100)
BREAKEVEN_MILESTONE = 40
TAKE_PROFIT_MILESTONE = 100

# $100 of risk is 0.01 lot
RISK_PER_MICRO_LOT = Decimal("100")
MICRO_LOT = Decimal("0.01")


def to_decimal(value: Number) -> Decimal:
    """Convert a price-like value to Decimal without float artefacts."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def compute_tp_sl(entry: Number, side: TradeSide) -> Tuple[Decimal, Decimal]:
    """Compute take profit and stop loss for a new signal.

    Both levels sit TP_SL_DISTANCE_PIPS away from the entry.

    Args:
        entry: Entry price
        side: Trade direction

    Returns:
        Tuple of (take_profit, stop_loss)
    """
    entry = to_decimal(entry)
    delta = TP_SL_DISTANCE_PIPS * PIP_VALUE

    if side == TradeSide.BUY:
        return entry + delta, entry - delta
    return entry - delta, entry + delta


def pips_moved(entry: Number, current: Number, side: TradeSide) -> int:
    """Compute whole pips moved in the trade's favour.

    Fractional pips are floored so a milestone only counts once it has
    actually been crossed. Adverse movement yields a negative number.

    Args:
        entry: Entry price
        current: Current market price
        side: Trade direction

    Returns:
        Integer pip movement
    """
    entry = to_decimal(entry)
    current = to_decimal(current)

    if side == TradeSide.BUY:
        delta = current - entry
    else:
        delta = entry - current

    return int((delta / PIP_VALUE).to_integral_value(rounding=ROUND_FLOOR))


def compute_lot_suggestion(balance: Number, risk_percent: Number) -> Decimal:
    """Suggest a lot size for the given balance and risk percentage.

    Args:
        balance: Account balance in dollars
        risk_percent: Percentage of the balance to risk

    Returns:
        Suggested lot size (unrounded)

    Raises:
        ValueError: If balance or risk is not positive
    """
    balance = to_decimal(balance)
    risk_percent = to_decimal(risk_percent)

    if balance <= 0:
        raise ValueError(f"Balance must be positive, got {balance}")
    if risk_percent <= 0:
        raise ValueError(f"Risk percent must be positive, got {risk_percent}")

    risk_amount = balance * risk_percent / 100
    return risk_amount / RISK_PER_MICRO_LOT * MICRO_LOT

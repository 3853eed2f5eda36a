"""Signal lifecycle for the gold signal bot.

This package provides functionality for:
- Computing take profit, stop loss, pips and lot sizes
- Tracking the single active trade
- Watching price milestones and posting progress
"""

from .calculator import (
    MILESTONES,
    PIP_VALUE,
    compute_lot_suggestion,
    compute_tp_sl,
    pips_moved,
)
from .trade_state import Trade, TradeState
from .service import SignalService
from .watcher import MilestoneWatcher

__all__ = [
    'MILESTONES',
    'PIP_VALUE',
    'compute_lot_suggestion',
    'compute_tp_sl',
    'pips_moved',
    'Trade',
    'TradeState',
    'SignalService',
    'MilestoneWatcher'
]

"""Control panel texts and canned channel posts."""

from typing import List, Tuple

# Rows of (button label, action id)
CONTROL_PANEL: List[List[Tuple[str, str]]] = [
    [("🚀 Market BUY", "buy"), ("📉 Market SELL", "sell")],
    [("🔄 Again BUY", "again_buy"), ("🔄 Again SELL", "again_sell")],
    [("⏳ Limit BUY", "limit_buy"), ("⏳ Limit SELL", "limit_sell")],
    [("✏️ Update TP/SL", "update_tpsl"), ("📊 Calculate Lot", "calc_lot")],
    [("🌅 Morning Msg", "morning"), ("🧠 Psychology Tip", "psych")],
    [("📊 Daily Report", "daily"), ("📈 Weekly Report", "weekly")],
    [("💰 Price Check", "price"), ("❌ Cancel/Reset", "reset")],
]

CONTROL_PANEL_TITLE = "📌 Gold Signal Control Panel — press a button:"

LIMIT_PROMPT = "✏️ Send limit entry price for {side} (e.g., 1930.50)"
TP_SL_PROMPT = '✏️ Send: TP SL (e.g., "1935.50 1915.50")'
LOT_PROMPT = '✏️ Send: Balance Risk% (e.g., "1000 2")'

LIMIT_POSTED = "⏳ Limit {side} signal posted at {price}"

INVALID_PRICE = "❌ Invalid price"
INVALID_TP_SL = '❌ Send both TP and SL (e.g., "1935.50 1915.50")'
INVALID_LOT = '❌ Send "Balance Risk%" e.g., "1000 2"'
NO_ACTIVE_SIGNAL = "ℹ️ No active signal. Start BUY/SELL first."

# Canned channel posts keyed by action id, with the callback answer text
CANNED_POSTS = {
    "morning": (
        "\n".join([
            "🌅 In the name of Allah, we begin today.",
            "Stay disciplined, trust your plan, and manage risk.",
            "May your trades be guided with wisdom. 🤲",
        ]),
        "Morning sent",
    ),
    "psych": (
        "🧠 Trading Psychology:\n"
        "Patience beats impulse. Wait for confirmation, respect your stop, and let winners run.",
        "Psychology sent",
    ),
    "daily": (
        "📊 Daily Report:\n"
        "Signals shared, risk observed, and discipline maintained. Remember to journal each trade.",
        "Daily sent",
    ),
    "weekly": (
        "📈 Weekly Report:\n"
        "Review your entries, exits, and psychology. Small consistent gains build big results.",
        "Weekly sent",
    ),
}

"""
GoldSignal: Telegram gold signal bot
Posts XAUUSD trading signals and milestone updates to a Telegram channel.
"""

__version__ = "0.1.0"
__author__ = "GoldSignal Team"

"""Parsing of operator free-text replies."""

from decimal import Decimal, InvalidOperation
from typing import Tuple


def parse_number(token: str) -> Decimal:
    """Parse a single positive number.

    Raises:
        ValueError: If the token is not a finite, positive number
    """
    try:
        value = Decimal(token.strip())
    except (InvalidOperation, AttributeError):
        raise ValueError(f"Not a number: {token!r}")

    if not value.is_finite() or value <= 0:
        raise ValueError(f"Invalid value: {token!r}")
    return value


def parse_price(text: str) -> Decimal:
    """Parse a price reply such as "1930.50"."""
    if not text or not text.strip():
        raise ValueError("Empty price")
    return parse_number(text)


def parse_pair(text: str) -> Tuple[Decimal, Decimal]:
    """Parse a two-number reply such as "1935.50 1915.50" or "1000 2".

    Extra tokens after the first two are ignored.
    """
    parts = (text or "").split()
    if len(parts) < 2:
        raise ValueError(f"Expected two numbers, got {text!r}")
    return parse_number(parts[0]), parse_number(parts[1])

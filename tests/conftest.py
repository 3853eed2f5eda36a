"""Pytest configuration and common fixtures.

This module contains pytest configuration and common fixtures used across
test modules. It also ensures the goldsignal package is in the Python path.
"""

import sys
from decimal import Decimal
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

# Add the project root directory to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from goldsignal.pricing.price_source import PriceQuote  # noqa: E402


# Configure pytest-asyncio
def pytest_configure(config):
    """Configure pytest-asyncio to use function scope for event loops."""
    config.option.asyncio_mode = "strict"
    config.option.asyncio_default_fixture_loop_scope = "function"


@pytest.fixture
def price_source():
    """Price source whose quotes are set per test."""
    source = AsyncMock()
    source.fetch_price = AsyncMock(return_value=PriceQuote(price=Decimal("3375.00")))
    return source


@pytest.fixture
def notify():
    """Notifier capturing channel posts."""
    return AsyncMock()


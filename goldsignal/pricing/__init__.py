"""Gold price feed.

This package provides:
- Live quote fetching from the quote provider
- Fallback pricing when the provider is unavailable
"""

from .price_source import PriceSource, PriceQuote, parse_quote

__all__ = ["PriceSource", "PriceQuote", "parse_quote"]

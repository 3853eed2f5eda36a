"""Gold price source.

Fetches the live XAUUSD quote from the quote provider over HTTP. Any
upstream failure degrades to a fixed fallback price so callers always
receive a usable quote.
"""

import asyncio
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

import aiohttp
import structlog

logger = structlog.get_logger(__name__)

DEFAULT_QUOTE_URL = "https://www.goldapi.io/api/XAU/USD"
DEFAULT_TIMEOUT_SECONDS = 8.0
DEFAULT_FALLBACK_PRICE = Decimal("3375.0")

# Fields tried in order when resolving the quote price
PRICE_FIELDS = ("price", "ask", "bid")


@dataclass(frozen=True)
class PriceQuote:
    """Result of a price fetch.

    A quote is always produced; is_fallback marks the degraded case.
    """
    price: Decimal
    change_percent: Optional[Decimal] = None
    is_fallback: bool = False


def _as_decimal(value: Any) -> Optional[Decimal]:
    """Convert a JSON number to Decimal, None if it is not numeric."""
    if value is None or isinstance(value, bool):
        return None
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not result.is_finite():
        return None
    return result


def parse_quote(data: Dict[str, Any]) -> PriceQuote:
    """Build a quote from the provider's JSON body.

    The first non-zero value among price, ask and bid wins.

    Args:
        data: Decoded JSON response

    Returns:
        PriceQuote with the resolved price and change percent

    Raises:
        ValueError: If no usable price is present
    """
    if not isinstance(data, dict):
        raise ValueError(f"Unexpected quote payload: {type(data).__name__}")

    price = None
    for name in PRICE_FIELDS:
        raw = data.get(name)
        if raw:
            price = _as_decimal(raw)
            break

    if price is None or price <= 0:
        raise ValueError("Bad price from API")

    return PriceQuote(price=price, change_percent=_as_decimal(data.get("chp")))


class PriceSource:
    """Fetches live gold quotes with fallback on failure."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        url: str = DEFAULT_QUOTE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        fallback_price: Decimal = DEFAULT_FALLBACK_PRICE
    ):
        """Initialize price source.

        Args:
            api_key: Quote provider access token; without it every fetch
                returns the fallback
            url: Quote endpoint
            timeout: Request timeout in seconds
            fallback_price: Price returned when the provider is unavailable
        """
        self.api_key = api_key or None
        self.url = url
        self.timeout = timeout
        self.fallback_price = Decimal(str(fallback_price))

    @property
    def fallback_quote(self) -> PriceQuote:
        """Quote returned when the provider cannot be used."""
        return PriceQuote(price=self.fallback_price, change_percent=None, is_fallback=True)

    async def fetch_price(self) -> PriceQuote:
        """Fetch the current gold price.

        Never raises: failures are logged and the fallback quote returned.

        Returns:
            PriceQuote
        """
        if not self.api_key:
            logger.warning("quote_api_key_missing", fallback_price=str(self.fallback_price))
            return self.fallback_quote

        try:
            data = await self._request()
            quote = parse_quote(data)
            logger.debug(
                "quote_fetched",
                price=str(quote.price),
                change_percent=str(quote.change_percent)
            )
            return quote
        except asyncio.TimeoutError:
            logger.warning("quote_fetch_timeout", timeout=self.timeout)
        except Exception as e:
            logger.warning(
                "quote_fetch_failed",
                error=str(e),
                error_type=type(e).__name__,
                fallback_price=str(self.fallback_price)
            )
        return self.fallback_quote

    async def _request(self) -> Dict[str, Any]:
        """Perform the HTTP request against the quote provider.

        Raises:
            aiohttp.ClientError: On connection problems or non-2xx status
            asyncio.TimeoutError: If the provider does not answer in time
        """
        headers = {
            "x-access-token": self.api_key,
            "Content-Type": "application/json",
            "Accept": "application/json"
        }
        timeout = aiohttp.ClientTimeout(total=self.timeout)

        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(self.url, headers=headers) as response:
                response.raise_for_status()
                return await response.json(content_type=None)

"""Alpha Vantage client for live company overview and quote data.

Issues the OVERVIEW and GLOBAL_QUOTE calls for a symbol concurrently and
returns both raw payloads. Parsing and fallback happen in the merge; this
client only classifies provider failures.
"""

import asyncio
import json
import logging
from typing import Any

import httpx

from ..errors import ApiUnavailable, ProviderError, RateLimited
from ..models import OverviewFields, QuoteFields

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://www.alphavantage.co/query"


def to_provider_symbol(symbol: str) -> str:
    """Strip the exchange suffix: ``RELIANCE.NS`` -> ``RELIANCE``."""
    return symbol.split(".", 1)[0]


class AlphaVantageClient:
    """Async HTTP client for the Alpha Vantage query endpoint.

    No retries: every failure surfaces as a typed LiveDataError.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 15.0,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize Alpha Vantage client.

        Args:
            api_key: Alpha Vantage API key ("demo" works for sample symbols only)
            base_url: Query endpoint URL
            timeout: Request timeout in seconds
            client: Optional pre-built httpx client (tests inject a MockTransport)
        """
        self.api_key = api_key
        self.base_url = base_url
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def _query(self, function: str, symbol: str) -> dict[str, Any]:
        """Call one Alpha Vantage function and classify the payload.

        Raises:
            ApiUnavailable: Transport error, non-2xx status or non-JSON body
            ProviderError: Payload carries an ``Error Message``
            RateLimited: Payload carries a rate-limit ``Note``
        """
        params = {"function": function, "symbol": symbol, "apikey": self.api_key}

        try:
            response = await self.client.get(self.base_url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Alpha Vantage {function} returned HTTP {e.response.status_code}")
            raise ApiUnavailable(
                "Failed to fetch data from the financial API.", symbol=symbol
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Alpha Vantage {function} request failed: {e}")
            raise ApiUnavailable(
                "Failed to fetch data from the financial API.", symbol=symbol
            ) from e
        except json.JSONDecodeError as e:
            logger.error(f"Alpha Vantage {function} returned a non-JSON body")
            raise ApiUnavailable(
                "Financial API returned an unreadable response.", symbol=symbol
            ) from e

        if not isinstance(data, dict):
            raise ApiUnavailable("Financial API returned an unexpected payload.", symbol=symbol)

        if data.get("Error Message"):
            logger.warning(f"Alpha Vantage {function} error for {symbol}: {data['Error Message']}")
            raise ProviderError(str(data["Error Message"]), symbol=symbol)

        if data.get("Note"):
            logger.warning(f"Alpha Vantage rate limit note: {data['Note']}")
            raise RateLimited(
                "API call frequency limit reached. Please try again in a moment.",
                symbol=symbol,
            )

        if data.get("Information"):
            # Demo-key and premium notices: no data, every field falls back
            logger.warning(f"Alpha Vantage {function} information for {symbol}: {data['Information']}")

        return data

    async def get_overview(self, symbol: str) -> OverviewFields:
        """Company overview (name, sector, market cap, ratios)."""
        return await self._query("OVERVIEW", to_provider_symbol(symbol))

    async def get_global_quote(self, symbol: str) -> QuoteFields:
        """Latest quote. Price lives under ``Global Quote`` -> ``05. price``."""
        return await self._query("GLOBAL_QUOTE", to_provider_symbol(symbol))

    async def fetch_overview_and_quote(self, symbol: str) -> tuple[OverviewFields, QuoteFields]:
        """Fetch overview and quote concurrently; both must succeed.

        Raises:
            LiveDataError: From whichever call failed first
        """
        logger.info(f"Fetching live overview and quote for {symbol}")
        overview, quote = await asyncio.gather(
            self.get_overview(symbol),
            self.get_global_quote(symbol),
        )
        return overview, quote

    async def close(self) -> None:
        """Close HTTP client."""
        await self.client.aclose()
        logger.info("Alpha Vantage client closed")

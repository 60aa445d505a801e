"""
Async HTTP clients for the quote gateway and the price listing API.

Features:
- Single session with connection pooling
- Fast JSON parsing with orjson
- Integrated rate limiting
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from decimal import Decimal
from typing import Any

import aiohttp
import orjson

from arbcycle.config.constants import (
    COINMARKETCAP_API_URL,
    COINMARKETCAP_KEY_HEADER,
    DEFAULT_QUOTE_API_URL,
    ENDPOINT_EXPECTED_RATE,
    ENDPOINT_LISTINGS_LATEST,
)
from arbcycle.core.types import Asset
from arbcycle.exchange.models import ExpectedRate, ListingsResponse
from arbcycle.exchange.rate_limiter import RateLimiter


logger = logging.getLogger(__name__)


class QuoteClientError(Exception):
    """Base exception for HTTP client errors."""

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class QuoteAPIError(QuoteClientError):
    """Exception for error responses returned by the API."""

    pass


class _JsonClient:
    """Shared session handling and response parsing."""

    def __init__(
        self,
        base_url: str,
        headers: dict[str, str] | None = None,
        rate_limiter: RateLimiter | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._headers = headers or {}
        self._rate_limiter = rate_limiter or RateLimiter()
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session."""
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                limit=50,
                keepalive_timeout=30,
                enable_cleanup_closed=True,
            )
            self._session = aiohttp.ClientSession(
                connector=connector,
                headers={"Accept": "application/json", **self._headers},
                timeout=self._timeout,
                json_serialize=lambda x: orjson.dumps(x).decode(),
            )

        return self._session

    async def close(self) -> None:
        """Close the client session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    @asynccontextmanager
    async def _request_context(self) -> AsyncIterator[aiohttp.ClientSession]:
        session = await self._get_session()
        try:
            yield session
        except aiohttp.ClientError as e:
            raise QuoteClientError(f"Network error: {e}") from e

    async def _get(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        """
        Make a rate-limited GET request.

        Raises:
            QuoteAPIError: On API error response.
            QuoteClientError: On network or parsing errors.
        """
        await self._rate_limiter.acquire()

        url = f"{self._base_url}{endpoint}"

        async with self._request_context() as session:
            async with session.get(url, params=params or {}) as response:
                return await self._handle_response(response)

    async def _handle_response(self, response: aiohttp.ClientResponse) -> Any:
        """Parse and validate response."""
        text = await response.text()

        try:
            data = orjson.loads(text)
        except orjson.JSONDecodeError as e:
            raise QuoteClientError(f"Invalid JSON response: {e}", code=response.status) from e

        if response.status >= 400:
            message = text
            if isinstance(data, dict):
                message = data.get("error") or data.get("msg") or text
            raise QuoteAPIError(f"API error {response.status}: {message}", code=response.status)

        return data


class QuoteClient(_JsonClient):
    """
    Expected-rate quote gateway client.

    Implements the RateSource protocol.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_QUOTE_API_URL,
        rate_limiter: RateLimiter | None = None,
        timeout: float = 10.0,
    ) -> None:
        super().__init__(base_url, rate_limiter=rate_limiter, timeout=timeout)

    async def get_quote(self, src: Asset, dst: Asset, src_amount: int) -> ExpectedRate:
        """
        Get the full quote for selling src_amount of src for dst.

        Args:
            src: Asset being sold.
            dst: Asset being bought.
            src_amount: Trade size in src base units.
        """
        params = {"src": src.id, "dst": dst.id, "qty": str(src_amount)}
        data = await self._get(ENDPOINT_EXPECTED_RATE, params)
        return ExpectedRate.model_validate(data)

    async def get_expected_rate(self, src: Asset, dst: Asset, src_amount: int) -> int:
        """Get the expected rate scaled by 10**18 (0 = no liquidity)."""
        quote = await self.get_quote(src, dst, src_amount)
        return quote.expected_rate

    async def __aenter__(self) -> "QuoteClient":
        await self._get_session()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()


class PriceClient(_JsonClient):
    """CoinMarketCap latest-listings client for USD prices."""

    def __init__(
        self,
        api_key: str,
        base_url: str = COINMARKETCAP_API_URL,
        rate_limiter: RateLimiter | None = None,
        timeout: float = 10.0,
    ) -> None:
        super().__init__(
            base_url,
            headers={COINMARKETCAP_KEY_HEADER: api_key},
            rate_limiter=rate_limiter,
            timeout=timeout,
        )

    async def get_listings(self, limit: int = 5000) -> ListingsResponse:
        """Get the latest listings ranked by market cap."""
        data = await self._get(ENDPOINT_LISTINGS_LATEST, {"limit": limit, "convert": "USD"})
        listings = ListingsResponse.model_validate(data)

        if listings.status.error_code:
            raise QuoteAPIError(
                f"Listings error {listings.status.error_code}: {listings.status.error_message}",
                code=listings.status.error_code,
            )

        return listings

    async def get_usd_prices(self) -> dict[str, Decimal]:
        """Get USD prices keyed by symbol."""
        listings = await self.get_listings()
        prices = listings.prices()
        logger.info(f"Loaded {len(prices)} USD prices")
        return prices

    async def __aenter__(self) -> "PriceClient":
        await self._get_session()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

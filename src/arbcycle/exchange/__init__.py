"""Rate source integration: quote and price clients, lazy fetching."""

from arbcycle.exchange.client import PriceClient, QuoteAPIError, QuoteClient, QuoteClientError
from arbcycle.exchange.fetcher import LazyRateFetcher
from arbcycle.exchange.models import ExpectedRate, ListingsResponse
from arbcycle.exchange.rate_limiter import RateLimiter


__all__ = [
    "ExpectedRate",
    "LazyRateFetcher",
    "ListingsResponse",
    "PriceClient",
    "QuoteAPIError",
    "QuoteClient",
    "QuoteClientError",
    "RateLimiter",
]

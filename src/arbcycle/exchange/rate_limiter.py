"""
Token bucket rate limiter for quote requests.

Seeding the graph fires one request per ordered asset pair at once;
the limiter spreads them out so the quote gateway is not flooded.
"""

import asyncio
import time
from dataclasses import dataclass, field

from arbcycle.config.constants import DEFAULT_REQUESTS_PER_SECOND


@dataclass
class TokenBucket:
    """
    Token bucket implementation for rate limiting.

    Tokens are added at a constant rate up to a maximum capacity.
    Each request consumes one or more tokens.
    """

    capacity: int
    refill_rate: float  # tokens per second
    tokens: float = field(init=False)
    last_refill: float = field(init=False)  # monotonic seconds
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False, repr=False)

    def __post_init__(self) -> None:
        """Initialize with full bucket."""
        self.tokens = float(self.capacity)
        self.last_refill = time.monotonic()

    def _refill(self) -> None:
        """Add tokens based on elapsed time."""
        now = time.monotonic()
        self.tokens = min(
            self.capacity,
            self.tokens + (now - self.last_refill) * self.refill_rate,
        )
        self.last_refill = now

    async def acquire(self, tokens: int = 1) -> None:
        """Acquire tokens, waiting until enough have accumulated."""
        async with self._lock:
            self._refill()

            if self.tokens < tokens:
                wait_seconds = (tokens - self.tokens) / self.refill_rate
                await asyncio.sleep(wait_seconds)
                self._refill()

            self.tokens -= tokens


class RateLimiter:
    """Request limiter with a burst capacity of twice the steady rate."""

    def __init__(self, requests_per_second: int = DEFAULT_REQUESTS_PER_SECOND) -> None:
        self._bucket = TokenBucket(
            capacity=requests_per_second * 2,
            refill_rate=float(requests_per_second),
        )

    async def acquire(self) -> None:
        """Wait for permission to send one request."""
        await self._bucket.acquire(1)

"""
Lazy rate fetching.

The cycle search is synchronous and never waits for I/O. When it walks
into an asset with no known edges it calls LazyRateFetcher.request(),
which schedules the quote on the running event loop and returns at once.
The rate lands in the store when the task completes, so only later
scans can see it.
"""

import asyncio
import logging

from arbcycle.config.constants import (
    DEFAULT_RATE_FETCH_RETRIES,
    DEFAULT_RATE_FETCH_TIMEOUT,
    RATE_FETCH_RETRY_DELAY,
)
from arbcycle.core.event_bus import Event, EventBus, EventType
from arbcycle.core.types import Asset, RateSource
from arbcycle.exchange.client import QuoteClientError
from arbcycle.strategy.rates import RateStore
from arbcycle.telemetry.metrics import MetricsCollector
from arbcycle.utils.time import LatencyTimer


logger = logging.getLogger(__name__)


class LazyRateFetcher:
    """
    Resolves missing graph edges through a RateSource.

    Requests for a pair that is already in flight are coalesced. Each
    quote attempt is bounded by a timeout and retried with exponential
    backoff before being given up on.
    """

    def __init__(
        self,
        source: RateSource,
        store: RateStore,
        event_bus: EventBus | None = None,
        metrics: MetricsCollector | None = None,
        timeout: float = DEFAULT_RATE_FETCH_TIMEOUT,
        retries: int = DEFAULT_RATE_FETCH_RETRIES,
        retry_delay: float = RATE_FETCH_RETRY_DELAY,
    ) -> None:
        """
        Initialize the fetcher.

        Args:
            source: Quote source to ask.
            store: Store that receives resolved rates.
            event_bus: Bus for RATE_* events.
            metrics: Optional metrics collector.
            timeout: Per-attempt timeout in seconds.
            retries: Attempts after the first failed one.
            retry_delay: Base backoff delay in seconds.
        """
        self._source = source
        self._store = store
        self._event_bus = event_bus or EventBus()
        self._metrics = metrics
        self._timeout = timeout
        self._retries = retries
        self._retry_delay = retry_delay
        self._in_flight: dict[tuple[Asset, Asset], asyncio.Task[int]] = {}

    def request(self, src: Asset, dst: Asset, amount: int) -> None:
        """
        Schedule a quote for src -> dst without waiting for it.

        Must be called from code running on the event loop.

        Raises:
            RuntimeError: If no event loop is running in this thread.
        """
        key = (src, dst)
        if key in self._in_flight:
            logger.debug(f"Quote {src.symbol}->{dst.symbol} already in flight")
            return

        loop = asyncio.get_running_loop()
        task = loop.create_task(self._resolve(src, dst, amount), name=f"rate:{src.symbol}->{dst.symbol}")
        self._in_flight[key] = task
        task.add_done_callback(lambda t: self._on_done(key, t))

        self._count("rate_requests")
        self._event_bus.publish_sync(Event(EventType.RATE_REQUESTED, key, source="fetcher"))

    async def fetch(self, src: Asset, dst: Asset, amount: int) -> int:
        """
        Fetch src -> dst now and store it.

        Used for eager seeding. Failures are logged and yield 0.
        """
        return await self._resolve(src, dst, amount)

    async def _resolve(self, src: Asset, dst: Asset, amount: int) -> int:
        attempts = self._retries + 1
        last_error: Exception | None = None

        for attempt in range(attempts):
            try:
                with LatencyTimer() as timer:
                    rate = await asyncio.wait_for(
                        self._source.get_expected_rate(src, dst, amount),
                        timeout=self._timeout,
                    )
            except (QuoteClientError, TimeoutError, ValueError) as e:
                last_error = e
                logger.debug(f"Quote {src.symbol}->{dst.symbol} attempt {attempt + 1}/{attempts} failed: {e}")
                if attempt + 1 < attempts:
                    await asyncio.sleep(self._retry_delay * 2**attempt)
                continue

            if self._metrics:
                self._metrics.record_latency("rate_fetch", timer.latency_us)

            if rate == 0:
                logger.debug(f"No quote for {src.symbol}->{dst.symbol}")
                self._count("rates_unquoted")
                return 0

            self._store.update_rate(src, dst, rate)
            self._count("rates_resolved")
            self._event_bus.publish_sync(
                Event(EventType.RATE_UPDATED, (src, dst, rate), source="fetcher")
            )
            return rate

        logger.warning(f"Giving up on quote {src.symbol}->{dst.symbol}: {last_error}")
        self._count("rate_fetch_failures")
        self._event_bus.publish_sync(
            Event(EventType.RATE_FETCH_FAILED, (src, dst, str(last_error)), source="fetcher")
        )
        return 0

    def _on_done(self, key: tuple[Asset, Asset], task: asyncio.Task[int]) -> None:
        self._in_flight.pop(key, None)

        if task.cancelled():
            return

        error = task.exception()
        if error is not None:
            src, dst = key
            logger.error(f"Unexpected error resolving {src.symbol}->{dst.symbol}: {error!r}")

    def _count(self, name: str) -> None:
        if self._metrics:
            self._metrics.increment_counter(name)

    async def drain(self) -> None:
        """Wait for every in-flight request to finish."""
        while self._in_flight:
            await asyncio.gather(*self._in_flight.values(), return_exceptions=True)

    async def cancel_all(self) -> None:
        """Cancel every in-flight request."""
        tasks = list(self._in_flight.values())
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._in_flight.clear()

    @property
    def pending(self) -> int:
        """Number of requests in flight."""
        return len(self._in_flight)

    def is_pending(self, src: Asset, dst: Asset) -> bool:
        return (src, dst) in self._in_flight

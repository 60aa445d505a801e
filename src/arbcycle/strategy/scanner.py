"""
Full-pass scan over every priced asset as a cycle origin.

Each origin starts with the same USD notional so that results are
comparable across assets of very different unit prices.
"""

import logging
from decimal import Decimal

from arbcycle.config.constants import DEFAULT_HOP_BUDGET, DEFAULT_NOTIONAL_USD
from arbcycle.core.event_bus import Event, EventBus, EventType
from arbcycle.core.exceptions import InvariantViolation
from arbcycle.core.types import Asset, ScanFailure, ScanReport, ScanResult, is_closing, route_profit
from arbcycle.strategy.rates import RateStore
from arbcycle.strategy.search import CycleSearch
from arbcycle.telemetry.metrics import MetricsCollector
from arbcycle.utils.time import LatencyTimer, get_timestamp_us
from arbcycle.utils.units import notional_amount


logger = logging.getLogger(__name__)


class ScanDriver:
    """
    Runs the cycle search once for every origin in the rate store.

    Results are published as ROUTE_FOUND events whatever their sign;
    the only filtering is the search's own acceptance test.
    """

    def __init__(
        self,
        store: RateStore,
        search: CycleSearch,
        event_bus: EventBus | None = None,
        metrics: MetricsCollector | None = None,
        hop_budget: int = DEFAULT_HOP_BUDGET,
        notional_usd: float = DEFAULT_NOTIONAL_USD,
    ) -> None:
        """
        Initialize the scan driver.

        Args:
            store: Rate graph whose sources are the candidate origins.
            search: Cycle search bound to the same store.
            event_bus: Bus to publish results on.
            metrics: Optional metrics collector.
            hop_budget: Intermediate hops allowed per route.
            notional_usd: USD value each origin starts with.
        """
        self._store = store
        self._search = search
        self._event_bus = event_bus or EventBus()
        self._metrics = metrics
        self._hop_budget = hop_budget
        self._notional_usd = Decimal(str(notional_usd))

    def start_amount(self, origin: Asset) -> int:
        """Base-unit amount of origin worth the configured notional."""
        return notional_amount(self._notional_usd, origin.price_usd, origin.decimals)

    def scan_origin(self, origin: Asset) -> ScanResult | None:
        """
        Search for the best cycle from a single origin.

        Returns:
            ScanResult, or None if no closing route was accepted.

        Raises:
            InvariantViolation: If the returned route does not close.
        """
        amount = self.start_amount(origin)
        if amount == 0:
            logger.debug(f"Notional rounds to zero for {origin.symbol}, skipping")
            return None

        route = self._search.find_best_route(origin, amount, self._hop_budget)
        if not route:
            return None

        if not is_closing(route) or route[0].src != origin:
            raise InvariantViolation(f"Route for {origin.symbol} does not close: {route}")

        return ScanResult(
            origin=origin,
            route=route,
            profit=route_profit(route),
            timestamp_us=get_timestamp_us(),
        )

    def scan(self) -> ScanReport:
        """
        Scan every priced origin once.

        An invariant violation for one origin is recorded as a failure
        and the pass continues with the next origin.

        Returns:
            ScanReport for this pass.
        """
        report = ScanReport(start_timestamp_us=get_timestamp_us())

        for origin in self._store.origins():
            if not origin.has_price:
                continue

            report.origins_scanned += 1

            with LatencyTimer() as timer:
                try:
                    result = self.scan_origin(origin)
                except InvariantViolation as e:
                    logger.error(f"Search invariant broken for {origin.symbol}: {e}")
                    failure = ScanFailure(origin=origin, error=str(e))
                    report.failures.append(failure)
                    self._event_bus.publish_sync(Event(EventType.SCAN_FAILED, failure, source="scanner"))
                    continue

            if self._metrics:
                self._metrics.record_latency("search", timer.latency_us)

            if result is None:
                continue

            report.results.append(result)
            if self._metrics:
                self._metrics.record_route(result.profit_usd)

            logger.debug(f"Best cycle {result.path} profit={result.profit}")
            self._event_bus.publish_sync(Event(EventType.ROUTE_FOUND, result, source="scanner"))

        report.end_timestamp_us = get_timestamp_us()

        if self._metrics:
            self._metrics.record_scan(report)

        logger.info(
            f"Scanned {report.origins_scanned} origins, "
            f"{len(report.results)} routes, {len(report.failures)} failures"
        )
        self._event_bus.publish_sync(Event(EventType.SCAN_COMPLETE, report, source="scanner"))

        return report

    @property
    def hop_budget(self) -> int:
        return self._hop_budget

    @property
    def notional_usd(self) -> Decimal:
        return self._notional_usd

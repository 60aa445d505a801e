"""
Unit tests for ScanDriver.

Tests start amounts, origin selection, failure isolation, and the
events published per pass.
"""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from arbcycle.core.event_bus import Event, EventBus, EventType
from arbcycle.core.exceptions import InvariantViolation
from arbcycle.core.types import Asset, Trade
from arbcycle.strategy.rates import RateStore
from arbcycle.strategy.scanner import ScanDriver
from arbcycle.strategy.search import CycleSearch
from arbcycle.telemetry.metrics import MetricsCollector
from arbcycle.utils.units import scale_rate


ONE = 10**18


class TestScanDriver:
    """Tests for ScanDriver."""

    @pytest.fixture
    def events(self, event_bus: EventBus) -> list[Event]:
        """Collects every scan event."""
        received: list[Event] = []
        for event_type in (EventType.ROUTE_FOUND, EventType.SCAN_FAILED, EventType.SCAN_COMPLETE):
            event_bus.subscribe_sync(event_type, received.append)
        return received

    @pytest.fixture
    def driver(
        self, store: RateStore, search: CycleSearch, event_bus: EventBus, metrics: MetricsCollector
    ) -> ScanDriver:
        return ScanDriver(store, search, event_bus=event_bus, metrics=metrics, hop_budget=1)

    def test_start_amount(self, store: RateStore, search: CycleSearch, eth: Asset, usdc: Asset, wbtc: Asset) -> None:
        """Every origin starts with the configured USD notional."""
        driver = ScanDriver(store, search, notional_usd=100.0)

        assert driver.start_amount(eth) == 5 * 10**16
        assert driver.start_amount(usdc) == 100 * 10**6
        assert driver.start_amount(wbtc) == 250_000

    def test_start_amount_requires_price(self, driver: ScanDriver) -> None:
        """Unpriced assets cannot be sized."""
        with pytest.raises(ValueError):
            driver.start_amount(Asset("0xf", "FREE", 18))

    def test_scan_reports_routes(
        self, store: RateStore, driver: ScanDriver, events: list[Event], eth: Asset, dai: Asset
    ) -> None:
        """Test a full pass over two origins."""
        store.update_rate(eth, dai, 2010 * ONE)
        store.update_rate(dai, eth, scale_rate("0.0005"))

        report = driver.scan()

        assert report.origins_scanned == 2
        assert [r.origin for r in report.results] == [eth, dai]

        eth_result = report.results[0]
        assert eth_result.path == "ETH -> DAI -> ETH"
        assert eth_result.profit == 5 * 10**16 * 2010 // 2000 - 5 * 10**16
        assert eth_result.is_profitable
        assert eth_result.profit_usd == Decimal("0.5")

        assert [e.type for e in events] == [
            EventType.ROUTE_FOUND,
            EventType.ROUTE_FOUND,
            EventType.SCAN_COMPLETE,
        ]
        assert events[-1].payload is report

    def test_break_even_route_reported(
        self, store: RateStore, driver: ScanDriver, asset_a: Asset, asset_c: Asset
    ) -> None:
        """Results are reported whatever their profit."""
        store.update_rate(asset_a, asset_c, ONE)
        store.update_rate(asset_c, asset_a, ONE)

        report = driver.scan()

        assert len(report.results) == 2
        assert all(r.profit == 0 for r in report.results)
        assert not any(r.is_profitable for r in report.results)

    def test_unpriced_origin_skipped(
        self, store: RateStore, driver: ScanDriver, asset_a: Asset
    ) -> None:
        """Origins without a USD price are not scanned."""
        free = Asset("0xf", "FREE", 18)
        store.update_rate(free, asset_a, ONE)
        store.update_rate(asset_a, free, ONE)

        report = driver.scan()

        assert report.origins_scanned == 1
        assert [r.origin for r in report.results] == [asset_a]

    def test_no_route_no_result(self, store: RateStore, driver: ScanDriver, events: list[Event], asset_a: Asset, asset_c: Asset) -> None:
        """An origin without an accepted route yields nothing."""
        store.update_rate(asset_a, asset_c, ONE)
        store.update_rate(asset_c, asset_a, scale_rate("0.5"))

        report = driver.scan()

        assert report.origins_scanned == 2
        assert report.results == []
        assert [e.type for e in events] == [EventType.SCAN_COMPLETE]

    def test_failure_isolated(
        self, store: RateStore, event_bus: EventBus, events: list[Event], asset_a: Asset, asset_c: Asset
    ) -> None:
        """An invariant violation for one origin does not stop the pass."""
        store.update_rate(asset_a, asset_c, ONE)
        store.update_rate(asset_c, asset_a, ONE)

        def find_best_route(origin: Asset, amount: int, hop_budget: int) -> tuple[Trade, ...]:
            if origin == asset_a:
                raise InvariantViolation("broken")
            return (
                Trade(asset_c, asset_a, amount, amount, ONE),
                Trade(asset_a, asset_c, amount, amount, ONE),
            )

        search = MagicMock(spec=CycleSearch)
        search.find_best_route.side_effect = find_best_route
        driver = ScanDriver(store, search, event_bus=event_bus, hop_budget=1)

        report = driver.scan()

        assert report.origins_scanned == 2
        assert [f.origin for f in report.failures] == [asset_a]
        assert report.failures[0].error == "broken"
        assert [r.origin for r in report.results] == [asset_c]
        assert [e.type for e in events] == [
            EventType.SCAN_FAILED,
            EventType.ROUTE_FOUND,
            EventType.SCAN_COMPLETE,
        ]

    def test_route_from_wrong_origin_fails(
        self, store: RateStore, event_bus: EventBus, asset_a: Asset, asset_c: Asset
    ) -> None:
        """A closing route that starts elsewhere is rejected."""
        store.update_rate(asset_a, asset_c, ONE)

        search = MagicMock(spec=CycleSearch)
        search.find_best_route.return_value = (
            Trade(asset_c, asset_a, ONE, ONE, ONE),
            Trade(asset_a, asset_c, ONE, ONE, ONE),
        )
        driver = ScanDriver(store, search, event_bus=event_bus, hop_budget=1)

        with pytest.raises(InvariantViolation):
            driver.scan_origin(asset_a)

    def test_metrics_recorded(
        self, store: RateStore, driver: ScanDriver, metrics: MetricsCollector, asset_a: Asset, asset_c: Asset
    ) -> None:
        """Test scan statistics accumulate across passes."""
        store.update_rate(asset_a, asset_c, ONE)
        store.update_rate(asset_c, asset_a, scale_rate("1.01"))

        driver.scan()
        driver.scan()

        stats = metrics.scan_stats
        assert stats.scans_completed == 2
        assert stats.origins_scanned == 4
        assert stats.routes_found == 4
        assert stats.routes_profitable == 4
        assert metrics.get_latency_stats("search").count == 4

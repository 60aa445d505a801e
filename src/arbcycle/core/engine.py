"""
Main scan engine orchestrator.

Coordinates all system components and manages the
scanning lifecycle.
"""

import asyncio
import itertools
import logging
import signal
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TextIO

from arbcycle.config.settings import Settings
from arbcycle.core.event_bus import Event, EventBus, EventType
from arbcycle.core.types import RateSource, ScanReport
from arbcycle.exchange.client import PriceClient, QuoteClient
from arbcycle.exchange.fetcher import LazyRateFetcher
from arbcycle.exchange.rate_limiter import RateLimiter
from arbcycle.market.tokens import TokenRegistry
from arbcycle.simulation.quotes import QuoteSimulator
from arbcycle.strategy.rates import RateStore
from arbcycle.strategy.scanner import ScanDriver
from arbcycle.strategy.search import CycleSearch
from arbcycle.telemetry.exporter import ReportExporter
from arbcycle.telemetry.logger import AsyncLogger, setup_logging
from arbcycle.telemetry.metrics import MetricsCollector
from arbcycle.telemetry.reporter import ScanReporter


logger = logging.getLogger(__name__)


class ScanEngine:
    """
    Main scan engine orchestrator.

    Manages the complete lifecycle of:
    - Token metadata and USD prices
    - Rate source connectivity
    - The rate graph and lazy fetching
    - Repeated cycle scans
    - Telemetry and reporting
    """

    def __init__(
        self,
        settings: Settings,
        source: RateSource | None = None,
        output: TextIO | None = None,
    ) -> None:
        """
        Initialize the engine.

        Args:
            settings: Application settings.
            source: Rate source override (default: built from settings).
            output: Reporter output stream (default: stdout).
        """
        self._settings = settings
        self._source = source
        self._output = output
        self._running = False
        self._shutdown_event = asyncio.Event()
        self._is_shut_down = False

        # Core components (initialized in setup)
        self._registry: TokenRegistry | None = None
        self._quote_client: QuoteClient | None = None
        self._store = RateStore()
        self._fetcher: LazyRateFetcher | None = None
        self._search: CycleSearch | None = None
        self._driver: ScanDriver | None = None

        # Infrastructure
        self._event_bus = EventBus()
        self._metrics = MetricsCollector()
        self._reporter: ScanReporter | None = None
        self._exporter: ReportExporter | None = None
        self._async_logger: AsyncLogger | None = None

        self._reports: list[ScanReport] = []

    async def setup(self) -> None:
        """Initialize all components."""
        logger.info("Initializing scan engine...")

        # Set up logging
        self._async_logger = setup_logging(
            level=self._settings.log_level,
            log_file=self._settings.log_file,
        )

        # Load token metadata and prices
        self._registry = await self._load_registry()
        logger.info(
            f"Loaded {len(self._registry)} assets, {len(self._registry.priced())} priced"
        )

        # Create rate source
        if self._source is None:
            self._source = self._create_source()

        # Wire the search to the lazy fetcher
        self._fetcher = LazyRateFetcher(
            source=self._source,
            store=self._store,
            event_bus=self._event_bus,
            metrics=self._metrics,
            timeout=self._settings.rate_fetch_timeout_s,
            retries=self._settings.rate_fetch_retries,
        )
        self._search = CycleSearch(self._store, request_rate=self._fetcher.request)
        self._driver = ScanDriver(
            store=self._store,
            search=self._search,
            event_bus=self._event_bus,
            metrics=self._metrics,
            hop_budget=self._settings.hop_budget,
            notional_usd=self._settings.notional_usd,
        )

        # Initialize reporting
        self._reporter = ScanReporter(
            metrics=self._metrics,
            output=self._output,
            decimals=self._settings.display_decimals,
        )
        self._reporter.attach(self._event_bus)

        if self._settings.export_path:
            self._exporter = ReportExporter(self._settings.export_path)
            self._exporter.attach(self._event_bus)

        self._event_bus.subscribe_sync(EventType.SCAN_COMPLETE, self._on_scan_complete)

        logger.info("Engine initialization complete")

    async def _load_registry(self) -> TokenRegistry:
        if self._settings.demo_mode:
            registry = TokenRegistry(QuoteSimulator.DEFAULT_ASSETS)
            registry.apply_prices({a.symbol: a.price_usd for a in QuoteSimulator.DEFAULT_ASSETS})
            return registry

        registry = TokenRegistry()
        registry.load_config(self._settings.tokens_file)

        if self._settings.uses_live_prices:
            if self._settings.cmc_api_key is None:
                raise RuntimeError("Live prices require a CoinMarketCap API key")
            async with PriceClient(
                api_key=self._settings.cmc_api_key.get_secret_value(),
                base_url=self._settings.price_api_url,
            ) as client:
                registry.apply_prices(await client.get_usd_prices())

        return registry

    def _create_source(self) -> RateSource:
        if self._settings.demo_mode:
            logger.info("Demo mode: using simulated quotes")
            if self._registry is None:
                raise RuntimeError("Token registry must be loaded before the rate source")
            return QuoteSimulator(assets=self._registry.priced())

        logger.info(f"Using quote gateway at {self._settings.quote_api_url}")
        self._quote_client = QuoteClient(
            base_url=self._settings.quote_api_url,
            rate_limiter=RateLimiter(self._settings.requests_per_second),
            timeout=self._settings.rate_fetch_timeout_s,
        )
        return self._quote_client

    async def seed_rates(self) -> int:
        """
        Eagerly fetch rates for every ordered pair of priced assets.

        Returns:
            Number of edges in the store afterwards.
        """
        if not self._registry or not self._fetcher or not self._driver:
            raise RuntimeError("Engine not set up")

        assets = self._registry.priced()
        logger.info(f"Seeding rates for {len(assets)} assets...")

        await asyncio.gather(
            *(
                self._fetcher.fetch(src, dst, self._driver.start_amount(src))
                for src, dst in itertools.permutations(assets, 2)
            )
        )

        logger.info(f"Seeded {self._store.edge_count} edges")
        return self._store.edge_count

    def _on_scan_complete(self, event: Event[ScanReport]) -> None:
        self._reports.append(event.payload)

    async def scan_once(self) -> ScanReport:
        """Run a single scan pass."""
        if not self._driver:
            raise RuntimeError("Engine not set up")
        return self._driver.scan()

    async def run(self, seed: bool = True) -> None:
        """
        Run the scan loop.

        Args:
            seed: Fetch every pair before the first pass; otherwise
                edges are discovered lazily as scans touch them.
        """
        self._running = True

        # Set up signal handlers
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self._handle_shutdown)
            except (NotImplementedError, RuntimeError):
                logger.debug(f"Signal handler for {sig.name} not supported")

        try:
            if seed:
                await self.seed_rates()

            scan_count = self._settings.scan_count
            passes = itertools.count() if scan_count == 0 else range(scan_count)

            for index in passes:
                if self._shutdown_event.is_set():
                    break

                report = await self.scan_once()
                logger.debug(
                    f"Pass {index + 1}: {len(report.results)} routes, "
                    f"{self._fetcher.pending if self._fetcher else 0} fetches pending"
                )

                # Lazy fetches land while we wait
                try:
                    await asyncio.wait_for(
                        self._shutdown_event.wait(),
                        timeout=self._settings.scan_interval_s,
                    )
                except TimeoutError:
                    pass

        except Exception as e:
            logger.error(f"Engine error: {e}")
            raise

        finally:
            self._running = False
            for sig in (signal.SIGINT, signal.SIGTERM):
                try:
                    loop.remove_signal_handler(sig)
                except (NotImplementedError, RuntimeError):
                    pass

    def _handle_shutdown(self) -> None:
        """Handle shutdown signal."""
        logger.info("Shutdown signal received")
        self._running = False
        self._shutdown_event.set()

    async def shutdown(self) -> None:
        """Gracefully shut down the engine."""
        if self._is_shut_down:
            return
        self._is_shut_down = True

        logger.info("Shutting down engine...")

        self._running = False
        self._shutdown_event.set()
        self._event_bus.publish_sync(Event(EventType.SHUTDOWN, None, source="engine"))

        # Cancel outstanding quotes
        if self._fetcher:
            await self._fetcher.cancel_all()

        # Close quote client
        if self._quote_client:
            await self._quote_client.close()

        # Print summary
        if self._reporter:
            self._reporter.print_summary()
            self._reporter.detach()

        logger.info("Engine shutdown complete")

        # Stop async logger
        if self._async_logger:
            self._async_logger.stop()

    @property
    def is_running(self) -> bool:
        """Check if engine is running."""
        return self._running

    @property
    def metrics(self) -> MetricsCollector:
        """Get metrics collector."""
        return self._metrics

    @property
    def store(self) -> RateStore:
        """Get the rate graph."""
        return self._store

    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    @property
    def registry(self) -> TokenRegistry | None:
        return self._registry

    @property
    def fetcher(self) -> LazyRateFetcher | None:
        return self._fetcher

    @property
    def reports(self) -> list[ScanReport]:
        """Reports of every completed pass."""
        return list(self._reports)


@asynccontextmanager
async def create_engine(
    settings: Settings,
    source: RateSource | None = None,
    output: TextIO | None = None,
) -> AsyncIterator[ScanEngine]:
    """
    Create and manage engine lifecycle.

    Usage:
        async with create_engine(settings) as engine:
            await engine.run()
    """
    engine = ScanEngine(settings, source=source, output=output)

    try:
        await engine.setup()
        yield engine
    finally:
        await engine.shutdown()

"""
Console reporter for scan results.

Prints every best route as one line per trade followed by the
profit in origin units and USD, coloured by sign.
"""

import sys
from datetime import timedelta
from typing import Any, TextIO

from arbcycle.config.constants import (
    CONSOLE_GREEN,
    CONSOLE_RED,
    CONSOLE_RESET,
    DISPLAY_DECIMALS,
    DISPLAY_PADDING,
)
from arbcycle.core.event_bus import Event, EventBus, EventType
from arbcycle.core.types import ScanFailure, ScanReport, ScanResult, Trade
from arbcycle.telemetry.metrics import MetricsCollector
from arbcycle.utils.time import format_duration_us
from arbcycle.utils.units import unscale_rate


class ScanReporter:
    """
    Prints scan results as they are published.

    Attach to an EventBus with attach(); detach() removes the handlers.
    """

    SEPARATOR = "-" * 80

    def __init__(
        self,
        metrics: MetricsCollector | None = None,
        output: TextIO | None = None,
        decimals: int = DISPLAY_DECIMALS,
        color: bool | None = None,
    ) -> None:
        """
        Initialize reporter.

        Args:
            metrics: Metrics collector for the session summary.
            output: Output stream (default: stdout).
            decimals: Fractional digits for amounts and rates.
            color: Colour profit lines (default: when output is a tty).
        """
        self._metrics = metrics
        self._output = output or sys.stdout
        self._decimals = decimals
        self._color = self._output.isatty() if color is None else color
        self._event_bus: EventBus | None = None

    def attach(self, event_bus: EventBus) -> None:
        """Subscribe to scan events."""
        event_bus.subscribe_sync(EventType.ROUTE_FOUND, self._on_route)
        event_bus.subscribe_sync(EventType.SCAN_FAILED, self._on_failure)
        event_bus.subscribe_sync(EventType.SCAN_COMPLETE, self._on_complete)
        self._event_bus = event_bus

    def detach(self) -> None:
        """Unsubscribe from scan events."""
        if self._event_bus is None:
            return
        self._event_bus.unsubscribe(EventType.ROUTE_FOUND, self._on_route)
        self._event_bus.unsubscribe(EventType.SCAN_FAILED, self._on_failure)
        self._event_bus.unsubscribe(EventType.SCAN_COMPLETE, self._on_complete)
        self._event_bus = None

    def _on_route(self, event: Event[Any]) -> None:
        self.print_result(event.payload)

    def _on_failure(self, event: Event[Any]) -> None:
        failure: ScanFailure = event.payload
        self._write(self._paint(f"!! {failure.origin.symbol}\t{failure.error}", CONSOLE_RED))

    def _on_complete(self, event: Event[Any]) -> None:
        report: ScanReport = event.payload
        self._write(
            f"== scanned {report.origins_scanned} origins in "
            f"{format_duration_us(report.duration_us)}, {len(report.results)} routes"
        )

    def format_trade(self, trade: Trade) -> str:
        """Format one trade as amount, symbol, rate and result."""
        src_amount = trade.src.format_amount(trade.src_amount, self._decimals).ljust(DISPLAY_PADDING)
        dst_amount = trade.dst.format_amount(trade.dst_amount, self._decimals).ljust(DISPLAY_PADDING)
        rate = f"{unscale_rate(trade.exch_rate):.{self._decimals}f}".ljust(DISPLAY_PADDING)

        return f"=> {src_amount}\t{trade.src.symbol}\t@{rate}\t=>\t{dst_amount}\t{trade.dst.symbol}"

    def format_profit(self, result: ScanResult) -> str:
        """Format the profit line of a result."""
        profit = result.origin.format_amount(result.profit, self._decimals).ljust(DISPLAY_PADDING)
        return f"++ {profit}\t{result.origin.symbol}\t${result.profit_usd:.2f}"

    def print_result(self, result: ScanResult) -> None:
        """Print the trades and profit of a single result."""
        for trade in result.route:
            self._write(self.format_trade(trade))

        color = CONSOLE_GREEN if result.profit > 0 else CONSOLE_RED
        self._write(self._paint(self.format_profit(result), color))
        self._write(self.SEPARATOR)

    def print_summary(self) -> None:
        """Print a final session summary."""
        if self._metrics is None:
            return

        stats = self._metrics.scan_stats
        uptime = timedelta(seconds=int(self._metrics.uptime_seconds))
        search_latency = self._metrics.get_latency_stats("search")

        lines = [
            "",
            "=" * 50,
            "  SESSION SUMMARY",
            "=" * 50,
            f"  Uptime: {uptime}",
            f"  Scans completed:  {stats.scans_completed:,}",
            f"  Origins scanned:  {stats.origins_scanned:,}",
            f"  Routes found:     {stats.routes_found:,} ({stats.hit_rate:.1%})",
            f"  Profitable:       {stats.routes_profitable:,}",
            f"  Failures:         {stats.origin_failures:,}",
            f"  Rate requests:    {self._metrics.get_counter('rate_requests'):,}",
            f"  Rates resolved:   {self._metrics.get_counter('rates_resolved'):,}",
            f"  Unquoted pairs:   {self._metrics.get_counter('rates_unquoted'):,}",
            f"  Best profit:      ${stats.best_profit_usd:.2f}",
            f"  Avg search:       {search_latency.avg_us:.0f}μs",
            "=" * 50,
        ]
        for line in lines:
            self._write(line)

    def _paint(self, text: str, color: str) -> str:
        if not self._color:
            return text
        return f"{color}{text}{CONSOLE_RESET}"

    def _write(self, line: str) -> None:
        self._output.write(line + "\n")
        self._output.flush()

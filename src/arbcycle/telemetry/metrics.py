"""
Metrics collection for scan monitoring.

Tracks latencies, counters, and scan statistics
with efficient in-memory storage.
"""

import time
from collections import deque
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from arbcycle.core.types import ScanReport


@dataclass
class LatencyStats:
    """Aggregated latency statistics."""

    min_us: int = 0
    max_us: int = 0
    avg_us: float = 0.0
    p50_us: int = 0
    p95_us: int = 0
    p99_us: int = 0
    count: int = 0


@dataclass
class ScanStats:
    """Cycle scan statistics."""

    scans_completed: int = 0
    origins_scanned: int = 0
    routes_found: int = 0
    routes_profitable: int = 0
    origin_failures: int = 0
    total_profit_usd: Decimal = Decimal(0)
    best_profit_usd: Decimal = Decimal(0)

    @property
    def hit_rate(self) -> float:
        """Fraction of scanned origins that produced a route."""
        return self.routes_found / self.origins_scanned if self.origins_scanned > 0 else 0.0


class MetricsCollector:
    """
    Collects and aggregates scanner metrics.

    Features:
    - Rolling window latency tracking
    - Counter-based event tracking
    - Per-route profit accumulation
    """

    def __init__(
        self,
        latency_window_size: int = 1000,
    ) -> None:
        """
        Initialize metrics collector.

        Args:
            latency_window_size: Number of samples to keep for latency stats.
        """
        self._window_size = latency_window_size
        self._latencies: dict[str, deque[int]] = {}
        self._counters: dict[str, int] = {}
        self._scan_stats = ScanStats()
        self._start_time = time.time()

    def record_latency(self, name: str, latency_us: int) -> None:
        """
        Record a latency measurement.

        Args:
            name: Metric name (e.g., "search", "rate_fetch").
            latency_us: Latency in microseconds.
        """
        if name not in self._latencies:
            self._latencies[name] = deque(maxlen=self._window_size)

        self._latencies[name].append(latency_us)

    def increment_counter(self, name: str, value: int = 1) -> None:
        """Increment a counter."""
        self._counters[name] = self._counters.get(name, 0) + value

    def get_counter(self, name: str) -> int:
        """Get counter value."""
        return self._counters.get(name, 0)

    def record_route(self, profit_usd: Decimal) -> None:
        """
        Record the best route found for one origin.

        Args:
            profit_usd: Route profit in USD (may be negative).
        """
        self._scan_stats.routes_found += 1
        self._scan_stats.total_profit_usd += profit_usd

        if profit_usd > 0:
            self._scan_stats.routes_profitable += 1

        if profit_usd > self._scan_stats.best_profit_usd:
            self._scan_stats.best_profit_usd = profit_usd

    def record_scan(self, report: "ScanReport") -> None:
        """Record a completed scan pass."""
        self._scan_stats.scans_completed += 1
        self._scan_stats.origins_scanned += report.origins_scanned
        self._scan_stats.origin_failures += len(report.failures)
        self.record_latency("scan", report.duration_us)

    def get_latency_stats(self, name: str) -> LatencyStats:
        """
        Get latency statistics for a metric.

        Args:
            name: Metric name.

        Returns:
            LatencyStats with aggregated values.
        """
        samples = self._latencies.get(name)
        if not samples:
            return LatencyStats()

        sorted_samples = sorted(samples)
        n = len(sorted_samples)

        return LatencyStats(
            min_us=sorted_samples[0],
            max_us=sorted_samples[-1],
            avg_us=sum(sorted_samples) / n,
            p50_us=sorted_samples[n // 2],
            p95_us=sorted_samples[int(n * 0.95)],
            p99_us=sorted_samples[int(n * 0.99)] if n > 1 else sorted_samples[-1],
            count=n,
        )

    def get_all_latency_stats(self) -> dict[str, LatencyStats]:
        """Get latency stats for all metrics."""
        return {name: self.get_latency_stats(name) for name in self._latencies}

    @property
    def scan_stats(self) -> ScanStats:
        """Get scan statistics."""
        return self._scan_stats

    @property
    def uptime_seconds(self) -> float:
        """Get uptime in seconds."""
        return time.time() - self._start_time

    def to_dict(self) -> dict[str, object]:
        """
        Export all metrics as a dict.

        Returns:
            Dict representation of all metrics.
        """
        return {
            "uptime_seconds": self.uptime_seconds,
            "counters": dict(self._counters),
            "latencies": {
                name: {
                    "min": stats.min_us,
                    "max": stats.max_us,
                    "avg": stats.avg_us,
                    "p50": stats.p50_us,
                    "p99": stats.p99_us,
                    "count": stats.count,
                }
                for name, stats in self.get_all_latency_stats().items()
            },
            "scans": {
                "scans_completed": self._scan_stats.scans_completed,
                "origins_scanned": self._scan_stats.origins_scanned,
                "routes_found": self._scan_stats.routes_found,
                "routes_profitable": self._scan_stats.routes_profitable,
                "origin_failures": self._scan_stats.origin_failures,
                "total_profit_usd": str(self._scan_stats.total_profit_usd),
                "best_profit_usd": str(self._scan_stats.best_profit_usd),
            },
        }

    def reset(self) -> None:
        """Reset all metrics."""
        self._latencies.clear()
        self._counters.clear()
        self._scan_stats = ScanStats()
        self._start_time = time.time()

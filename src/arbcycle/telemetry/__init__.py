"""Telemetry module for logging, metrics, and reporting."""

from arbcycle.telemetry.exporter import ReportExporter
from arbcycle.telemetry.logger import AsyncLogger, setup_logging
from arbcycle.telemetry.metrics import MetricsCollector
from arbcycle.telemetry.reporter import ScanReporter


__all__ = [
    "AsyncLogger",
    "MetricsCollector",
    "ReportExporter",
    "ScanReporter",
    "setup_logging",
]

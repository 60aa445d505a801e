"""Core module containing the main engine, event bus, and type definitions."""

from arbcycle.core.event_bus import Event, EventBus, EventType
from arbcycle.core.exceptions import (
    ArbCycleError,
    ArithmeticOverflow,
    InvariantViolation,
    TokenConfigError,
)
from arbcycle.core.types import (
    EMPTY_ROUTE,
    Asset,
    RateRequester,
    RateSource,
    Route,
    ScanFailure,
    ScanReport,
    ScanResult,
    Trade,
)


__all__ = [
    "EMPTY_ROUTE",
    "ArbCycleError",
    "ArithmeticOverflow",
    "Asset",
    "Event",
    "EventBus",
    "EventType",
    "InvariantViolation",
    "RateRequester",
    "RateSource",
    "Route",
    "ScanFailure",
    "ScanReport",
    "ScanResult",
    "TokenConfigError",
    "Trade",
]

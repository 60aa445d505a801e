"""Utility functions for the cycle scanner."""

from arbcycle.utils.time import (
    LatencyTimer,
    format_duration_us,
    get_timestamp_us,
)
from arbcycle.utils.units import (
    from_base_units,
    invert_rate,
    notional_amount,
    scale_rate,
    to_base_units,
    unscale_rate,
)


__all__ = [
    "LatencyTimer",
    "format_duration_us",
    "from_base_units",
    "get_timestamp_us",
    "invert_rate",
    "notional_amount",
    "scale_rate",
    "to_base_units",
    "unscale_rate",
]

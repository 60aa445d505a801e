"""Configuration module for the cycle scanner."""

from arbcycle.config.constants import (
    DEFAULT_HOP_BUDGET,
    DEFAULT_NOTIONAL_USD,
    ETH_ADDRESS,
    MAX_HOP_BUDGET,
    RATE_PRECISION,
    RATE_SCALE,
)
from arbcycle.config.settings import Settings, get_settings


__all__ = [
    "Settings",
    "get_settings",
    "DEFAULT_HOP_BUDGET",
    "DEFAULT_NOTIONAL_USD",
    "ETH_ADDRESS",
    "MAX_HOP_BUDGET",
    "RATE_PRECISION",
    "RATE_SCALE",
]

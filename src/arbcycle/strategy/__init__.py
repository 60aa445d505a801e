"""Strategy module for the rate graph and cycle search."""

from arbcycle.strategy.fixed_point import convert_amount
from arbcycle.strategy.rates import RateStore
from arbcycle.strategy.scanner import ScanDriver
from arbcycle.strategy.search import CycleSearch


__all__ = [
    "CycleSearch",
    "RateStore",
    "ScanDriver",
    "convert_amount",
]

"""Simulation module for demo mode without live quote services."""

from arbcycle.simulation.quotes import QuoteSimulator


__all__ = [
    "QuoteSimulator",
]

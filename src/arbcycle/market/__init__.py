"""Asset metadata."""

from arbcycle.market.tokens import TokenRegistry


__all__ = ["TokenRegistry"]

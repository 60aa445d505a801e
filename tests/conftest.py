"""
Pytest configuration and shared fixtures.

Provides reusable test fixtures for all test modules.
"""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from arbcycle.core.event_bus import EventBus
from arbcycle.core.types import Asset
from arbcycle.strategy.rates import RateStore
from arbcycle.strategy.search import CycleSearch
from arbcycle.telemetry.metrics import MetricsCollector


ONE = 10**18


# =============================================================================
# Asset Fixtures
# =============================================================================


@pytest.fixture
def eth() -> Asset:
    """Native currency, 18 decimals."""
    return Asset("0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE", "ETH", 18, Decimal("2000"))


@pytest.fixture
def dai() -> Asset:
    """18-decimal stablecoin."""
    return Asset("0x6B175474E89094C44Da98b954EedeAC495271d0F", "DAI", 18, Decimal("1"))


@pytest.fixture
def usdc() -> Asset:
    """6-decimal stablecoin."""
    return Asset("0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48", "USDC", 6, Decimal("1"))


@pytest.fixture
def wbtc() -> Asset:
    """8-decimal token."""
    return Asset("0x2260FAC5E5542a773Aa44fBCfeDf7C193bc2C599", "WBTC", 8, Decimal("40000"))


@pytest.fixture
def asset_a() -> Asset:
    """Generic 18-decimal asset priced at $1."""
    return Asset("0xa", "A", 18, Decimal("1"))


@pytest.fixture
def asset_b() -> Asset:
    """Generic 6-decimal asset priced at $1."""
    return Asset("0xb", "B", 6, Decimal("1"))


@pytest.fixture
def asset_c() -> Asset:
    """Generic 18-decimal asset priced at $1."""
    return Asset("0xc", "C", 18, Decimal("1"))


# =============================================================================
# Graph Fixtures
# =============================================================================


@pytest.fixture
def store() -> RateStore:
    """Empty rate store."""
    return RateStore()


@pytest.fixture
def requester() -> MagicMock:
    """Records rate requests made by the search."""
    return MagicMock(return_value=None)


@pytest.fixture
def search(store: RateStore, requester: MagicMock) -> CycleSearch:
    """Cycle search over the shared store."""
    return CycleSearch(store, request_rate=requester)


@pytest.fixture
def event_bus() -> EventBus:
    """Fresh event bus."""
    return EventBus()


@pytest.fixture
def metrics() -> MetricsCollector:
    """Fresh metrics collector."""
    return MetricsCollector()

"""
Type definitions for the cycle scanner.

This module contains all dataclasses, type aliases and Protocol
definitions used throughout the application. Using slots=True for
memory efficiency and faster attribute access.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Protocol


# =============================================================================
# Asset Types
# =============================================================================


@dataclass(slots=True, frozen=True, eq=False)
class Asset:
    """
    Fungible token or native currency.

    Identity is the id alone so that a re-priced copy of an asset
    still addresses the same graph node.
    """

    id: str
    symbol: str
    decimals: int
    price_usd: Decimal = Decimal(0)

    def __post_init__(self) -> None:
        if self.decimals < 0:
            raise ValueError(f"decimals must be non-negative, got {self.decimals}")
        if self.price_usd < 0:
            raise ValueError(f"price_usd must be non-negative, got {self.price_usd}")

    @property
    def has_price(self) -> bool:
        """Check if a USD price is known."""
        return self.price_usd > 0

    def format_amount(self, amount: int, places: int = 6) -> str:
        """Render a base-unit amount as a decimal string."""
        value = Decimal(amount).scaleb(-self.decimals)
        return f"{value:.{places}f}"

    def with_price(self, price_usd: Decimal) -> "Asset":
        """Return a copy of this asset with a new USD price."""
        return Asset(self.id, self.symbol, self.decimals, price_usd)

    def __hash__(self) -> int:
        return hash(self.id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Asset):
            return NotImplemented
        return self.id == other.id

    def __repr__(self) -> str:
        return f"Asset({self.symbol})"


# =============================================================================
# Route Types
# =============================================================================


@dataclass(slots=True, frozen=True)
class Trade:
    """
    Single step of a route.

    Amounts are in each asset's base units, the rate is scaled by 10**18.
    """

    src: Asset
    dst: Asset
    src_amount: int
    dst_amount: int
    exch_rate: int

    def __repr__(self) -> str:
        return f"{self.src.symbol}->{self.dst.symbol}({self.src_amount}->{self.dst_amount})"


# Routes are rebuilt per recursion step, never shared between searches
Route = tuple[Trade, ...]

EMPTY_ROUTE: Route = ()


def is_closing(route: Route) -> bool:
    """Check that a non-empty route ends on the asset it started from."""
    return bool(route) and route[0].src == route[-1].dst


def route_profit(route: Route) -> int:
    """Profit of a closing route in base units of its origin asset."""
    return route[-1].dst_amount - route[0].src_amount


# =============================================================================
# Scan Types
# =============================================================================


@dataclass(slots=True)
class ScanResult:
    """Best closing route found for one origin asset."""

    origin: Asset
    route: Route
    profit: int
    timestamp_us: int = 0

    @property
    def profit_usd(self) -> Decimal:
        """Profit converted to USD at the origin's price."""
        return Decimal(self.profit).scaleb(-self.origin.decimals) * self.origin.price_usd

    @property
    def is_profitable(self) -> bool:
        """Check if the cycle returns more than it started with."""
        return self.profit > 0

    @property
    def path(self) -> str:
        """Human-readable asset path, e.g. ETH -> DAI -> ETH."""
        symbols = [self.route[0].src.symbol] + [t.dst.symbol for t in self.route]
        return " -> ".join(symbols)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a serializable dict."""
        return {
            "origin": self.origin.id,
            "symbol": self.origin.symbol,
            "path": self.path,
            "profit": str(self.profit),
            "profit_usd": str(self.profit_usd),
            "timestamp_us": self.timestamp_us,
            "trades": [
                {
                    "src": t.src.id,
                    "dst": t.dst.id,
                    "src_amount": str(t.src_amount),
                    "dst_amount": str(t.dst_amount),
                    "exch_rate": str(t.exch_rate),
                }
                for t in self.route
            ],
        }


@dataclass(slots=True)
class ScanFailure:
    """Origin whose search broke an internal invariant."""

    origin: Asset
    error: str


@dataclass(slots=True)
class ScanReport:
    """Outcome of one full pass over all priced origins."""

    results: list[ScanResult] = field(default_factory=list)
    failures: list[ScanFailure] = field(default_factory=list)
    origins_scanned: int = 0
    start_timestamp_us: int = 0
    end_timestamp_us: int = 0

    @property
    def duration_us(self) -> int:
        return self.end_timestamp_us - self.start_timestamp_us

    @property
    def best(self) -> ScanResult | None:
        """Result with the highest USD profit."""
        if not self.results:
            return None
        return max(self.results, key=lambda r: r.profit_usd)

    def to_dict(self) -> dict[str, Any]:
        return {
            "origins_scanned": self.origins_scanned,
            "duration_us": self.duration_us,
            "results": [r.to_dict() for r in self.results],
            "failures": [
                {"origin": f.origin.id, "symbol": f.origin.symbol, "error": f.error}
                for f in self.failures
            ],
        }


# =============================================================================
# Protocols (Interfaces)
# =============================================================================


class RateSource(Protocol):
    """Protocol for anything that can quote a scaled exchange rate."""

    async def get_expected_rate(self, src: Asset, dst: Asset, src_amount: int) -> int:
        """Quote src -> dst for src_amount, scaled by 10**18 (0 = no quote)."""
        ...


# Schedules a quote for (src, dst) without waiting for it
RateRequester = Callable[[Asset, Asset, int], None]

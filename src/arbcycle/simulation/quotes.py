"""
Quote simulator for demo mode.

Derives expected rates from reference USD prices with a spread and
random noise, and occasionally quotes a pair above fair value so that
demo scans have profitable cycles to find.
"""

import asyncio
import random
from dataclasses import dataclass, field
from decimal import Decimal

from arbcycle.core.types import Asset
from arbcycle.utils.units import scale_rate


@dataclass
class SimulatedAsset:
    """Configuration for a simulated token."""

    asset: Asset
    volatility: float = 0.0003  # Price change per quote (0.03%)
    current_price: float = field(init=False)

    def __post_init__(self) -> None:
        self.current_price = float(self.asset.price_usd)


class QuoteSimulator:
    """
    Simulates an expected-rate quote gateway.

    Features:
    - Rates derived from per-asset USD prices
    - Random walk on prices between quotes
    - Configurable spread and response latency
    - Occasional mispriced quotes (configurable)
    - Pairs without liquidity quote 0

    Implements the RateSource protocol.
    """

    DEFAULT_ASSETS = [
        Asset("0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE", "ETH", 18, Decimal("2000")),
        Asset("0x6B175474E89094C44Da98b954EedeAC495271d0F", "DAI", 18, Decimal("1")),
        Asset("0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48", "USDC", 6, Decimal("1")),
        Asset("0x2260FAC5E5542a773Aa44fBCfeDf7C193bc2C599", "WBTC", 8, Decimal("40000")),
        Asset("0xdd974D5C2e2928deA5F71b9825b8b646686BD200", "KNC", 18, Decimal("0.7")),
        Asset("0x514910771AF9Ca656af840dff83E8264EcF986CA", "LINK", 18, Decimal("15")),
    ]

    def __init__(
        self,
        assets: list[Asset] | None = None,
        spread_pct: float = 0.003,
        opportunity_frequency: float = 0.05,  # 5% chance per quote
        opportunity_profit_range: tuple[float, float] = (0.004, 0.02),
        latency_s: float = 0.0,
        illiquid_pairs: set[tuple[str, str]] | None = None,
        seed: int | None = None,
    ) -> None:
        """
        Initialize quote simulator.

        Args:
            assets: Priced assets to quote (default: DEFAULT_ASSETS).
            spread_pct: Fraction taken off the fair rate of every quote.
            opportunity_frequency: Probability a quote is mispriced upward.
            opportunity_profit_range: Min/max markup of a mispriced quote.
            latency_s: Simulated response delay in seconds.
            illiquid_pairs: (src_symbol, dst_symbol) pairs that quote 0.
            seed: Seed for reproducible quotes.
        """
        self._assets = {a.id: SimulatedAsset(a) for a in (assets or self.DEFAULT_ASSETS)}
        self._spread_pct = spread_pct
        self._opportunity_frequency = opportunity_frequency
        self._opportunity_profit_range = opportunity_profit_range
        self._latency_s = latency_s
        self._illiquid_pairs = illiquid_pairs or set()
        self._random = random.Random(seed)

        self._quote_count = 0
        self._opportunities_created = 0

    def _step_price(self, sim: SimulatedAsset) -> float:
        """Random walk without drift, pulled back toward the reference price."""
        shock = self._random.gauss(0, sim.volatility)
        reference = float(sim.asset.price_usd)
        sim.current_price *= 1 + shock
        sim.current_price += (reference - sim.current_price) * 0.01
        return sim.current_price

    def _quote(self, src: Asset, dst: Asset) -> Decimal:
        if (src.symbol, dst.symbol) in self._illiquid_pairs:
            return Decimal(0)

        sim_src = self._assets.get(src.id)
        sim_dst = self._assets.get(dst.id)
        if sim_src is None or sim_dst is None:
            return Decimal(0)

        src_price = self._step_price(sim_src)
        dst_price = self._step_price(sim_dst)
        if src_price <= 0 or dst_price <= 0:
            return Decimal(0)

        rate = src_price / dst_price * (1 - self._spread_pct)

        if self._random.random() < self._opportunity_frequency:
            rate *= 1 + self._random.uniform(*self._opportunity_profit_range)
            self._opportunities_created += 1

        return Decimal(repr(rate))

    async def get_expected_rate(self, src: Asset, dst: Asset, src_amount: int) -> int:
        """Quote src -> dst scaled by 10**18 (0 = no liquidity)."""
        if self._latency_s:
            await asyncio.sleep(self._latency_s)

        self._quote_count += 1
        return scale_rate(self._quote(src, dst))

    @property
    def quote_count(self) -> int:
        """Get number of quotes served."""
        return self._quote_count

    @property
    def opportunities_created(self) -> int:
        """Get number of mispriced quotes served."""
        return self._opportunities_created

"""
Depth-bounded search for the most profitable closing route.

Explores every path of at most hop_budget intermediate trades that
returns to the origin asset and keeps the best one that does not lose
against its baseline amount.
"""

import logging

from arbcycle.config.constants import MAX_HOP_BUDGET
from arbcycle.core.exceptions import ArithmeticOverflow, InvariantViolation
from arbcycle.core.types import EMPTY_ROUTE, Asset, RateRequester, Route, Trade
from arbcycle.strategy.fixed_point import convert_amount
from arbcycle.strategy.rates import RateStore


logger = logging.getLogger(__name__)


def _no_request(src: Asset, dst: Asset, amount: int) -> None:
    """Default requester for stores that are never refreshed."""


class CycleSearch:
    """
    Recursive backtracking search over a RateStore.

    Each call is in one of three states:
    - unresolved: current has no outgoing edges, a quote is requested
      and the call returns empty without waiting for it
    - closing: hop budget spent, only current -> origin may be taken
    - exploring: branch over every outgoing edge of current

    Recursion depth is bounded by the hop budget.
    """

    __slots__ = ("_store", "_request_rate", "_stats")

    def __init__(
        self,
        store: RateStore,
        request_rate: RateRequester | None = None,
    ) -> None:
        """
        Initialize the search.

        Args:
            store: Rate graph to search.
            request_rate: Non-blocking callback invoked with
                (current, origin, amount) when current is unresolved.
        """
        self._store = store
        self._request_rate = request_rate or _no_request
        self._stats = {"calls": 0, "misses": 0, "overflows": 0}

    def find_best_route(self, origin: Asset, amount: int, hop_budget: int) -> Route:
        """
        Find the best closing route from origin.

        Args:
            origin: Asset the cycle starts and ends with.
            amount: Starting amount in origin base units.
            hop_budget: Intermediate hops allowed before closing.

        Returns:
            Best accepted closing route, or an empty route.

        Raises:
            ValueError: If hop_budget is outside [0, MAX_HOP_BUDGET].
            InvariantViolation: If a non-closing route surfaces.
        """
        if not 0 <= hop_budget <= MAX_HOP_BUDGET:
            raise ValueError(f"hop_budget must be within [0, {MAX_HOP_BUDGET}], got {hop_budget}")

        return self.search(origin, origin, amount, hop_budget, EMPTY_ROUTE)

    def search(
        self,
        origin: Asset,
        current: Asset,
        current_amount: int,
        hops_remaining: int,
        route: Route,
    ) -> Route:
        """
        Search from current back to origin.

        Args:
            origin: Asset the route must close on.
            current: Asset currently held.
            current_amount: Amount of current held.
            hops_remaining: Intermediate hops left before closing.
            route: Trades taken so far.

        Returns:
            Best accepted closing route through current, or empty.
        """
        self._stats["calls"] += 1

        if not self._store.has_outgoing(current):
            self._stats["misses"] += 1
            if current != origin:
                logger.debug(f"Unresolved {current.symbol}, requesting {current.symbol}->{origin.symbol}")
                self._request_rate(current, origin, current_amount)
            return EMPTY_ROUTE

        if hops_remaining <= 0:
            return self._close(origin, current, current_amount, route)

        best_route = EMPTY_ROUTE
        # The top-level call competes against its own input, deeper calls
        # against the amount the whole route started with
        best_return = current_amount if current == origin or not route else route[0].src_amount

        for next_asset, rate in self._store.outgoing_edges(current):
            if next_asset == current:
                continue
            if any(trade.src == next_asset for trade in route):
                continue

            try:
                next_amount = convert_amount(current, next_asset, rate, current_amount)
            except ArithmeticOverflow as e:
                self._stats["overflows"] += 1
                logger.debug(f"Skipping {current.symbol}->{next_asset.symbol}: {e}")
                continue

            trade = Trade(current, next_asset, current_amount, next_amount, rate)
            candidate = self.search(origin, next_asset, next_amount, hops_remaining - 1, route + (trade,))

            if not candidate:
                continue

            if candidate[-1].dst != origin:
                raise InvariantViolation(
                    f"Route from {origin.symbol} ends on {candidate[-1].dst.symbol}: {candidate}"
                )

            final_amount = candidate[-1].dst_amount
            if final_amount >= best_return:
                best_route = candidate
                best_return = final_amount

        return best_route

    def _close(self, origin: Asset, current: Asset, current_amount: int, route: Route) -> Route:
        """Take the current -> origin edge if it exists."""
        rate = self._store.get_rate(current, origin)
        if rate is None:
            return EMPTY_ROUTE

        try:
            origin_amount = convert_amount(current, origin, rate, current_amount)
        except ArithmeticOverflow as e:
            self._stats["overflows"] += 1
            logger.debug(f"Cannot close {current.symbol}->{origin.symbol}: {e}")
            return EMPTY_ROUTE

        return route + (Trade(current, origin, current_amount, origin_amount, rate),)

    @property
    def stats(self) -> dict[str, int]:
        """Get call, miss and overflow counters."""
        return dict(self._stats)

    def reset_stats(self) -> None:
        for key in self._stats:
            self._stats[key] = 0

"""
Directed exchange-rate graph.

Uses a NetworkX DiGraph as the backing store. Its adjacency dicts keep
insertion order, which the cycle search relies on for deterministic
tie-breaking, and overwriting an edge keeps its original position.
"""

import logging
from typing import Any

import networkx as nx

from arbcycle.core.types import Asset


logger = logging.getLogger(__name__)

RATE_ATTR = "rate"


class RateStore:
    """
    Holds the scaled rate for every quoted (src, dst) pair.

    Invariants:
    - an edge exists iff a nonzero rate was recorded for that ordered pair
    - no self-loops are ever stored
    """

    def __init__(self) -> None:
        self._graph: nx.DiGraph = nx.DiGraph()

    def update_rate(self, src: Asset, dst: Asset, rate_scaled: int) -> None:
        """
        Insert or overwrite the rate for src -> dst.

        A zero rate means "no quote" and is ignored, as is a self-loop.

        Args:
            src: Asset being sold.
            dst: Asset being bought.
            rate_scaled: Rate scaled by 10**18.
        """
        if rate_scaled == 0:
            return

        if src == dst:
            logger.debug(f"Ignoring self-loop rate for {src.symbol}")
            return

        self._graph.add_edge(src, dst, **{RATE_ATTR: rate_scaled})

    def has_outgoing(self, src: Asset) -> bool:
        """Check if any edge originates at src."""
        return src in self._graph and self._graph.out_degree(src) > 0

    def outgoing_edges(self, src: Asset) -> list[tuple[Asset, int]]:
        """
        Get (dst, rate_scaled) pairs leaving src, in insertion order.

        Returns an empty list for an asset the store has never seen.
        """
        if src not in self._graph:
            return []
        return [(dst, data[RATE_ATTR]) for dst, data in self._graph.adj[src].items()]

    def get_rate(self, src: Asset, dst: Asset) -> int | None:
        """Get the scaled rate for src -> dst, or None if not quoted."""
        data = self._graph.get_edge_data(src, dst)
        if data is None:
            return None
        return int(data[RATE_ATTR])

    def origins(self) -> list[Asset]:
        """Assets with at least one outgoing edge, in graph order."""
        return [node for node in self._graph.nodes if self._graph.out_degree(node) > 0]

    def assets(self) -> set[Asset]:
        """Get all assets in the graph."""
        return set(self._graph.nodes())

    @property
    def edge_count(self) -> int:
        return int(self._graph.number_of_edges())

    @property
    def graph(self) -> nx.DiGraph:
        """Get the underlying NetworkX graph."""
        return self._graph

    def clear(self) -> None:
        """Remove all rates."""
        self._graph.clear()

    def to_dict(self) -> dict[str, dict[str, str]]:
        """
        Snapshot the graph as {src_id: {dst_id: rate}}.

        Rates are strings so the snapshot survives JSON round trips
        without losing integer precision.
        """
        snapshot: dict[str, dict[str, Any]] = {}
        for src in self.origins():
            snapshot[src.id] = {dst.id: str(rate) for dst, rate in self.outgoing_edges(src)}
        return snapshot

    def __len__(self) -> int:
        return self.edge_count

    def __repr__(self) -> str:
        return (
            f"RateStore(assets={self._graph.number_of_nodes()}, "
            f"edges={self._graph.number_of_edges()})"
        )

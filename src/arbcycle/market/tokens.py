"""
Token metadata registry.

Loads assets from a CSV config file and attaches USD prices from a
price listing. The native currency is always present.
"""

import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal, InvalidOperation
from pathlib import Path

from arbcycle.config.constants import (
    DEFAULT_TOKEN_DECIMALS,
    ETH_ADDRESS,
    ETH_DECIMALS,
    ETH_SYMBOL,
)
from arbcycle.core.exceptions import TokenConfigError
from arbcycle.core.types import Asset


logger = logging.getLogger(__name__)


class TokenRegistry:
    """
    Manages asset metadata.

    Responsibilities:
    - Parsing the token config file
    - Applying USD prices by symbol
    - Providing lookups by address and symbol
    """

    __slots__ = ("_tokens",)

    def __init__(self, assets: Iterable[Asset] = ()) -> None:
        self._tokens: dict[str, Asset] = {}
        self.add(Asset(ETH_ADDRESS, ETH_SYMBOL, ETH_DECIMALS))
        for asset in assets:
            self.add(asset)

    def add(self, asset: Asset) -> bool:
        """
        Register an asset.

        Returns:
            False if the address was already registered.
        """
        key = asset.id.lower()
        if key in self._tokens:
            return False
        self._tokens[key] = asset
        return True

    def load_config(self, path: Path) -> int:
        """
        Load tokens from a config file.

        Format, one token per line:
            symbol,address[,decimals][,price_usd]
        Blank lines and lines starting with '#' are skipped.
        Duplicate addresses keep their first entry.

        Returns:
            Number of tokens added.

        Raises:
            TokenConfigError: On a malformed line.
            FileNotFoundError: If the file does not exist.
        """
        added = 0
        with path.open(encoding="utf-8") as f:
            for line_number, line in enumerate(f, 1):
                data = line.strip()
                if not data or data.startswith("#"):
                    continue

                asset = self._parse_line(data, line_number)
                if self.add(asset):
                    added += 1
                    logger.debug(f"Loaded token from config {asset.symbol} {asset.id}")
                    continue

                # Duplicate: only fill in a missing price
                key = asset.id.lower()
                if asset.has_price and not self._tokens[key].has_price:
                    self._tokens[key] = self._tokens[key].with_price(asset.price_usd)

        logger.info(f"Loaded {added} tokens from {path}")
        return added

    def _parse_line(self, data: str, line_number: int) -> Asset:
        fields = [part.strip() for part in data.split(",")]
        if len(fields) < 2 or not fields[1]:
            raise TokenConfigError(f"Expected 'symbol,address' on line {line_number}: {data!r}", line_number)

        symbol, address = fields[0], fields[1]

        try:
            price = Decimal(fields[3]) if len(fields) > 3 and fields[3] else Decimal(0)

            # Native currency ignores the configured symbol and decimals
            if address.lower() == ETH_ADDRESS.lower():
                return Asset(ETH_ADDRESS, ETH_SYMBOL, ETH_DECIMALS, price)

            decimals = int(fields[2]) if len(fields) > 2 and fields[2] else DEFAULT_TOKEN_DECIMALS
            return Asset(address, symbol or address, decimals, price)
        except (ValueError, InvalidOperation) as e:
            raise TokenConfigError(f"Invalid token on line {line_number}: {e}", line_number) from e

    def apply_prices(self, prices: Mapping[str, Decimal]) -> int:
        """
        Replace USD prices from a {symbol: price} mapping.

        Assets whose symbol is not listed keep their current price.

        Returns:
            Number of assets priced.
        """
        priced = 0
        for key, asset in self._tokens.items():
            price = prices.get(asset.symbol)
            if price is None or price < 0:
                continue
            self._tokens[key] = asset.with_price(price)
            priced += 1

        logger.info(f"Priced {priced}/{len(self._tokens)} tokens")
        return priced

    def get_by_address(self, address: str) -> Asset | None:
        return self._tokens.get(address.lower())

    def get_by_symbol(self, symbol: str) -> Asset | None:
        for asset in self._tokens.values():
            if asset.symbol == symbol:
                return asset
        return None

    @property
    def eth(self) -> Asset:
        """Get the native currency asset."""
        return self._tokens[ETH_ADDRESS.lower()]

    def all(self) -> list[Asset]:
        """Get all assets in load order."""
        return list(self._tokens.values())

    def priced(self) -> list[Asset]:
        """Get assets with a known USD price."""
        return [a for a in self._tokens.values() if a.has_price]

    def __len__(self) -> int:
        return len(self._tokens)

    def __contains__(self, address: object) -> bool:
        return isinstance(address, str) and address.lower() in self._tokens

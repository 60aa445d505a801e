"""
Unit tests for TokenRegistry.

Tests config parsing, price application, and lookups.
"""

from decimal import Decimal
from pathlib import Path

import pytest

from arbcycle.config.constants import ETH_ADDRESS
from arbcycle.core.exceptions import TokenConfigError
from arbcycle.core.types import Asset
from arbcycle.market.tokens import TokenRegistry


DAI_ADDRESS = "0x6B175474E89094C44Da98b954EedeAC495271d0F"
USDC_ADDRESS = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"


def write_config(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "tokens.csv"
    path.write_text(content, encoding="utf-8")
    return path


class TestTokenRegistry:
    """Tests for TokenRegistry."""

    def test_eth_always_present(self) -> None:
        """The native currency is registered on construction."""
        registry = TokenRegistry()

        assert len(registry) == 1
        assert registry.eth.symbol == "ETH"
        assert registry.eth.decimals == 18
        assert ETH_ADDRESS in registry

    def test_load_config(self, tmp_path: Path) -> None:
        """Test parsing symbols, addresses, decimals and prices."""
        path = write_config(
            tmp_path,
            "# symbol,address,decimals,price\n"
            "\n"
            f"DAI,{DAI_ADDRESS}\n"
            f"USDC, {USDC_ADDRESS} ,6,1.00\n",
        )
        registry = TokenRegistry()

        added = registry.load_config(path)

        assert added == 2
        dai = registry.get_by_symbol("DAI")
        usdc = registry.get_by_symbol("USDC")
        assert dai is not None and dai.decimals == 18 and not dai.has_price
        assert usdc is not None and usdc.decimals == 6 and usdc.price_usd == Decimal("1.00")
        assert [a.symbol for a in registry.all()] == ["ETH", "DAI", "USDC"]

    def test_lookup_case_insensitive(self, tmp_path: Path) -> None:
        """Addresses match regardless of checksum casing."""
        registry = TokenRegistry()
        registry.load_config(write_config(tmp_path, f"DAI,{DAI_ADDRESS}\n"))

        asset = registry.get_by_address(DAI_ADDRESS.lower())
        assert asset is not None
        assert asset.symbol == "DAI"
        assert registry.get_by_address("0x0") is None

    def test_duplicate_address_keeps_first(self, tmp_path: Path) -> None:
        """Test that a repeated address does not replace the first entry."""
        path = write_config(tmp_path, f"DAI,{DAI_ADDRESS}\nSAI,{DAI_ADDRESS.lower()},9\n")
        registry = TokenRegistry()

        assert registry.load_config(path) == 1
        asset = registry.get_by_address(DAI_ADDRESS)
        assert asset is not None
        assert asset.symbol == "DAI"
        assert asset.decimals == 18

    def test_eth_line_uses_native_metadata(self, tmp_path: Path) -> None:
        """The sentinel address is always ETH with 18 decimals, but takes a configured price."""
        registry = TokenRegistry()

        added = registry.load_config(write_config(tmp_path, f"WETH,{ETH_ADDRESS},6,2000\n"))

        assert added == 0
        assert registry.eth.symbol == "ETH"
        assert registry.eth.decimals == 18
        assert registry.eth.price_usd == Decimal("2000")

    @pytest.mark.parametrize(
        "line",
        [
            "DAI\n",
            "DAI,\n",
            f"DAI,{DAI_ADDRESS},eighteen\n",
            f"DAI,{DAI_ADDRESS},-1\n",
            f"DAI,{DAI_ADDRESS},18,cheap\n",
        ],
    )
    def test_malformed_line(self, tmp_path: Path, line: str) -> None:
        """Malformed entries report their line number."""
        registry = TokenRegistry()

        with pytest.raises(TokenConfigError) as exc_info:
            registry.load_config(write_config(tmp_path, "# header\n" + line))

        assert exc_info.value.line_number == 2

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            TokenRegistry().load_config(tmp_path / "missing.csv")

    def test_apply_prices(self) -> None:
        """Prices are applied by symbol, unlisted symbols keep theirs."""
        registry = TokenRegistry(
            [
                Asset(DAI_ADDRESS, "DAI", 18),
                Asset(USDC_ADDRESS, "USDC", 6, Decimal("0.99")),
            ]
        )

        priced = registry.apply_prices({"ETH": Decimal("2500"), "DAI": Decimal("1.001")})

        assert priced == 2
        assert registry.eth.price_usd == Decimal("2500")
        assert registry.get_by_symbol("DAI").price_usd == Decimal("1.001")  # type: ignore[union-attr]
        assert registry.get_by_symbol("USDC").price_usd == Decimal("0.99")  # type: ignore[union-attr]
        assert [a.symbol for a in registry.priced()] == ["ETH", "DAI", "USDC"]

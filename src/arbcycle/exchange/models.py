"""
Pydantic models for quote and price API responses.

These models provide type-safe parsing of external responses
with automatic validation.
"""

from decimal import Decimal

from pydantic import BaseModel, Field, field_validator


class ExpectedRate(BaseModel):
    """Expected-rate quote for one src -> dst trade size."""

    expected_rate: int = Field(alias="expectedRate", ge=0)
    slippage_rate: int = Field(default=0, alias="slippageRate", ge=0)

    model_config = {"populate_by_name": True}

    @field_validator("expected_rate", "slippage_rate", mode="before")
    @classmethod
    def parse_uint(cls, v: object) -> object:
        """Rates are sent as decimal or 0x-prefixed hex strings."""
        if isinstance(v, str) and v.lower().startswith("0x"):
            return int(v, 16)
        return v


class UsdQuote(BaseModel):
    """USD quote of a listed cryptocurrency."""

    price: Decimal | None = None


class ListingQuote(BaseModel):
    """Quotes keyed by convert currency."""

    usd: UsdQuote = Field(alias="USD")

    model_config = {"populate_by_name": True}


class Listing(BaseModel):
    """Single cryptocurrency listing."""

    id: int
    name: str
    symbol: str
    quote: ListingQuote


class ListingStatus(BaseModel):
    """Status block of a CoinMarketCap response."""

    error_code: int = 0
    error_message: str | None = None


class ListingsResponse(BaseModel):
    """Latest listings response."""

    status: ListingStatus = Field(default_factory=ListingStatus)
    data: list[Listing] = Field(default_factory=list)

    def prices(self) -> dict[str, Decimal]:
        """
        Get USD prices by symbol.

        The first listing wins when several coins share a symbol,
        listings are ranked by market cap.
        """
        prices: dict[str, Decimal] = {}
        for listing in self.data:
            if listing.symbol in prices or listing.quote.usd.price is None:
                continue
            prices[listing.symbol] = listing.quote.usd.price
        return prices

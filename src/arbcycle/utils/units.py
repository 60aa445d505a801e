"""
Fixed-point unit helpers.

Amounts are integers in an asset's base units (10**decimals per whole
token), rates are integers scaled by 10**RATE_PRECISION. These helpers
move values across that boundary without going through float.
"""

from decimal import ROUND_FLOOR, Decimal

from arbcycle.config.constants import RATE_PRECISION, RATE_SCALE


def to_base_units(value: Decimal | int | str, decimals: int) -> int:
    """
    Convert a whole-token value to base units, rounding down.

    Example:
        >>> to_base_units("1.5", 6)
        1500000
    """
    scaled = Decimal(value).scaleb(decimals)
    return int(scaled.to_integral_value(rounding=ROUND_FLOOR))


def from_base_units(amount: int, decimals: int) -> Decimal:
    """Convert base units back to a whole-token Decimal."""
    return Decimal(amount).scaleb(-decimals)


def scale_rate(real_rate: Decimal | int | str) -> int:
    """
    Scale a real exchange rate to its fixed-point integer form.

    Example:
        >>> scale_rate("0.4")
        400000000000000000
    """
    return to_base_units(real_rate, RATE_PRECISION)


def unscale_rate(rate_scaled: int) -> Decimal:
    """Convert a scaled rate back to a Decimal."""
    return from_base_units(rate_scaled, RATE_PRECISION)


def invert_rate(rate_scaled: int) -> int:
    """
    Exact inverse of a scaled rate, i.e. 10**(2P) // rate.

    Raises:
        ZeroDivisionError: If rate_scaled is zero.
    """
    return RATE_SCALE * RATE_SCALE // rate_scaled


def notional_amount(notional_usd: Decimal | float | str, price_usd: Decimal, decimals: int) -> int:
    """
    Base-unit amount of an asset worth notional_usd dollars.

    Example:
        >>> notional_amount(100, Decimal("2000"), 18)
        50000000000000000
    """
    if price_usd <= 0:
        raise ValueError(f"price_usd must be positive, got {price_usd}")
    return to_base_units(Decimal(str(notional_usd)) / price_usd, decimals)

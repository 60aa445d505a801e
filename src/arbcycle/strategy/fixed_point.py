"""
Fixed-point amount conversion between assets of different precision.

The rate is applied before any decimal shift so that no precision is
lost when, for example, a 6-decimal stablecoin is converted into an
18-decimal token.
"""

from arbcycle.config.constants import MAX_UINT256, RATE_PRECISION
from arbcycle.core.exceptions import ArithmeticOverflow
from arbcycle.core.types import Asset


def convert_amount(src: Asset, dst: Asset, rate_scaled: int, src_amount: int) -> int:
    """
    Convert src_amount of src into the equivalent amount of dst.

    Args:
        src: Asset being sold.
        dst: Asset being bought.
        rate_scaled: src -> dst rate scaled by 10**18.
        src_amount: Amount in src base units.

    Returns:
        Amount in dst base units, truncated toward zero.

    Raises:
        ArithmeticOverflow: If the unscaled product exceeds 2**256 - 1.

    Example:
        >>> usdc = Asset("usdc", "USDC", 6)
        >>> dai = Asset("dai", "DAI", 18)
        >>> convert_amount(usdc, dai, 10**18, 5_000_000)
        5000000000000000000
    """
    if dst.decimals >= src.decimals:
        product = src_amount * rate_scaled * 10 ** (dst.decimals - src.decimals)
        divisor = 10**RATE_PRECISION
    else:
        product = src_amount * rate_scaled
        divisor = 10 ** (src.decimals - dst.decimals + RATE_PRECISION)

    if product > MAX_UINT256:
        raise ArithmeticOverflow(
            f"{src.symbol}->{dst.symbol} conversion of {src_amount} overflows 256 bits",
            value=product,
        )

    return product // divisor

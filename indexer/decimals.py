"""
Decimal Normalizer.

Converts raw base-unit integers into display decimals:
raw / 10**decimals, computed exactly.
"""

from decimal import Decimal

from core.constants import DEFAULT_TOKEN_DECIMALS


def to_decimal(raw: int, decimals: int = DEFAULT_TOKEN_DECIMALS) -> Decimal:
    """
    Convert a raw integer amount to its decimal display value.

    The result is built from the digit tuple with a shifted
    exponent, so no context rounding applies even for full
    uint256 values.

    Example:
        >>> to_decimal(1500000000000000000)
        Decimal('1.500000000000000000')
    """
    sign, digits, exponent = Decimal(int(raw)).as_tuple()
    return Decimal((sign, digits, exponent - decimals))

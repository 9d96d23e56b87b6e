"""
Money helpers for payroll calculations.

All payroll amounts are single-currency Decimals rounded half-up to cents.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, List

ZERO = Decimal("0.00")
CENT = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    """Convert numeric input to Decimal; ``None`` counts as zero."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    # str() avoids binary float artifacts such as 0.1 -> 0.1000000000000000055
    return Decimal(str(value))


def quantize_money(value: Any) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def split_evenly(total: Any, parts: int) -> List[Decimal]:
    """
    Split ``total`` into ``parts`` cent amounts that sum exactly to the
    rounded total. Leftover cents go to the first shares, one each.
    """
    if parts < 1:
        raise ValueError("parts must be at least 1")
    cents = int(quantize_money(total) / CENT)
    base, remainder = divmod(cents, parts)
    return [
        (Decimal(base + (1 if i < remainder else 0)) * CENT).quantize(CENT)
        for i in range(parts)
    ]

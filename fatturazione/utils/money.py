"""
Helpers for currency arithmetic.

All amounts are ``Decimal``; rounding to cents uses ROUND_HALF_UP, which on
``Decimal`` rounds half away from zero for negative values too.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal("100")


def to_decimal(value) -> Decimal:
    """Convert int/str/float/Decimal to Decimal without binary float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round2(value) -> Decimal:
    """Round a money value to cents, half away from zero."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def percentage_of(amount: Decimal, percentage: Decimal) -> Decimal:
    """Unrounded ``amount * percentage / 100``."""
    return to_decimal(amount) * to_decimal(percentage) / HUNDRED


def money_sum(values: Iterable[Decimal]) -> Decimal:
    return round2(sum((to_decimal(v) for v in values), ZERO))

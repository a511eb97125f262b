"""Money helpers

All ledger amounts are fixed-point decimals with two fractional digits,
stored as NUMERIC(18, 2).
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

# Exclusive upper bound of a NUMERIC(18, 2) column.
MAX_AMOUNT = Decimal(10) ** 16


def to_money(value: Union[Decimal, int, str]) -> Decimal:
    """Quantize a value to cents (half-up)."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def has_valid_precision(value: Decimal) -> bool:
    """True when the value carries no more than two fractional digits."""
    try:
        return value == value.quantize(CENT)
    except InvalidOperation:
        return False


def is_valid_amount(value: Decimal) -> bool:
    """
    True for a finite posting amount in (0, MAX_AMOUNT) with at most two
    fractional digits
    """
    if not value.is_finite():
        return False
    return ZERO < value < MAX_AMOUNT and has_valid_precision(value)

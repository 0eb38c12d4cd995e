"""
Integer money arithmetic.

Amounts are integer minor units (cents) and rates are integer basis points
(10000 = 100%). Fractional results are rounded once, half-up, when a rate is
applied; sums of cents never round.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

BPS_PER_UNIT = 10000
CENTS_PER_UNIT = 100

_CENT = Decimal("0.01")


def to_cents(amount: Decimal | str | int) -> int:
    """
    Convert a major-unit amount (e.g. "61.425") to cents, rounding half-up.

    Floats are rejected: they cannot represent most decimal amounts exactly.
    """
    if isinstance(amount, float):
        raise TypeError("Use Decimal or str for money, not float")
    value = Decimal(amount) * CENTS_PER_UNIT
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def from_cents(cents: int) -> Decimal:
    """Cents to a major-unit Decimal with exactly two fractional digits."""
    return (Decimal(cents) / CENTS_PER_UNIT).quantize(_CENT)


def percent_to_bps(percent: Decimal | str | int) -> int:
    """Convert a percentage (e.g. "8.25") to basis points (825)."""
    if isinstance(percent, float):
        raise TypeError("Use Decimal or str for rates, not float")
    value = Decimal(percent) * 100
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def apply_rate(cents: int, rate_bps: int) -> int:
    """Portion of an amount at a basis-point rate, rounded half-up to a cent."""
    value = Decimal(cents) * Decimal(rate_bps) / BPS_PER_UNIT
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def clamp_non_negative(cents: int) -> int:
    return max(0, cents)


def sum_cents(amounts: Iterable[int]) -> int:
    return sum(amounts, 0)


def format_cents(cents: int, currency_code: str = "") -> str:
    """Display string such as "PKR 6,142.50"."""
    text = f"{from_cents(cents):,.2f}"
    return f"{currency_code} {text}" if currency_code else text


def ratio_bps(part_cents: int, whole_cents: int) -> int:
    """part / whole in basis points, rounded half-up; 0 when whole is 0."""
    if whole_cents == 0:
        return 0
    value = Decimal(part_cents) * BPS_PER_UNIT / Decimal(whole_cents)
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))

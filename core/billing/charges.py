"""
Derived charges: room charges from stay length and order aggregation.

Pure functions of their inputs.
"""

import math
from datetime import date, datetime
from typing import Iterable, Protocol

from core.billing.money import sum_cents
from core.exceptions import ValidationError
from core.models.guest import StayPeriod
from utils.timezone import as_utc_datetime, now_utc

SECONDS_PER_DAY = 86400


class _Line(Protocol):
    quantity: int


class _Order(Protocol):
    paid: bool
    total_amount_cents: int


def stay_days(
    check_in: date | datetime | None,
    check_out: date | datetime | None = None,
    now: datetime | None = None,
) -> int:
    """
    Billable days between check-in and check-out (or now for an open stay).

    Partial days round up, and anything under one day (including same-day and
    inverted spans) bills as one day.

    Raises:
        ValidationError: If check_in is missing or a datetime is naive
    """
    if check_in is None:
        raise ValidationError("check_in is required to compute stay length")

    end = check_out if check_out is not None else (now or now_utc())

    try:
        start_dt = as_utc_datetime(check_in)
        end_dt = as_utc_datetime(end)
    except ValueError as e:
        raise ValidationError(str(e)) from e

    seconds = (end_dt - start_dt).total_seconds()
    return max(1, math.ceil(seconds / SECONDS_PER_DAY))


def room_charges(stay: StayPeriod, daily_rate_cents: int, now: datetime | None = None) -> int:
    """stay_days * daily rate; walk-ins (no room) are never charged for a room."""
    if stay.is_walk_in:
        return 0
    return stay_days(stay.check_in, stay.check_out, now) * daily_rate_cents


def line_total(quantity: int, unit_price_cents: int) -> int:
    return quantity * unit_price_cents


def order_total(lines: Iterable) -> int:
    """
    Sum of quantity * unit price over order lines.

    Accepts sale/order lines (unit_price_cents) and purchase lines
    (unit_cost_cents).
    """
    total = 0
    for line in lines:
        unit = getattr(line, "unit_price_cents", None)
        if unit is None:
            unit = line.unit_cost_cents
        total += line_total(line.quantity, unit)
    return total


def unpaid_orders_total(orders: Iterable[_Order]) -> int:
    """Sum of totals over orders still marked unpaid."""
    return sum_cents(order.total_amount_cents for order in orders if not order.paid)

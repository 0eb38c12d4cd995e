"""Guest checkout domain models.

All amounts are stored in cents (integer); tax rate in basis points.
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel

from core.models.billing import BillBreakdown, DiscountType


class CheckoutTotals(BillBreakdown):
    """Itemized bill for a guest at (or before) checkout."""

    guest_id: UUID
    stay_days: int
    daily_rate_cents: int
    room_charges_cents: int
    unpaid_food_cents: int
    unpaid_order_count: int


class Checkout(BaseModel):
    """Checkout record as stored, including the discount actually applied."""

    id: UUID
    guest_id: UUID
    check_out: date
    stay_days: int
    room_charges_cents: int
    unpaid_food_cents: int
    subtotal_cents: int
    discount_type: DiscountType | None
    discount_value: int
    discount_description: str | None
    discount_cents: int
    tax_rate_bps: int
    tax_cents: int
    grand_total_cents: int
    created_at: datetime

    model_config = {"from_attributes": True}

"""Billing inputs and outputs: discounts, tax settings, bill breakdowns.

Amounts are integer cents, rates are basis points (10000 = 100%).
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class DiscountType(str, Enum):
    """How a discount value is interpreted."""

    FLAT = "flat"
    PERCENTAGE = "percentage"


class Discount(BaseModel):
    """
    Discount supplied for one bill computation.

    value is cents for FLAT and basis points for PERCENTAGE (1000 = 10%).
    Not a standing entity; checkout persists the discount it applied.
    """

    type: DiscountType = DiscountType.FLAT
    value: int = Field(0, ge=0)
    description: str = Field("", max_length=255)

    model_config = {"frozen": True}


class TaxConfig(BaseModel):
    """Snapshot of the business tax setting, captured once per computation."""

    enabled: bool = False
    rate_bps: int = Field(0, ge=0, le=10000)
    updated_at: datetime | None = None

    model_config = {"frozen": True, "from_attributes": True}

    @property
    def is_effective(self) -> bool:
        """Whether applying this config changes an amount."""
        return self.enabled and self.rate_bps > 0


class TaxConfigUpdate(BaseModel):
    """Settings-update payload. Omitted fields keep their current value."""

    enabled: bool | None = None
    rate_bps: int | None = Field(None, ge=0, le=10000)


class BillBreakdown(BaseModel):
    """Every step of subtotal -> discount -> tax -> grand total."""

    subtotal_cents: int
    discount_cents: int
    after_discount_cents: int
    tax_rate_bps: int
    tax_cents: int
    grand_total_cents: int

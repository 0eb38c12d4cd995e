"""Food / product order domain models.

Orders use the toggle payment model: an order is either fully paid or fully
unpaid. Prices are stored in cents (integer).
"""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field, computed_field, model_validator


class CustomerType(str, Enum):
    """Who an order is billed to."""

    GUEST = "guest"
    WALK_IN = "walk_in"


class OrderLineCreate(BaseModel):
    """One line of a new order."""

    menu_item_id: UUID | None = None
    item_name: str = Field(..., min_length=1, max_length=100)
    quantity: int = Field(1, ge=1)
    unit_price_cents: int = Field(..., ge=0)


class OrderLine(BaseModel):
    """Order line as stored."""

    id: UUID
    order_id: UUID
    menu_item_id: UUID | None = None
    item_name: str
    quantity: int
    unit_price_cents: int

    model_config = {"from_attributes": True}

    @property
    def line_total_cents(self) -> int:
        return self.quantity * self.unit_price_cents


class FoodOrderCreate(BaseModel):
    """Data required to place an order."""

    guest_id: UUID | None = None
    customer_type: CustomerType = CustomerType.GUEST
    customer_name: str | None = Field(None, max_length=100)
    lines: list[OrderLineCreate] = Field(..., min_length=1)

    @model_validator(mode="after")
    def guest_orders_need_guest(self) -> "FoodOrderCreate":
        """A guest order must reference the guest it is billed to."""
        if self.customer_type == CustomerType.GUEST and self.guest_id is None:
            raise ValueError("guest_id is required for guest orders")
        return self


class FoodOrder(BaseModel):
    """Full order entity as stored, with its lines."""

    id: UUID
    guest_id: UUID | None
    customer_type: CustomerType
    customer_name: str | None
    lines: list[OrderLine] = Field(default_factory=list)
    paid: bool
    paid_at: datetime | None
    checkout_id: UUID | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def total_amount_cents(self) -> int:
        """Recomputed from lines on every read."""
        return sum(line.line_total_cents for line in self.lines)

"""Sale domain models.

A sale is billed to a customer account (or to a walk-in when customer_id is
None). All prices are stored in cents (integer).
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, computed_field

from core.models.payment import PaymentTerms


class SaleLineCreate(BaseModel):
    """One line of a new sale."""

    product_id: UUID | None = None
    item_name: str = Field(..., min_length=1, max_length=255)
    quantity: int = Field(1, ge=1)
    unit_price_cents: int = Field(..., ge=0)


class SaleLine(BaseModel):
    """Sale line as stored."""

    id: UUID
    sale_id: UUID
    product_id: UUID | None = None
    item_name: str
    quantity: int
    unit_price_cents: int

    model_config = {"from_attributes": True}

    @property
    def line_total_cents(self) -> int:
        return self.quantity * self.unit_price_cents


class SaleCreate(PaymentTerms):
    """Data required to record a sale."""

    customer_id: UUID | None = None
    customer_name: str | None = Field(None, max_length=255)
    reference: str | None = Field(None, max_length=100)
    notes: str | None = Field(None, max_length=2000)
    lines: list[SaleLineCreate] = Field(..., min_length=1)

    @property
    def total_amount_cents(self) -> int:
        return sum(line.quantity * line.unit_price_cents for line in self.lines)


class Sale(BaseModel):
    """Full sale entity as stored, with its lines."""

    id: UUID
    customer_id: UUID | None
    customer_name: str | None
    reference: str | None
    notes: str | None
    lines: list[SaleLine] = Field(default_factory=list)
    paid_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def total_amount_cents(self) -> int:
        """Recomputed from lines on every read."""
        return sum(line.line_total_cents for line in self.lines)

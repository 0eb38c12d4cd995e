"""Purchase (stock bought from a supplier) domain models.

All costs are stored in cents (integer).
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field, computed_field

from core.models.payment import PaymentTerms


class PurchaseLineCreate(BaseModel):
    """One line of a purchase."""

    product_id: UUID | None = None
    item_name: str = Field(..., min_length=1, max_length=255)
    quantity: int = Field(1, ge=1)
    unit_cost_cents: int = Field(..., gt=0)


class PurchaseLine(BaseModel):
    """Purchase line as stored."""

    id: UUID
    purchase_id: UUID
    product_id: UUID | None = None
    item_name: str
    quantity: int
    unit_cost_cents: int

    model_config = {"from_attributes": True}

    @property
    def line_total_cents(self) -> int:
        return self.quantity * self.unit_cost_cents


class PurchaseCreate(PaymentTerms):
    """Data required to record a purchase."""

    supplier_id: UUID | None = None
    purchase_date: date
    reference: str | None = Field(None, max_length=100)
    notes: str | None = Field(None, max_length=2000)
    lines: list[PurchaseLineCreate] = Field(..., min_length=1)

    @property
    def total_amount_cents(self) -> int:
        return sum(line.quantity * line.unit_cost_cents for line in self.lines)


class Purchase(BaseModel):
    """Full purchase entity as stored, with its lines."""

    id: UUID
    supplier_id: UUID | None
    purchase_date: date
    reference: str | None
    notes: str | None
    lines: list[PurchaseLine] = Field(default_factory=list)
    paid_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def total_amount_cents(self) -> int:
        """Recomputed from lines on every read."""
        return sum(line.line_total_cents for line in self.lines)

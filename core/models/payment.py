"""Payment ledger domain models.

Sales and purchases use the accumulating payment model: each payment is an
append-only record and the balance is total minus the sum of payments.
All amounts are stored in cents (integer).
"""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field, computed_field, model_validator


class EntityKind(str, Enum):
    """Billable entities that carry a payment ledger."""

    SALE = "sale"
    PURCHASE = "purchase"


class PaymentMethod(str, Enum):
    """How money changed hands."""

    CASH = "cash"
    CARD = "card"
    MOBILE = "mobile"
    BANK = "bank"


class PaymentMode(str, Enum):
    """Payment taken when a sale or purchase is created."""

    PAY_LATER = "pay_later"
    PAY_NOW = "pay_now"
    PAY_PARTIAL = "pay_partial"


class PaymentTerms(BaseModel):
    """Creation-time payment fields shared by sales and purchases."""

    payment_mode: PaymentMode = PaymentMode.PAY_LATER
    payment_amount_cents: int | None = Field(None, ge=0)
    payment_method: PaymentMethod = PaymentMethod.CASH
    payment_note: str | None = Field(None, max_length=500)

    @model_validator(mode="after")
    def partial_needs_amount(self) -> "PaymentTerms":
        """pay_partial must say how much is paid now."""
        if self.payment_mode == PaymentMode.PAY_PARTIAL and self.payment_amount_cents is None:
            raise ValueError("payment_amount_cents is required for pay_partial")
        return self


class PaymentCreate(BaseModel):
    """A payment to append to an entity's ledger."""

    amount_cents: int = Field(..., gt=0)
    method: PaymentMethod = PaymentMethod.CASH
    note: str | None = Field(None, max_length=500)


class Payment(BaseModel):
    """Payment record as stored."""

    id: UUID
    entity_kind: EntityKind
    entity_id: UUID
    amount_cents: int
    method: PaymentMethod
    note: str | None
    user_id: UUID | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class EntityBalance(BaseModel):
    """Total, paid and outstanding amounts for one billable entity."""

    entity_kind: EntityKind
    entity_id: UUID
    total_amount_cents: int
    amount_paid_cents: int
    balance_due_cents: int

    @computed_field
    @property
    def paid(self) -> bool:
        return self.balance_due_cents <= 0

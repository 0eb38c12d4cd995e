"""Expense domain models. Amounts are stored in cents (integer)."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from core.models.payment import PaymentMethod


class ExpenseCreate(BaseModel):
    """Data required to record an expense."""

    expense_date: date
    category: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    amount_cents: int = Field(..., gt=0)
    payment_method: PaymentMethod | None = None

    @field_validator("category")
    @classmethod
    def strip_category(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("category cannot be blank")
        return value


class Expense(BaseModel):
    """Full expense entity as stored."""

    id: UUID
    expense_date: date
    category: str
    description: str | None
    amount_cents: int
    payment_method: PaymentMethod | None
    created_at: datetime

    model_config = {"from_attributes": True}

"""Customer (sales account holder) domain models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class CustomerCreate(BaseModel):
    """Data required to create a customer account."""

    name: str = Field(..., min_length=1, max_length=255)
    phone: str | None = Field(None, max_length=50)
    notes: str | None = Field(None, max_length=2000)


class CustomerUpdate(BaseModel):
    """Data that can be updated on a customer. All fields optional."""

    name: str | None = Field(None, min_length=1, max_length=255)
    phone: str | None = Field(None, max_length=50)
    notes: str | None = Field(None, max_length=2000)


class Customer(BaseModel):
    """Full customer entity as stored."""

    id: UUID
    name: str
    phone: str | None
    notes: str | None
    is_active: bool = True
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

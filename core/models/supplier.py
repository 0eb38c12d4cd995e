"""Supplier (purchase account holder) domain models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class SupplierCreate(BaseModel):
    """Data required to create a supplier."""

    name: str = Field(..., min_length=1, max_length=255)
    contact_name: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=50)
    notes: str | None = Field(None, max_length=2000)


class SupplierUpdate(BaseModel):
    """Data that can be updated on a supplier. All fields optional."""

    name: str | None = Field(None, min_length=1, max_length=255)
    contact_name: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=50)
    notes: str | None = Field(None, max_length=2000)


class Supplier(BaseModel):
    """Full supplier entity as stored."""

    id: UUID
    name: str
    contact_name: str | None
    phone: str | None
    notes: str | None
    is_active: bool = True
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

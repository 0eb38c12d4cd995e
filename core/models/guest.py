"""Guest stay domain models.

Daily rates are stored in cents (integer).
"""

from datetime import date, datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from core.models.room import ROOM_NUMBER_PATTERN


class GuestStatus(str, Enum):
    """Guest stay lifecycle status."""

    ACTIVE = "active"
    CHECKED_OUT = "checked_out"


class StayPeriod(BaseModel):
    """
    Check-in and optional check-out of a stay.

    An open stay (no check_out) is billed up to "now". room_number None means
    a walk-in with no room, which carries no room charge.
    """

    check_in: date | datetime
    check_out: date | datetime | None = None
    room_number: str | None = None

    model_config = {"frozen": True}

    @property
    def is_walk_in(self) -> bool:
        return self.room_number is None


class GuestCreate(BaseModel):
    """Data required to check a guest in."""

    name: str = Field(..., min_length=1, max_length=100)
    phone: str | None = Field(None, max_length=50)
    room_number: str | None = Field(None, max_length=10, pattern=ROOM_NUMBER_PATTERN)
    check_in: date
    check_out: date | None = None
    daily_rate_cents: int = Field(0, ge=0)

    @model_validator(mode="after")
    def check_out_not_before_check_in(self) -> "GuestCreate":
        """Reject a check-out date earlier than check-in."""
        if self.check_out is not None and self.check_out < self.check_in:
            raise ValueError("check_out cannot be before check_in")
        return self


class GuestUpdate(BaseModel):
    """
    Editable fields of an active stay. All fields optional.

    Omitted or null fields keep their value, except room_number: sending it
    explicitly as null moves the guest out of their room, making the stay a
    walk-in with no room charge.
    """

    name: str | None = Field(None, min_length=1, max_length=100)
    phone: str | None = Field(None, max_length=50)
    room_number: str | None = Field(None, max_length=10, pattern=ROOM_NUMBER_PATTERN)
    check_out: date | None = None
    daily_rate_cents: int | None = Field(None, ge=0)


class Guest(BaseModel):
    """Full guest entity as stored."""

    id: UUID
    name: str
    phone: str | None
    room_number: str | None
    check_in: date
    check_out: date | None
    daily_rate_cents: int
    status: GuestStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @property
    def stay(self) -> StayPeriod:
        return StayPeriod(
            check_in=self.check_in,
            check_out=self.check_out,
            room_number=self.room_number,
        )

    @property
    def is_checked_out(self) -> bool:
        return self.status == GuestStatus.CHECKED_OUT

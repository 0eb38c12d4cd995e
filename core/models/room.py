"""Room registry models.

Guests are checked in to a registered, active room by its number; a guest
with no room is a walk-in.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

ROOM_NUMBER_PATTERN = r"^[A-Za-z0-9_-]+$"


class RoomCreate(BaseModel):
    """Data required to register a room."""

    number: str = Field(..., min_length=1, max_length=10, pattern=ROOM_NUMBER_PATTERN)

    @field_validator("number", mode="before")
    @classmethod
    def strip_number(cls, v):
        """Surrounding whitespace is not part of a room number."""
        return v.strip() if isinstance(v, str) else v


class Room(BaseModel):
    """Full room entity as stored."""

    id: UUID
    number: str
    is_active: bool = True
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

"""
Room registry.

Guests can only be checked in to a registered, active room. Rooms are
deactivated rather than deleted so past stays keep pointing at them.
"""

import logging
from uuid import UUID, uuid4

from clients.postgres_client import PostgresClient, Transaction
from core.audit import AuditLogger, AuditAction
from core.exceptions import ConflictError, NotFoundError, ValidationError
from core.models import Room, RoomCreate
from utils.timezone import now_utc

logger = logging.getLogger(__name__)


class RoomService:
    """Service for the room registry."""

    def __init__(self, postgres: PostgresClient, audit: AuditLogger):
        self.postgres = postgres
        self.audit = audit

    def create(self, data: RoomCreate) -> Room:
        """
        Register a room.

        Raises:
            ConflictError: If a room with that number already exists
        """
        if self.get_by_number(data.number) is not None:
            raise ConflictError(f"Room {data.number} already exists")

        now = now_utc()
        row = self.postgres.execute_returning(
            """
            INSERT INTO rooms (id, number, is_active, created_at, updated_at)
            VALUES (%s, %s, TRUE, %s, %s)
            ON CONFLICT (number) DO NOTHING
            RETURNING *
            """,
            (uuid4(), data.number, now, now)
        )
        # Lost a race with another insert of the same number
        if not row:
            raise ConflictError(f"Room {data.number} already exists")

        room = Room.model_validate(row[0])

        self.audit.log_change(
            entity_type="room",
            entity_id=room.id,
            action=AuditAction.CREATE,
            changes={"created": data.model_dump(mode="json")}
        )

        logger.info("Room %s registered", room.number)

        return room

    def get_by_id(self, room_id: UUID) -> Room | None:
        row = self.postgres.execute_single("SELECT * FROM rooms WHERE id = %s", (room_id,))
        return Room.model_validate(row) if row else None

    def get_by_number(self, number: str) -> Room | None:
        row = self.postgres.execute_single("SELECT * FROM rooms WHERE number = %s", (number,))
        return Room.model_validate(row) if row else None

    def require_active(self, number: str, tx: Transaction | None = None) -> Room:
        """
        Room a guest may be placed in.

        Inside a transaction the room row is share-locked, so it cannot be
        deactivated before the caller commits.

        Raises:
            NotFoundError: If no room has that number
            ValidationError: If the room is deactivated
        """
        query = "SELECT * FROM rooms WHERE number = %s"
        if tx is not None:
            query += " FOR SHARE"

        row = (tx or self.postgres).execute_single(query, (number,))
        if row is None:
            raise NotFoundError("room", number)

        room = Room.model_validate(row)
        if not room.is_active:
            raise ValidationError(f"Room {number} is inactive")
        return room

    def list_all(self, include_inactive: bool = False) -> list[Room]:
        """Rooms ordered by number."""
        rows = self.postgres.execute(
            """
            SELECT * FROM rooms
            WHERE is_active OR %s
            ORDER BY number ASC
            """,
            (include_inactive,)
        )
        return [Room.model_validate(row) for row in rows]

    def deactivate(self, room_id: UUID) -> Room:
        """
        Take a room out of service.

        Raises:
            NotFoundError: If room not found
            ConflictError: If a guest is still staying in the room
        """
        with self.postgres.transaction() as tx:
            row = tx.execute_single("SELECT * FROM rooms WHERE id = %s FOR UPDATE", (room_id,))
            if row is None:
                raise NotFoundError("room", room_id)

            current = Room.model_validate(row)
            if not current.is_active:
                return current

            occupancy = tx.execute_single(
                "SELECT COUNT(*) AS guests FROM guests WHERE room_number = %s AND status = 'active'",
                (current.number,)
            )
            if occupancy["guests"]:
                raise ConflictError(f"Room {current.number} has active guests and cannot be deactivated")

            row = tx.execute_returning(
                """
                UPDATE rooms
                SET is_active = FALSE, updated_at = %s
                WHERE id = %s
                RETURNING *
                """,
                (now_utc(), room_id)
            )[0]

            self.audit.log_change(
                entity_type="room",
                entity_id=room_id,
                action=AuditAction.UPDATE,
                changes={"is_active": {"old": True, "new": False}},
                tx=tx
            )

        logger.info("Room %s deactivated", current.number)

        return Room.model_validate(row)

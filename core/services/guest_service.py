"""
Guest stay service.

A guest is checked in to a registered room (or none, for walk-ins) at a
daily rate. The stay stays editable until checkout; after that it is frozen
and billed.
"""

import logging
from datetime import datetime
from uuid import UUID, uuid4

from clients.postgres_client import PostgresClient
from core.audit import AuditLogger, AuditAction, compute_changes
from core.billing import stay_days
from core.exceptions import ConflictError, NotFoundError, ValidationError
from core.models import Guest, GuestCreate, GuestStatus, GuestUpdate
from core.services.room_service import RoomService
from utils.timezone import now_utc, to_utc

logger = logging.getLogger(__name__)

# Valid columns that can be updated
_UPDATABLE_COLUMNS = {"name", "phone", "room_number", "check_out", "daily_rate_cents"}


class GuestService:
    """Service for guest stays."""

    def __init__(self, postgres: PostgresClient, audit: AuditLogger, rooms: RoomService | None = None):
        self.postgres = postgres
        self.audit = audit
        self.rooms = rooms or RoomService(postgres, audit)

    def check_in(self, data: GuestCreate) -> Guest:
        """
        Register a new stay.

        Args:
            data: Guest details, room and daily rate

        Returns:
            Created guest in ACTIVE status

        Raises:
            NotFoundError: If the room is not registered
            ValidationError: If the room is deactivated
        """
        now = now_utc()

        with self.postgres.transaction() as tx:
            if data.room_number is not None:
                self.rooms.require_active(data.room_number, tx)

            row = tx.execute_returning(
                """
                INSERT INTO guests (
                    id, name, phone, room_number, check_in, check_out,
                    daily_rate_cents, status, created_at, updated_at
                ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                RETURNING *
                """,
                (
                    uuid4(), data.name.strip(), data.phone, data.room_number,
                    data.check_in, data.check_out, data.daily_rate_cents,
                    GuestStatus.ACTIVE.value, now, now
                )
            )[0]

            guest = Guest.model_validate(row)

            self.audit.log_change(
                entity_type="guest",
                entity_id=guest.id,
                action=AuditAction.CREATE,
                changes={"created": data.model_dump(mode="json", exclude_none=True)},
                tx=tx
            )

        logger.info("Guest %s checked in to room %s", guest.id, guest.room_number or "-")

        return guest

    def get_by_id(self, guest_id: UUID) -> Guest | None:
        """
        Get guest by ID.

        Returns:
            Guest if found, None otherwise.
        """
        row = self.postgres.execute_single(
            "SELECT * FROM guests WHERE id = %s",
            (guest_id,)
        )

        if row is None:
            return None

        return Guest.model_validate(row)

    def update(self, guest_id: UUID, data: GuestUpdate) -> Guest:
        """
        Edit an active stay.

        Args:
            guest_id: Guest UUID
            data: Fields to update. Only non-None fields change, except an
                explicit null room_number, which makes the stay a walk-in.

        Returns:
            Updated guest

        Raises:
            NotFoundError: If guest not found, or the new room is not registered
            ConflictError: If the guest has already checked out
            ValidationError: If the new check-out precedes check-in, or the
                new room is deactivated
        """
        current = self.get_by_id(guest_id)
        if current is None:
            raise NotFoundError("guest", guest_id)

        if current.is_checked_out:
            raise ConflictError(f"Guest {guest_id} has checked out; the stay can no longer change")

        updates = data.model_dump(exclude_none=True)
        if "room_number" in data.model_fields_set and data.room_number is None:
            updates["room_number"] = None

        for field in updates:
            if field not in _UPDATABLE_COLUMNS:
                logger.warning(
                    "Attempted to update unknown field '%s' on guest %s", field, guest_id
                )

        valid_updates = {k: v for k, v in updates.items() if k in _UPDATABLE_COLUMNS}
        if not valid_updates:
            return current

        check_out = valid_updates.get("check_out")
        if check_out is not None and check_out < current.check_in:
            raise ValidationError("check_out cannot be before check_in")

        new_room = valid_updates.get("room_number")
        moving = new_room is not None and new_room != current.room_number

        set_parts = [f"{field} = %s" for field in valid_updates]
        params = list(valid_updates.values())

        set_parts.append("updated_at = %s")
        params.append(now_utc())
        params.append(guest_id)
        params.append(GuestStatus.ACTIVE.value)

        with self.postgres.transaction() as tx:
            if moving:
                self.rooms.require_active(new_room, tx)

            # Status guard: a concurrent checkout wins over this edit
            rows = tx.execute_returning(
                f"""
                UPDATE guests
                SET {', '.join(set_parts)}
                WHERE id = %s AND status = %s
                RETURNING *
                """,
                tuple(params)
            )
            if not rows:
                raise ConflictError(f"Guest {guest_id} changed while being edited; re-fetch and retry")

            updated = Guest.model_validate(rows[0])

            changes = compute_changes(current, updated)
            if changes:
                self.audit.log_change(
                    entity_type="guest",
                    entity_id=guest_id,
                    action=AuditAction.UPDATE,
                    changes=changes,
                    tx=tx
                )

        return updated

    def list_active(self, limit: int = 50) -> list[Guest]:
        """List guests currently staying, by room."""
        rows = self.postgres.execute(
            """
            SELECT * FROM guests
            WHERE status = %s
            ORDER BY room_number ASC NULLS LAST, check_in ASC
            LIMIT %s
            """,
            (GuestStatus.ACTIVE.value, limit)
        )

        return [Guest.model_validate(row) for row in rows]

    def list_checked_out(self, limit: int = 50) -> list[Guest]:
        """List past stays, most recent check-out first."""
        rows = self.postgres.execute(
            """
            SELECT * FROM guests
            WHERE status = %s
            ORDER BY check_out DESC, updated_at DESC
            LIMIT %s
            """,
            (GuestStatus.CHECKED_OUT.value, limit)
        )

        return [Guest.model_validate(row) for row in rows]

    def stay_days(self, guest_id: UUID, now: datetime | None = None) -> int:
        """
        Billable days for a guest's stay so far (or in total, once checked out).

        An open stay is counted through today (UTC), the day checkout would
        close it on.

        Raises:
            NotFoundError: If guest not found
        """
        guest = self.get_by_id(guest_id)
        if guest is None:
            raise NotFoundError("guest", guest_id)

        check_out = guest.check_out or to_utc(now or now_utc()).date()
        return stay_days(guest.check_in, check_out)

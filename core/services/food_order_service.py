"""
Food order service.

Orders use the toggle payment model: paid or unpaid, flipped as a whole.
Unpaid guest orders are settled by checkout, after which they are locked to
that checkout and can no longer be toggled.
"""

import logging
from typing import Any
from uuid import UUID, uuid4

from clients.postgres_client import PostgresClient, Transaction
from core.audit import AuditLogger, AuditAction
from core.billing import order_total
from core.exceptions import ConflictError, NotFoundError
from core.models import CustomerType, FoodOrder, FoodOrderCreate, GuestStatus, OrderLine
from utils.timezone import now_utc

logger = logging.getLogger(__name__)


def attach_lines(source: PostgresClient | Transaction, rows: list[dict[str, Any]]) -> list[FoodOrder]:
    """Load lines for a batch of order rows in one query."""
    if not rows:
        return []

    line_rows = source.execute(
        "SELECT * FROM order_lines WHERE order_id = ANY(%s::uuid[]) ORDER BY item_name",
        ([row["id"] for row in rows],)
    )

    by_order: dict[str, list[dict[str, Any]]] = {}
    for line in line_rows:
        by_order.setdefault(str(line["order_id"]), []).append(line)

    return [
        FoodOrder.model_validate({**row, "lines": by_order.get(str(row["id"]), [])})
        for row in rows
    ]


class FoodOrderService:
    """Service for food orders and their paid flag."""

    def __init__(self, postgres: PostgresClient, audit: AuditLogger):
        self.postgres = postgres
        self.audit = audit

    def create(self, data: FoodOrderCreate) -> FoodOrder:
        """
        Place an order for a guest or a walk-in.

        Args:
            data: Order lines and who the order is billed to

        Returns:
            Created order, unpaid

        Raises:
            NotFoundError: If the guest does not exist
            ConflictError: If the guest has already checked out
        """
        guest_id = data.guest_id if data.customer_type == CustomerType.GUEST else None
        customer_name = data.customer_name
        total = order_total(data.lines)
        order_id = uuid4()
        now = now_utc()

        with self.postgres.transaction() as tx:
            if guest_id is not None:
                guest = tx.execute_single(
                    "SELECT id, name, status FROM guests WHERE id = %s",
                    (guest_id,)
                )
                if guest is None:
                    raise NotFoundError("guest", guest_id)
                if guest["status"] == GuestStatus.CHECKED_OUT.value:
                    raise ConflictError(f"Guest {guest_id} has already checked out")
                customer_name = customer_name or guest["name"]

            row = tx.execute_returning(
                """
                INSERT INTO food_orders (
                    id, guest_id, customer_type, customer_name,
                    total_amount_cents, paid, paid_at, checkout_id, created_at, updated_at
                ) VALUES (%s, %s, %s, %s, %s, FALSE, NULL, NULL, %s, %s)
                RETURNING *
                """,
                (order_id, guest_id, data.customer_type.value, customer_name, total, now, now)
            )[0]

            lines = [
                OrderLine.model_validate(tx.execute_returning(
                    """
                    INSERT INTO order_lines (id, order_id, menu_item_id, item_name, quantity, unit_price_cents)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    RETURNING *
                    """,
                    (uuid4(), order_id, line.menu_item_id, line.item_name, line.quantity, line.unit_price_cents)
                )[0])
                for line in data.lines
            ]

            self.audit.log_change(
                entity_type="food_order",
                entity_id=order_id,
                action=AuditAction.CREATE,
                changes={"created": data.model_dump(mode="json", exclude_none=True)},
                tx=tx
            )

        return FoodOrder.model_validate({**row, "lines": lines})

    def get_by_id(self, order_id: UUID) -> FoodOrder | None:
        """
        Get order by ID, with its lines.

        Returns:
            FoodOrder if found, None otherwise.
        """
        row = self.postgres.execute_single(
            "SELECT * FROM food_orders WHERE id = %s",
            (order_id,)
        )

        if row is None:
            return None

        return attach_lines(self.postgres, [row])[0]

    def list_for_guest(self, guest_id: UUID) -> list[FoodOrder]:
        """All orders billed to a guest, oldest first."""
        rows = self.postgres.execute(
            "SELECT * FROM food_orders WHERE guest_id = %s ORDER BY created_at ASC",
            (guest_id,)
        )
        return attach_lines(self.postgres, rows)

    def get_unpaid_orders(self, guest_id: UUID) -> list[FoodOrder]:
        """Orders still owed by a guest and not yet settled by a checkout."""
        rows = self.postgres.execute(
            """
            SELECT * FROM food_orders
            WHERE guest_id = %s AND paid = FALSE AND checkout_id IS NULL
            ORDER BY created_at ASC
            """,
            (guest_id,)
        )
        return attach_lines(self.postgres, rows)

    def list_recent(self, limit: int = 50, unpaid_only: bool = False) -> list[FoodOrder]:
        """List orders, newest first."""
        rows = self.postgres.execute(
            """
            SELECT * FROM food_orders
            WHERE paid = FALSE OR NOT %s
            ORDER BY created_at DESC
            LIMIT %s
            """,
            (unpaid_only, limit)
        )
        return attach_lines(self.postgres, rows)

    def toggle_payment(self, order_id: UUID) -> FoodOrder:
        """
        Flip an order between paid and unpaid.

        The write only lands if the order still has the paid value that was
        read, so two operators toggling at once cannot both succeed.

        Returns:
            Order with its new paid state

        Raises:
            NotFoundError: If order not found
            ConflictError: If the order was settled by checkout, or changed
                or deleted concurrently
        """
        current = self.get_by_id(order_id)
        if current is None:
            raise NotFoundError("food_order", order_id)

        return self._write_paid(current, not current.paid)

    def set_paid(self, order_id: UUID, paid: bool) -> FoodOrder:
        """
        Set an order's paid flag explicitly. A no-op if it already matches.

        Raises:
            NotFoundError: If order not found
            ConflictError: If the order was settled by checkout, or changed
                or deleted concurrently
        """
        current = self.get_by_id(order_id)
        if current is None:
            raise NotFoundError("food_order", order_id)

        if current.paid == paid:
            return current

        return self._write_paid(current, paid)

    def _write_paid(self, current: FoodOrder, paid: bool) -> FoodOrder:
        if current.checkout_id is not None:
            raise ConflictError(
                f"Food order {current.id} was settled by checkout {current.checkout_id}"
            )

        now = now_utc()
        row = self.postgres.execute_single(
            """
            UPDATE food_orders
            SET paid = %s, paid_at = %s, updated_at = %s
            WHERE id = %s AND paid = %s AND checkout_id IS NULL
            RETURNING *
            """,
            (paid, now if paid else None, now, current.id, current.paid)
        )

        if row is None:
            still_there = self.postgres.execute_single(
                "SELECT id FROM food_orders WHERE id = %s",
                (current.id,)
            )
            if still_there is None:
                raise ConflictError(
                    f"Food order {current.id} was deleted while updating payment; re-fetch and retry"
                )
            raise ConflictError(
                f"Food order {current.id} changed while updating payment; re-fetch and retry"
            )

        self.audit.log_change(
            entity_type="food_order",
            entity_id=current.id,
            action=AuditAction.UPDATE,
            changes={
                "paid": {"old": current.paid, "new": paid},
                "paid_at": {
                    "old": current.paid_at.isoformat() if current.paid_at else None,
                    "new": row["paid_at"].isoformat() if row["paid_at"] else None
                }
            }
        )

        logger.info("Food order %s marked %s", current.id, "paid" if paid else "unpaid")

        return FoodOrder.model_validate({**row, "lines": current.lines})

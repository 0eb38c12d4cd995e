"""
Guest checkout.

Builds the final bill for a stay: room charges plus unpaid food orders,
then discount, then tax. checkout() persists that bill, closes the stay and
settles the orders it included in one transaction.
"""

import logging
from datetime import date, datetime
from uuid import UUID, uuid4

from clients.postgres_client import PostgresClient
from core.audit import AuditLogger, AuditAction
from core.billing import compute_bill, room_charges, stay_days, unpaid_orders_total, validate_discount
from core.exceptions import ConflictError, NotFoundError
from core.models import Checkout, CheckoutTotals, Discount, FoodOrder, Guest, GuestStatus, TaxConfig
from core.services.food_order_service import attach_lines
from core.services.settings_service import SettingsService
from utils.timezone import now_utc, to_utc

logger = logging.getLogger(__name__)

_UNPAID_ORDERS_QUERY = """
    SELECT * FROM food_orders
    WHERE guest_id = %s AND paid = FALSE AND checkout_id IS NULL
    ORDER BY created_at ASC
"""


def closing_date(guest: Guest, now: datetime) -> date:
    """Last day of a stay: the planned check-out, or the UTC day of checkout."""
    return guest.check_out or to_utc(now).date()


def build_totals(
    guest: Guest,
    orders: list[FoodOrder],
    discount: Discount | None,
    tax_config: TaxConfig,
    now: datetime,
) -> CheckoutTotals:
    """Itemized bill for a guest from already-loaded inputs."""
    # Bill the same dates the closed stay will carry
    stay = guest.stay.model_copy(update={"check_out": closing_date(guest, now)})
    days = stay_days(stay.check_in, stay.check_out)
    room = room_charges(stay, guest.daily_rate_cents)
    unpaid = [order for order in orders if not order.paid]
    food = unpaid_orders_total(unpaid)

    bill = compute_bill([room, food], discount, tax_config)

    return CheckoutTotals(
        **bill.model_dump(),
        guest_id=guest.id,
        stay_days=days,
        daily_rate_cents=guest.daily_rate_cents,
        room_charges_cents=room,
        unpaid_food_cents=food,
        unpaid_order_count=len(unpaid),
    )


class CheckoutService:
    """Service for previewing and completing guest checkouts."""

    def __init__(self, postgres: PostgresClient, audit: AuditLogger, settings: SettingsService):
        self.postgres = postgres
        self.audit = audit
        self.settings = settings

    def preview(
        self,
        guest_id: UUID,
        discount: Discount | None = None,
        now: datetime | None = None
    ) -> CheckoutTotals:
        """
        Compute what checkout would bill, without writing anything.

        Raises:
            ValidationError: If the discount is out of range
            NotFoundError: If guest not found
            ConflictError: If the guest has already checked out
        """
        validate_discount(discount)
        now = now or now_utc()

        row = self.postgres.execute_single("SELECT * FROM guests WHERE id = %s", (guest_id,))
        if row is None:
            raise NotFoundError("guest", guest_id)

        guest = Guest.model_validate(row)
        if guest.is_checked_out:
            raise ConflictError(f"Guest {guest_id} has already checked out")

        orders = attach_lines(self.postgres, self.postgres.execute(_UNPAID_ORDERS_QUERY, (guest_id,)))
        tax_config = self.settings.get_tax_config()

        return build_totals(guest, orders, discount, tax_config, now)

    def checkout(
        self,
        guest_id: UUID,
        discount: Discount | None = None,
        now: datetime | None = None
    ) -> Checkout:
        """
        Bill and close a stay.

        The guest row is locked, the tax setting is read once, and the
        checkout record, guest status and settled orders are written
        together or not at all.

        Args:
            guest_id: Guest UUID
            discount: Optional flat or percentage discount
            now: Checkout time (defaults to current UTC time)

        Returns:
            Stored checkout record

        Raises:
            ValidationError: If the discount is out of range
            NotFoundError: If guest not found
            ConflictError: If the guest has already checked out
        """
        validate_discount(discount)
        now = now or now_utc()

        with self.postgres.transaction() as tx:
            row = tx.execute_single("SELECT * FROM guests WHERE id = %s FOR UPDATE", (guest_id,))
            if row is None:
                raise NotFoundError("guest", guest_id)

            guest = Guest.model_validate(row)
            if guest.is_checked_out:
                raise ConflictError(f"Guest {guest_id} has already checked out")

            order_rows = tx.execute(_UNPAID_ORDERS_QUERY.rstrip() + " FOR UPDATE", (guest_id,))
            orders = attach_lines(tx, order_rows)
            tax_config = self.settings.get_tax_config(tx)

            totals = build_totals(guest, orders, discount, tax_config, now)
            check_out = closing_date(guest, now)
            checkout_id = uuid4()

            record = tx.execute_returning(
                """
                INSERT INTO checkouts (
                    id, guest_id, check_out, stay_days,
                    room_charges_cents, unpaid_food_cents, subtotal_cents,
                    discount_type, discount_value, discount_description, discount_cents,
                    tax_rate_bps, tax_cents, grand_total_cents, created_at
                ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                RETURNING *
                """,
                (
                    checkout_id, guest_id, check_out, totals.stay_days,
                    totals.room_charges_cents, totals.unpaid_food_cents, totals.subtotal_cents,
                    discount.type.value if discount else None,
                    discount.value if discount else 0,
                    discount.description if discount else None,
                    totals.discount_cents,
                    totals.tax_rate_bps, totals.tax_cents, totals.grand_total_cents, now
                )
            )[0]

            tx.execute(
                """
                UPDATE guests
                SET status = %s, check_out = %s, updated_at = %s
                WHERE id = %s
                """,
                (GuestStatus.CHECKED_OUT.value, check_out, now, guest_id)
            )

            if orders:
                tx.execute(
                    """
                    UPDATE food_orders
                    SET paid = TRUE, paid_at = %s, checkout_id = %s, updated_at = %s
                    WHERE id = ANY(%s::uuid[])
                    """,
                    (now, checkout_id, now, [order.id for order in orders])
                )

            checkout = Checkout.model_validate(record)

            self.audit.log_change(
                entity_type="checkout",
                entity_id=checkout_id,
                action=AuditAction.CREATE,
                changes={
                    "created": checkout.model_dump(mode="json"),
                    "settled_orders": [str(order.id) for order in orders]
                },
                tx=tx
            )

        logger.info(
            "Guest %s checked out: %s days, grand total %s",
            guest_id, totals.stay_days, totals.grand_total_cents
        )

        return checkout

    def get_for_guest(self, guest_id: UUID) -> Checkout | None:
        """Stored checkout record for a guest, if they have checked out."""
        row = self.postgres.execute_single(
            "SELECT * FROM checkouts WHERE guest_id = %s ORDER BY created_at DESC LIMIT 1",
            (guest_id,)
        )

        if row is None:
            return None

        return Checkout.model_validate(row)

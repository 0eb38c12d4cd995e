"""
Payment ledger for sales and purchases.

Payments are append-only rows in the payments table. An entity's balance is
its cached total minus the sum of its payments, and every write locks the
entity row first so two operators cannot both pay the last of a balance.
"""

import logging
from uuid import UUID, uuid4

from clients.postgres_client import PostgresClient, Transaction
from core.audit import AuditLogger, AuditAction
from core.billing import display_balance, ledger_balance_due, validate_payment
from core.exceptions import NotFoundError
from core.models import EntityBalance, EntityKind, Payment, PaymentCreate, PaymentMethod
from utils.operator_context import get_operator_id
from utils.timezone import now_utc

logger = logging.getLogger(__name__)

# Table holding the cached total for each ledgered entity kind
ENTITY_TABLES = {
    EntityKind.SALE: "sales",
    EntityKind.PURCHASE: "purchases",
}


def amount_paid(source: PostgresClient | Transaction, kind: EntityKind, entity_id: UUID) -> int:
    """Sum of recorded payments for one entity."""
    row = source.execute_single(
        """
        SELECT COALESCE(SUM(amount_cents), 0)::bigint AS amount_paid_cents
        FROM payments
        WHERE entity_kind = %s AND entity_id = %s
        """,
        (kind.value, entity_id)
    )
    return row["amount_paid_cents"] if row else 0


def insert_payment(
    tx: Transaction,
    kind: EntityKind,
    entity_id: UUID,
    amount_cents: int,
    method: PaymentMethod,
    note: str | None = None,
) -> Payment:
    """Append one payment row inside an open transaction."""
    row = tx.execute_returning(
        """
        INSERT INTO payments (id, entity_kind, entity_id, amount_cents, method, note, user_id, created_at)
        VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
        RETURNING *
        """,
        (
            uuid4(), kind.value, entity_id, amount_cents, method.value, note,
            get_operator_id(), now_utc()
        )
    )[0]
    return Payment.model_validate(row)


class PaymentService:
    """Service for recording and reading ledgered payments."""

    def __init__(self, postgres: PostgresClient, audit: AuditLogger):
        self.postgres = postgres
        self.audit = audit

    def record_payment(self, kind: EntityKind, entity_id: UUID, data: PaymentCreate) -> EntityBalance:
        """
        Append a payment to a sale or purchase.

        The entity row is locked for the whole read-validate-write cycle.

        Args:
            kind: SALE or PURCHASE
            entity_id: Entity UUID
            data: Amount, method and note

        Returns:
            Balance after the payment

        Raises:
            ValidationError: If the amount is not positive
            ConflictError: If the amount exceeds the current balance due
            NotFoundError: If the entity does not exist
        """
        table = ENTITY_TABLES[kind]

        with self.postgres.transaction() as tx:
            entity = tx.execute_single(
                f"SELECT id, total_amount_cents, paid_at FROM {table} WHERE id = %s FOR UPDATE",
                (entity_id,)
            )
            if entity is None:
                raise NotFoundError(kind.value, entity_id)

            total = entity["total_amount_cents"]
            paid_before = amount_paid(tx, kind, entity_id)
            balance_before = ledger_balance_due(total, paid_before)

            validate_payment(data.amount_cents, balance_before)

            payment = insert_payment(tx, kind, entity_id, data.amount_cents, data.method, data.note)

            paid_after = paid_before + data.amount_cents
            balance_after = ledger_balance_due(total, paid_after)

            if balance_after == 0:
                tx.execute(
                    f"UPDATE {table} SET paid_at = %s, updated_at = %s WHERE id = %s",
                    (payment.created_at, payment.created_at, entity_id)
                )

            self.audit.log_change(
                entity_type="payment",
                entity_id=payment.id,
                action=AuditAction.CREATE,
                changes={"created": payment.model_dump(mode="json")},
                tx=tx
            )

        logger.info(
            "Payment of %s recorded on %s %s, balance due %s",
            data.amount_cents, kind.value, entity_id, balance_after
        )

        return EntityBalance(
            entity_kind=kind,
            entity_id=entity_id,
            total_amount_cents=total,
            amount_paid_cents=paid_after,
            balance_due_cents=balance_after,
        )

    def get_balance(self, kind: EntityKind, entity_id: UUID) -> EntityBalance:
        """
        Current total, paid and outstanding amounts for one entity.

        Raises:
            NotFoundError: If the entity does not exist
        """
        table = ENTITY_TABLES[kind]
        entity = self.postgres.execute_single(
            f"SELECT id, total_amount_cents FROM {table} WHERE id = %s",
            (entity_id,)
        )
        if entity is None:
            raise NotFoundError(kind.value, entity_id)

        paid = amount_paid(self.postgres, kind, entity_id)

        return EntityBalance(
            entity_kind=kind,
            entity_id=entity_id,
            total_amount_cents=entity["total_amount_cents"],
            amount_paid_cents=paid,
            balance_due_cents=display_balance(
                entity["total_amount_cents"], paid, f"{kind.value} {entity_id}"
            ),
        )

    def list_payments(self, kind: EntityKind, entity_id: UUID) -> list[Payment]:
        """Payments recorded against one entity, oldest first."""
        rows = self.postgres.execute(
            """
            SELECT * FROM payments
            WHERE entity_kind = %s AND entity_id = %s
            ORDER BY created_at ASC
            """,
            (kind.value, entity_id)
        )

        return [Payment.model_validate(row) for row in rows]

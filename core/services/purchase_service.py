"""
Purchase service.

Stock bought from suppliers. Like sales, a purchase and its initial payment
are written together; unlike sales, lines can be added afterwards, which
refreshes the cached total and can reopen a settled balance.
"""

import logging
from uuid import UUID, uuid4

from clients.postgres_client import PostgresClient
from core.audit import AuditLogger, AuditAction
from core.billing import initial_payment_cents, ledger_balance_due, order_total
from core.exceptions import NotFoundError
from core.models import EntityKind, Purchase, PurchaseCreate, PurchaseLine, PurchaseLineCreate
from core.services.payment_service import amount_paid, insert_payment
from utils.timezone import now_utc

logger = logging.getLogger(__name__)


class PurchaseService:
    """Service for purchase operations."""

    def __init__(self, postgres: PostgresClient, audit: AuditLogger):
        self.postgres = postgres
        self.audit = audit

    def create(self, data: PurchaseCreate) -> Purchase:
        """
        Record a purchase with its lines and initial payment.

        Args:
            data: Purchase lines, supplier and payment terms

        Returns:
            Created purchase

        Raises:
            ValidationError: If a partial payment is not within (0, total]
            NotFoundError: If supplier_id does not exist
        """
        total = order_total(data.lines)
        initial = initial_payment_cents(data.payment_mode, total, data.payment_amount_cents)

        purchase_id = uuid4()
        now = now_utc()
        paid_at = now if initial == total else None

        with self.postgres.transaction() as tx:
            if data.supplier_id is not None:
                supplier = tx.execute_single(
                    "SELECT id FROM suppliers WHERE id = %s",
                    (data.supplier_id,)
                )
                if supplier is None:
                    raise NotFoundError("supplier", data.supplier_id)

            row = tx.execute_returning(
                """
                INSERT INTO purchases (
                    id, supplier_id, purchase_date, reference, notes,
                    total_amount_cents, paid_at, created_at, updated_at
                ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
                RETURNING *
                """,
                (
                    purchase_id, data.supplier_id, data.purchase_date, data.reference, data.notes,
                    total, paid_at, now, now
                )
            )[0]

            lines = [
                self._insert_line(tx, purchase_id, line)
                for line in data.lines
            ]

            if initial > 0:
                insert_payment(
                    tx, EntityKind.PURCHASE, purchase_id, initial,
                    data.payment_method, data.payment_note
                )

            purchase = Purchase.model_validate({**row, "lines": lines})

            self.audit.log_change(
                entity_type="purchase",
                entity_id=purchase_id,
                action=AuditAction.CREATE,
                changes={
                    "created": {
                        "supplier_id": str(data.supplier_id) if data.supplier_id else None,
                        "total_amount_cents": total,
                        "payment_mode": data.payment_mode.value,
                        "initial_payment_cents": initial
                    }
                },
                tx=tx
            )

        logger.info("Purchase %s created: total %s, paid %s", purchase_id, total, initial)

        return purchase

    @staticmethod
    def _insert_line(tx, purchase_id: UUID, line: PurchaseLineCreate) -> PurchaseLine:
        row = tx.execute_returning(
            """
            INSERT INTO purchase_lines (id, purchase_id, product_id, item_name, quantity, unit_cost_cents)
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING *
            """,
            (uuid4(), purchase_id, line.product_id, line.item_name, line.quantity, line.unit_cost_cents)
        )[0]
        return PurchaseLine.model_validate(row)

    def add_line(self, purchase_id: UUID, line: PurchaseLineCreate) -> Purchase:
        """
        Append a line to an existing purchase.

        The cached total is recomputed from all lines. A purchase that was
        settled becomes outstanding again.

        Raises:
            NotFoundError: If purchase not found
        """
        with self.postgres.transaction() as tx:
            current = tx.execute_single(
                "SELECT * FROM purchases WHERE id = %s FOR UPDATE",
                (purchase_id,)
            )
            if current is None:
                raise NotFoundError("purchase", purchase_id)

            self._insert_line(tx, purchase_id, line)

            lines = [
                PurchaseLine.model_validate(row)
                for row in tx.execute(
                    "SELECT * FROM purchase_lines WHERE purchase_id = %s ORDER BY item_name",
                    (purchase_id,)
                )
            ]
            total = order_total(lines)
            paid = amount_paid(tx, EntityKind.PURCHASE, purchase_id)
            paid_at = current["paid_at"] if ledger_balance_due(total, paid) <= 0 else None

            row = tx.execute_returning(
                """
                UPDATE purchases
                SET total_amount_cents = %s, paid_at = %s, updated_at = %s
                WHERE id = %s
                RETURNING *
                """,
                (total, paid_at, now_utc(), purchase_id)
            )[0]

            self.audit.log_change(
                entity_type="purchase",
                entity_id=purchase_id,
                action=AuditAction.UPDATE,
                changes={
                    "total_amount_cents": {"old": current["total_amount_cents"], "new": total},
                    "line_added": line.model_dump(mode="json")
                },
                tx=tx
            )

        if current["paid_at"] is not None and paid_at is None:
            logger.info("Purchase %s reopened by new line, balance due %s", purchase_id, total - paid)

        return Purchase.model_validate({**row, "lines": lines})

    def _load_lines(self, purchase_id: UUID) -> list[PurchaseLine]:
        rows = self.postgres.execute(
            "SELECT * FROM purchase_lines WHERE purchase_id = %s ORDER BY item_name",
            (purchase_id,)
        )
        return [PurchaseLine.model_validate(row) for row in rows]

    def get_by_id(self, purchase_id: UUID) -> Purchase | None:
        """
        Get purchase by ID, with its lines.

        Returns:
            Purchase if found, None otherwise.
        """
        row = self.postgres.execute_single(
            "SELECT * FROM purchases WHERE id = %s",
            (purchase_id,)
        )

        if row is None:
            return None

        return Purchase.model_validate({**row, "lines": self._load_lines(purchase_id)})

    def list_for_supplier(self, supplier_id: UUID, limit: int = 50) -> list[Purchase]:
        """
        List a supplier's purchases, newest first.

        Args:
            supplier_id: Supplier UUID
            limit: Maximum results
        """
        rows = self.postgres.execute(
            """
            SELECT * FROM purchases
            WHERE supplier_id = %s
            ORDER BY purchase_date DESC, created_at DESC
            LIMIT %s
            """,
            (supplier_id, limit)
        )

        return [
            Purchase.model_validate({**row, "lines": self._load_lines(row["id"])})
            for row in rows
        ]

    def list_recent(self, limit: int = 50) -> list[Purchase]:
        """List all purchases, newest first."""
        rows = self.postgres.execute(
            "SELECT * FROM purchases ORDER BY purchase_date DESC, created_at DESC LIMIT %s",
            (limit,)
        )

        return [
            Purchase.model_validate({**row, "lines": self._load_lines(row["id"])})
            for row in rows
        ]

"""
Sale service.

A sale, its lines and any payment taken at the till are written in one
transaction. Later payments go through PaymentService.
"""

import logging
from uuid import UUID, uuid4

from clients.postgres_client import PostgresClient
from core.audit import AuditLogger, AuditAction
from core.billing import initial_payment_cents, order_total
from core.exceptions import NotFoundError
from core.models import EntityKind, Sale, SaleCreate, SaleLine
from core.services.payment_service import insert_payment
from utils.timezone import now_utc

logger = logging.getLogger(__name__)


class SaleService:
    """Service for sale operations."""

    def __init__(self, postgres: PostgresClient, audit: AuditLogger):
        self.postgres = postgres
        self.audit = audit

    def create(self, data: SaleCreate) -> Sale:
        """
        Record a sale with its lines and initial payment.

        Args:
            data: Sale lines, owner and payment terms

        Returns:
            Created sale

        Raises:
            ValidationError: If a partial payment is not within (0, total]
            NotFoundError: If customer_id does not exist
        """
        total = order_total(data.lines)
        initial = initial_payment_cents(data.payment_mode, total, data.payment_amount_cents)

        sale_id = uuid4()
        now = now_utc()
        paid_at = now if initial == total else None

        with self.postgres.transaction() as tx:
            customer_name = data.customer_name
            if data.customer_id is not None:
                customer = tx.execute_single(
                    "SELECT id, name FROM customers WHERE id = %s",
                    (data.customer_id,)
                )
                if customer is None:
                    raise NotFoundError("customer", data.customer_id)
                customer_name = customer_name or customer["name"]

            row = tx.execute_returning(
                """
                INSERT INTO sales (
                    id, customer_id, customer_name, reference, notes,
                    total_amount_cents, paid_at, created_at, updated_at
                ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
                RETURNING *
                """,
                (
                    sale_id, data.customer_id, customer_name, data.reference, data.notes,
                    total, paid_at, now, now
                )
            )[0]

            lines = [
                SaleLine.model_validate(tx.execute_returning(
                    """
                    INSERT INTO sale_lines (id, sale_id, product_id, item_name, quantity, unit_price_cents)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    RETURNING *
                    """,
                    (uuid4(), sale_id, line.product_id, line.item_name, line.quantity, line.unit_price_cents)
                )[0])
                for line in data.lines
            ]

            if initial > 0:
                insert_payment(
                    tx, EntityKind.SALE, sale_id, initial, data.payment_method, data.payment_note
                )

            sale = Sale.model_validate({**row, "lines": lines})

            self.audit.log_change(
                entity_type="sale",
                entity_id=sale_id,
                action=AuditAction.CREATE,
                changes={
                    "created": {
                        "customer_id": str(data.customer_id) if data.customer_id else None,
                        "total_amount_cents": total,
                        "payment_mode": data.payment_mode.value,
                        "initial_payment_cents": initial
                    }
                },
                tx=tx
            )

        logger.info("Sale %s created: total %s, paid %s", sale_id, total, initial)

        return sale

    def _load_lines(self, sale_id: UUID) -> list[SaleLine]:
        rows = self.postgres.execute(
            "SELECT * FROM sale_lines WHERE sale_id = %s ORDER BY item_name",
            (sale_id,)
        )
        return [SaleLine.model_validate(row) for row in rows]

    def get_by_id(self, sale_id: UUID) -> Sale | None:
        """
        Get sale by ID, with its lines.

        Returns:
            Sale if found, None otherwise.
        """
        row = self.postgres.execute_single(
            "SELECT * FROM sales WHERE id = %s",
            (sale_id,)
        )

        if row is None:
            return None

        return Sale.model_validate({**row, "lines": self._load_lines(sale_id)})

    def list_for_customer(self, customer_id: UUID, limit: int = 50) -> list[Sale]:
        """
        List a customer's sales, newest first.

        Args:
            customer_id: Customer UUID
            limit: Maximum results
        """
        rows = self.postgres.execute(
            """
            SELECT * FROM sales
            WHERE customer_id = %s
            ORDER BY created_at DESC
            LIMIT %s
            """,
            (customer_id, limit)
        )

        return [
            Sale.model_validate({**row, "lines": self._load_lines(row["id"])})
            for row in rows
        ]

    def list_recent(self, limit: int = 50) -> list[Sale]:
        """List all sales, newest first."""
        rows = self.postgres.execute(
            "SELECT * FROM sales ORDER BY created_at DESC LIMIT %s",
            (limit,)
        )

        return [
            Sale.model_validate({**row, "lines": self._load_lines(row["id"])})
            for row in rows
        ]

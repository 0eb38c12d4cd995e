"""Expense service: money paid out that is not a supplier purchase."""

import logging
from datetime import date
from uuid import UUID, uuid4

from clients.postgres_client import PostgresClient
from core.audit import AuditLogger, AuditAction
from core.exceptions import NotFoundError, ValidationError
from core.models import Expense, ExpenseCreate
from utils.timezone import now_utc

logger = logging.getLogger(__name__)


class ExpenseService:
    """Service for expense records."""

    def __init__(self, postgres: PostgresClient, audit: AuditLogger):
        self.postgres = postgres
        self.audit = audit

    def create(self, data: ExpenseCreate) -> Expense:
        """
        Record an expense.

        Args:
            data: Date, category, amount and optional description

        Returns:
            Created expense
        """
        row = self.postgres.execute_returning(
            """
            INSERT INTO expenses (id, expense_date, category, description, amount_cents, payment_method, created_at)
            VALUES (%s, %s, %s, %s, %s, %s, %s)
            RETURNING *
            """,
            (
                uuid4(), data.expense_date, data.category, data.description, data.amount_cents,
                data.payment_method.value if data.payment_method else None, now_utc()
            )
        )[0]

        expense = Expense.model_validate(row)

        self.audit.log_change(
            entity_type="expense",
            entity_id=expense.id,
            action=AuditAction.CREATE,
            changes={"created": data.model_dump(mode="json", exclude_none=True)}
        )

        return expense

    def get_by_id(self, expense_id: UUID) -> Expense | None:
        """
        Get expense by ID.

        Returns:
            Expense if found, None otherwise.
        """
        row = self.postgres.execute_single(
            "SELECT * FROM expenses WHERE id = %s",
            (expense_id,)
        )

        if row is None:
            return None

        return Expense.model_validate(row)

    def list_expenses(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
        category: str | None = None,
        limit: int = 50
    ) -> list[Expense]:
        """
        List expenses, newest first.

        Args:
            start_date: Earliest expense date (inclusive)
            end_date: Latest expense date (inclusive)
            category: Exact category to filter on
            limit: Maximum results

        Raises:
            ValidationError: If start_date is after end_date
        """
        if start_date and end_date and start_date > end_date:
            raise ValidationError("start_date cannot be after end_date")

        conditions = []
        params: list = []

        if start_date is not None:
            conditions.append("expense_date >= %s")
            params.append(start_date)
        if end_date is not None:
            conditions.append("expense_date <= %s")
            params.append(end_date)
        if category:
            conditions.append("category = %s")
            params.append(category)

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        params.append(limit)

        rows = self.postgres.execute(
            f"""
            SELECT * FROM expenses
            {where}
            ORDER BY expense_date DESC, created_at DESC
            LIMIT %s
            """,
            tuple(params)
        )

        return [Expense.model_validate(row) for row in rows]

    def delete(self, expense_id: UUID) -> None:
        """
        Delete an expense.

        Raises:
            NotFoundError: If expense not found
        """
        current = self.get_by_id(expense_id)
        if current is None:
            raise NotFoundError("expense", expense_id)

        self.postgres.execute(
            "DELETE FROM expenses WHERE id = %s",
            (expense_id,)
        )

        self.audit.log_change(
            entity_type="expense",
            entity_id=expense_id,
            action=AuditAction.DELETE,
            changes={"deleted": current.model_dump(mode="json")}
        )

        logger.info("Expense %s deleted", expense_id)

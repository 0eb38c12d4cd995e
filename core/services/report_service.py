"""
Financial summary over a date range.

Revenue is money actually received: sale payments, checkout bills, and food
orders paid at the counter (orders settled by checkout are already inside
the checkout total). Expenses are the expense records; supplier payments are
reported alongside but not deducted from profit.
"""

from datetime import date, timedelta

from clients.postgres_client import PostgresClient
from core.billing import ratio_bps, sum_cents
from core.config import LedgerConfig
from core.exceptions import ValidationError
from core.models import CategoryTotal, EntityKind, FinancialSummary
from utils.timezone import start_of_day_utc


class ReportService:
    """Service for financial reporting."""

    def __init__(self, postgres: PostgresClient, config: LedgerConfig | None = None):
        self.postgres = postgres
        self.config = config or LedgerConfig()

    def _sum(self, query: str, params: tuple) -> int:
        value = self.postgres.execute_scalar(query, params)
        return int(value or 0)

    def financial_summary(self, start_date: date, end_date: date) -> FinancialSummary:
        """
        Revenue, expenses and profit for start_date..end_date inclusive (UTC days).

        Raises:
            ValidationError: If start_date is after end_date
        """
        if start_date > end_date:
            raise ValidationError("start_date cannot be after end_date")

        range_start = start_of_day_utc(start_date)
        range_end = start_of_day_utc(end_date + timedelta(days=1))

        sale_payments = self._sum(
            """
            SELECT COALESCE(SUM(amount_cents), 0)::bigint FROM payments
            WHERE entity_kind = %s AND created_at >= %s AND created_at < %s
            """,
            (EntityKind.SALE.value, range_start, range_end)
        )
        checkouts = self._sum(
            """
            SELECT COALESCE(SUM(grand_total_cents), 0)::bigint FROM checkouts
            WHERE created_at >= %s AND created_at < %s
            """,
            (range_start, range_end)
        )
        counter_food = self._sum(
            """
            SELECT COALESCE(SUM(total_amount_cents), 0)::bigint FROM food_orders
            WHERE paid = TRUE AND checkout_id IS NULL
              AND paid_at >= %s AND paid_at < %s
            """,
            (range_start, range_end)
        )
        supplier_payments = self._sum(
            """
            SELECT COALESCE(SUM(amount_cents), 0)::bigint FROM payments
            WHERE entity_kind = %s AND created_at >= %s AND created_at < %s
            """,
            (EntityKind.PURCHASE.value, range_start, range_end)
        )

        expense_rows = self.postgres.execute(
            """
            SELECT category, COALESCE(SUM(amount_cents), 0)::bigint AS amount_cents
            FROM expenses
            WHERE expense_date >= %s AND expense_date <= %s
            GROUP BY category
            ORDER BY amount_cents DESC, category ASC
            """,
            (start_date, end_date)
        )

        revenue_by_source = [
            CategoryTotal(name="sales", amount_cents=sale_payments),
            CategoryTotal(name="checkouts", amount_cents=checkouts),
            CategoryTotal(name="food_orders", amount_cents=counter_food),
        ]
        expenses_by_category = [
            CategoryTotal(name=row["category"], amount_cents=row["amount_cents"])
            for row in expense_rows
        ]

        revenue = sum_cents(item.amount_cents for item in revenue_by_source)
        expenses = sum_cents(item.amount_cents for item in expenses_by_category)
        net_profit = revenue - expenses

        return FinancialSummary(
            start_date=start_date,
            end_date=end_date,
            currency_code=self.config.currency_code,
            total_revenue_cents=revenue,
            total_expenses_cents=expenses,
            supplier_payments_cents=supplier_payments,
            net_profit_cents=net_profit,
            profit_margin_bps=ratio_bps(net_profit, revenue),
            revenue_by_source=revenue_by_source,
            expenses_by_category=expenses_by_category,
        )

"""Financial summary read-model."""

from datetime import date

from pydantic import BaseModel


class CategoryTotal(BaseModel):
    """Amount attributed to one revenue source or expense category."""

    name: str
    amount_cents: int


class FinancialSummary(BaseModel):
    """Money in versus money out over a date range (inclusive)."""

    start_date: date
    end_date: date
    currency_code: str
    total_revenue_cents: int
    total_expenses_cents: int
    supplier_payments_cents: int
    net_profit_cents: int
    profit_margin_bps: int
    revenue_by_source: list[CategoryTotal]
    expenses_by_category: list[CategoryTotal]

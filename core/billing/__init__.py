"""
Billing and balance engine.

Pure computations over plain values and domain models: no database access,
no clock reads unless "now" is omitted. Store-backed operations live in
core.services and call into these modules.
"""

from core.billing.money import (
    to_cents,
    from_cents,
    percent_to_bps,
    apply_rate,
    clamp_non_negative,
    sum_cents,
    format_cents,
    ratio_bps,
)
from core.billing.charges import stay_days, room_charges, order_total, unpaid_orders_total
from core.billing.discount import validate_discount, discount_amount, apply_discount
from core.billing.tax import tax_amount, apply_tax
from core.billing.pipeline import compute_bill
from core.billing.ledger import (
    PaymentModel,
    payment_model_for,
    toggle_balance_due,
    ledger_balance_due,
    initial_payment_cents,
    validate_payment,
)
from core.billing.balances import display_balance, statement, summarize, summarize_owners

"""
Payment rules for the two payment models.

Food orders use TOGGLE: paid or unpaid, nothing in between. Sales and
purchases use LEDGERED: an append-only list of payments against a total.
Both expose balance_due so roll-ups treat them alike.
"""

from enum import Enum

from core.exceptions import ConflictError, ValidationError
from core.models.payment import EntityKind, PaymentMode


class PaymentModel(Enum):
    """How an entity kind tracks payment."""

    TOGGLE = "toggle"
    LEDGERED = "ledgered"


PAYMENT_MODELS = {
    "food_order": PaymentModel.TOGGLE,
    EntityKind.SALE.value: PaymentModel.LEDGERED,
    EntityKind.PURCHASE.value: PaymentModel.LEDGERED,
}


def payment_model_for(entity_kind: str) -> PaymentModel:
    try:
        return PAYMENT_MODELS[entity_kind]
    except KeyError:
        raise ValidationError(f"Unknown billable entity kind '{entity_kind}'")


def toggle_balance_due(total_amount_cents: int, paid: bool) -> int:
    """Outstanding amount of a toggle-model entity: all or nothing."""
    return 0 if paid else total_amount_cents


def ledger_balance_due(total_amount_cents: int, amount_paid_cents: int) -> int:
    """Outstanding amount of a ledgered entity. Negative means over-paid."""
    return total_amount_cents - amount_paid_cents


def initial_payment_cents(
    mode: PaymentMode,
    total_amount_cents: int,
    amount_cents: int | None = None,
) -> int:
    """
    Amount to record when a ledgered entity is created.

    Returns:
        0 for pay_later, the full total for pay_now, the supplied amount for
        pay_partial

    Raises:
        ValidationError: If a partial amount is missing, not positive, or
            above the total
    """
    if mode == PaymentMode.PAY_LATER:
        return 0

    if mode == PaymentMode.PAY_NOW:
        return total_amount_cents

    if amount_cents is None or amount_cents <= 0:
        raise ValidationError("Partial payment amount must be greater than 0")
    if amount_cents > total_amount_cents:
        raise ValidationError(
            f"Partial payment {amount_cents} cannot exceed total {total_amount_cents}"
        )
    return amount_cents


def validate_payment(amount_cents: int, balance_due_cents: int) -> None:
    """
    Check a follow-up payment against the current outstanding balance.

    Raises:
        ValidationError: If the amount is not positive
        ConflictError: If the payment would drive the balance below zero,
            including any payment against a settled entity
    """
    if amount_cents <= 0:
        raise ValidationError("Payment amount must be greater than 0")
    if amount_cents > balance_due_cents:
        raise ConflictError(
            f"Payment of {amount_cents} exceeds balance due of {max(0, balance_due_cents)}"
        )

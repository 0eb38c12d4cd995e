"""Discount engine: flat or percentage reductions, never below zero."""

from core.billing.money import BPS_PER_UNIT, apply_rate, clamp_non_negative
from core.exceptions import ValidationError
from core.models.billing import Discount, DiscountType


def validate_discount(discount: Discount | None) -> None:
    """
    Edge validation for caller-supplied discounts.

    Raises:
        ValidationError: If a percentage lies outside 0-100% or a value is negative
    """
    if discount is None:
        return
    if discount.value < 0:
        raise ValidationError("Discount amount cannot be negative")
    if discount.type == DiscountType.PERCENTAGE and discount.value > BPS_PER_UNIT:
        raise ValidationError(
            f"Percentage discount must be between 0 and 100% (got {discount.value / 100}%)"
        )


def discount_amount(subtotal_cents: int, discount: Discount | None) -> int:
    """
    Cents actually taken off the subtotal.

    Never more than the subtotal itself. Assumes validate_discount already ran.
    """
    if discount is None or discount.value <= 0:
        return 0

    if discount.type == DiscountType.PERCENTAGE:
        reduction = apply_rate(subtotal_cents, discount.value)
    else:
        reduction = discount.value

    return min(reduction, clamp_non_negative(subtotal_cents))


def apply_discount(subtotal_cents: int, discount: Discount | None) -> int:
    """Subtotal after discount, clamped at zero."""
    if discount is None or discount.value <= 0:
        return subtotal_cents
    return clamp_non_negative(subtotal_cents - discount_amount(subtotal_cents, discount))

"""
Bill pipeline: subtotal -> discount -> tax -> grand total.

Tax is always computed on the post-discount amount.
"""

from core.billing.discount import apply_discount
from core.billing.tax import apply_tax
from core.models.billing import BillBreakdown, Discount, TaxConfig


def compute_bill(
    charges_cents: list[int] | tuple[int, ...],
    discount: Discount | None,
    tax_config: TaxConfig,
) -> BillBreakdown:
    """
    Itemize a bill from its charge components.

    Args:
        charges_cents: Charge components summed into the subtotal
            (e.g. room charges and unpaid food total)
        discount: Optional discount, already validated
        tax_config: Tax snapshot for this computation

    Returns:
        BillBreakdown with every intermediate amount
    """
    subtotal = sum(charges_cents)
    after_discount = apply_discount(subtotal, discount)
    grand_total = apply_tax(after_discount, tax_config)

    return BillBreakdown(
        subtotal_cents=subtotal,
        discount_cents=subtotal - after_discount,
        after_discount_cents=after_discount,
        tax_rate_bps=tax_config.rate_bps if tax_config.is_effective else 0,
        tax_cents=grand_total - after_discount,
        grand_total_cents=grand_total,
    )

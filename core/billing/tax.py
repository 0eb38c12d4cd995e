"""Tax engine: one flat rate, applied after discount, only when enabled."""

from core.billing.money import apply_rate
from core.models.billing import TaxConfig


def tax_amount(after_discount_cents: int, tax_config: TaxConfig) -> int:
    if not tax_config.is_effective:
        return 0
    return apply_rate(after_discount_cents, tax_config.rate_bps)


def apply_tax(after_discount_cents: int, tax_config: TaxConfig) -> int:
    """after_discount * (1 + rate), or unchanged when tax is off or zero."""
    return after_discount_cents + tax_amount(after_discount_cents, tax_config)

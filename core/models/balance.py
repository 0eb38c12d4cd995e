"""Balance read-models for customer and supplier accounts.

Pure projections recomputed on demand; nothing here is stored.
"""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel

from core.models.payment import EntityBalance, EntityKind


class OwnerKind(str, Enum):
    """Account holders whose balances roll up."""

    CUSTOMER = "customer"
    SUPPLIER = "supplier"

    @property
    def entity_kind(self) -> EntityKind:
        """Billable entity kind owned by this account type."""
        return EntityKind.SALE if self is OwnerKind.CUSTOMER else EntityKind.PURCHASE


class BalanceSummary(BaseModel):
    """Roll-up of every billable entity for one owner."""

    owner_kind: OwnerKind
    owner_id: UUID
    owner_name: str
    is_active: bool = True
    entity_count: int
    total_billed_cents: int
    amount_paid_cents: int
    balance_due_cents: int


class StatementRow(EntityBalance):
    """One line of an owner statement."""

    reference: str | None = None
    created_at: datetime

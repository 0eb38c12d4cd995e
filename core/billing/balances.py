"""
Balance summarizer: per-entity statements and per-owner roll-ups.

Display balances floor at zero. An over-paid entity is a data inconsistency:
it is logged, not hidden as a negative number.
"""

import logging
from typing import Any, Iterable, Mapping
from uuid import UUID

from core.billing.ledger import ledger_balance_due
from core.models.balance import BalanceSummary, OwnerKind, StatementRow
from core.models.payment import EntityKind

logger = logging.getLogger(__name__)


def display_balance(total_cents: int, paid_cents: int, entity: str = "") -> int:
    """total - paid, floored at zero; warns when paid exceeds total."""
    balance = ledger_balance_due(total_cents, paid_cents)
    if balance < 0:
        logger.warning(
            "Over-payment detected%s: total=%s paid=%s",
            f" on {entity}" if entity else "",
            total_cents,
            paid_cents,
        )
        return 0
    return balance


def statement(entity_kind: EntityKind, rows: Iterable[Mapping[str, Any]]) -> list[StatementRow]:
    """
    Line-level statement for one owner.

    Each row needs id, total_amount_cents, amount_paid_cents, created_at and
    optionally reference.
    """
    result = []
    for row in rows:
        balance = display_balance(
            row["total_amount_cents"],
            row["amount_paid_cents"],
            f"{entity_kind.value} {row['id']}",
        )
        result.append(StatementRow(
            entity_kind=entity_kind,
            entity_id=row["id"],
            reference=row.get("reference"),
            created_at=row["created_at"],
            total_amount_cents=row["total_amount_cents"],
            amount_paid_cents=row["amount_paid_cents"],
            balance_due_cents=balance,
        ))
    return result


def summarize(
    owner_kind: OwnerKind,
    owner_id: UUID,
    owner_name: str,
    rows: Iterable[Mapping[str, Any]],
    is_active: bool = True,
) -> BalanceSummary:
    """
    Roll one owner's entities into total billed, paid and balance due.

    balance_due is summed from per-entity display balances, so the owner
    figure always equals the sum of its statement lines.
    """
    total_billed = 0
    amount_paid = 0
    balance_due = 0
    count = 0

    for row in rows:
        count += 1
        total_billed += row["total_amount_cents"]
        amount_paid += row["amount_paid_cents"]
        balance_due += display_balance(
            row["total_amount_cents"],
            row["amount_paid_cents"],
            f"{owner_kind.entity_kind.value} {row['id']}",
        )

    return BalanceSummary(
        owner_kind=owner_kind,
        owner_id=owner_id,
        owner_name=owner_name,
        is_active=is_active,
        entity_count=count,
        total_billed_cents=total_billed,
        amount_paid_cents=amount_paid,
        balance_due_cents=balance_due,
    )


def summarize_owners(
    owner_kind: OwnerKind,
    owners: Iterable[Mapping[str, Any]],
    rows: Iterable[Mapping[str, Any]],
) -> list[BalanceSummary]:
    """
    Roll-up per owner for a list view, largest balance first.

    Args:
        owners: Rows with id, name and optionally is_active
        rows: Entity rows with owner_id plus the fields statement() needs;
            rows whose owner is not listed (walk-ins, inactive) are ignored
    """
    by_owner: dict[UUID, list[Mapping[str, Any]]] = {}
    for row in rows:
        by_owner.setdefault(row["owner_id"], []).append(row)

    summaries = [
        summarize(
            owner_kind,
            owner["id"],
            owner["name"],
            by_owner.get(owner["id"], []),
            owner.get("is_active", True),
        )
        for owner in owners
    ]
    summaries.sort(key=lambda s: (-s.balance_due_cents, s.owner_name.lower()))
    return summaries


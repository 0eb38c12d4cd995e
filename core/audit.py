"""
Append-only audit trail for ledger mutations.

One audit_log row per payment, order toggle, checkout, account or settings
change, carrying the operator (NULL for system actions) and a JSON change set.
Entries written inside a transaction commit or roll back with the mutation
they describe.
"""

from enum import Enum
from typing import Any, Mapping
from uuid import UUID, uuid4

from psycopg2.extras import Json
from pydantic import BaseModel

from clients.postgres_client import PostgresClient, Transaction
from utils.operator_context import get_operator_id
from utils.timezone import now_utc


class AuditAction(Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


def _as_json_dict(state: BaseModel | Mapping[str, Any]) -> dict[str, Any]:
    if isinstance(state, BaseModel):
        return state.model_dump(mode="json")
    return dict(state)


def compute_changes(
    old: BaseModel | Mapping[str, Any],
    new: BaseModel | Mapping[str, Any],
    exclude_fields: set[str] | None = None
) -> dict[str, dict[str, Any]]:
    """
    Field-level diff between two states of an entity.

    Models are dumped in JSON mode first, so UUIDs, dates and enums compare
    (and store) as strings.

    Args:
        old: State before the mutation
        new: State after the mutation
        exclude_fields: Fields to ignore (defaults to {"updated_at"})

    Returns:
        {field: {"old": ..., "new": ...}} for changed fields, in field-name
        order. Empty when nothing changed.
    """
    exclude = exclude_fields or {"updated_at"}
    before = _as_json_dict(old)
    after = _as_json_dict(new)

    return {
        key: {"old": before.get(key), "new": after.get(key)}
        for key in sorted(before.keys() | after.keys())
        if key not in exclude and before.get(key) != after.get(key)
    }


class AuditLogger:
    """
    Writes and reads audit_log.

    Usage:
        audit = AuditLogger(postgres)

        with postgres.transaction() as tx:
            payment = insert_payment(tx, ...)
            audit.log_change(
                entity_type="payment",
                entity_id=payment.id,
                action=AuditAction.CREATE,
                changes={"created": payment.model_dump(mode="json")},
                tx=tx
            )
    """

    def __init__(self, postgres: PostgresClient):
        self.postgres = postgres

    def log_change(
        self,
        entity_type: str,
        entity_id: UUID,
        action: AuditAction,
        changes: dict[str, Any],
        user_id: UUID | None = None,
        tx: Transaction | None = None
    ) -> None:
        """
        Append one entry.

        Args:
            entity_type: "sale", "food_order", "checkout", ...
            entity_id: ID of the entity
            action: CREATE, UPDATE or DELETE
            changes: {"created": {...}} / {"field": {"old", "new"}} / {"deleted": {...}}
            user_id: Operator to attribute (defaults to the operator in context)
            tx: Open transaction to write through, if any
        """
        if user_id is None:
            user_id = get_operator_id()

        target = tx if tx is not None else self.postgres
        target.execute(
            """
            INSERT INTO audit_log (id, user_id, entity_type, entity_id, action, changes, created_at)
            VALUES (%s, %s, %s, %s, %s, %s, %s)
            """,
            (uuid4(), user_id, entity_type, entity_id, action.value, Json(changes), now_utc())
        )

    def get_entity_history(
        self,
        entity_type: str,
        entity_id: UUID,
        limit: int = 100
    ) -> list[dict[str, Any]]:
        """Audit entries for one entity, newest first."""
        return self.postgres.execute(
            """
            SELECT id, user_id, entity_type, entity_id, action, changes, created_at
            FROM audit_log
            WHERE entity_type = %s AND entity_id = %s
            ORDER BY created_at DESC
            LIMIT %s
            """,
            (entity_type, entity_id, limit)
        )

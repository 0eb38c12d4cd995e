"""
Customer and supplier balances.

Read-only roll-ups over sales (customers) and purchases (suppliers) and their
payments. Nothing is cached: every call recomputes from the ledger.
"""

from uuid import UUID

from clients.postgres_client import PostgresClient
from core.billing import statement, summarize_owners
from core.exceptions import NotFoundError
from core.models import BalanceSummary, OwnerKind, StatementRow

# owner table, entity table, owner column on the entity table
_OWNER_SOURCES = {
    OwnerKind.CUSTOMER: ("customers", "sales", "customer_id"),
    OwnerKind.SUPPLIER: ("suppliers", "purchases", "supplier_id"),
}


def _entity_rows_query(owner_kind: OwnerKind, single_owner: bool) -> str:
    _, entity_table, owner_column = _OWNER_SOURCES[owner_kind]
    owner_filter = f"e.{owner_column} = %s" if single_owner else f"e.{owner_column} IS NOT NULL"
    return f"""
        SELECT
            e.id,
            e.{owner_column} AS owner_id,
            e.reference,
            e.created_at,
            e.total_amount_cents,
            COALESCE(p.amount_paid_cents, 0)::bigint AS amount_paid_cents
        FROM {entity_table} e
        LEFT JOIN (
            SELECT entity_id, SUM(amount_cents) AS amount_paid_cents
            FROM payments
            WHERE entity_kind = %s
            GROUP BY entity_id
        ) p ON p.entity_id = e.id
        WHERE {owner_filter}
        ORDER BY e.created_at ASC
    """


class BalanceService:
    """Service for owner balance summaries and statements."""

    def __init__(self, postgres: PostgresClient):
        self.postgres = postgres

    def get_balance_summaries(
        self,
        owner_kind: OwnerKind,
        include_inactive: bool = False
    ) -> list[BalanceSummary]:
        """
        One summary per customer or supplier, largest balance first.

        Args:
            owner_kind: CUSTOMER or SUPPLIER
            include_inactive: Also summarize deactivated accounts

        Returns:
            List of BalanceSummary, including owners with nothing billed
        """
        owner_table, _, _ = _OWNER_SOURCES[owner_kind]

        owners = self.postgres.execute(
            f"""
            SELECT id, name, is_active FROM {owner_table}
            WHERE is_active OR %s
            ORDER BY name ASC
            """,
            (include_inactive,)
        )

        rows = self.postgres.execute(
            _entity_rows_query(owner_kind, single_owner=False),
            (owner_kind.entity_kind.value,)
        )

        return summarize_owners(owner_kind, owners, rows)

    def get_entity_statement(self, owner_kind: OwnerKind, owner_id: UUID) -> list[StatementRow]:
        """
        Every sale (or purchase) of one owner with its own total, paid and balance.

        Raises:
            NotFoundError: If the owner does not exist
        """
        owner_table, _, _ = _OWNER_SOURCES[owner_kind]

        owner = self.postgres.execute_single(
            f"SELECT id FROM {owner_table} WHERE id = %s",
            (owner_id,)
        )
        if owner is None:
            raise NotFoundError(owner_kind.value, owner_id)

        rows = self.postgres.execute(
            _entity_rows_query(owner_kind, single_owner=True),
            (owner_kind.entity_kind.value, owner_id)
        )

        return statement(owner_kind.entity_kind, rows)

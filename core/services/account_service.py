"""
Account holder service shared by customers and suppliers.

Accounts own billable entities (customers own sales, suppliers own
purchases). They are deactivated rather than deleted so history and
balances stay intact. Subclasses name the table, the stored model and the
columns a caller may set.
"""

import logging
from typing import Generic, TypeVar
from uuid import UUID, uuid4

from pydantic import BaseModel

from clients.postgres_client import PostgresClient
from core.audit import AuditLogger, AuditAction, compute_changes
from core.exceptions import NotFoundError
from utils.timezone import now_utc

logger = logging.getLogger(__name__)

AccountT = TypeVar("AccountT", bound=BaseModel)


class AccountService(Generic[AccountT]):
    """CRUD for one kind of account holder."""

    table: str
    entity_type: str
    model: type[AccountT]
    # Columns written on create and accepted on update, in insert order
    columns: tuple[str, ...]

    def __init__(self, postgres: PostgresClient, audit: AuditLogger):
        self.postgres = postgres
        self.audit = audit

    def create(self, data: BaseModel) -> AccountT:
        """
        Create a new account. The name is stored trimmed.

        Args:
            data: Creation payload carrying every name in `columns`

        Returns:
            Created account, active
        """
        now = now_utc()
        values = {column: getattr(data, column) for column in self.columns}
        values["name"] = values["name"].strip()

        placeholders = ", ".join(["%s"] * len(values))
        row = self.postgres.execute_returning(
            f"""
            INSERT INTO {self.table} (id, {', '.join(values)}, is_active, created_at, updated_at)
            VALUES (%s, {placeholders}, TRUE, %s, %s)
            RETURNING *
            """,
            (uuid4(), *values.values(), now, now)
        )[0]

        account = self.model.model_validate(row)

        self.audit.log_change(
            entity_type=self.entity_type,
            entity_id=account.id,
            action=AuditAction.CREATE,
            changes={"created": data.model_dump(mode="json", exclude_none=True)}
        )

        return account

    def get_by_id(self, account_id: UUID) -> AccountT | None:
        """Account by ID, or None."""
        row = self.postgres.execute_single(
            f"SELECT * FROM {self.table} WHERE id = %s",
            (account_id,)
        )

        if row is None:
            return None

        return self.model.model_validate(row)

    def _require(self, account_id: UUID) -> AccountT:
        current = self.get_by_id(account_id)
        if current is None:
            raise NotFoundError(self.entity_type, account_id)
        return current

    def update(self, account_id: UUID, data: BaseModel) -> AccountT:
        """
        Update account fields.

        Args:
            account_id: Account UUID
            data: Fields to update (only non-None fields are changed)

        Returns:
            Updated account

        Raises:
            NotFoundError: If the account does not exist
        """
        current = self._require(account_id)

        updates = data.model_dump(exclude_none=True)
        for field in updates:
            if field not in self.columns:
                logger.warning(
                    "Attempted to update unknown field '%s' on %s %s",
                    field, self.entity_type, account_id
                )

        valid_updates = {k: v for k, v in updates.items() if k in self.columns}
        if not valid_updates:
            return current

        set_parts = [f"{field} = %s" for field in valid_updates]
        params = list(valid_updates.values())

        set_parts.append("updated_at = %s")
        params.append(now_utc())
        params.append(account_id)

        row = self.postgres.execute_returning(
            f"""
            UPDATE {self.table}
            SET {', '.join(set_parts)}
            WHERE id = %s
            RETURNING *
            """,
            tuple(params)
        )[0]

        updated = self.model.model_validate(row)

        changes = compute_changes(current, updated)
        if changes:
            self.audit.log_change(
                entity_type=self.entity_type,
                entity_id=account_id,
                action=AuditAction.UPDATE,
                changes=changes
            )

        return updated

    def deactivate(self, account_id: UUID) -> AccountT:
        """
        Hide an account from active lists without touching its history.

        Raises:
            NotFoundError: If the account does not exist
        """
        current = self._require(account_id)
        if not current.is_active:
            return current

        row = self.postgres.execute_returning(
            f"""
            UPDATE {self.table}
            SET is_active = FALSE, updated_at = %s
            WHERE id = %s
            RETURNING *
            """,
            (now_utc(), account_id)
        )[0]

        self.audit.log_change(
            entity_type=self.entity_type,
            entity_id=account_id,
            action=AuditAction.UPDATE,
            changes={"is_active": {"old": True, "new": False}}
        )

        return self.model.model_validate(row)

    def list_all(self, include_inactive: bool = False, limit: int = 50, offset: int = 0) -> list[AccountT]:
        """
        List accounts by name.

        Args:
            include_inactive: Also return deactivated accounts
            limit: Maximum results
            offset: Offset for pagination
        """
        rows = self.postgres.execute(
            f"""
            SELECT * FROM {self.table}
            WHERE is_active OR %s
            ORDER BY name ASC
            LIMIT %s OFFSET %s
            """,
            (include_inactive, limit, offset)
        )

        return [self.model.model_validate(row) for row in rows]

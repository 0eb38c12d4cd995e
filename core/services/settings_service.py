"""
Business settings service.

Tax settings are a single row in business_settings. Computations take a fresh
TaxConfig snapshot per call and never hold one across requests.
"""

import logging
from uuid import UUID

from clients.postgres_client import PostgresClient, Transaction
from core.audit import AuditLogger, AuditAction, compute_changes
from core.models import TaxConfig, TaxConfigUpdate
from utils.timezone import now_utc

logger = logging.getLogger(__name__)

# business_settings is a singleton row
_SETTINGS_ROW_ID = 1
_SETTINGS_ENTITY_ID = UUID(int=_SETTINGS_ROW_ID)


class SettingsService:
    """Service for business-wide settings."""

    def __init__(self, postgres: PostgresClient, audit: AuditLogger):
        self.postgres = postgres
        self.audit = audit

    def get_tax_config(self, tx: Transaction | None = None) -> TaxConfig:
        """
        Read the current tax setting.

        Args:
            tx: Open transaction to read through, so a checkout sees one
                consistent snapshot

        Returns:
            TaxConfig snapshot; disabled at 0% when never configured
        """
        source = tx if tx is not None else self.postgres
        row = source.execute_single(
            """
            SELECT tax_enabled, tax_rate_bps, updated_at
            FROM business_settings
            WHERE id = %s
            """,
            (_SETTINGS_ROW_ID,)
        )

        if row is None:
            return TaxConfig()

        return TaxConfig(
            enabled=row["tax_enabled"],
            rate_bps=row["tax_rate_bps"],
            updated_at=row["updated_at"],
        )

    def update_tax_config(self, data: TaxConfigUpdate) -> TaxConfig:
        """
        Change the tax setting. Omitted fields keep their current value.

        Returns:
            The new TaxConfig
        """
        current = self.get_tax_config()

        enabled = current.enabled if data.enabled is None else data.enabled
        rate_bps = current.rate_bps if data.rate_bps is None else data.rate_bps

        row = self.postgres.execute_returning(
            """
            INSERT INTO business_settings (id, tax_enabled, tax_rate_bps, updated_at)
            VALUES (%s, %s, %s, %s)
            ON CONFLICT (id) DO UPDATE
            SET tax_enabled = EXCLUDED.tax_enabled,
                tax_rate_bps = EXCLUDED.tax_rate_bps,
                updated_at = EXCLUDED.updated_at
            RETURNING tax_enabled, tax_rate_bps, updated_at
            """,
            (_SETTINGS_ROW_ID, enabled, rate_bps, now_utc())
        )[0]

        updated = TaxConfig(
            enabled=row["tax_enabled"],
            rate_bps=row["tax_rate_bps"],
            updated_at=row["updated_at"],
        )

        changes = compute_changes(current, updated)
        if changes:
            self.audit.log_change(
                entity_type="business_settings",
                entity_id=_SETTINGS_ENTITY_ID,
                action=AuditAction.UPDATE,
                changes=changes
            )
            logger.info("Tax settings changed: enabled=%s rate_bps=%s", enabled, rate_bps)

        return updated

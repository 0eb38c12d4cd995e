"""Ledger configuration."""

import os

from pydantic import BaseModel, Field

from clients.vault_client import get_database_url, vault_configured


class LedgerConfig(BaseModel):
    """
    Process configuration for the ledger service.

    Business settings that operators change at runtime (tax) are not here;
    they live in the database and are read per computation by SettingsService.
    """

    currency_code: str = Field(
        default="PKR",
        description="ISO 4217 code used when formatting amounts",
        min_length=3,
        max_length=3,
    )
    default_list_limit: int = Field(
        default=50,
        description="Rows returned by list endpoints when no limit is given",
        ge=1,
        le=500,
    )
    database_url: str | None = Field(
        default=None,
        description="Fallback DSN when Vault is not configured",
    )
    app_name: str = Field(
        default="Hotel POS Ledger",
        description="Application name for API metadata",
    )


def load_config() -> LedgerConfig:
    """Build config from LEDGER_* environment variables."""
    values = {}
    if os.getenv("LEDGER_CURRENCY_CODE"):
        values["currency_code"] = os.getenv("LEDGER_CURRENCY_CODE")
    if os.getenv("LEDGER_DEFAULT_LIST_LIMIT"):
        values["default_list_limit"] = int(os.getenv("LEDGER_DEFAULT_LIST_LIMIT"))
    if os.getenv("LEDGER_DATABASE_URL"):
        values["database_url"] = os.getenv("LEDGER_DATABASE_URL")
    if os.getenv("LEDGER_APP_NAME"):
        values["app_name"] = os.getenv("LEDGER_APP_NAME")
    return LedgerConfig(**values)


def resolve_database_url(config: LedgerConfig) -> str:
    """
    Database URL from Vault when configured, else from config.

    Raises:
        ValueError: If neither source provides a URL
    """
    if vault_configured():
        return get_database_url()
    if config.database_url:
        return config.database_url
    raise ValueError("No database URL: set VAULT_* or LEDGER_DATABASE_URL")

"""Shared test fixtures for the ledger test suite."""

import pytest
from unittest.mock import MagicMock, Mock
from uuid import UUID
from pathlib import Path

from dotenv import load_dotenv

# Load .env file BEFORE any other imports that might use env vars
# override=True ensures .env takes precedence over shell env vars
load_dotenv(Path(__file__).parent.parent / ".env", override=True)

# Drop any Vault client built before the .env values were loaded
from clients.vault_client import reset_vault_client
reset_vault_client()

from clients.postgres_client import PostgresClient, Transaction
from core.audit import AuditLogger
from utils.operator_context import operator_context, clear_operator_id


# =============================================================================
# OPERATOR CONSTANTS
# =============================================================================

# Front desk cashier - use for single-operator tests
CASHIER_ID = UUID("00000000-0000-0000-0000-000000000001")

# Duty manager
MANAGER_ID = UUID("00000000-0000-0000-0000-000000000002")


# =============================================================================
# OPERATOR CONTEXT FIXTURES
# =============================================================================


@pytest.fixture(autouse=True)
def reset_operator_context():
    """Ensure no operator leaks between tests."""
    clear_operator_id()
    yield
    clear_operator_id()


@pytest.fixture
def cashier_id() -> UUID:
    return CASHIER_ID


@pytest.fixture
def manager_id() -> UUID:
    return MANAGER_ID


@pytest.fixture
def as_cashier(cashier_id):
    """Run the test with the cashier acting."""
    with operator_context(cashier_id):
        yield cashier_id


# =============================================================================
# STORE FIXTURES
# =============================================================================


@pytest.fixture
def tx():
    """Transaction handle yielded by postgres.transaction()."""
    return MagicMock(spec=Transaction)


@pytest.fixture
def postgres(tx):
    """PostgresClient stand-in whose transaction() yields the tx fixture."""
    mock = MagicMock(spec=PostgresClient)
    mock.transaction.return_value.__enter__.return_value = tx
    mock.transaction.return_value.__exit__.return_value = False
    return mock


@pytest.fixture
def audit():
    """AuditLogger stand-in; assert on log_change calls."""
    return Mock(spec=AuditLogger)

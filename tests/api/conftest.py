"""API test fixtures: the real app over mocked services."""

from datetime import date, datetime, timezone
from unittest.mock import MagicMock, Mock
from uuid import UUID

import pytest
from starlette.testclient import TestClient

from api.app import create_app
from clients.postgres_client import PostgresClient
from core.audit import AuditLogger
from core.models import (
    Customer, EntityBalance, EntityKind, FoodOrder, Guest, OrderLine, TaxConfig,
)
from core.services.balance_service import BalanceService
from core.services.checkout_service import CheckoutService
from core.services.customer_service import CustomerService
from core.services.expense_service import ExpenseService
from core.services.food_order_service import FoodOrderService
from core.services.guest_service import GuestService
from core.services.payment_service import PaymentService
from core.services.purchase_service import PurchaseService
from core.services.report_service import ReportService
from core.services.room_service import RoomService
from core.services.sale_service import SaleService
from core.services.settings_service import SettingsService
from core.services.supplier_service import SupplierService

NOW = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
GUEST_ID = UUID("10000000-0000-0000-0000-000000000001")
ORDER_ID = UUID("20000000-0000-0000-0000-000000000001")
SALE_ID = UUID("30000000-0000-0000-0000-000000000001")
CUSTOMER_ID = UUID("40000000-0000-0000-0000-000000000001")


# =============================================================================
# SAMPLE ENTITIES
# =============================================================================


@pytest.fixture
def sample_guest():
    return Guest(
        id=GUEST_ID, name="Hamza", phone=None, room_number="101",
        check_in=date(2026, 3, 1), check_out=None, daily_rate_cents=200000,
        status="active", created_at=NOW, updated_at=NOW,
    )


@pytest.fixture
def sample_order():
    return FoodOrder(
        id=ORDER_ID, guest_id=GUEST_ID, customer_type="guest", customer_name="Hamza",
        lines=[OrderLine(
            id=UUID(int=1), order_id=ORDER_ID, item_name="Karahi", quantity=2, unit_price_cents=25000,
        )],
        paid=True, paid_at=NOW, created_at=NOW, updated_at=NOW,
    )


@pytest.fixture
def sample_customer():
    return Customer(
        id=CUSTOMER_ID, name="Ayesha", phone=None, notes=None,
        created_at=NOW, updated_at=NOW,
    )


@pytest.fixture
def sample_balance():
    return EntityBalance(
        entity_kind=EntityKind.SALE, entity_id=SALE_ID,
        total_amount_cents=50000, amount_paid_cents=50000, balance_due_cents=0,
    )


# =============================================================================
# SERVICES DICT
# =============================================================================


@pytest.fixture
def services():
    settings = Mock(spec=SettingsService)
    settings.get_tax_config.return_value = TaxConfig(enabled=True, rate_bps=500)

    return {
        "customer": Mock(spec=CustomerService),
        "supplier": Mock(spec=SupplierService),
        "guest": Mock(spec=GuestService),
        "food_order": Mock(spec=FoodOrderService),
        "checkout": Mock(spec=CheckoutService),
        "sale": Mock(spec=SaleService),
        "purchase": Mock(spec=PurchaseService),
        "payment": Mock(spec=PaymentService),
        "balance": Mock(spec=BalanceService),
        "settings": settings,
        "expense": Mock(spec=ExpenseService),
        "report": Mock(spec=ReportService),
        "room": Mock(spec=RoomService),
        "audit": Mock(spec=AuditLogger),
    }


# =============================================================================
# APP & CLIENT FIXTURES
# =============================================================================


@pytest.fixture
def app(services):
    """The production app wired to mocked services."""
    return create_app(MagicMock(spec=PostgresClient), services=services)


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def action(client):
    """POST one action and return the response."""

    def post(domain: str, name: str, data: dict | None = None):
        return client.post("/api/actions", json={"domain": domain, "action": name, "data": data or {}})

    return post

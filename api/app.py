"""Application factory: wires services, middleware, error handlers and routes."""

import logging

from fastapi import FastAPI, Request

from api.actions import create_actions_router
from api.base import respond
from api.data import create_data_router
from api.errors import register_error_handlers
from api.middleware import OperatorMiddleware, RequestIDMiddleware
from clients.postgres_client import PostgresClient
from core.audit import AuditLogger
from core.config import LedgerConfig
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

logger = logging.getLogger(__name__)


def build_services(postgres: PostgresClient, config: LedgerConfig) -> dict:
    """Instantiate every service against one store."""
    audit = AuditLogger(postgres)
    settings = SettingsService(postgres, audit)
    rooms = RoomService(postgres, audit)

    return {
        "customer": CustomerService(postgres, audit),
        "supplier": SupplierService(postgres, audit),
        "room": rooms,
        "guest": GuestService(postgres, audit, rooms),
        "food_order": FoodOrderService(postgres, audit),
        "checkout": CheckoutService(postgres, audit, settings),
        "sale": SaleService(postgres, audit),
        "purchase": PurchaseService(postgres, audit),
        "payment": PaymentService(postgres, audit),
        "balance": BalanceService(postgres),
        "settings": settings,
        "expense": ExpenseService(postgres, audit),
        "report": ReportService(postgres, config),
        "audit": audit,
    }


def create_app(
    postgres: PostgresClient,
    config: LedgerConfig | None = None,
    services: dict | None = None
) -> FastAPI:
    """
    Build the HTTP app.

    Args:
        postgres: Store every service reads and writes
        config: Process configuration (defaults apply when omitted)
        services: Prebuilt services, replacing the ones built from postgres
    """
    config = config or LedgerConfig()
    services = services or build_services(postgres, config)

    app = FastAPI(title=config.app_name)
    # Last added runs first: request id is assigned before the operator check
    app.add_middleware(OperatorMiddleware)
    app.add_middleware(RequestIDMiddleware)
    register_error_handlers(app)

    app.include_router(create_data_router(services), prefix="/api")
    app.include_router(create_actions_router(services), prefix="/api")

    @app.get("/health")
    async def health(request: Request):
        return respond(request, {"status": "ok"})

    logger.info("%s ready with %d services", config.app_name, len(services))

    return app

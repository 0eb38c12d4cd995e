"""POST /api/actions: unified mutation endpoint."""

from uuid import UUID

from fastapi import APIRouter, Request
from pydantic import BaseModel

from api.base import respond
from core.models import (
    CustomerCreate, CustomerUpdate,
    SupplierCreate, SupplierUpdate,
    GuestCreate, GuestUpdate,
    RoomCreate,
    FoodOrderCreate,
    Discount,
    SaleCreate,
    PurchaseCreate, PurchaseLineCreate,
    PaymentCreate, EntityKind,
    TaxConfigUpdate,
    ExpenseCreate,
)


class ActionRequest(BaseModel):
    domain: str
    action: str
    data: dict


def create_actions_router(services: dict) -> APIRouter:
    router = APIRouter()

    handlers = {
        "customer": AccountHandler(services["customer"], CustomerCreate, CustomerUpdate),
        "supplier": AccountHandler(services["supplier"], SupplierCreate, SupplierUpdate),
        "room": RoomHandler(services["room"]),
        "guest": GuestHandler(services["guest"]),
        "food_order": FoodOrderHandler(services["food_order"]),
        "checkout": CheckoutHandler(services["checkout"]),
        "sale": SaleHandler(services["sale"]),
        "purchase": PurchaseHandler(services["purchase"]),
        "payment": PaymentHandler(services["payment"]),
        "settings": SettingsHandler(services["settings"]),
        "expense": ExpenseHandler(services["expense"]),
    }

    @router.post("/actions")
    async def perform_action(request: Request, body: ActionRequest):
        handler = handlers.get(body.domain)
        if handler is None:
            raise ValueError(
                f"Unknown domain '{body.domain}'. "
                f"Valid domains: {', '.join(sorted(handlers.keys()))}"
            )

        if body.action not in handler.ALLOWED_ACTIONS:
            raise ValueError(
                f"Action '{body.action}' not allowed on '{body.domain}'. "
                f"Allowed: {', '.join(sorted(handler.ALLOWED_ACTIONS))}"
            )

        method = getattr(handler, f"_handle_{body.action}", None)
        return respond(request, method(body.data))

    return router


def _require_id(data: dict, key: str = "id") -> UUID:
    if key not in data:
        raise ValueError(f"'{key}' is required")
    return UUID(str(data[key]))


# =============================================================================
# HANDLER CLASSES
# =============================================================================


class AccountHandler:
    """Customers and suppliers share create / update / deactivate."""

    ALLOWED_ACTIONS = {"create", "update", "deactivate"}

    def __init__(self, service, create_model, update_model):
        self.service = service
        self.create_model = create_model
        self.update_model = update_model

    def _handle_create(self, data: dict):
        account = self.service.create(self.create_model(**data))
        return account.model_dump(mode="json")

    def _handle_update(self, data: dict):
        account_id = _require_id(data)
        fields = {k: v for k, v in data.items() if k != "id"}
        account = self.service.update(account_id, self.update_model(**fields))
        return account.model_dump(mode="json")

    def _handle_deactivate(self, data: dict):
        account = self.service.deactivate(_require_id(data))
        return account.model_dump(mode="json")


class RoomHandler:
    ALLOWED_ACTIONS = {"create", "deactivate"}

    def __init__(self, service):
        self.service = service

    def _handle_create(self, data: dict):
        room = self.service.create(RoomCreate(**data))
        return room.model_dump(mode="json")

    def _handle_deactivate(self, data: dict):
        room = self.service.deactivate(_require_id(data))
        return room.model_dump(mode="json")


class GuestHandler:
    ALLOWED_ACTIONS = {"check_in", "update"}

    def __init__(self, service):
        self.service = service

    def _handle_check_in(self, data: dict):
        guest = self.service.check_in(GuestCreate(**data))
        return guest.model_dump(mode="json")

    def _handle_update(self, data: dict):
        guest_id = _require_id(data)
        fields = {k: v for k, v in data.items() if k != "id"}
        guest = self.service.update(guest_id, GuestUpdate(**fields))
        return guest.model_dump(mode="json")


class FoodOrderHandler:
    ALLOWED_ACTIONS = {"create", "toggle_payment", "set_paid"}

    def __init__(self, service):
        self.service = service

    def _handle_create(self, data: dict):
        order = self.service.create(FoodOrderCreate(**data))
        return order.model_dump(mode="json")

    def _handle_toggle_payment(self, data: dict):
        order = self.service.toggle_payment(_require_id(data))
        return order.model_dump(mode="json")

    def _handle_set_paid(self, data: dict):
        if not isinstance(data.get("paid"), bool):
            raise ValueError("'paid' must be true or false")
        order = self.service.set_paid(_require_id(data), data["paid"])
        return order.model_dump(mode="json")


class CheckoutHandler:
    ALLOWED_ACTIONS = {"checkout"}

    def __init__(self, service):
        self.service = service

    def _handle_checkout(self, data: dict):
        discount = Discount(**data["discount"]) if data.get("discount") else None
        checkout = self.service.checkout(_require_id(data, "guest_id"), discount)
        return checkout.model_dump(mode="json")


class SaleHandler:
    ALLOWED_ACTIONS = {"create"}

    def __init__(self, service):
        self.service = service

    def _handle_create(self, data: dict):
        sale = self.service.create(SaleCreate(**data))
        return sale.model_dump(mode="json")


class PurchaseHandler:
    ALLOWED_ACTIONS = {"create", "add_line"}

    def __init__(self, service):
        self.service = service

    def _handle_create(self, data: dict):
        purchase = self.service.create(PurchaseCreate(**data))
        return purchase.model_dump(mode="json")

    def _handle_add_line(self, data: dict):
        purchase_id = _require_id(data)
        fields = {k: v for k, v in data.items() if k != "id"}
        purchase = self.service.add_line(purchase_id, PurchaseLineCreate(**fields))
        return purchase.model_dump(mode="json")


class PaymentHandler:
    ALLOWED_ACTIONS = {"record"}

    def __init__(self, service):
        self.service = service

    def _handle_record(self, data: dict):
        kind = EntityKind(data.get("kind"))
        entity_id = _require_id(data, "entity_id")
        fields = {k: v for k, v in data.items() if k not in ("kind", "entity_id")}
        balance = self.service.record_payment(kind, entity_id, PaymentCreate(**fields))
        return balance.model_dump(mode="json")


class SettingsHandler:
    ALLOWED_ACTIONS = {"update_tax"}

    def __init__(self, service):
        self.service = service

    def _handle_update_tax(self, data: dict):
        tax_config = self.service.update_tax_config(TaxConfigUpdate(**data))
        return tax_config.model_dump(mode="json")


class ExpenseHandler:
    ALLOWED_ACTIONS = {"create", "delete"}

    def __init__(self, service):
        self.service = service

    def _handle_create(self, data: dict):
        expense = self.service.create(ExpenseCreate(**data))
        return expense.model_dump(mode="json")

    def _handle_delete(self, data: dict):
        self.service.delete(_require_id(data))
        return {"deleted": True}

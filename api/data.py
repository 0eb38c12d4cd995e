"""GET /api/data: unified read endpoint."""

from uuid import UUID

from fastapi import APIRouter, Query, Request
from fastapi.encoders import jsonable_encoder

from api.base import respond
from core.models import Discount, DiscountType, EntityKind, OwnerKind
from utils.timezone import parse_date, parse_iso, today_utc


VALID_TYPES = {
    "guests", "food_orders", "sales", "purchases", "payments", "balances",
    "statement", "checkout_preview", "tax_config", "expenses",
    "financial_summary", "customers", "suppliers", "history", "rooms",
}


def _dump_list(items) -> list:
    return [item.model_dump(mode="json") for item in items]


def create_data_router(services: dict) -> APIRouter:
    router = APIRouter()

    @router.get("/data")
    async def get_data(
        request: Request,
        type: str | None = Query(None),
        id: str | None = Query(None),
        guest_id: str | None = Query(None),
        customer_id: str | None = Query(None),
        supplier_id: str | None = Query(None),
        kind: str | None = Query(None),
        owner: str | None = Query(None),
        filter: str | None = Query(None),
        include: str | None = Query(None),
        include_inactive: bool = Query(False),
        discount_type: str | None = Query(None),
        discount_value: int | None = Query(None, ge=0),
        at: str | None = Query(None),
        start: str | None = Query(None),
        end: str | None = Query(None),
        category: str | None = Query(None),
        entity: str | None = Query(None),
        limit: int = Query(50, ge=1, le=500),
        offset: int = Query(0, ge=0),
    ):
        if type is None:
            raise ValueError("'type' query parameter is required")

        if type not in VALID_TYPES:
            raise ValueError(f"Unknown type '{type}'. Valid types: {', '.join(sorted(VALID_TYPES))}")

        includes = set(include.split(",")) if include else set()

        if type == "guests":
            data = _handle_guests(services, id, filter, includes, limit)
        elif type == "food_orders":
            data = _handle_food_orders(services["food_order"], id, guest_id, filter, limit)
        elif type == "sales":
            data = _handle_sales(services["sale"], id, customer_id, limit)
        elif type == "purchases":
            data = _handle_purchases(services["purchase"], id, supplier_id, limit)
        elif type == "payments":
            data = _handle_payments(services["payment"], kind, id)
        elif type == "balances":
            data = _handle_balances(services, kind, owner, id, include_inactive)
        elif type == "statement":
            data = _handle_statement(services["balance"], owner, id)
        elif type == "checkout_preview":
            data = _handle_checkout_preview(services["checkout"], id, discount_type, discount_value, at)
        elif type == "tax_config":
            data = services["settings"].get_tax_config().model_dump(mode="json")
        elif type == "expenses":
            data = _handle_expenses(services["expense"], id, start, end, category, limit)
        elif type == "financial_summary":
            data = _handle_financial_summary(services["report"], start, end)
        elif type == "customers":
            data = _handle_accounts(services["customer"], "Customer", id, include_inactive, limit, offset)
        elif type == "history":
            data = _handle_history(services["audit"], entity, id, limit)
        elif type == "rooms":
            data = _handle_rooms(services["room"], id, include_inactive)
        else:
            data = _handle_accounts(services["supplier"], "Supplier", id, include_inactive, limit, offset)

        return respond(request, data)

    return router


def _handle_guests(services, id, filter, includes, limit):
    guest_svc = services["guest"]

    if id:
        guest = guest_svc.get_by_id(UUID(id))
        if guest is None:
            raise ValueError(f"Guest {id} not found")

        data = guest.model_dump(mode="json")
        if "stay_days" in includes:
            data["stay_days"] = guest_svc.stay_days(guest.id)
        if "food_orders" in includes:
            data["food_orders"] = _dump_list(services["food_order"].list_for_guest(guest.id))
        if "checkout" in includes:
            checkout = services["checkout"].get_for_guest(guest.id)
            data["checkout"] = checkout.model_dump(mode="json") if checkout else None
        return data

    if filter == "checked_out":
        return _dump_list(guest_svc.list_checked_out(limit))

    return _dump_list(guest_svc.list_active(limit))


def _handle_food_orders(food_order_svc, id, guest_id, filter, limit):
    if id:
        order = food_order_svc.get_by_id(UUID(id))
        if order is None:
            raise ValueError(f"Food order {id} not found")
        return order.model_dump(mode="json")

    if guest_id:
        if filter == "unpaid":
            return _dump_list(food_order_svc.get_unpaid_orders(UUID(guest_id)))
        return _dump_list(food_order_svc.list_for_guest(UUID(guest_id)))

    return _dump_list(food_order_svc.list_recent(limit, unpaid_only=filter == "unpaid"))


def _handle_sales(sale_svc, id, customer_id, limit):
    if id:
        sale = sale_svc.get_by_id(UUID(id))
        if sale is None:
            raise ValueError(f"Sale {id} not found")
        return sale.model_dump(mode="json")

    if customer_id:
        return _dump_list(sale_svc.list_for_customer(UUID(customer_id), limit))

    return _dump_list(sale_svc.list_recent(limit))


def _handle_purchases(purchase_svc, id, supplier_id, limit):
    if id:
        purchase = purchase_svc.get_by_id(UUID(id))
        if purchase is None:
            raise ValueError(f"Purchase {id} not found")
        return purchase.model_dump(mode="json")

    if supplier_id:
        return _dump_list(purchase_svc.list_for_supplier(UUID(supplier_id), limit))

    return _dump_list(purchase_svc.list_recent(limit))


def _handle_payments(payment_svc, kind, id):
    if not kind or not id:
        raise ValueError("'payments' type requires 'kind' (sale or purchase) and 'id' parameters")

    return _dump_list(payment_svc.list_payments(EntityKind(kind), UUID(id)))


def _handle_balances(services, kind, owner, id, include_inactive):
    # A single sale or purchase
    if kind:
        if not id:
            raise ValueError("'balances' with 'kind' requires an 'id' parameter")
        return services["payment"].get_balance(EntityKind(kind), UUID(id)).model_dump(mode="json")

    if not owner:
        raise ValueError("'balances' type requires 'owner' (customer or supplier) or 'kind' and 'id'")

    summaries = services["balance"].get_balance_summaries(OwnerKind(owner), include_inactive)
    return _dump_list(summaries)


def _handle_statement(balance_svc, owner, id):
    if not owner or not id:
        raise ValueError("'statement' type requires 'owner' (customer or supplier) and 'id' parameters")

    return _dump_list(balance_svc.get_entity_statement(OwnerKind(owner), UUID(id)))


def _handle_checkout_preview(checkout_svc, id, discount_type, discount_value, at):
    if not id:
        raise ValueError("'checkout_preview' type requires an 'id' (guest) parameter")

    discount = None
    if discount_value:
        discount = Discount(
            type=DiscountType(discount_type or DiscountType.FLAT.value),
            value=discount_value,
        )

    now = parse_iso(at) if at else None
    return checkout_svc.preview(UUID(id), discount, now).model_dump(mode="json")


def _handle_expenses(expense_svc, id, start, end, category, limit):
    if id:
        expense = expense_svc.get_by_id(UUID(id))
        if expense is None:
            raise ValueError(f"Expense {id} not found")
        return expense.model_dump(mode="json")

    expenses = expense_svc.list_expenses(
        start_date=parse_date(start) if start else None,
        end_date=parse_date(end) if end else None,
        category=category,
        limit=limit,
    )
    return _dump_list(expenses)


def _handle_financial_summary(report_svc, start, end):
    # Defaults to today
    end_date = parse_date(end) if end else today_utc()
    start_date = parse_date(start) if start else end_date

    return report_svc.financial_summary(start_date, end_date).model_dump(mode="json")


def _handle_accounts(account_svc, label, id, include_inactive, limit, offset):
    if id:
        account = account_svc.get_by_id(UUID(id))
        if account is None:
            raise ValueError(f"{label} {id} not found")
        return account.model_dump(mode="json")

    return _dump_list(account_svc.list_all(include_inactive, limit, offset))


def _handle_history(audit, entity, id, limit):
    if not entity or not id:
        raise ValueError("'history' type requires 'entity' and 'id' parameters")

    return jsonable_encoder(audit.get_entity_history(entity, UUID(id), limit))


def _handle_rooms(room_svc, id, include_inactive):
    if id:
        room = room_svc.get_by_id(UUID(id))
        if room is None:
            raise ValueError(f"Room {id} not found")
        return room.model_dump(mode="json")

    return _dump_list(room_svc.list_all(include_inactive))

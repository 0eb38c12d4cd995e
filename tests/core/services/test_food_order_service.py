"""Tests for FoodOrderService - the toggle payment path."""

import pytest
from datetime import datetime, timezone
from uuid import uuid4

from core.exceptions import ConflictError, NotFoundError
from core.models import CustomerType, FoodOrderCreate, OrderLineCreate
from core.services.food_order_service import FoodOrderService

NOW = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


def _order_row(order_id=None, paid=False, checkout_id=None, guest_id=None, total=50000):
    return {
        "id": order_id or uuid4(),
        "guest_id": guest_id,
        "customer_type": "guest" if guest_id else "walk_in",
        "customer_name": None,
        "total_amount_cents": total,
        "paid": paid,
        "paid_at": NOW if paid else None,
        "checkout_id": checkout_id,
        "created_at": NOW,
        "updated_at": NOW,
    }


def _line_row(order_id, quantity=1, unit_price=50000):
    return {
        "id": uuid4(),
        "order_id": order_id,
        "menu_item_id": None,
        "item_name": "Karahi",
        "quantity": quantity,
        "unit_price_cents": unit_price,
    }


@pytest.fixture
def service(postgres, audit):
    return FoodOrderService(postgres, audit)


class TestTogglePayment:
    """Flipping paid state with a conditional write."""

    def test_unpaid_becomes_paid(self, service, postgres, audit):
        """Toggle on an unpaid order marks it paid and stamps paid_at."""
        order_id = uuid4()
        postgres.execute_single.side_effect = [
            _order_row(order_id, paid=False),
            _order_row(order_id, paid=True),
        ]
        postgres.execute.return_value = [_line_row(order_id)]

        order = service.toggle_payment(order_id)

        assert order.paid is True
        assert order.paid_at is not None
        assert order.total_amount_cents == 50000

        update_query, params = postgres.execute_single.call_args[0]
        assert "WHERE id = %s AND paid = %s AND checkout_id IS NULL" in update_query
        assert params[0] is True
        assert params[4] is False  # the paid value that was read

        assert audit.log_change.call_args.kwargs["changes"]["paid"] == {"old": False, "new": True}

    def test_paid_becomes_unpaid(self, service, postgres):
        """Toggle on a paid order clears paid_at."""
        order_id = uuid4()
        postgres.execute_single.side_effect = [
            _order_row(order_id, paid=True),
            _order_row(order_id, paid=False),
        ]
        postgres.execute.return_value = [_line_row(order_id)]

        order = service.toggle_payment(order_id)

        assert order.paid is False
        assert order.paid_at is None
        assert postgres.execute_single.call_args[0][1][1] is None

    def test_double_toggle_restores_state(self, service, postgres):
        """Two toggles return the order to its original state."""
        order_id = uuid4()
        postgres.execute_single.side_effect = [
            _order_row(order_id, paid=False),
            _order_row(order_id, paid=True),
            _order_row(order_id, paid=True),
            _order_row(order_id, paid=False),
        ]
        postgres.execute.return_value = [_line_row(order_id)]

        first = service.toggle_payment(order_id)
        second = service.toggle_payment(order_id)

        assert first.paid is True
        assert second.paid is False

    def test_concurrent_change_conflicts(self, service, postgres):
        """When the conditional write matches nothing but the order exists, it is a conflict."""
        order_id = uuid4()
        postgres.execute_single.side_effect = [
            _order_row(order_id, paid=False),
            None,
            {"id": order_id},
        ]
        postgres.execute.return_value = []

        with pytest.raises(ConflictError, match="re-fetch"):
            service.toggle_payment(order_id)

    def test_deleted_during_toggle(self, service, postgres, audit):
        """An order deleted between read and write conflicts so the caller re-fetches."""
        order_id = uuid4()
        postgres.execute_single.side_effect = [_order_row(order_id), None, None]
        postgres.execute.return_value = []

        with pytest.raises(ConflictError, match="deleted") as exc_info:
            service.toggle_payment(order_id)

        assert not isinstance(exc_info.value, NotFoundError)
        audit.log_change.assert_not_called()

    def test_deleted_during_set_paid(self, service, postgres):
        """set_paid shares the same write path."""
        order_id = uuid4()
        postgres.execute_single.side_effect = [_order_row(order_id, paid=False), None, None]
        postgres.execute.return_value = []

        with pytest.raises(ConflictError, match="re-fetch"):
            service.set_paid(order_id, True)

    def test_missing_order(self, service, postgres):
        """Unknown order is NotFoundError."""
        postgres.execute_single.return_value = None

        with pytest.raises(NotFoundError, match="Food order .* not found"):
            service.toggle_payment(uuid4())

    def test_settled_by_checkout_cannot_toggle(self, service, postgres, audit):
        """Orders billed at checkout are locked."""
        order_id = uuid4()
        postgres.execute_single.return_value = _order_row(order_id, paid=True, checkout_id=uuid4())
        postgres.execute.return_value = []

        with pytest.raises(ConflictError, match="settled by checkout"):
            service.toggle_payment(order_id)

        assert postgres.execute_single.call_count == 1
        audit.log_change.assert_not_called()


class TestSetPaid:
    """Explicit paid flag."""

    def test_noop_when_already_matching(self, service, postgres, audit):
        """Setting the current value writes nothing."""
        order_id = uuid4()
        postgres.execute_single.return_value = _order_row(order_id, paid=True)
        postgres.execute.return_value = []

        order = service.set_paid(order_id, True)

        assert order.paid is True
        assert postgres.execute_single.call_count == 1
        audit.log_change.assert_not_called()

    def test_sets_value(self, service, postgres):
        """Setting a different value writes it."""
        order_id = uuid4()
        postgres.execute_single.side_effect = [
            _order_row(order_id, paid=False),
            _order_row(order_id, paid=True),
        ]
        postgres.execute.return_value = []

        assert service.set_paid(order_id, True).paid is True


class TestCreate:
    """Placing orders."""

    def test_guest_order(self, service, tx, audit):
        """Guest orders are checked against the guest and inherit the name."""
        guest_id = uuid4()
        tx.execute_single.return_value = {"id": guest_id, "name": "Hamza", "status": "active"}

        def returning(query, params):
            if "INSERT INTO food_orders" in query:
                row = _order_row(params[0], guest_id=guest_id, total=params[4])
                row["customer_name"] = params[3]
                return [row]
            return [_line_row(params[1], params[4], params[5])]

        tx.execute_returning.side_effect = returning

        order = service.create(FoodOrderCreate(
            guest_id=guest_id,
            lines=[
                OrderLineCreate(item_name="Tea", quantity=2, unit_price_cents=15000),
                OrderLineCreate(item_name="Naan", quantity=4, unit_price_cents=5000),
            ],
        ))

        assert order.total_amount_cents == 50000
        assert order.customer_name == "Hamza"
        assert order.paid is False
        assert audit.log_change.call_args.kwargs["tx"] is tx

    def test_checked_out_guest_conflicts(self, service, tx):
        """No new orders once the guest has left."""
        tx.execute_single.return_value = {"id": uuid4(), "name": "Hamza", "status": "checked_out"}

        with pytest.raises(ConflictError, match="checked out"):
            service.create(FoodOrderCreate(
                guest_id=uuid4(),
                lines=[OrderLineCreate(item_name="Tea", unit_price_cents=15000)],
            ))

        tx.execute_returning.assert_not_called()

    def test_unknown_guest(self, service, tx):
        """Ordering for a missing guest is NotFoundError."""
        tx.execute_single.return_value = None

        with pytest.raises(NotFoundError):
            service.create(FoodOrderCreate(
                guest_id=uuid4(),
                lines=[OrderLineCreate(item_name="Tea", unit_price_cents=15000)],
            ))

    def test_walk_in_ignores_guest(self, service, tx):
        """Walk-in orders are never attached to a guest."""
        def returning(query, params):
            if "INSERT INTO food_orders" in query:
                return [_order_row(params[0], total=params[4])]
            return [_line_row(params[1], params[4], params[5])]

        tx.execute_returning.side_effect = returning

        service.create(FoodOrderCreate(
            customer_type=CustomerType.WALK_IN,
            guest_id=uuid4(),
            lines=[OrderLineCreate(item_name="Tea", unit_price_cents=15000)],
        ))

        tx.execute_single.assert_not_called()
        order_params = tx.execute_returning.call_args_list[0][0][1]
        assert order_params[1] is None


class TestQueries:
    """Read paths."""

    def test_unpaid_orders_exclude_settled(self, service, postgres):
        """Only unpaid orders not yet on a checkout are returned."""
        guest_id = uuid4()
        order_id = uuid4()
        postgres.execute.side_effect = [
            [_order_row(order_id, guest_id=guest_id)],
            [_line_row(order_id, 2, 1000)],
        ]

        orders = service.get_unpaid_orders(guest_id)

        query = postgres.execute.call_args_list[0][0][0]
        assert "paid = FALSE AND checkout_id IS NULL" in query
        assert orders[0].total_amount_cents == 2000

    def test_lines_loaded_in_one_query(self, service, postgres):
        """Lines for several orders are fetched together and grouped."""
        a, b = uuid4(), uuid4()
        postgres.execute.side_effect = [
            [_order_row(a), _order_row(b)],
            [_line_row(a, 1, 100), _line_row(b, 1, 200), _line_row(a, 1, 300)],
        ]

        orders = service.list_recent(10)

        assert postgres.execute.call_count == 2
        assert [o.total_amount_cents for o in orders] == [400, 200]

    def test_get_by_id_missing(self, service, postgres):
        """Unknown id returns None."""
        postgres.execute_single.return_value = None
        assert service.get_by_id(uuid4()) is None

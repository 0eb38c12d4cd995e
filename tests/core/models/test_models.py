"""Tests for core domain models - custom validators and derived fields only."""

import pytest
from datetime import date, datetime, timezone
from pydantic import ValidationError
from uuid import uuid4

NOW = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


class TestGuestCreate:
    """Tests for GuestCreate custom validators."""

    def test_rejects_check_out_before_check_in(self):
        """Check-out earlier than check-in is rejected."""
        from core.models import GuestCreate

        with pytest.raises(ValidationError, match="check_out cannot be before check_in"):
            GuestCreate(name="Hamza", check_in=date(2026, 3, 5), check_out=date(2026, 3, 1))

    def test_accepts_open_stay(self):
        """No check-out means an open stay."""
        from core.models import GuestCreate

        guest = GuestCreate(name="Hamza", room_number="101", check_in=date(2026, 3, 1))
        assert guest.check_out is None

    def test_room_number_pattern(self):
        """Room numbers are short alphanumeric codes."""
        from core.models import GuestCreate

        with pytest.raises(ValidationError):
            GuestCreate(name="Hamza", room_number="10 1", check_in=date(2026, 3, 1))


class TestGuest:
    """Derived properties on stored guests."""

    def test_stay_walk_in_without_room(self):
        """A guest without a room is a walk-in stay."""
        from core.models import Guest, GuestStatus

        guest = Guest(
            id=uuid4(), name="Walk", phone=None, room_number=None,
            check_in=date(2026, 3, 1), check_out=None, daily_rate_cents=0,
            status=GuestStatus.ACTIVE, created_at=NOW, updated_at=NOW,
        )

        assert guest.stay.is_walk_in
        assert not guest.is_checked_out


class TestFoodOrderCreate:
    """Tests for FoodOrderCreate custom validators."""

    def test_guest_order_needs_guest_id(self):
        """Guest orders must say which guest."""
        from core.models import FoodOrderCreate, OrderLineCreate

        with pytest.raises(ValidationError, match="guest_id is required"):
            FoodOrderCreate(lines=[OrderLineCreate(item_name="Tea", unit_price_cents=500)])

    def test_walk_in_without_guest(self):
        """Walk-in orders need no guest."""
        from core.models import CustomerType, FoodOrderCreate, OrderLineCreate

        order = FoodOrderCreate(
            customer_type=CustomerType.WALK_IN,
            lines=[OrderLineCreate(item_name="Tea", unit_price_cents=500)],
        )
        assert order.guest_id is None

    def test_requires_a_line(self):
        """An empty order is rejected."""
        from core.models import CustomerType, FoodOrderCreate

        with pytest.raises(ValidationError):
            FoodOrderCreate(customer_type=CustomerType.WALK_IN, lines=[])


class TestFoodOrderTotal:
    """Total recomputed from lines."""

    def test_total_from_lines(self):
        """Stored total is ignored in favor of the lines."""
        from core.models import CustomerType, FoodOrder

        order_id = uuid4()
        order = FoodOrder.model_validate({
            "id": order_id, "guest_id": None, "customer_type": CustomerType.WALK_IN,
            "customer_name": None, "paid": False, "paid_at": None,
            "created_at": NOW, "updated_at": NOW, "total_amount_cents": 1,
            "lines": [
                {"id": uuid4(), "order_id": order_id, "item_name": "Tea", "quantity": 2, "unit_price_cents": 500},
                {"id": uuid4(), "order_id": order_id, "item_name": "Naan", "quantity": 3, "unit_price_cents": 150},
            ],
        })

        assert order.total_amount_cents == 1450
        assert order.model_dump(mode="json")["total_amount_cents"] == 1450


class TestPaymentTerms:
    """Tests for creation-time payment validators."""

    def test_partial_needs_amount(self):
        """pay_partial without an amount is rejected."""
        from core.models import PaymentMode, SaleCreate, SaleLineCreate

        with pytest.raises(ValidationError, match="payment_amount_cents is required"):
            SaleCreate(
                payment_mode=PaymentMode.PAY_PARTIAL,
                lines=[SaleLineCreate(item_name="Soap", unit_price_cents=300)],
            )

    def test_defaults_to_pay_later_cash(self):
        """Default terms defer payment."""
        from core.models import PaymentMethod, PaymentMode, SaleCreate, SaleLineCreate

        sale = SaleCreate(lines=[SaleLineCreate(item_name="Soap", quantity=4, unit_price_cents=300)])

        assert sale.payment_mode == PaymentMode.PAY_LATER
        assert sale.payment_method == PaymentMethod.CASH
        assert sale.total_amount_cents == 1200

    def test_payment_amount_must_be_positive(self):
        """Follow-up payments must be positive."""
        from core.models import PaymentCreate

        with pytest.raises(ValidationError):
            PaymentCreate(amount_cents=0)


class TestPurchaseLineCreate:
    """Purchase cost validation."""

    def test_unit_cost_must_be_positive(self):
        """Free stock is not a purchase."""
        from core.models import PurchaseLineCreate

        with pytest.raises(ValidationError):
            PurchaseLineCreate(item_name="Rice", unit_cost_cents=0)


class TestEntityBalance:
    """Derived paid flag."""

    def test_paid_when_balance_zero(self):
        """Zero balance reads as paid."""
        from core.models import EntityBalance, EntityKind

        balance = EntityBalance(
            entity_kind=EntityKind.SALE, entity_id=uuid4(),
            total_amount_cents=500, amount_paid_cents=500, balance_due_cents=0,
        )
        assert balance.paid is True
        assert balance.model_dump()["paid"] is True


class TestBillingModels:
    """Discount and tax settings."""

    def test_tax_rate_bounds(self):
        """Rates above 100% are rejected."""
        from core.models import TaxConfig

        with pytest.raises(ValidationError):
            TaxConfig(enabled=True, rate_bps=10001)

    def test_tax_effective_only_when_enabled_and_positive(self):
        """Disabled or zero-rate tax is not effective."""
        from core.models import TaxConfig

        assert TaxConfig(enabled=True, rate_bps=500).is_effective
        assert not TaxConfig(enabled=False, rate_bps=500).is_effective
        assert not TaxConfig(enabled=True, rate_bps=0).is_effective

    def test_discount_value_not_negative(self):
        """Negative discounts are rejected by the model."""
        from core.models import Discount

        with pytest.raises(ValidationError):
            Discount(value=-1)


class TestOwnerKind:
    """Owner to entity mapping."""

    def test_entity_kind(self):
        """Customers own sales, suppliers own purchases."""
        from core.models import EntityKind, OwnerKind

        assert OwnerKind.CUSTOMER.entity_kind == EntityKind.SALE
        assert OwnerKind.SUPPLIER.entity_kind == EntityKind.PURCHASE


class TestExpenseCreate:
    """Expense validators."""

    def test_category_stripped(self):
        """Surrounding whitespace is removed."""
        from core.models import ExpenseCreate

        expense = ExpenseCreate(expense_date=date(2026, 3, 1), category="  Utilities ", amount_cents=100)
        assert expense.category == "Utilities"

    def test_blank_category_rejected(self):
        """Whitespace-only categories are rejected."""
        from core.models import ExpenseCreate

        with pytest.raises(ValidationError, match="category cannot be blank"):
            ExpenseCreate(expense_date=date(2026, 3, 1), category="   ", amount_cents=100)

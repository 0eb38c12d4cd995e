"""Core domain models."""

from core.models.billing import Discount, DiscountType, TaxConfig, TaxConfigUpdate, BillBreakdown
from core.models.customer import Customer, CustomerCreate, CustomerUpdate
from core.models.supplier import Supplier, SupplierCreate, SupplierUpdate
from core.models.guest import Guest, GuestCreate, GuestUpdate, GuestStatus, StayPeriod
from core.models.room import Room, RoomCreate
from core.models.food_order import FoodOrder, FoodOrderCreate, OrderLine, OrderLineCreate, CustomerType
from core.models.payment import (
    Payment, PaymentCreate, PaymentMethod, PaymentMode, PaymentTerms, EntityKind, EntityBalance,
)
from core.models.sale import Sale, SaleCreate, SaleLine, SaleLineCreate
from core.models.purchase import Purchase, PurchaseCreate, PurchaseLine, PurchaseLineCreate
from core.models.balance import BalanceSummary, StatementRow, OwnerKind
from core.models.checkout import Checkout, CheckoutTotals
from core.models.expense import Expense, ExpenseCreate
from core.models.report import FinancialSummary, CategoryTotal

__all__ = [
    # Billing
    "Discount", "DiscountType", "TaxConfig", "TaxConfigUpdate", "BillBreakdown",
    # Customer / Supplier
    "Customer", "CustomerCreate", "CustomerUpdate",
    "Supplier", "SupplierCreate", "SupplierUpdate",
    # Guest
    "Guest", "GuestCreate", "GuestUpdate", "GuestStatus", "StayPeriod",
    # Room
    "Room", "RoomCreate",
    # FoodOrder
    "FoodOrder", "FoodOrderCreate", "OrderLine", "OrderLineCreate", "CustomerType",
    # Payment
    "Payment", "PaymentCreate", "PaymentMethod", "PaymentMode", "PaymentTerms",
    "EntityKind", "EntityBalance",
    # Sale / Purchase
    "Sale", "SaleCreate", "SaleLine", "SaleLineCreate",
    "Purchase", "PurchaseCreate", "PurchaseLine", "PurchaseLineCreate",
    # Balances
    "BalanceSummary", "StatementRow", "OwnerKind",
    # Checkout
    "Checkout", "CheckoutTotals",
    # Expense / Report
    "Expense", "ExpenseCreate", "FinancialSummary", "CategoryTotal",
]

"""Customer accounts. Customers own sales."""

from core.models import Customer
from core.services.account_service import AccountService


class CustomerService(AccountService[Customer]):
    """Service for customer account operations."""

    table = "customers"
    entity_type = "customer"
    model = Customer
    columns = ("name", "phone", "notes")

"""Supplier accounts. Suppliers own purchases and carry a contact name."""

from core.models import Supplier
from core.services.account_service import AccountService


class SupplierService(AccountService[Supplier]):
    """Service for supplier account operations."""

    table = "suppliers"
    entity_type = "supplier"
    model = Supplier
    columns = ("name", "contact_name", "phone", "notes")

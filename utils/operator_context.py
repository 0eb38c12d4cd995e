"""Operator identity for the current request.

The operator is the staff member acting at the till or front desk. Identity is
established upstream (login is not handled here). OperatorMiddleware copies it
in per request; the audit trail and the payments ledger read it back out.
Actions with no operator (imports, scheduled jobs) record NULL.
"""

from contextlib import contextmanager
from contextvars import ContextVar
from uuid import UUID

_operator_id: ContextVar[UUID | None] = ContextVar("operator_id", default=None)


def get_operator_id() -> UUID | None:
    """Operator acting in this context, or None for system actions."""
    return _operator_id.get()


def set_operator_id(operator_id: UUID) -> None:
    _operator_id.set(operator_id)


def clear_operator_id() -> None:
    """Drop the operator. Call from a finally block so nothing leaks across requests."""
    _operator_id.set(None)


@contextmanager
def operator_context(operator_id: UUID):
    """
    Act as operator_id for the duration of the block.

    Example:
        with operator_context(cashier_id):
            payment_service.record_payment(EntityKind.SALE, sale_id, data)
    """
    token = _operator_id.set(operator_id)
    try:
        yield operator_id
    finally:
        _operator_id.reset(token)

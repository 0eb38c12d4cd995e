"""Typed exceptions for ledger failures.

Each subclasses ValueError as well, so callers that only know about
ValueError keep working.
"""


class LedgerError(Exception):
    """Base class for billing and payment errors."""


class ValidationError(LedgerError, ValueError):
    """
    Invalid input rejected before any mutation is attempted.

    Examples: non-positive payment amount, partial payment above the total,
    percentage discount outside 0-100%, missing check-in date.
    """


class ConflictError(LedgerError, ValueError):
    """
    The write conflicts with current state.

    The payment would drive a balance negative, or the target changed or
    disappeared since it was read. Caller should re-fetch and retry.
    """


class NotFoundError(LedgerError, ValueError):
    """Referenced entity or owner does not exist."""

    def __init__(self, entity_type: str, entity_id):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type.replace('_', ' ').capitalize()} {entity_id} not found")

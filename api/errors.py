"""Exception handlers mapping ledger errors onto HTTP statuses."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError

from api.base import ErrorCodes, error_json
from core.exceptions import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """
    Register handlers on the app.

    Starlette resolves handlers along the exception's MRO, so the typed ledger
    errors win over the ValueError fallback they also inherit from.
    """

    @app.exception_handler(ValidationError)
    async def ledger_validation_handler(request: Request, exc: ValidationError):
        return error_json(request, 400, ErrorCodes.VALIDATION_ERROR, str(exc))

    @app.exception_handler(ConflictError)
    async def conflict_handler(request: Request, exc: ConflictError):
        return error_json(request, 409, ErrorCodes.CONFLICT, str(exc))

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return error_json(request, 404, ErrorCodes.NOT_FOUND, str(exc))

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        # Bad ids, enum values and pydantic payload errors from the routers
        message = str(exc)
        if "not found" in message.lower():
            return error_json(request, 404, ErrorCodes.NOT_FOUND, message)
        return error_json(request, 400, ErrorCodes.INVALID_REQUEST, message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return error_json(request, 422, ErrorCodes.VALIDATION_ERROR, str(exc.errors()))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return error_json(request, 500, ErrorCodes.INTERNAL_ERROR, "An internal error occurred")

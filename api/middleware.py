"""Request-scoped middleware for API requests."""

import logging
from uuid import UUID, uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from api.base import ErrorCodes, error_json
from utils.operator_context import set_operator_id, clear_operator_id

logger = logging.getLogger(__name__)

OPERATOR_HEADER = "X-Operator-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assigns a unique request ID to every request."""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


class OperatorMiddleware(BaseHTTPMiddleware):
    """
    Copies the operator id set by the upstream gateway into operator context.

    Requests without the header run as system actions (no operator on the
    audit trail). A malformed header is rejected.
    """

    async def dispatch(self, request: Request, call_next):
        raw = request.headers.get(OPERATOR_HEADER)
        if not raw:
            return await call_next(request)

        try:
            operator_id = UUID(raw)
        except ValueError:
            logger.warning("Rejected malformed %s header", OPERATOR_HEADER)
            return error_json(
                request, 400, ErrorCodes.INVALID_REQUEST, f"{OPERATOR_HEADER} must be a UUID"
            )

        set_operator_id(operator_id)
        request.state.operator_id = operator_id

        try:
            return await call_next(request)
        finally:
            clear_operator_id()

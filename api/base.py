"""Response envelope shared by every endpoint.

Success and failure use the same shape so till and front-desk clients parse
one structure. Amounts inside data are always integer cents.
"""

from datetime import datetime
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field
from starlette.requests import Request
from starlette.responses import JSONResponse

from utils.timezone import now_utc


class APIError(BaseModel):
    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")


class APIMeta(BaseModel):
    timestamp: datetime = Field(..., description="Response timestamp (UTC)")
    request_id: str = Field(..., description="Request identifier, echoed in X-Request-ID")


class APIResponse(BaseModel):
    success: bool
    data: Any | None = None
    error: APIError | None = None
    meta: APIMeta


class ErrorCodes:
    """Error codes returned in APIError.code."""

    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_REQUEST = "INVALID_REQUEST"
    INTERNAL_ERROR = "INTERNAL_ERROR"


def _meta(request_id: str | None) -> APIMeta:
    return APIMeta(timestamp=now_utc(), request_id=request_id or str(uuid4()))


def success_response(data: Any, request_id: str | None = None) -> APIResponse:
    return APIResponse(success=True, data=data, meta=_meta(request_id))


def error_response(code: str, message: str, request_id: str | None = None) -> APIResponse:
    return APIResponse(success=False, error=APIError(code=code, message=message), meta=_meta(request_id))


def request_id_of(request: Request) -> str | None:
    """Id assigned by RequestIDMiddleware, if it ran."""
    return getattr(request.state, "request_id", None)


def respond(request: Request, data: Any) -> dict:
    """JSON-ready success envelope for a route handler."""
    return success_response(data, request_id_of(request)).model_dump(mode="json")


def error_json(request: Request, status_code: int, code: str, message: str) -> JSONResponse:
    """Failure envelope as a response, for exception handlers and middleware."""
    return JSONResponse(
        status_code=status_code,
        content=error_response(code, message, request_id_of(request)).model_dump(mode="json"),
    )

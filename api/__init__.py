"""API modules for HTTP interface."""

from api.base import (
    APIError,
    APIMeta,
    APIResponse,
    success_response,
    error_response,
    ErrorCodes,
    respond,
    error_json,
)
from api.app import create_app, build_services

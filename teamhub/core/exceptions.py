"""
API exceptions and global exception handlers for TeamHub.
Every error leaves the application as {"errors": {"type": ..., "message": ...}}.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from teamhub.core.responses import render

logger = logging.getLogger(__name__)

REQUEST_LOCATIONS = ("body", "query", "path", "header", "cookie")


# ── Custom exception classes ──────────────────────────────────────────────────

class APIException(Exception):
    """Base exception for all TeamHub API errors."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    error_type: str = "APIError"
    default_message: str = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_errors(self) -> dict[str, Any]:
        return {"type": self.error_type, "message": self.message}


class AuthorizationFailed(APIException):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_type = "AuthorizationFailed"
    default_message = "Login required"


class InsufficientPermissions(APIException):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_type = "InsufficientPermissions"
    default_message = "Insufficient permissions"


class ObjectNotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    error_type = "ObjectNotFound"
    default_message = "Object not found"


class InvalidRecord(APIException):
    """Validation failure. Field errors are merged into the error body."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    error_type = "InvalidRecord"
    default_message = "One or more fields were invalid"

    def __init__(
        self,
        errors: dict[str, list[str]] | None = None,
        message: str | None = None,
    ) -> None:
        self.errors = errors or {}
        super().__init__(message)

    def to_errors(self) -> dict[str, Any]:
        body: dict[str, Any] = dict(self.errors)
        body.update(super().to_errors())
        return body


# ── Exception handlers ────────────────────────────────────────────────────────

def api_error(request: Request, status_code: int, errors: dict[str, Any]) -> Response:
    return render(request, {"errors": errors}, status_code=status_code)


async def api_exception_handler(request: Request, exc: APIException) -> Response:
    return api_error(request, exc.status_code, exc.to_errors())


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> Response:
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        loc = list(error["loc"])
        if loc and loc[0] in REQUEST_LOCATIONS:
            loc = loc[1:]
        field = ".".join(str(part) for part in loc) or "base"
        errors.setdefault(field, []).append(error["msg"])
    invalid = InvalidRecord(errors)
    return api_error(request, invalid.status_code, invalid.to_errors())


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> Response:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        error_type = "ObjectNotFound"
    elif exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        error_type = "MethodNotAllowed"
    else:
        error_type = "HTTPError"
    return api_error(
        request, exc.status_code, {"type": error_type, "message": str(exc.detail)}
    )


async def generic_exception_handler(request: Request, exc: Exception) -> Response:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return api_error(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        {"type": "InternalError", "message": "An unexpected internal server error occurred"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all custom exception handlers on the FastAPI application."""
    app.add_exception_handler(APIException, api_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)

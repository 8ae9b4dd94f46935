"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). The error_code -> HTTP
status table below is the single mapping used both by route handlers and
by the authentication filter (which renders LifecycleResult errors with
error_response()).
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from tenantauth.core.config import get_settings
from tenantauth.domain.exceptions import TenantAuthException, UnauthorizedException
from tenantauth.shared.context import get_current_request_id
from tenantauth.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

# Map domain error_code to HTTP status
_ERROR_CODE_STATUS: dict[str, int] = {
    "BAD_REQUEST": 400,
    "VALIDATION_ERROR": 400,
    "AUTHENTICATION_ERROR": 401,
    "UNAUTHORIZED": 401,
    "TENANT_NOT_FOUND": 404,
    "USER_NOT_FOUND": 404,
    "TENANT_ALREADY_EXISTS": 409,
    "SIGNING_FAILURE": 500,
    "INTERNAL_ERROR": 500,
}


def status_for(exc: TenantAuthException) -> int:
    """Return the HTTP status for a domain exception (400 when unmapped)."""
    return _ERROR_CODE_STATUS.get(exc.error_code, 400)


def error_response(exc: TenantAuthException) -> JSONResponse:
    """Render a domain exception as {code, error, message, details, request_id}.

    Unauthorized errors carry their WWW-Authenticate challenge. request_id is
    present while a request id is bound to the running request.
    """
    status = status_for(exc)
    headers = None
    if isinstance(exc, UnauthorizedException) and exc.challenge:
        headers = {"WWW-Authenticate": exc.challenge}
    content: dict[str, Any] = {"code": status, **exc.to_dict()}
    request_id = get_current_request_id()
    if request_id:
        content["request_id"] = request_id
    return JSONResponse(
        status_code=status,
        content=content,
        headers=headers,
    )


def _tenantauth_exception_handler(
    request: Request, exc: TenantAuthException
) -> JSONResponse:
    """Return JSON from TenantAuthException.to_dict() with the mapped status code."""
    return error_response(exc)


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with validation error details."""
    return JSONResponse(
        status_code=422,
        content={
            "code": 422,
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": exc.errors(),
        },
    )


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"code": exc.status_code, "error": "HTTP_ERROR", "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"code": 500, "error": "INTERNAL_ERROR", "message": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app. Handlers: TenantAuthException (and
    subclasses), RequestValidationError, StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(TenantAuthException, _tenantauth_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)

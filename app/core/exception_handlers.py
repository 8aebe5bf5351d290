"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and framework
exceptions to the response envelope {success: false, error, ...}.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.domain.exceptions import RbacError

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status
_ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "DUPLICATE_NAME": 409,
    "RESOURCE_NOT_FOUND": 404,
    "IMMUTABLE_SYSTEM_ROLE": 400,
    "SYSTEM_ROLE_PROTECTED": 400,
    "ROLE_IN_USE": 400,
    "ALREADY_ASSIGNED": 409,
    "DUPLICATE_ASSIGNMENT": 409,
    "AUTHENTICATION_ERROR": 401,
    "PERMISSION_DENIED": 403,
    "PERMISSION_CHECK_FAILED": 500,
    "SERVICE_UNAVAILABLE": 503,
}


def error_body(message: Any, code: str, details: Any = None) -> dict[str, Any]:
    """Envelope for failed requests."""
    body: dict[str, Any] = {"success": False, "error": message, "code": code}
    if details:
        body["details"] = details
    return body


def _rbac_exception_handler(request: Request, exc: RbacError) -> JSONResponse:
    """Return the envelope with the status mapped from error_code."""
    status = _ERROR_CODE_STATUS.get(exc.error_code, 400)
    if status >= 500:
        logger.error("%s: %s", exc.error_code, exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if status == 401 else None
    return JSONResponse(
        status_code=status,
        content=error_body(exc.message, exc.error_code, exc.details),
        headers=headers,
    )


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 400 with validation error details."""
    return JSONResponse(
        status_code=400,
        content=error_body(
            "Request validation failed",
            "VALIDATION_ERROR",
            jsonable_errors(exc),
        ),
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """Pydantic error list without non-serializable ctx values."""
    return [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
        for e in exc.errors()
    ]


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return envelope for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.detail, "HTTP_ERROR"),
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content=error_body(detail, "INTERNAL_ERROR"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app. Handlers: RbacError (and subclasses),
    RequestValidationError, StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(RbacError, _rbac_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)

"""Error Handlers - global exception handlers for the registration API.

Invariants:
    - RegistrationPortalError -> structured JSON with error code, message, severity
    - PersistenceError detail (paths, OS messages) is logged, never returned
    - RequestValidationError -> field-level error details
    - Exception (catch-all) -> never leaks internal details
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from registrations.core.errors import (
    ErrorSeverity, PersistenceError, RegistrationPortalError,
)

logger = logging.getLogger(__name__)

_LOCATION_PREFIXES = {"body", "query", "path", "header"}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_portal_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_portal_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RegistrationPortalError)
    async def portal_error_handler(request: Request, exc: RegistrationPortalError):
        """Handle all domain and storage errors."""
        extra = {"error_code": exc.code, "path": request.url.path}
        if isinstance(exc, PersistenceError):
            logger.error(
                f"{exc.code}: {exc.operation} failed: {exc.detail}",
                extra={**extra, "operation": exc.operation},
            )
        else:
            logger.warning(f"{exc.code}: {exc.message}", extra=extra)
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all, never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def _field_name(loc: tuple) -> str:
    parts = [str(p) for p in loc]
    if parts and parts[0] in _LOCATION_PREFIXES:
        parts = parts[1:]
    return ".".join(parts)


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Validation failed",
            "category": "validation",
            "severity": ErrorSeverity.ERROR.value,
            "details": [
                {
                    "field": _field_name(e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    }

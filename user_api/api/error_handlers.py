"""Error Handlers — global exception handlers rendering errors per error mode.

Invariants:
    - UserApiError -> compat: HTTP 200 {"message": {...}}; strict: exc.http_status + envelope
    - UserNotFoundError in compat mode -> HTTP 200 with a null body
    - RequestValidationError -> rendered as UserValidationError with field details
    - Exception (catch-all) -> never leaks internal details
    - The mode is read from app.state.error_mode on every request

Design Decisions:
    - This module is the only place that knows about the legacy 200-with-error body;
      routes and the repository always raise structured errors
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from user_api.core.domain_types import ErrorMode
from user_api.core.errors import (
    ErrorCategory,
    ErrorSeverity,
    UserApiError,
    UserNotFoundError,
    UserValidationError,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_user_api_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def error_mode_of(request: Request) -> ErrorMode:
    return ErrorMode(getattr(request.app.state, "error_mode", ErrorMode.COMPAT))


def render_error(exc: UserApiError, mode: ErrorMode) -> JSONResponse:
    """Render a structured error for the given mode."""
    if mode == ErrorMode.STRICT:
        return JSONResponse(status_code=exc.http_status, content=exc.to_response())
    if isinstance(exc, UserNotFoundError):
        return JSONResponse(status_code=status.HTTP_200_OK, content=None)
    return JSONResponse(
        status_code=status.HTTP_200_OK, content=exc.to_compat_response(),
    )


def _register_user_api_error_handler(app: FastAPI) -> None:
    """Register User API domain/store error handler."""

    @app.exception_handler(UserApiError)
    async def user_api_error_handler(request: Request, exc: UserApiError):
        extra = {
            "error_code": exc.code,
            "path": request.url.path,
            "user_id": exc.context.user_id,
            "operation": exc.context.operation,
        }
        if exc.http_status >= 500:
            logger.error(f"UserApiError: {exc.message}", extra=extra)
        else:
            logger.warning(f"UserApiError: {exc.message}", extra=extra)
        return render_error(exc, error_mode_of(request))


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return render_error(
            build_validation_error(exc), error_mode_of(request),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return render_error(
            UserApiError(
                "An unexpected error occurred", "INTERNAL_ERROR",
                ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
            ),
            error_mode_of(request),
        )


def build_validation_error(exc: RequestValidationError) -> UserValidationError:
    """Turn FastAPI's request validation failure into a UserValidationError."""
    details = [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    missing = [d["field"].rsplit(".", 1)[-1] for d in details if d["type"] == "missing"]
    if missing:
        message = f"User validation failed: {', '.join(missing)} is required"
    else:
        message = "Invalid request data"
    return UserValidationError(message, details)

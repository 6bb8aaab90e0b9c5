"""Error Hierarchy — typed, categorized exceptions for all User API failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) are recoverable; store errors (500-level) are critical
    - to_response() produces the strict REST envelope; to_compat_response() the
      legacy {"message": ...} body, named with legacy_name (ValidationError, CastError)
      so older clients can keep branching on it
    - No driver internals leaked in user-facing messages

Design Decisions:
    - Single hierarchy with UserApiError base: one global handler renders all of them
    - Rendering mode is not known here; api/error_handlers.py picks the envelope
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context attached to an error for logs and the strict envelope."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


class UserApiError(Exception):
    """Base exception for all User API errors."""

    legacy_name = "Error"

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "user_id": self.context.user_id,
                    "operation": self.context.operation,
                },
            }
        }

    def to_compat_response(self) -> dict:
        """Convert to the legacy body: HTTP 200 with the error under "message".

        "name" carries the legacy error name clients compare against, while
        "code" carries the same code as the strict envelope.
        """
        return {
            "message": {
                "name": self.legacy_name,
                "code": self.code,
                "message": self.message,
            }
        }


# ─── Client Errors (400-level) ──────────────────────────────────

class UserValidationError(UserApiError):
    """Record rejected by the schema: a required field is missing or ill-typed."""
    legacy_name = "ValidationError"

    def __init__(
        self,
        message: str,
        details: list[dict] | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.details = details or []

    def to_response(self) -> dict:
        response = super().to_response()
        if self.details:
            response["error"]["details"] = self.details
        return response

    def to_compat_response(self) -> dict:
        response = super().to_compat_response()
        if self.details:
            response["message"]["details"] = self.details
        return response


class InvalidUserIdError(UserApiError):
    """Path id cannot be cast to a store identifier."""
    legacy_name = "CastError"

    def __init__(self, user_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.user_id = user_id
        super().__init__(
            f"'{user_id}' is not a valid user id",
            "INVALID_USER_ID", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.user_id = user_id


class UserNotFoundError(UserApiError):
    """No record matches the requested id."""
    legacy_name = "DocumentNotFoundError"

    def __init__(self, user_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.user_id = user_id
        super().__init__(
            f"User '{user_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, ctx, 404,
        )
        self.user_id = user_id


# ─── Store Errors (500-level) ───────────────────────────────────

class DatabaseError(UserApiError):
    """Document store operation failed."""
    legacy_name = "MongoServerError"

    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.operation = operation
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, ctx, 500,
        )
        self.operation = operation

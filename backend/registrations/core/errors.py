"""Error Hierarchy - typed, categorized exceptions for every registration failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; storage errors (500-level) are critical
    - to_response() produces the REST envelope used by the global handler
    - No storage paths or OS messages leak into user-facing messages

Design Decisions:
    - Single hierarchy with RegistrationPortalError base: FastAPI global handler catches all
    - ErrorContext as dataclass: observability fields without coupling to the logging framework
    - ExportError subclasses PersistenceError: a failed render is reported like a failed read
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    CONFLICT = "conflict"
    RESOURCE_NOT_FOUND = "resource_not_found"
    AUTHENTICATION = "authentication"
    PERSISTENCE = "persistence"
    RATE_LIMIT = "rate_limit"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    record_id: str | None = None
    field: str | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


class RegistrationPortalError(Exception):
    """Base exception for all registration portal errors."""

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
        body = {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
        }
        if self.context.field:
            body["field"] = self.context.field
        return {"error": body}


# ─── Domain Errors (400-level) ──────────────────────────────────

class ValidationError(RegistrationPortalError):
    """Caller-supplied data fails a field constraint."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.field = field
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.field = field


class DuplicateError(RegistrationPortalError):
    """Email or phone already belongs to an existing registration."""
    def __init__(self, field: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.field = field
        super().__init__(
            f"A student with this {field} is already registered.",
            "DUPLICATE_REGISTRATION", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, ctx, 409,
        )
        self.field = field


class NotFoundError(RegistrationPortalError):
    """Update/delete target does not exist."""
    def __init__(self, record_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.record_id = record_id
        super().__init__(
            "Student not found.",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, ctx, 404,
        )
        self.record_id = record_id


class AuthenticationError(RegistrationPortalError):
    """Admin credential missing or rejected."""
    def __init__(self, message: str = "Unauthorized", context: ErrorContext | None = None):
        super().__init__(
            message, "UNAUTHORIZED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class RateLimitError(RegistrationPortalError):
    """Client exceeded the /api request budget for the current window."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Too many requests. Please try again later.",
            "RATE_LIMITED", ErrorCategory.RATE_LIMIT,
            ErrorSeverity.WARNING, context, 429,
        )


# ─── Storage Errors (500-level) ─────────────────────────────────

class PersistenceError(RegistrationPortalError):
    """Dataset read or write failed. `detail` is for logs only."""
    def __init__(
        self, operation: str, detail: str = "",
        context: ErrorContext | None = None,
        message: str = "Storage is temporarily unavailable. Please try again.",
        code: str = "PERSISTENCE_ERROR",
        http_status: int = 503,
    ):
        ctx = context or ErrorContext()
        ctx.operation = operation
        super().__init__(
            message, code, ErrorCategory.PERSISTENCE,
            ErrorSeverity.CRITICAL, ctx, http_status,
        )
        self.operation = operation
        self.detail = detail


class ExportError(PersistenceError):
    """Export rendering failed; no partial payload is emitted."""
    def __init__(self, export_format: str, detail: str = "", context: ErrorContext | None = None):
        super().__init__(
            f"export_{export_format}", detail, context,
            message=f"Failed to generate {export_format.upper()} export.",
            code="EXPORT_ERROR", http_status=500,
        )
        self.export_format = export_format

"""Error Hierarchy: typed, categorized exceptions for every crud-api failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Each error kind maps to one stable code and HTTP status
    - to_response() produces the REST envelope; messages never carry driver internals

Design Decisions:
    - Single hierarchy with CrudApiError base so one FastAPI handler covers all kinds
    - ErrorContext as dataclass: observability data without coupling to logging
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
    """High-level error categories callers branch on."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context attached to an error for logs and the response envelope."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    resource_type: str | None = None
    resource_id: str | None = None
    operation: str | None = None
    details: list[dict[str, Any]] | None = None


class CrudApiError(Exception):
    """Base exception for all crud-api errors."""

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
            "context": {
                "resource_type": self.context.resource_type,
                "resource_id": self.context.resource_id,
                "operation": self.context.operation,
            },
        }
        if self.context.details:
            body["details"] = self.context.details
        return {"error": body}


# ─── Domain Errors (400-level) ──────────────────────────────────

class ValidationError(CrudApiError):
    """Input is malformed or missing required fields."""
    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: list[dict[str, Any]] | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        if details is not None:
            ctx.details = details
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.field = field


class NotFoundError(CrudApiError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.resource_type = resource_type
        ctx.resource_id = resource_id
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )


class ConflictError(CrudApiError):
    """A uniqueness constraint or invariant would be violated."""
    def __init__(
        self, message: str, field: str | None = None, context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )
        self.field = field


# ─── Infrastructure Errors (500-level) ──────────────────────────

class StoreUnavailableError(CrudApiError):
    """Persistent store unreachable, timed out, or failed mid-operation."""
    def __init__(self, operation: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.operation = operation
        super().__init__(
            f"Store unavailable during {operation}",
            "STORE_UNAVAILABLE", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, ctx, 503,
        )
        self.operation = operation

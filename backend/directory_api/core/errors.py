"""Error Hierarchy — typed, categorized exceptions for all User Directory failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope: {"success": false, "message", "code", ...}
    - InvalidRecordIdError is a RecordNotFoundError: a malformed id never resolves to a record
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from directory_api.core.user_rules import FieldViolation


class ErrorSeverity(str, Enum):
    """How loudly an error is logged."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """Which layer an error comes from."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"


@dataclass
class ErrorContext:
    """Context attached to an error for logs."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    record_id: str | None = None
    operation: str | None = None


class DirectoryError(Exception):
    """Base exception for all User Directory errors."""

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

    @property
    def recoverable(self) -> bool:
        return self.http_status < 500

    def to_response(self) -> dict:
        """Convert to the standard error envelope."""
        return {
            "success": False,
            "message": self.message,
            "code": self.code,
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class RecordValidationError(DirectoryError):
    """One or more field rules were violated. Carries every violation."""
    def __init__(
        self, violations: list[FieldViolation], context: ErrorContext | None = None,
    ):
        super().__init__(
            "Validation Error", "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.violations = violations

    @property
    def fields(self) -> list[str]:
        return [v.field for v in self.violations]

    def to_response(self) -> dict:
        body = super().to_response()
        body["errors"] = [v.to_dict() for v in self.violations]
        return body


class RecordNotFoundError(DirectoryError):
    """Requested record does not exist."""
    def __init__(self, record_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.record_id = record_id
        super().__init__(
            f"User '{record_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, ctx, 404,
        )
        self.record_id = record_id


class InvalidRecordIdError(RecordNotFoundError):
    """Record id is not a well-formed store identifier."""
    def __init__(self, record_id: str, context: ErrorContext | None = None):
        super().__init__(record_id, context)
        self.message = "Invalid ID format"
        self.args = (self.message,)
        self.code = "INVALID_ID"
        self.http_status = 400


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(DirectoryError):
    """Store operation failed while serving a request."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.operation = operation
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, ctx, 500,
        )
        self.operation = operation


class StoreUnavailableError(DirectoryError):
    """Store unreachable at startup. Fatal: the process exits instead of serving."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Document store unavailable: {message}",
            "STORE_UNAVAILABLE", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )

"""Error Hierarchy — typed, categorized exceptions for all Roster failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope used by every error handler
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with RosterError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone

from roster.core.student import FieldError


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    RATE_LIMIT = "rate_limit"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    student_id: str | None = None
    retry_after_ms: int | None = None


class RosterError(Exception):
    """Base exception for all Roster errors."""

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

    def details(self) -> list[dict] | None:
        return None

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        body = {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
        }
        details = self.details()
        if details is not None:
            body["details"] = details
        return {"error": body}


# ─── Domain Errors (400-level) ──────────────────────────────────

class StudentValidationError(RosterError):
    """Candidate record failed one or more field rules."""
    def __init__(
        self, field_errors: tuple[FieldError, ...] | list[FieldError],
        context: ErrorContext | None = None,
    ):
        self.field_errors = tuple(field_errors)
        fields = ", ".join(e.field for e in self.field_errors)
        super().__init__(
            f"Invalid student data: {fields}",
            "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )

    def details(self) -> list[dict]:
        return [e.to_dict() for e in self.field_errors]


class UploadRejectedError(RosterError):
    """Uploaded file violates size or type limits."""
    def __init__(self, message: str, code: str, context: ErrorContext | None = None):
        super().__init__(
            message, code, ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )


class ResourceNotFoundError(RosterError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class StudentNotFoundError(ResourceNotFoundError):
    """No student with the given id."""
    def __init__(self, student_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.student_id = student_id
        super().__init__("Student", student_id, ctx)


class RateLimitExceededError(RosterError):
    """Client exceeded the request budget for the current window."""
    def __init__(self, retry_after_seconds: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.retry_after_ms = retry_after_seconds * 1000
        super().__init__(
            "Too many requests, please try again later.",
            "RATE_LIMITED", ErrorCategory.RATE_LIMIT,
            ErrorSeverity.WARNING, ctx, 429,
        )
        self.retry_after_seconds = retry_after_seconds


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(RosterError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class MediaUploadError(RosterError):
    """Media host rejected or failed the upload."""
    def __init__(
        self,
        message: str,
        upload_error_type: str,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"File upload failed ({upload_error_type}): {message}",
            "MEDIA_UPLOAD_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, 502,
        )
        self.upload_error_type = upload_error_type

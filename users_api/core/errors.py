"""Error Hierarchy — typed, categorized exceptions for all Users API failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) are recoverable; store errors (500-level) are critical
    - to_response() produces the {success: false, error, message?} envelope
    - message is only present when there is underlying store text to forward

Design Decisions:
    - Single hierarchy with UsersApiError base: one FastAPI handler renders all of them
    - UniqueViolationError is store-generic; the create path narrows it to
      EmailAlreadyExistsError because email is the only unique column
"""

from enum import Enum


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
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


class UsersApiError(Exception):
    """Base exception for all Users API errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        http_status: int = 500,
        detail: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.http_status = http_status
        self.detail = detail

    def to_response(self) -> dict:
        """Convert to the standard error envelope."""
        body = {"success": False, "error": self.message}
        if self.detail is not None:
            body["message"] = self.detail
        return body


# ─── Client Errors (400-level) ──────────────────────────────────

class RequestValidationFailed(UsersApiError):
    """Request body or parameters failed validation."""
    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, 400,
        )
        self.field = field


class UserNotFoundError(UsersApiError):
    """No user row matches the requested id."""
    def __init__(self, user_id: str):
        super().__init__(
            "User not found", "USER_NOT_FOUND",
            ErrorCategory.RESOURCE_NOT_FOUND, ErrorSeverity.WARNING, 404,
        )
        self.user_id = user_id


class UniqueViolationError(UsersApiError):
    """Store rejected a write that would duplicate a unique value."""
    def __init__(self, detail: str | None = None):
        super().__init__(
            "Duplicate value violates a unique constraint", "UNIQUE_VIOLATION",
            ErrorCategory.CONFLICT, ErrorSeverity.WARNING, 409, detail,
        )


class EmailAlreadyExistsError(UsersApiError):
    """Another user already owns this email."""
    def __init__(self, email: str):
        super().__init__(
            "Email already exists", "EMAIL_ALREADY_EXISTS",
            ErrorCategory.CONFLICT, ErrorSeverity.WARNING, 409,
        )
        self.email = email


# ─── Store Errors (500-level) ───────────────────────────────────

class DatabaseError(UsersApiError):
    """Store unreachable, timed out, or rejected the statement."""
    def __init__(self, detail: str, operation: str = "query"):
        super().__init__(
            "Database connection failed", "DATABASE_ERROR",
            ErrorCategory.DATABASE, ErrorSeverity.CRITICAL, 500, detail,
        )
        self.operation = operation

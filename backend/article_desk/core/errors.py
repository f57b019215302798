"""Error Hierarchy — typed, categorized exceptions for all Article Desk failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Caller faults are 400-level; store/persistence failures are 500
    - severity picks the log level in api/error_handlers.py; category is logged alongside
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with ArticleDeskError base: FastAPI global handler catches all (ADR: uniform error shape)
    - One status per error kind, applied everywhere (validation 400, not found 404, store 500)
"""

from enum import Enum


class ErrorSeverity(str, Enum):
    """Error severity for observability."""
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    STORE = "store"
    UPLOAD_POLICY = "upload_policy"


class ArticleDeskError(Exception):
    """Base exception for all Article Desk errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.http_status = http_status


# ─── Caller Errors (400-level) ──────────────────────────────────

class InputValidationError(ArticleDeskError):
    """Malformed or missing input. Never retried server-side."""
    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, 400,
        )
        self.field = field


class UploadRejectedError(ArticleDeskError):
    """Uploaded file violates the type/size policy."""
    def __init__(self, message: str):
        super().__init__(
            message, "UPLOAD_REJECTED", ErrorCategory.UPLOAD_POLICY,
            ErrorSeverity.WARNING, 400,
        )


class ResourceNotFoundError(ArticleDeskError):
    """Requested resource does not exist."""
    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


# ─── Infrastructure Errors (500-level) ──────────────────────────

class StoreError(ArticleDeskError):
    """Connection or persistence failure. Safe for the caller to retry."""
    def __init__(self, message: str, operation: str):
        super().__init__(
            f"Store {operation} failed: {message}",
            "STORE_ERROR", ErrorCategory.STORE,
            ErrorSeverity.CRITICAL, 500,
        )
        self.operation = operation

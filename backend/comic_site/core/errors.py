"""Error Hierarchy — exceptions raised by the store and text adapters.

Invariants:
    - Every error carries a code, an ErrorCategory and an ErrorSeverity
    - MarkupError is the only error whose detail is re-displayed on a form
    - StoreError messages name the operation, never the driver or the SQL
    - to_response() produces the envelope used by the global error handlers

Design Decisions:
    - One base class (ComicSiteError): adapters raise, the workflow engine turns
      the exception into an explicit result (core/outcomes.py) before it decides
      on rollback, and the HTTP layer catches whatever escapes
    - ErrorContext pins the comic/page being worked on for log correlation
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    CONTENT_FORMAT = "content_format"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Where the failure happened, for logs and the error envelope."""
    comic_id: int | None = None
    page_index: int | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class ComicSiteError(Exception):
    """Base exception for all Comic Site errors."""

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

    def log_extra(self) -> dict[str, Any]:
        """Structured logging fields for this error."""
        return {
            "error_code": self.code,
            "comic_id": self.context.comic_id,
            "page_index": self.context.page_index,
        }

    def to_response(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "comic_id": self.context.comic_id,
                    "page_index": self.context.page_index,
                },
            }
        }


# ─── User input (400) ───────────────────────────────────────────

class MarkupError(ComicSiteError):
    """BBCode source is structurally invalid (unbalanced or unknown tags)."""

    def __init__(self, detail: str, context: ErrorContext | None = None):
        super().__init__(
            detail, "MARKUP_ERROR", ErrorCategory.CONTENT_FORMAT,
            ErrorSeverity.WARNING, context, 400,
        )
        self.detail = detail


class UploadTooLargeError(ComicSiteError):
    """An uploaded page image exceeded the configured size limit."""

    def __init__(self, filename: str, limit: int, context: ErrorContext | None = None):
        super().__init__(
            f"Upload {filename} exceeds {limit} bytes",
            "UPLOAD_TOO_LARGE", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 413,
        )
        self.limit = limit


# ─── Persistence (503) ──────────────────────────────────────────

class StoreError(ComicSiteError):
    """A store operation failed; `operation` names the step (insert, commit, ...)."""

    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class TransactionStateError(StoreError):
    """Transaction boundary misused (nested start, commit without start)."""

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(message, "transaction", context)
        self.code = "TRANSACTION_STATE_ERROR"

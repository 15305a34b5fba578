"""Error Hierarchy — typed, categorized exceptions for all store failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors are recoverable; storage errors are critical
    - to_response() produces a structured envelope; to_notification() produces a toast payload
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with WMStoreError base: PersistenceAPI catches all at one boundary
    - InvariantViolationError is a programmer error and is never converted into a result
    - ErrorContext as dataclass: rich observability without coupling to logging framework
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
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    STORAGE = "storage"
    INTERNAL = "internal"


# Toast levels the UI understands
_NOTIFICATION_LEVELS = {
    ErrorSeverity.INFO: "info",
    ErrorSeverity.WARNING: "warning",
    ErrorSeverity.ERROR: "danger",
    ErrorSeverity.CRITICAL: "danger",
}


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    profile_id: int | None = None
    operation: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class WMStoreError(Exception):
    """Base exception for all store errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    @property
    def recoverable(self) -> bool:
        return self.severity in (ErrorSeverity.INFO, ErrorSeverity.WARNING)

    def to_response(self) -> dict:
        """Convert to standardized structured error."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "profile_id": self.context.profile_id,
                    "operation": self.context.operation,
                },
            }
        }

    def to_notification(self) -> dict:
        """Convert to the payload a UI renders as a toast."""
        return {
            "level": _NOTIFICATION_LEVELS[self.severity],
            "message": self.context.user_message or self.message,
            "code": self.code,
        }


# ─── Domain Errors ──────────────────────────────────────────────

class NoActiveProfileError(WMStoreError):
    """An operation needed a profile context and none was found."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "No active profile. Create or select a profile first.",
            "NO_ACTIVE_PROFILE", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context,
        )


class ProfileNotFoundError(WMStoreError):
    """Rename/delete/switch referenced a profile id that does not exist."""
    def __init__(self, profile_id: int, context: ErrorContext | None = None):
        super().__init__(
            f"Profile '{profile_id}' not found",
            "PROFILE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context,
        )
        self.profile_id = profile_id


class CapacityExceededError(WMStoreError):
    """Profile creation beyond the configured maximum."""
    def __init__(self, max_profiles: int, context: ErrorContext | None = None):
        super().__init__(
            f"Maximum {max_profiles} profiles allowed. Delete a profile first.",
            "CAPACITY_EXCEEDED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context,
        )
        self.max_profiles = max_profiles


class MalformedInputError(WMStoreError):
    """Import payload is not parseable JSON."""
    def __init__(self, detail: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.user_message = ctx.user_message or (
            "Invalid JSON format. Please check your save data."
        )
        super().__init__(
            f"Malformed JSON: {detail}",
            "MALFORMED_INPUT", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx,
        )
        self.detail = detail


class UnknownFormatError(WMStoreError):
    """Import document matches none of the recognized save shapes."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Unknown save format. Cannot load this data.",
            "UNKNOWN_FORMAT", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context,
        )


class ValidationFailedError(WMStoreError):
    """Structural validation rejected the document. Carries every defect."""
    def __init__(self, defects: list[str], context: ErrorContext | None = None):
        first = defects[0] if defects else "unknown defect"
        super().__init__(
            f"Invalid save data: {first}",
            "VALIDATION_FAILED", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context,
        )
        self.defects = list(defects)


# ─── Infrastructure Errors ──────────────────────────────────────

class StorageError(WMStoreError):
    """Storage transaction failed (quota, corruption, host error)."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.operation = ctx.operation or operation
        super().__init__(
            f"Storage {operation} failed: {message}",
            "STORAGE_FAILURE", ErrorCategory.STORAGE,
            ErrorSeverity.CRITICAL, ctx,
        )
        self.operation = operation


class InvariantViolationError(WMStoreError):
    """Persisted state breaks a store invariant. Programmer error; never swallowed."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invariant violated: {message}",
            "INVARIANT_VIOLATION", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context,
        )

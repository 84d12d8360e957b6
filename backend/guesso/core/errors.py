"""Error Hierarchy: typed, categorized exceptions for every room-engine failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Every error carries a human-readable message surfaced as the top-level "error" key
    - Precondition failures (wrong state, wrong role, bad payload) never mutate state
    - A lost concurrent transition is reported exactly like a precondition failure (400)
    - Storage failures are 500-level and carry no internal details

Design Decisions:
    - Single hierarchy with GuessoError base: one FastAPI handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to the logging framework
    - from_check() bridges pure core checks (which return descriptors) to exceptions in the shell
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
    BUSINESS_RULE = "business_rule"
    PERMISSION = "permission"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    RATE_LIMIT = "rate_limit"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    room_code: str | None = None
    player_id: str | None = None
    action: str | None = None
    round_no: int | None = None
    debug_info: dict[str, Any] | None = None
    retry_after_ms: int | None = None


class GuessoError(Exception):
    """Base exception for all room-engine errors."""

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
        """Convert to the REST error envelope: {"error": reason, ...metadata}."""
        return {
            "error": self.message,
            "code": self.code,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
            "context": {
                "room_code": self.context.room_code,
                "action": self.context.action,
                "round_no": self.context.round_no,
                "retry_after_ms": self.context.retry_after_ms,
            },
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ActionValidationError(GuessoError):
    """Malformed or semantically invalid action payload."""
    def __init__(self, message: str, field: str | None = None, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.field = field


class InvalidStateError(GuessoError):
    """Action requested while the room is in a state that does not allow it."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_STATE", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 400,
        )


class RoleViolationError(GuessoError):
    """Caller lacks the role (host / asker / guesser) the action requires."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "ROLE_VIOLATION", ErrorCategory.PERMISSION,
            ErrorSeverity.WARNING, context, 403,
        )


class ResourceNotFoundError(GuessoError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class RoomFullError(GuessoError):
    def __init__(self, capacity: int, context: ErrorContext | None = None):
        super().__init__(
            f"Room is full (max {capacity} players)",
            "ROOM_FULL", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 400,
        )


class ConcurrencyError(GuessoError):
    """Another request advanced the room first. Client should re-fetch state."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONCURRENT_TRANSITION", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 400,
        )


class RateLimitExceededError(GuessoError):
    def __init__(self, retry_after_ms: int | None = None, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.retry_after_ms = retry_after_ms
        super().__init__(
            "Too many requests. Slow down and try again.",
            "RATE_LIMITED", ErrorCategory.RATE_LIMIT,
            ErrorSeverity.WARNING, ctx, 429,
        )


class SignatureError(GuessoError):
    """Integration webhook signature missing or invalid."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Invalid signature", "INVALID_SIGNATURE", ErrorCategory.PERMISSION,
            ErrorSeverity.WARNING, context, 401,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(GuessoError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation


class RoomCodeExhaustedError(GuessoError):
    """No free room code found within the configured number of attempts."""
    def __init__(self, attempts: int, context: ErrorContext | None = None):
        super().__init__(
            f"Could not allocate a room code after {attempts} attempts",
            "ROOM_CODE_EXHAUSTED", ErrorCategory.INTERNAL,
            ErrorSeverity.ERROR, context, 500,
        )


# ─── Check descriptor bridge ────────────────────────────────────

_CHECK_ERRORS: dict[str, type[GuessoError]] = {
    "VALIDATION_ERROR": ActionValidationError,
    "INVALID_STATE": InvalidStateError,
    "ROLE_VIOLATION": RoleViolationError,
    "CONCURRENT_TRANSITION": ConcurrencyError,
}


def from_check(check: dict, context: ErrorContext | None = None) -> GuessoError:
    """Build the typed exception for an error descriptor returned by a pure core check."""
    error_cls = _CHECK_ERRORS.get(check["error_code"], ActionValidationError)
    return error_cls(check["message"], context=context)

"""Error Hierarchy - the closed taxonomy every pipeline failure is normalized into.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Parameter errors (InvalidLimit, InvalidOffset) are raised before any IO and never retried
    - normalize_error() is total: any Exception maps to exactly one UserQueryError
    - A UserQueryError passed to normalize_error() is returned unchanged (no double wrapping)
    - Collaborator failures keep their original exception as `cause` and `__cause__`

Design Decisions:
    - Single hierarchy with UserQueryError base: callers catch one type and branch on
      code or class to pick a display/retry decision
    - RepositoryError lives here, not in the repository: the core owns the contract
      the repository must fail with
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
    NETWORK = "network"
    DATABASE = "database"
    PERMISSION = "permission"
    RATE_LIMIT = "rate_limit"
    SERVER = "server"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Where and when a failure happened. Filled in by the use case."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    operation: str | None = None
    parameters: dict[str, Any] | None = None
    duration_ms: float | None = None


class UserQueryError(Exception):
    """Base exception for all user query failures."""

    retryable: bool = False

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.cause = cause

    def to_dict(self) -> dict:
        """Flat, JSON-serializable envelope for logs and client payloads."""
        return {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "retryable": self.retryable,
            "timestamp": self.context.timestamp.isoformat(),
            "operation": self.context.operation,
            "duration_ms": self.context.duration_ms,
        }


# ─── Parameter Errors ───────────────────────────────────────────

class InvalidLimitError(UserQueryError):
    """Page size outside 1..1000."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid limit: {message}", "INVALID_LIMIT",
            ErrorCategory.VALIDATION, ErrorSeverity.WARNING, context,
        )


class InvalidOffsetError(UserQueryError):
    """Negative page offset."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid offset: {message}", "INVALID_OFFSET",
            ErrorCategory.VALIDATION, ErrorSeverity.WARNING, context,
        )


# ─── Collaborator Errors (normalized) ───────────────────────────

class NetworkError(UserQueryError):
    retryable = True

    def __init__(self, cause: BaseException | None, context: ErrorContext | None = None):
        super().__init__(
            f"Network error: {cause}", "NETWORK_ERROR",
            ErrorCategory.NETWORK, ErrorSeverity.ERROR, context, cause,
        )


class DatabaseError(UserQueryError):
    def __init__(self, cause: BaseException | None, context: ErrorContext | None = None):
        super().__init__(
            f"Database error: {cause}", "DATABASE_ERROR",
            ErrorCategory.DATABASE, ErrorSeverity.CRITICAL, context, cause,
        )


class DataValidationError(UserQueryError):
    """Records failed validation, either at the repository or in the validator."""
    def __init__(
        self, message: str, context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(
            f"Validation error: {message}", "VALIDATION_ERROR",
            ErrorCategory.VALIDATION, ErrorSeverity.ERROR, context, cause,
        )
        self.detail = message


class PermissionDeniedError(UserQueryError):
    def __init__(self, context: ErrorContext | None = None, cause: BaseException | None = None):
        super().__init__(
            "Permission denied to access users", "PERMISSION_DENIED",
            ErrorCategory.PERMISSION, ErrorSeverity.ERROR, context, cause,
        )


class RateLimitExceededError(UserQueryError):
    retryable = True

    def __init__(self, context: ErrorContext | None = None, cause: BaseException | None = None):
        super().__init__(
            "Rate limit exceeded for users retrieval", "RATE_LIMIT_EXCEEDED",
            ErrorCategory.RATE_LIMIT, ErrorSeverity.WARNING, context, cause,
        )


class ServerError(UserQueryError):
    retryable = True

    def __init__(
        self, message: str, context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(
            f"Server error: {message}", "SERVER_ERROR",
            ErrorCategory.SERVER, ErrorSeverity.CRITICAL, context, cause,
        )
        self.detail = message


class UnknownError(UserQueryError):
    """Anything not recognized. Always wraps the original exception."""
    def __init__(self, cause: BaseException, context: ErrorContext | None = None):
        super().__init__(
            f"Unknown error: {cause}", "UNKNOWN_ERROR",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL, context, cause,
        )


# ─── Collaborator Contracts ─────────────────────────────────────

class RepositoryErrorKind(str, Enum):
    """Closed set of failure kinds a UserRepository may report."""
    NETWORK = "network"
    DATABASE = "database"
    VALIDATION = "validation"
    PERMISSION_DENIED = "permission_denied"
    RATE_LIMIT = "rate_limit"
    SERVER = "server"
    NOT_FOUND = "not_found"
    INVALID_USER = "invalid_user"
    DUPLICATE_EMAIL = "duplicate_email"
    UNKNOWN = "unknown"


class RepositoryError(Exception):
    """Raised by UserRepository implementations."""
    def __init__(
        self, kind: RepositoryErrorKind, message: str = "",
        cause: BaseException | None = None,
    ):
        super().__init__(message or kind.value)
        self.kind = kind
        self.message = message or kind.value
        self.cause = cause


class UserValidationFailure(Exception):
    """Raised by UserValidator implementations; carries every problem found."""
    def __init__(self, user_id: str, problems: list[str]):
        super().__init__(f"user {user_id!r}: {', '.join(problems)}")
        self.user_id = user_id
        self.problems = problems


# ─── Normalization ──────────────────────────────────────────────

def normalize_error(
    error: BaseException, context: ErrorContext | None = None,
) -> UserQueryError:
    """Classify any failure into the taxonomy. Pure, never raises."""
    if isinstance(error, UserQueryError):
        return error
    if isinstance(error, RepositoryError):
        return _from_repository_error(error, context)
    if isinstance(error, UserValidationFailure):
        return DataValidationError(str(error), context, cause=error)
    return UnknownError(error, context)


def _from_repository_error(
    error: RepositoryError, context: ErrorContext | None,
) -> UserQueryError:
    # cause: the transport exception when the repository attached one
    cause = error.cause or error
    kind = error.kind
    if kind is RepositoryErrorKind.NETWORK:
        return NetworkError(cause, context)
    if kind is RepositoryErrorKind.DATABASE:
        return DatabaseError(cause, context)
    if kind is RepositoryErrorKind.VALIDATION:
        return DataValidationError(error.message, context, cause=error)
    if kind is RepositoryErrorKind.PERMISSION_DENIED:
        return PermissionDeniedError(context, cause=error)
    if kind is RepositoryErrorKind.RATE_LIMIT:
        return RateLimitExceededError(context, cause=error)
    if kind is RepositoryErrorKind.SERVER:
        return ServerError(error.message, context, cause=error)
    return UnknownError(error, context)

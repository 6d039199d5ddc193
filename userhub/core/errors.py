"""Error Hierarchy — typed exceptions for all UserHub failure modes.

Invariants:
    - Every error has a code (str) and a severity (ErrorSeverity)
    - Every error carries the HTTP status it maps to; transports never guess
    - to_response() produces the REST envelope; to_ack() produces the socket ack
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with UserHubError base: FastAPI global handler catches all
    - Severity drives the log level the HTTP and socket adapters report at
"""

import logging
from enum import Enum


class ErrorSeverity(str, Enum):
    """Error severity, mapped to a log level by the transports."""
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


_LOG_LEVELS = {
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


class UserHubError(Exception):
    """Base exception for all UserHub errors."""

    def __init__(
        self,
        message: str,
        code: str,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.severity = severity
        self.http_status = http_status

    @property
    def log_level(self) -> int:
        return _LOG_LEVELS[self.severity]

    def to_response(self) -> dict:
        """Convert to the REST envelope."""
        return {"success": False, "error": self.message}

    def to_ack(self) -> dict:
        """Convert to a socket acknowledgement payload."""
        return {"success": False, "error": self.message}


# ─── Domain Errors (400-level) ──────────────────────────────────

class ValidationFailedError(UserHubError):
    """Request payload is missing required fields or is malformed."""
    def __init__(self, message: str, field_name: str | None = None):
        super().__init__(message, "VALIDATION_ERROR", ErrorSeverity.WARNING, 400)
        self.field_name = field_name


class DuplicateEmailError(UserHubError):
    """Another user already owns this email."""
    def __init__(self):
        super().__init__(
            "User with this email already exists",
            "DUPLICATE_EMAIL", ErrorSeverity.WARNING, 400,
        )


class DuplicateUsernameError(UserHubError):
    """Another user already owns this username."""
    def __init__(self):
        super().__init__(
            "User with this username already exists",
            "DUPLICATE_USERNAME", ErrorSeverity.WARNING, 400,
        )


class ResourceNotFoundError(UserHubError):
    """Requested resource does not exist."""
    def __init__(self, resource_type: str, resource_id: int | str):
        super().__init__(
            f"{resource_type} with ID {resource_id} not found",
            "RESOURCE_NOT_FOUND", ErrorSeverity.WARNING, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


# ─── Business Rule Errors (500-level) ───────────────────────────

class UpdateFailedError(UserHubError):
    """Update matched no rows although the row existed a moment earlier."""
    def __init__(self, resource_type: str):
        super().__init__(
            f"Failed to update {resource_type.lower()}",
            "UPDATE_FAILED", ErrorSeverity.ERROR, 500,
        )


class DeleteFailedError(UserHubError):
    """Delete matched no rows although the row existed a moment earlier."""
    def __init__(self, resource_type: str):
        super().__init__(
            f"Failed to delete {resource_type.lower()}",
            "DELETE_FAILED", ErrorSeverity.ERROR, 500,
        )


class InternalInconsistencyError(UserHubError):
    """A row vanished between a successful write and its re-read."""
    def __init__(self, message: str):
        super().__init__(
            message, "INTERNAL_INCONSISTENCY", ErrorSeverity.CRITICAL, 500,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(UserHubError):
    """Database operation failed."""
    def __init__(
        self, message: str, operation: str, code: str = "DATABASE_ERROR",
    ):
        super().__init__(
            f"Database {operation} failed: {message}",
            code, ErrorSeverity.CRITICAL, 500,
        )
        self.operation = operation


class ConstraintViolationError(DatabaseError):
    """Store rejected a write (type mismatch, NOT NULL, UNIQUE)."""
    def __init__(self, table: str, operation: str):
        super().__init__(
            f"constraint violated on {table}", operation,
            code="CONSTRAINT_VIOLATION",
        )
        self.table = table


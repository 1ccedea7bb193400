"""Error Hierarchy — typed, categorized exceptions for all trust-graph failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with TrustGraphError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - RelayError is raised by the transport and absorbed by the follows fetcher;
      it never reaches an API response
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
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    CONFLICT = "conflict"
    TIMEOUT = "timeout"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    pubkey: str | None = None
    relay: str | None = None
    build_id: str | None = None
    debug_info: dict[str, Any] | None = None


class TrustGraphError(Exception):
    """Base exception for all trust-graph errors."""

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
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "pubkey": self.context.pubkey,
                    "build_id": self.context.build_id,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class InvalidPubkeyError(TrustGraphError):
    """Identity is neither 64-char hex nor a valid npub."""
    def __init__(self, value: str, context: ErrorContext | None = None):
        super().__init__(
            "Invalid pubkey format. Must be npub or 64 hex characters.",
            "INVALID_PUBKEY", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.value = value


class ResourceNotFoundError(TrustGraphError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class SeederExistsError(TrustGraphError):
    """A seeder with this pubkey is already registered."""
    def __init__(self, pubkey: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.pubkey = pubkey
        super().__init__(
            "Seeder already exists",
            "SEEDER_EXISTS", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, ctx, 409,
        )


class BuildInProgressError(TrustGraphError):
    """Another graph build holds the build lock."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "A build is already in progress",
            "BUILD_IN_PROGRESS", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(TrustGraphError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class RelayError(TrustGraphError):
    """A single relay could not be reached or spoke garbage."""
    def __init__(self, relay: str, message: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.relay = relay
        super().__init__(
            f"Relay {relay} failed: {message}",
            "RELAY_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.WARNING, ctx, 502,
        )
        self.relay = relay

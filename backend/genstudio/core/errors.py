"""Error Hierarchy — typed, categorized exceptions for all GenStudio failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - GenerationFailure and its subclasses never escape the session controller
    - PersistenceError never escapes the workspace store
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with GenStudioError base: FastAPI global handler catches all (ADR: uniform error shape)
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
    ADMISSION = "admission"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    PERSISTENCE = "persistence"
    EXTERNAL_API = "external_api"
    EXPORT = "export"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    correlation_id: str | None = None
    request_seq: int | None = None
    slot: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None
    retry_after_ms: int | None = None


class GenStudioError(Exception):
    """Base exception for all GenStudio errors."""

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
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "correlation_id": self.context.correlation_id,
                    "request_seq": self.context.request_seq,
                    "retry_after_ms": self.context.retry_after_ms,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class AdmissionRejectedError(GenStudioError):
    """Submit refused: a request is in flight or the prompt is blank.

    Never surfaced to the user; the controller logs it and drops the submit.
    """
    def __init__(self, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Submit rejected: {reason}",
            "ADMISSION_REJECTED", ErrorCategory.ADMISSION,
            ErrorSeverity.INFO, context, 409,
        )
        self.reason = reason


class ResourceNotFoundError(GenStudioError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class ExportError(GenStudioError):
    """Export archive could not be produced from the current workspace."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "EXPORT_FAILED", ErrorCategory.EXPORT,
            ErrorSeverity.WARNING, context, 409,
        )


# ─── Generation Errors (external collaborator) ──────────────────

class GenerationFailure(GenStudioError):
    """Any failure of the code generation call. Recovered by the controller."""
    def __init__(
        self,
        message: str,
        code: str = "GENERATION_FAILED",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, context, 502,
        )


class AnthropicAPIError(GenerationFailure):
    """Anthropic API call failed."""
    def __init__(
        self,
        message: str,
        api_error_type: str,
        retry_after_ms: int | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.retry_after_ms = retry_after_ms
        super().__init__(
            f"Anthropic API error ({api_error_type}): {message}",
            "ANTHROPIC_API_ERROR", ctx,
        )
        self.api_error_type = api_error_type


class ResponseSchemaError(GenerationFailure):
    """Model output did not match the generation response schema."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Malformed generation response: {message}",
            "RESPONSE_SCHEMA_INVALID", context,
        )


class MissingCredentialError(GenerationFailure):
    """No usable API key configured for the generation service."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "API key not found in environment",
            "MISSING_CREDENTIAL", context,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(GenStudioError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class PersistenceError(GenStudioError):
    """Workspace snapshot could not be read, written or cleared."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Workspace {operation} failed: {message}",
            "PERSISTENCE_ERROR", ErrorCategory.PERSISTENCE,
            ErrorSeverity.WARNING, context, 503,
        )
        self.operation = operation

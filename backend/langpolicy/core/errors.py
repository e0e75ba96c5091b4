"""Error Hierarchy — typed, categorized exceptions for the imperative shell.

Invariants:
    - The detection/validation/instruction engine never raises; these errors
      come only from the generation layer and the API boundary
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with LangPolicyError base: one FastAPI handler renders all
    - ErrorContext as dataclass: observability fields travel with the error
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context attached to an error for logs and responses."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    language_code: str | None = None
    attempt: int | None = None
    debug_info: dict[str, Any] | None = None
    retry_after_ms: int | None = None

    def public_fields(self) -> dict[str, Any]:
        """Client-safe context; debug_info stays in logs."""
        fields = {
            "language_code": self.language_code,
            "attempt": self.attempt,
            "retry_after_ms": self.retry_after_ms,
        }
        return {k: v for k, v in fields.items() if v is not None}


class LangPolicyError(Exception):
    """Base exception for all language-policy service errors."""

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
                "context": self.context.public_fields(),
            }
        }


# ─── Infrastructure Errors (500-level) ──────────────────────────

class AnthropicAPIError(LangPolicyError):
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
            "ANTHROPIC_API_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, ctx, 503,
        )
        self.api_error_type = api_error_type


class GenerationOutputError(LangPolicyError):
    """Generator returned no usable field output."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "GENERATION_OUTPUT_INVALID", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, context, 502,
        )

"""Error Hierarchy — typed, categorized exceptions for every client failure mode.

Invariants:
    - Every error has a code (str), kind (ErrorKind), severity (ErrorSeverity)
    - Callers receive a fully decoded value or exactly one StripeClientError subclass
    - DecodeError is never retried; TransportFailure always is
    - ApiError is retried only when its envelope category is transient
    - MaxRetriesExceeded wraps the last underlying error, never replaces its type

Design Decisions:
    - Single hierarchy with StripeClientError base: malformed bodies and remote
      rejections are handled through one `except` clause
    - ErrorContext as dataclass: rich observability without coupling to logging
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from stripe_typed.core.domain_types import FailureCategory
from stripe_typed.core.error_model import ErrorEnvelope


class ErrorSeverity(str, Enum):
    """Error severity for observability and caller handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorKind(str, Enum):
    """Which layer produced the failure."""
    DECODE = "decode"
    TRANSPORT = "transport"
    REMOTE = "remote"
    RETRIES_EXHAUSTED = "retries_exhausted"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    method: str | None = None
    path: str | None = None
    idempotency_key: str | None = None
    attempt: int | None = None
    retry_after_ms: int | None = None
    debug_info: dict[str, Any] | None = None


class StripeClientError(Exception):
    """Base exception for all client errors."""

    def __init__(
        self,
        message: str,
        code: str,
        kind: ErrorKind,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.kind = kind
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    @property
    def is_retryable(self) -> bool:
        return False

    def to_dict(self) -> dict:
        """Diagnostic view, safe to log."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "kind": self.kind.value,
                "severity": self.severity.value,
                "http_status": self.http_status,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "method": self.context.method,
                    "path": self.context.path,
                    "idempotency_key": self.context.idempotency_key,
                    "attempt": self.context.attempt,
                    "retry_after_ms": self.context.retry_after_ms,
                },
            }
        }


class DecodeError(StripeClientError):
    """Wire tree did not match the expected type (missing field, unknown variant/enum)."""
    def __init__(
        self,
        message: str,
        errors: list[dict[str, Any]] | None = None,
        tree: Any = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "DECODE_ERROR", ErrorKind.DECODE,
            ErrorSeverity.ERROR, context,
        )
        self.errors = errors or []
        self.tree = tree


class TransportFailure(StripeClientError):
    """Connection refused, timeout, or a response body that is not JSON."""
    def __init__(
        self,
        message: str,
        reason: str,
        http_status: int | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Transport failure ({reason}): {message}",
            "TRANSPORT_FAILURE", ErrorKind.TRANSPORT,
            ErrorSeverity.WARNING, context, http_status,
        )
        self.reason = reason

    @property
    def is_retryable(self) -> bool:
        return True


class ApiError(StripeClientError):
    """The API answered with a well-formed error body."""
    def __init__(
        self,
        envelope: ErrorEnvelope,
        retry_after_ms: int | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.retry_after_ms = retry_after_ms
        detail = envelope.message or "no message"
        super().__init__(
            f"Stripe API error ({envelope.category.value}, HTTP {envelope.http_status}): {detail}",
            "API_ERROR", ErrorKind.REMOTE,
            ErrorSeverity.WARNING if envelope.is_transient else ErrorSeverity.ERROR,
            ctx, envelope.http_status,
        )
        self.envelope = envelope

    @property
    def category(self) -> FailureCategory:
        return self.envelope.category

    @property
    def is_retryable(self) -> bool:
        return self.envelope.is_transient


class MaxRetriesExceeded(StripeClientError):
    """Gave up after the configured number of retries."""
    def __init__(
        self,
        retries: int,
        last_error: StripeClientError,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Exceeded max number of retries ({retries}); last error: {last_error.message}",
            "MAX_RETRIES_EXCEEDED", ErrorKind.RETRIES_EXHAUSTED,
            ErrorSeverity.CRITICAL, context, last_error.http_status,
        )
        self.retries = retries
        self.last_error = last_error

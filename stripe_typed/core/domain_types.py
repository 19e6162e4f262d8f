"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - IdempotencyKey wraps str — never pass a bare string where a key is expected
    - All closed vocabularies encoded as Enums — no raw string matching
    - FailureCategory is a closed set; TRANSIENT_CATEGORIES is its retryable subset

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to the wire without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

IdempotencyKey = NewType("IdempotencyKey", str)


# ─── Enums ───────────────────────────────────────────────────────

class HttpMethod(str, Enum):
    """HTTP verbs used by the API."""
    GET = "GET"
    POST = "POST"
    DELETE = "DELETE"

    @property
    def has_side_effects(self) -> bool:
        return self is not HttpMethod.GET


class ErrorType(str, Enum):
    """Type tags the API puts in the `error.type` field of an error body."""
    API_CONNECTION_ERROR = "api_connection_error"
    API_ERROR = "api_error"
    AUTHENTICATION_ERROR = "authentication_error"
    CARD_ERROR = "card_error"
    IDEMPOTENCY_ERROR = "idempotency_error"
    INVALID_REQUEST_ERROR = "invalid_request_error"
    RATE_LIMIT_ERROR = "rate_limit_error"


class FailureCategory(str, Enum):
    """Closed taxonomy of remote failures, derived from status + type tag."""
    INVALID_REQUEST = "invalid_request"
    AUTHENTICATION = "authentication"
    CARD_DECLINED = "card_declined"
    RATE_LIMITED = "rate_limited"
    API_FAILURE = "api_failure"
    IDEMPOTENCY_CONFLICT = "idempotency_conflict"
    UNKNOWN = "unknown"

    @property
    def is_transient(self) -> bool:
        return self in TRANSIENT_CATEGORIES


TRANSIENT_CATEGORIES = frozenset({
    FailureCategory.API_FAILURE,
    FailureCategory.RATE_LIMITED,
})


class RetryPhase(str, Enum):
    """States of one logical operation driven by the resilience controller."""
    START = "start"
    ATTEMPTING = "attempting"
    RETRYING = "retrying"
    SUCCEEDED = "succeeded"
    FAILED_TERMINAL = "failed_terminal"

    @property
    def is_terminal(self) -> bool:
        return self in (RetryPhase.SUCCEEDED, RetryPhase.FAILED_TERMINAL)

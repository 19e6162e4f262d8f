"""Error Model — classifies an API error body into a closed failure taxonomy.

Invariants:
    - parse_error never raises: any status/body pair yields an ErrorEnvelope
    - Category uses status code AND the wire `type` tag (402 and 400 both carry card_error)
    - `param` stays in wire naming; ErrorEnvelope.field gives the attribute path
    - Unknown type tags are kept raw and categorised by status alone

Design Decisions:
    - Envelope as frozen dataclass: it is a value, not an exception; ApiError carries it
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from stripe_typed.core.domain_types import ErrorType, FailureCategory
from stripe_typed.core.naming import to_field_name


@dataclass(frozen=True)
class ErrorEnvelope:
    """A well-formed error response from the API."""
    category: FailureCategory
    http_status: int
    type: str | None = None
    code: str | None = None
    decline_code: str | None = None
    message: str | None = None
    param: str | None = None
    raw: Any = None

    @property
    def error_type(self) -> ErrorType | None:
        return _known_type(self.type)

    @property
    def field(self) -> str | None:
        """Failing parameter as a dotted attribute path, if the API named one."""
        if self.param is None:
            return None
        return to_field_name(self.param)

    @property
    def is_transient(self) -> bool:
        return self.category.is_transient


def parse_error(http_status: int, tree: Any) -> ErrorEnvelope:
    """Build an ErrorEnvelope from a non-2xx status and its decoded JSON body."""
    body = tree.get("error") if isinstance(tree, Mapping) else None
    if not isinstance(body, Mapping):
        body = {}

    type_tag = _optional_str(body.get("type"))
    return ErrorEnvelope(
        category=categorize(http_status, type_tag),
        http_status=http_status,
        type=type_tag,
        code=_optional_str(body.get("code")),
        decline_code=_optional_str(body.get("decline_code")),
        message=_optional_str(body.get("message")),
        param=_optional_str(body.get("param")),
        raw=tree,
    )


def categorize(http_status: int, type_tag: str | None) -> FailureCategory:
    """Status code + type tag -> FailureCategory. Order of checks matters."""
    error_type = _known_type(type_tag)

    if error_type is ErrorType.IDEMPOTENCY_ERROR or http_status == 409:
        return FailureCategory.IDEMPOTENCY_CONFLICT
    if error_type is ErrorType.RATE_LIMIT_ERROR or http_status == 429:
        return FailureCategory.RATE_LIMITED
    if error_type is ErrorType.AUTHENTICATION_ERROR or http_status in (401, 403):
        return FailureCategory.AUTHENTICATION
    if error_type is ErrorType.CARD_ERROR:
        return FailureCategory.CARD_DECLINED
    if error_type in (ErrorType.API_ERROR, ErrorType.API_CONNECTION_ERROR):
        return FailureCategory.API_FAILURE
    if http_status >= 500:
        return FailureCategory.API_FAILURE
    if error_type is ErrorType.INVALID_REQUEST_ERROR:
        return FailureCategory.INVALID_REQUEST
    if http_status == 402:
        return FailureCategory.CARD_DECLINED
    if http_status in (400, 404):
        return FailureCategory.INVALID_REQUEST
    return FailureCategory.UNKNOWN


def _known_type(type_tag: str | None) -> ErrorType | None:
    if type_tag is None:
        return None
    try:
        return ErrorType(type_tag)
    except ValueError:
        return None


def _optional_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None

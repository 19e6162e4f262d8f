"""Common Schemas — currency, addresses, metadata, list pages and delete responses.

Invariants:
    - Currency codes are lowercase ISO 4217 on the wire
    - A list page always carries object == "list" and preserves has_more
    - Metadata keys are caller-defined and never renamed
"""

from enum import Enum
from typing import Generic, Literal, TypeVar

from stripe_typed.core.codec import WireModel

T = TypeVar("T")

Metadata = dict[str, str]


class Currency(str, Enum):
    """Settlement and presentment currencies (subset)."""
    AUD = "aud"
    CAD = "cad"
    CHF = "chf"
    DKK = "dkk"
    EUR = "eur"
    GBP = "gbp"
    HKD = "hkd"
    HRK = "hrk"
    JPY = "jpy"
    NOK = "nok"
    NZD = "nzd"
    SEK = "sek"
    SGD = "sgd"
    USD = "usd"


class Address(WireModel):
    line1: str | None = None
    line2: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    country: str | None = None


class DeleteResponse(WireModel):
    """Body returned by every DELETE endpoint."""
    id: str
    deleted: bool


class StripeList(WireModel, Generic[T]):
    """One page of a list endpoint; continuation is the caller's concern."""
    object: Literal["list"] = "list"
    url: str
    has_more: bool
    data: list[T]
    total_count: int | None = None

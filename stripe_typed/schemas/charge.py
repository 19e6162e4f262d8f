"""Charge Schemas — the charge resource and the create-charge input.

Invariants:
    - Empty fraud_details / shipping / metadata objects decode to None
    - statement_descriptor: at most 22 characters, none of < > " '
    - A charge input names a source, a customer, or both
    - Card details are form-encoded under `card[...]`; a token or customer id as `source`
"""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import ConfigDict, RootModel, field_validator, model_validator

from stripe_typed.core.codec import (
    EmptyAsNone,
    RepeatedKeys,
    Shape,
    Timestamp,
    WireModel,
    is_mapping,
    is_string,
    variant,
)
from stripe_typed.schemas.common import Address, Currency, Metadata, StripeList
from stripe_typed.schemas.list_params import ListParams
from stripe_typed.schemas.payment_source import PaymentSource

STATEMENT_DESCRIPTOR_MAX_LENGTH = 22
STATEMENT_DESCRIPTOR_FORBIDDEN = frozenset('<>"\'')


class ChargeStatus(str, Enum):
    SUCCEEDED = "succeeded"
    PENDING = "pending"
    FAILED = "failed"


class FraudReport(str, Enum):
    FRAUDULENT = "fraudulent"
    SAFE = "safe"


class FraudDetails(WireModel):
    user_report: FraudReport | None = None
    stripe_report: FraudReport | None = None


class Shipping(WireModel):
    name: str
    address: Address
    carrier: str | None = None
    phone: str | None = None
    tracking_number: str | None = None


class Charge(WireModel):
    id: str
    object: Literal["charge"] = "charge"
    amount: int
    amount_refunded: int
    captured: bool
    created: Timestamp
    currency: Currency
    livemode: bool
    paid: bool
    refunded: bool
    status: ChargeStatus
    source: PaymentSource | None = None
    customer: str | None = None
    description: str | None = None
    failure_code: str | None = None
    failure_message: str | None = None
    balance_transaction: str | None = None
    receipt_email: str | None = None
    statement_descriptor: str | None = None
    fraud_details: Annotated[FraudDetails | None, EmptyAsNone] = None
    shipping: Annotated[Shipping | None, EmptyAsNone] = None
    metadata: Annotated[Metadata | None, EmptyAsNone] = None


ChargeList = StripeList[Charge]


# ─── Input ───────────────────────────────────────────────────────

class SourceToken(RootModel[str]):
    """A token, source or customer id sent as the charge source."""
    model_config = ConfigDict(frozen=True)


class CardDetails(WireModel):
    """Raw card details for a one-off charge."""
    __form_key__ = "card"

    object: Literal["card"] = "card"
    number: str
    exp_month: int
    exp_year: int
    cvc: str | None = None
    name: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None
    address_city: str | None = None
    address_state: str | None = None
    address_zip: str | None = None
    address_country: str | None = None


ChargeSource = variant(
    "charge source",
    Union[SourceToken, CardDetails],
    Shape("token", SourceToken, is_string),
    Shape("card", CardDetails, is_mapping),
)


class ChargeInput(WireModel):
    amount: int
    currency: Currency
    source: ChargeSource | None = None
    customer: str | None = None
    capture: bool | None = None
    application_fee: int | None = None
    description: str | None = None
    destination: str | None = None
    receipt_email: str | None = None
    statement_descriptor: str | None = None
    shipping: Annotated[Shipping | None, EmptyAsNone] = None
    metadata: Annotated[Metadata | None, EmptyAsNone] = None
    expand: Annotated[list[str] | None, RepeatedKeys] = None

    @field_validator("amount")
    @classmethod
    def positive_amount(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("amount must be a positive integer in the smallest currency unit")
        return v

    @field_validator("statement_descriptor")
    @classmethod
    def check_statement_descriptor(cls, v: str | None) -> str | None:
        if v is None:
            return v
        if len(v) > STATEMENT_DESCRIPTOR_MAX_LENGTH:
            raise ValueError(
                f"statement_descriptor is {len(v)} characters, "
                f"max is {STATEMENT_DESCRIPTOR_MAX_LENGTH}",
            )
        bad = sorted(set(v) & STATEMENT_DESCRIPTOR_FORBIDDEN)
        if bad:
            raise ValueError(f"statement_descriptor contains forbidden characters {bad}")
        return v

    @model_validator(mode="after")
    def source_or_customer(self) -> "ChargeInput":
        if self.source is None and self.customer is None:
            raise ValueError("a charge needs a source, a customer, or both")
        return self


class ChargeListParams(ListParams):
    customer: str | None = None

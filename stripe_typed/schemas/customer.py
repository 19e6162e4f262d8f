"""Customer Schemas."""

from typing import Annotated, Literal

from stripe_typed.core.codec import EmptyAsNone, RepeatedKeys, Timestamp, WireModel
from stripe_typed.schemas.charge import Shipping
from stripe_typed.schemas.common import Currency, Metadata
from stripe_typed.schemas.payment_source import PaymentSourceList


class Customer(WireModel):
    id: str
    object: Literal["customer"] = "customer"
    created: Timestamp
    livemode: bool
    account_balance: int = 0
    delinquent: bool = False
    currency: Currency | None = None
    default_source: str | None = None
    description: str | None = None
    email: str | None = None
    shipping: Annotated[Shipping | None, EmptyAsNone] = None
    sources: PaymentSourceList | None = None
    metadata: Annotated[Metadata | None, EmptyAsNone] = None


class CustomerUpdate(WireModel):
    """Fields accepted by POST /v1/customers/{id}; unset fields are left untouched."""
    account_balance: int | None = None
    coupon: str | None = None
    default_source: str | None = None
    description: str | None = None
    email: str | None = None
    source: str | None = None
    shipping: Shipping | None = None
    metadata: Metadata | None = None
    expand: Annotated[list[str] | None, RepeatedKeys] = None

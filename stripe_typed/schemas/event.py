"""Event Schemas — webhook/event payloads whose `data.object` is any known resource."""

from enum import Enum
from typing import Annotated, Any, Literal, Union

from stripe_typed.core.codec import EmptyAsNone, Shape, Timestamp, WireModel, tagged, variant
from stripe_typed.schemas.account import Account
from stripe_typed.schemas.charge import Charge
from stripe_typed.schemas.common import StripeList
from stripe_typed.schemas.customer import Customer
from stripe_typed.schemas.payment_source import BankAccount, BitcoinReceiver, Card


class EventType(str, Enum):
    ACCOUNT_UPDATED = "account.updated"
    ACCOUNT_APPLICATION_DEAUTHORIZED = "account.application.deauthorized"
    ACCOUNT_EXTERNAL_ACCOUNT_CREATED = "account.external_account.created"
    ACCOUNT_EXTERNAL_ACCOUNT_DELETED = "account.external_account.deleted"
    ACCOUNT_EXTERNAL_ACCOUNT_UPDATED = "account.external_account.updated"
    BITCOIN_RECEIVER_CREATED = "bitcoin.receiver.created"
    BITCOIN_RECEIVER_FILLED = "bitcoin.receiver.filled"
    BITCOIN_RECEIVER_UPDATED = "bitcoin.receiver.updated"
    CHARGE_CAPTURED = "charge.captured"
    CHARGE_FAILED = "charge.failed"
    CHARGE_REFUNDED = "charge.refunded"
    CHARGE_SUCCEEDED = "charge.succeeded"
    CHARGE_UPDATED = "charge.updated"
    CUSTOMER_CREATED = "customer.created"
    CUSTOMER_DELETED = "customer.deleted"
    CUSTOMER_UPDATED = "customer.updated"
    CUSTOMER_SOURCE_CREATED = "customer.source.created"
    CUSTOMER_SOURCE_DELETED = "customer.source.deleted"
    CUSTOMER_SOURCE_UPDATED = "customer.source.updated"
    PING = "ping"


EventObject = variant(
    "event object",
    Union[Charge, Customer, Account, Card, BankAccount, BitcoinReceiver],
    Shape("charge", Charge, tagged("charge")),
    Shape("customer", Customer, tagged("customer")),
    Shape("account", Account, tagged("account")),
    Shape("card", Card, tagged("card")),
    Shape("bank_account", BankAccount, tagged("bank_account")),
    Shape("bitcoin_receiver", BitcoinReceiver, tagged("bitcoin_receiver")),
)


class EventData(WireModel):
    object: EventObject
    # Only the attributes that changed, in wire naming
    previous_attributes: Annotated[dict[str, Any] | None, EmptyAsNone] = None


class Event(WireModel):
    id: str
    object: Literal["event"] = "event"
    type: EventType
    created: Timestamp
    data: EventData
    livemode: bool
    pending_webhooks: int = 0
    api_version: str | None = None
    request: str | None = None


EventList = StripeList[Event]

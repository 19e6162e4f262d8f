"""Payment Source Schemas — cards, bank accounts and bitcoin receivers.

Invariants:
    - PaymentSource decodes to exactly one of Card / BankAccount / BitcoinReceiver,
      chosen by the `object` tag; any other tag is a DecodeError naming it
    - Empty metadata ({}) from the API is held as None

Design Decisions:
    - `object` declared as a Literal with a default: encoding a shape writes its
      own tag back, so a decoded source re-encodes to something that decodes again
"""

from enum import Enum
from typing import Annotated, Literal, Union

from stripe_typed.core.codec import EmptyAsNone, Shape, Timestamp, WireModel, tagged, variant
from stripe_typed.schemas.common import Currency, Metadata, StripeList


class CardBrand(str, Enum):
    AMERICAN_EXPRESS = "American Express"
    DINERS_CLUB = "Diners Club"
    DISCOVER = "Discover"
    JCB = "JCB"
    MASTER_CARD = "MasterCard"
    UNKNOWN = "Unknown"
    VISA = "Visa"


class FundingType(str, Enum):
    CREDIT = "credit"
    DEBIT = "debit"
    PREPAID = "prepaid"
    UNKNOWN = "unknown"


class CheckResult(str, Enum):
    """Outcome of an address or CVC check."""
    PASS = "pass"
    FAIL = "fail"
    UNAVAILABLE = "unavailable"
    UNCHECKED = "unchecked"


class TokenizationMethod(str, Enum):
    APPLE_PAY = "apple_pay"
    ANDROID_PAY = "android_pay"


class BankAccountStatus(str, Enum):
    NEW = "new"
    VALIDATED = "validated"
    VERIFIED = "verified"
    VERIFICATION_FAILED = "verification_failed"
    ERRORED = "errored"


class AccountHolderType(str, Enum):
    INDIVIDUAL = "individual"
    COMPANY = "company"


class Card(WireModel):
    id: str
    object: Literal["card"] = "card"
    brand: CardBrand
    exp_month: int
    exp_year: int
    last4: str
    funding: FundingType
    country: str | None = None
    name: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None
    address_city: str | None = None
    address_state: str | None = None
    address_zip: str | None = None
    address_country: str | None = None
    address_line1_check: CheckResult | None = None
    address_zip_check: CheckResult | None = None
    cvc_check: CheckResult | None = None
    customer: str | None = None
    dynamic_last4: str | None = None
    fingerprint: str | None = None
    tokenization_method: TokenizationMethod | None = None
    metadata: Annotated[Metadata | None, EmptyAsNone] = None


class BankAccount(WireModel):
    id: str
    object: Literal["bank_account"] = "bank_account"
    country: str
    currency: Currency
    last4: str
    status: BankAccountStatus
    account_holder_name: str | None = None
    account_holder_type: AccountHolderType | None = None
    bank_name: str | None = None
    default_for_currency: bool | None = None
    fingerprint: str | None = None
    routing_number: str | None = None
    customer: str | None = None
    metadata: Annotated[Metadata | None, EmptyAsNone] = None


class BitcoinReceiver(WireModel):
    id: str
    object: Literal["bitcoin_receiver"] = "bitcoin_receiver"
    active: bool
    amount: int
    amount_received: int
    bitcoin_amount: int
    bitcoin_amount_received: int
    bitcoin_uri: str
    created: Timestamp
    currency: Currency
    filled: bool
    inbound_address: str
    livemode: bool
    uncaptured_funds: bool
    customer: str | None = None
    description: str | None = None
    email: str | None = None
    refund_address: str | None = None
    used_for_payment: bool | None = None
    metadata: Annotated[Metadata | None, EmptyAsNone] = None


PaymentSource = variant(
    "payment source",
    Union[Card, BankAccount, BitcoinReceiver],
    Shape("card", Card, tagged("card")),
    Shape("bank_account", BankAccount, tagged("bank_account")),
    Shape("bitcoin_receiver", BitcoinReceiver, tagged("bitcoin_receiver")),
)

PaymentSourceList = StripeList[PaymentSource]

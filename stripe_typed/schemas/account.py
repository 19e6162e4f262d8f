"""Account Schemas — connected accounts, legal entities and their updates.

Invariants:
    - A date of birth whose day, month and year are all null decodes to None
    - Nested inputs form-encode as legal_entity[address][city], legal_entity[dob][year], ...
"""

from collections.abc import Mapping
from datetime import date
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BeforeValidator

from stripe_typed.core.codec import EmptyAsNone, Timestamp, WireModel
from stripe_typed.schemas.common import Address, Currency, Metadata, StripeList
from stripe_typed.schemas.payment_source import PaymentSource


class LegalEntityType(str, Enum):
    INDIVIDUAL = "individual"
    COMPANY = "company"


class TransferInterval(str, Enum):
    MANUAL = "manual"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class Weekday(str, Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"


def _null_date_as_none(value: Any) -> Any:
    if isinstance(value, Mapping) and all(value.get(k) is None for k in ("day", "month", "year")):
        return None
    return value


class DateOfBirth(WireModel):
    day: int
    month: int
    year: int

    @classmethod
    def from_date(cls, value: date) -> "DateOfBirth":
        return cls(day=value.day, month=value.month, year=value.year)

    def to_date(self) -> date:
        return date(self.year, self.month, self.day)


class TosAcceptance(WireModel):
    date: Timestamp | None = None
    ip: str | None = None
    user_agent: str | None = None


class LegalEntity(WireModel):
    address: Address | None = None
    type: LegalEntityType | None = None
    business_name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    dob: Annotated[DateOfBirth | None, BeforeValidator(_null_date_as_none)] = None


class TransferSchedule(WireModel):
    interval: TransferInterval | None = None
    monthly_anchor: int | None = None
    weekly_anchor: Weekday | None = None
    delay_days: int | None = None


class Verification(WireModel):
    disabled_reason: str | None = None
    due_by: Timestamp | None = None
    fields_needed: list[str] = []


class Account(WireModel):
    id: str
    object: Literal["account"] = "account"
    charges_enabled: bool
    country: str
    details_submitted: bool
    transfers_enabled: bool
    default_currency: Currency
    debit_negative_balances: bool | None = None
    email: str | None = None
    business_name: str | None = None
    transfer_schedule: TransferSchedule | None = None
    external_accounts: StripeList[PaymentSource] | None = None
    legal_entity: LegalEntity | None = None
    verification: Verification | None = None
    metadata: Annotated[Metadata | None, EmptyAsNone] = None


class AccountUpdate(WireModel):
    """Fields accepted by POST /v1/accounts/{id}."""
    legal_entity: LegalEntity | None = None
    external_account: str | None = None
    default_currency: Currency | None = None
    email: str | None = None
    tos_acceptance: TosAcceptance | None = None
    transfer_schedule: TransferSchedule | None = None
    metadata: Metadata | None = None

"""Operation Catalogue — a representative set of endpoints as Operation values.

Each function only describes a call (method, path, input, response type); running
it is the ResilienceController's job. Create/update/delete calls are flagged
idempotent so a single key covers all of their retries.
"""

from typing import BinaryIO
from urllib.parse import quote

from stripe_typed.core.domain_types import HttpMethod, IdempotencyKey
from stripe_typed.schemas.account import Account, AccountUpdate
from stripe_typed.schemas.charge import Charge, ChargeInput, ChargeList, ChargeListParams
from stripe_typed.schemas.common import DeleteResponse
from stripe_typed.schemas.customer import Customer, CustomerUpdate
from stripe_typed.schemas.event import Event, EventList
from stripe_typed.schemas.file_upload import FilePurpose, FileUpload, FileUploadInput
from stripe_typed.schemas.list_params import ListParams
from stripe_typed.schemas.payment_source import PaymentSourceList
from stripe_typed.services.resilience import Operation

API_PREFIX = "/v1"


def _path(*segments: str) -> str:
    return API_PREFIX + "".join("/" + quote(s, safe="") for s in segments)


# ─── Charges ─────────────────────────────────────────────────────

def create_charge(
    charge: ChargeInput,
    *,
    idempotency_key: IdempotencyKey | None = None,
    stripe_account: str | None = None,
) -> Operation[Charge]:
    return Operation(
        HttpMethod.POST, _path("charges"), Charge,
        params=charge,
        idempotency_key=idempotency_key,
        stripe_account=stripe_account,
    )


def retrieve_charge(charge_id: str, *, stripe_account: str | None = None) -> Operation[Charge]:
    return Operation(
        HttpMethod.GET, _path("charges", charge_id), Charge,
        stripe_account=stripe_account,
    )


def list_charges(
    params: ChargeListParams | None = None, *, stripe_account: str | None = None,
) -> Operation[ChargeList]:
    return Operation(
        HttpMethod.GET, _path("charges"), ChargeList,
        params=params,
        stripe_account=stripe_account,
    )


# ─── Customers ───────────────────────────────────────────────────

def create_customer(
    customer: CustomerUpdate,
    *,
    idempotency_key: IdempotencyKey | None = None,
    stripe_account: str | None = None,
) -> Operation[Customer]:
    return Operation(
        HttpMethod.POST, _path("customers"), Customer,
        params=customer,
        idempotency_key=idempotency_key,
        stripe_account=stripe_account,
    )


def retrieve_customer(customer_id: str, *, stripe_account: str | None = None) -> Operation[Customer]:
    return Operation(
        HttpMethod.GET, _path("customers", customer_id), Customer,
        stripe_account=stripe_account,
    )


def update_customer(
    customer_id: str,
    update: CustomerUpdate,
    *,
    idempotency_key: IdempotencyKey | None = None,
    stripe_account: str | None = None,
) -> Operation[Customer]:
    return Operation(
        HttpMethod.POST, _path("customers", customer_id), Customer,
        params=update,
        idempotency_key=idempotency_key,
        stripe_account=stripe_account,
    )


def delete_customer(
    customer_id: str,
    *,
    idempotency_key: IdempotencyKey | None = None,
    stripe_account: str | None = None,
) -> Operation[DeleteResponse]:
    return Operation(
        HttpMethod.DELETE, _path("customers", customer_id), DeleteResponse,
        idempotency_key=idempotency_key,
        stripe_account=stripe_account,
    )


def list_customer_sources(
    customer_id: str, params: ListParams | None = None, *, stripe_account: str | None = None,
) -> Operation[PaymentSourceList]:
    return Operation(
        HttpMethod.GET, _path("customers", customer_id, "sources"), PaymentSourceList,
        params=params,
        stripe_account=stripe_account,
    )


# ─── Accounts ────────────────────────────────────────────────────

def retrieve_account(account_id: str) -> Operation[Account]:
    return Operation(HttpMethod.GET, _path("accounts", account_id), Account)


def update_account(
    account_id: str,
    update: AccountUpdate,
    *,
    idempotency_key: IdempotencyKey | None = None,
) -> Operation[Account]:
    return Operation(
        HttpMethod.POST, _path("accounts", account_id), Account,
        params=update,
        idempotency_key=idempotency_key,
    )


# ─── Events ──────────────────────────────────────────────────────

def retrieve_event(event_id: str, *, stripe_account: str | None = None) -> Operation[Event]:
    return Operation(
        HttpMethod.GET, _path("events", event_id), Event,
        stripe_account=stripe_account,
    )


def list_events(
    params: ListParams | None = None, *, stripe_account: str | None = None,
) -> Operation[EventList]:
    return Operation(
        HttpMethod.GET, _path("events"), EventList,
        params=params,
        stripe_account=stripe_account,
    )


# ─── Files ───────────────────────────────────────────────────────

def upload_file(
    purpose: FilePurpose,
    filename: str,
    content: bytes | BinaryIO,
    *,
    stripe_account: str | None = None,
) -> Operation[FileUpload]:
    """Multipart upload to the file-upload host; sent without an idempotency key."""
    if not isinstance(content, bytes):
        # read once so every retry sends the full file
        content = content.read()
    return Operation(
        HttpMethod.POST, _path("files"), FileUpload,
        params=FileUploadInput(purpose=purpose),
        files={"file": (filename, content, "application/octet-stream")},
        idempotent=False,
        stripe_account=stripe_account,
    )

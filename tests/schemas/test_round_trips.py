"""Wire Round-Trips — decode(encode(v)) == v for every resource and input shape.

Each type is exercised twice: with every optional absent and with every
optional present.
"""

import pytest

from stripe_typed.core.codec import decode_from_wire, encode_to_wire
from stripe_typed.schemas.charge import ChargeInput, ChargeList
from stripe_typed.schemas.common import DeleteResponse
from stripe_typed.schemas.event import Event
from stripe_typed.schemas.file_upload import FileUpload
from stripe_typed.schemas.payment_source import BankAccount, BitcoinReceiver, Card, PaymentSourceList

from tests.wire_samples import (
    CREATED,
    account_tree,
    bank_account_tree,
    bitcoin_receiver_tree,
    card_tree,
    charge_tree,
    customer_tree,
    list_tree,
)

MINIMAL_CARD = {
    "id": "card_1", "object": "card", "brand": "MasterCard",
    "exp_month": 1, "exp_year": 2030, "last4": "4444", "funding": "debit",
}

FULL_CARD = card_tree(
    name="Jane Austen",
    address_line1="Ulica 1",
    address_line2="Stan 4",
    address_city="Zadar",
    address_state="Zadarska",
    address_country="HR",
    address_line1_check="unchecked",
    dynamic_last4="0005",
    tokenization_method="apple_pay",
    metadata={"wallet": "phone"},
)

MINIMAL_BANK_ACCOUNT = {
    "id": "ba_1", "object": "bank_account", "country": "US",
    "currency": "usd", "last4": "6789", "status": "verified",
}

FULL_BANK_ACCOUNT = bank_account_tree(
    fingerprint="1JWtPxqbdX5Gamtc",
    customer="cus_9T5dV6fKxk7wG",
    metadata={"purpose": "payouts"},
)

MINIMAL_BITCOIN_RECEIVER = {
    key: value for key, value in bitcoin_receiver_tree().items()
    if key not in ("email", "metadata")
}

FULL_BITCOIN_RECEIVER = bitcoin_receiver_tree(
    customer="cus_9T5dV6fKxk7wG",
    description="Receiver for Jane",
    refund_address="test_refund_1",
    used_for_payment=True,
    metadata={"order": "1001"},
)

FULL_CARD_INPUT = {
    "object": "card", "number": "4242424242424242", "exp_month": 8, "exp_year": 2027,
    "cvc": "123", "name": "Jane Austen", "address_line1": "Ulica 1", "address_line2": "Stan 4",
    "address_city": "Zadar", "address_state": "Zadarska", "address_zip": "23000",
    "address_country": "HR",
}


def _event(obj, **fields):
    return {
        "id": "evt_19Aq4E2eZvKYlo2C", "object": "event", "type": "charge.succeeded",
        "created": CREATED, "data": {"object": obj}, "livemode": False, **fields,
    }


CASES = [
    pytest.param(Card, MINIMAL_CARD, id="card-minimal"),
    pytest.param(Card, FULL_CARD, id="card-full"),
    pytest.param(BankAccount, MINIMAL_BANK_ACCOUNT, id="bank-account-minimal"),
    pytest.param(BankAccount, FULL_BANK_ACCOUNT, id="bank-account-full"),
    pytest.param(BitcoinReceiver, MINIMAL_BITCOIN_RECEIVER, id="bitcoin-receiver-minimal"),
    pytest.param(BitcoinReceiver, FULL_BITCOIN_RECEIVER, id="bitcoin-receiver-full"),
    pytest.param(Event, _event(charge_tree()), id="event-minimal"),
    pytest.param(Event, _event(
        charge_tree(), pending_webhooks=2, api_version="2016-07-06", request="req_9T5dGdaB",
        data={"object": charge_tree(), "previous_attributes": {"amount_refunded": 0}},
    ), id="event-full"),
    pytest.param(Event, _event(customer_tree(), type="customer.created"), id="event-customer"),
    pytest.param(Event, _event(account_tree(), type="account.updated"), id="event-account"),
    pytest.param(Event, _event(card_tree(), type="customer.source.created"), id="event-card"),
    pytest.param(Event, _event(bank_account_tree(), type="account.external_account.created"),
                 id="event-bank-account"),
    pytest.param(Event, _event(bitcoin_receiver_tree(), type="bitcoin.receiver.filled"),
                 id="event-bitcoin-receiver"),
    pytest.param(FileUpload, {
        "id": "file_1", "object": "file_upload", "created": CREATED,
        "purpose": "dispute_evidence", "size": 1024,
    }, id="file-upload-minimal"),
    pytest.param(FileUpload, {
        "id": "file_1", "object": "file_upload", "created": CREATED,
        "purpose": "identity_document", "size": 9863, "type": "png",
        "url": "https://files.stripe.com/files/file_1",
    }, id="file-upload-full"),
    pytest.param(DeleteResponse, {"id": "cus_1", "deleted": True}, id="delete-response"),
    pytest.param(ChargeList, list_tree([]), id="list-minimal"),
    pytest.param(ChargeList, list_tree(
        [charge_tree(), charge_tree(id="ch_2", source=bank_account_tree())],
        has_more=True, total_count=2,
    ), id="list-full"),
    pytest.param(PaymentSourceList, list_tree(
        [card_tree(), bank_account_tree(), bitcoin_receiver_tree()],
        url="/v1/customers/cus_9T5dV6fKxk7wG/sources",
    ), id="payment-source-list-mixed"),
    pytest.param(ChargeInput, {"amount": 2000, "currency": "usd", "source": "tok_visa"},
                 id="charge-input-token"),
    pytest.param(ChargeInput, {"amount": 2000, "currency": "usd", "customer": "cus_9T5dV6fKxk7wG"},
                 id="charge-input-customer"),
    pytest.param(ChargeInput, {
        "amount": 2000, "currency": "eur", "source": FULL_CARD_INPUT,
        "customer": "cus_9T5dV6fKxk7wG", "capture": False, "application_fee": 100,
        "description": "Order 1001", "destination": "acct_1032D82eZvKYlo2C",
        "receipt_email": "jane@example.com", "statement_descriptor": "ZADAR SHOP",
        "shipping": {"name": "Jane", "address": {"city": "Zadar", "country": "HR"}},
        "metadata": {"orderId": "1001"}, "expand": ["balance_transaction", "customer"],
    }, id="charge-input-card-full"),
]


@pytest.mark.parametrize(("type_", "tree"), CASES)
def test_decode_encode_round_trip(type_, tree):
    value = decode_from_wire(type_, tree)
    assert decode_from_wire(type_, encode_to_wire(value)) == value

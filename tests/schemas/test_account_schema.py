"""Account Schemas — nested legal entity decode and form flattening."""

from datetime import date

from stripe_typed.core.codec import decode_from_wire, encode_form_params, encode_to_wire
from stripe_typed.schemas.account import (
    Account,
    AccountUpdate,
    DateOfBirth,
    LegalEntity,
    LegalEntityType,
    TransferInterval,
    TransferSchedule,
    Weekday,
)
from stripe_typed.schemas.common import Address, Currency
from stripe_typed.schemas.payment_source import BankAccount

from tests.wire_samples import account_tree


def test_account_decodes_nested_values():
    account = decode_from_wire(Account, account_tree())

    assert account.default_currency is Currency.EUR
    assert account.legal_entity.type is LegalEntityType.INDIVIDUAL
    assert account.legal_entity.address.city == "Zadar"
    assert account.transfer_schedule.weekly_anchor is Weekday.FRIDAY
    assert isinstance(account.external_accounts.data[0], BankAccount)
    assert account.verification.fields_needed == []
    assert account.metadata is None


def test_all_null_date_of_birth_is_absent():
    account = decode_from_wire(Account, account_tree())
    assert account.legal_entity.dob is None


def test_date_of_birth_round_trip():
    tree = account_tree()
    tree["legal_entity"]["dob"] = {"day": 14, "month": 2, "year": 1990}
    account = decode_from_wire(Account, tree)
    assert account.legal_entity.dob.to_date() == date(1990, 2, 14)
    assert decode_from_wire(Account, encode_to_wire(account)) == account


def test_update_flattens_nested_inputs():
    update = AccountUpdate(
        legal_entity=LegalEntity(
            address=Address(line1="Ulica 1", city="Zadar"),
            type=LegalEntityType.INDIVIDUAL,
            dob=DateOfBirth.from_date(date(1990, 2, 14)),
        ),
        transfer_schedule=TransferSchedule(interval=TransferInterval.WEEKLY, weekly_anchor=Weekday.FRIDAY),
        default_currency=Currency.EUR,
        external_account="btok_9CUaz9dyL0wxGr",
    )
    assert dict(encode_form_params(update)) == {
        "legal_entity[address][line1]": "Ulica 1",
        "legal_entity[address][city]": "Zadar",
        "legal_entity[type]": "individual",
        "legal_entity[dob][day]": "14",
        "legal_entity[dob][month]": "2",
        "legal_entity[dob][year]": "1990",
        "external_account": "btok_9CUaz9dyL0wxGr",
        "default_currency": "eur",
        "transfer_schedule[interval]": "weekly",
        "transfer_schedule[weekly_anchor]": "friday",
    }


def test_empty_update_has_no_params():
    assert len(encode_form_params(AccountUpdate())) == 0

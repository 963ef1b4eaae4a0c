import dataclasses
import datetime as dt

import pytest

from simplebank.models import Account, Entry, Transfer

WHEN = dt.datetime(2024, 1, 2, 3, 4, 5, tzinfo=dt.timezone.utc)


def test_account_fields_match_json_names():
    account = Account(id=1, owner="alice", balance=100, currency="USD", created_at=WHEN)
    assert dataclasses.asdict(account) == {
        "id": 1,
        "owner": "alice",
        "balance": 100,
        "currency": "USD",
        "created_at": WHEN,
    }


def test_entry_fields_match_json_names():
    entry = Entry(id=2, account_id=1, amount=-10, created_at=WHEN)
    assert list(dataclasses.asdict(entry)) == ["id", "account_id", "amount", "created_at"]
    assert entry.amount == -10


def test_transfer_fields_match_json_names():
    transfer = Transfer(id=3, from_account_id=1, to_account_id=2, amount=10, created_at=WHEN)
    assert list(dataclasses.asdict(transfer)) == [
        "id",
        "from_account_id",
        "to_account_id",
        "amount",
        "created_at",
    ]


def test_records_compare_by_value():
    a = Account(1, "bob", 5, "EUR", WHEN)
    b = Account(1, "bob", 5, "EUR", WHEN)
    assert a == b
    assert dataclasses.replace(a, balance=6).balance == 6


def test_records_are_immutable():
    entry = Entry(1, 1, 5, WHEN)
    with pytest.raises(dataclasses.FrozenInstanceError):
        entry.amount = 7  # type: ignore[misc]
    assert entry.amount == 5
    assert entry == Entry(1, 1, 5, WHEN)
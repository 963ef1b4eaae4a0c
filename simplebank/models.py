"""Records stored by the bank: accounts, balance entries and transfers."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass


@dataclass(frozen=True)
class Account:
    """A bank account holding a balance in one currency."""

    id: int
    owner: str
    balance: int
    currency: str
    created_at: dt.datetime


@dataclass(frozen=True)
class Entry:
    """A change to one account's balance; the amount may be negative or positive."""

    id: int
    account_id: int
    amount: int
    created_at: dt.datetime


@dataclass(frozen=True)
class Transfer:
    """A movement of money between two accounts; the amount must be positive."""

    id: int
    from_account_id: int
    to_account_id: int
    amount: int
    created_at: dt.datetime
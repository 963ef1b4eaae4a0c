"""Typed queries over the accounts, entries and transfers tables.

The queries use the ``?`` parameter style of :mod:`sqlite3` and do not commit:
give them a connection in autocommit mode, or let the caller manage the
transaction.
"""

from __future__ import annotations

import datetime as dt
from typing import Any, Callable, Sequence, TypeVar

from .models import Account, Entry, Transfer

T = TypeVar("T")

_ACCOUNT_COLUMNS = "id, owner, balance, currency, created_at"
_ENTRY_COLUMNS = "id, account_id, amount, created_at"
_TRANSFER_COLUMNS = "id, from_account_id, to_account_id, amount, created_at"


class NotFoundError(LookupError):
    """Raised when a query that must return a row finds none."""

    def __init__(self, message: str = "no rows in result set") -> None:
        super().__init__(message)


def _now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def _timestamp(value: Any) -> dt.datetime:
    if isinstance(value, dt.datetime):
        return value
    return dt.datetime.fromisoformat(value)


def _account(row: Sequence[Any]) -> Account:
    id_, owner, balance, currency, created_at = row
    return Account(id_, owner, balance, currency, _timestamp(created_at))


def _entry(row: Sequence[Any]) -> Entry:
    id_, account_id, amount, created_at = row
    return Entry(id_, account_id, amount, _timestamp(created_at))


def _transfer(row: Sequence[Any]) -> Transfer:
    id_, from_id, to_id, amount, created_at = row
    return Transfer(id_, from_id, to_id, amount, _timestamp(created_at))


class Queries:
    """Runs the bank's queries over a database connection."""

    def __init__(self, conn: Any) -> None:
        self.conn = conn

    def with_connection(self, conn: Any) -> "Queries":
        """Return the same queries bound to another connection."""
        return Queries(conn)

    def _execute(self, sql: str, params: Sequence[Any] = ()) -> Any:
        cursor = self.conn.cursor()
        cursor.execute(sql, tuple(params))
        return cursor

    def _one(self, sql: str, params: Sequence[Any], build: Callable[[Sequence[Any]], T]) -> T:
        row = self._execute(sql, params).fetchone()
        if row is None:
            raise NotFoundError()
        return build(row)

    def _many(self, sql: str, params: Sequence[Any], build: Callable[[Sequence[Any]], T]) -> list[T]:
        return [build(row) for row in self._execute(sql, params).fetchall()]

    def _update_one(self, sql: str, params: Sequence[Any]) -> None:
        if self._execute(sql, params).rowcount == 0:
            raise NotFoundError()

    # accounts

    def add_account_balance(self, account_id: int, amount: int) -> Account:
        """Add amount to an account's balance and return the updated account."""
        self._update_one(
            "UPDATE accounts SET balance = balance + ? WHERE id = ?", (amount, account_id)
        )
        return self.get_account(account_id)

    def create_account(self, owner: str, balance: int, currency: str) -> Account:
        """Insert a new account and return it."""
        cursor = self._execute(
            "INSERT INTO accounts (owner, balance, currency, created_at) VALUES (?, ?, ?, ?)",
            (owner, balance, currency, _now().isoformat()),
        )
        return self.get_account(cursor.lastrowid)

    def delete_account(self, account_id: int) -> None:
        """Delete an account; deleting a missing account is not an error."""
        self._execute("DELETE FROM accounts WHERE id = ?", (account_id,))

    def get_account(self, account_id: int) -> Account:
        """Return the account with the given id."""
        return self._one(
            f"SELECT {_ACCOUNT_COLUMNS} FROM accounts WHERE id = ? LIMIT 1",
            (account_id,),
            _account,
        )

    def get_account_for_update(self, account_id: int) -> Account:
        """Return an account that is about to be changed in the current transaction."""
        return self.get_account(account_id)

    def list_accounts(self, limit: int, offset: int) -> list[Account]:
        """Return accounts ordered by id, one page at a time."""
        return self._many(
            f"SELECT {_ACCOUNT_COLUMNS} FROM accounts ORDER BY id LIMIT ? OFFSET ?",
            (limit, offset),
            _account,
        )

    def update_account(self, account_id: int, balance: int) -> Account:
        """Set an account's balance and return the updated account."""
        self._update_one("UPDATE accounts SET balance = ? WHERE id = ?", (balance, account_id))
        return self.get_account(account_id)

    # entries

    def create_entry(self, account_id: int, amount: int) -> Entry:
        """Insert a balance entry for an account and return it."""
        cursor = self._execute(
            "INSERT INTO entries (account_id, amount, created_at) VALUES (?, ?, ?)",
            (account_id, amount, _now().isoformat()),
        )
        return self.get_entry(cursor.lastrowid)

    def get_entry(self, entry_id: int) -> Entry:
        """Return the entry with the given id."""
        return self._one(
            f"SELECT {_ENTRY_COLUMNS} FROM entries WHERE id = ? LIMIT 1", (entry_id,), _entry
        )

    def list_entries(self, account_id: int, limit: int, offset: int) -> list[Entry]:
        """Return an account's entries ordered by id, one page at a time."""
        return self._many(
            f"SELECT {_ENTRY_COLUMNS} FROM entries WHERE account_id = ? "
            "ORDER BY id LIMIT ? OFFSET ?",
            (account_id, limit, offset),
            _entry,
        )

    # transfers

    def create_transfer(self, from_account_id: int, to_account_id: int, amount: int) -> Transfer:
        """Insert a transfer record and return it."""
        cursor = self._execute(
            "INSERT INTO transfers (from_account_id, to_account_id, amount, created_at) "
            "VALUES (?, ?, ?, ?)",
            (from_account_id, to_account_id, amount, _now().isoformat()),
        )
        return self.get_transfer(cursor.lastrowid)

    def get_transfer(self, transfer_id: int) -> Transfer:
        """Return the transfer with the given id."""
        return self._one(
            f"SELECT {_TRANSFER_COLUMNS} FROM transfers WHERE id = ? LIMIT 1",
            (transfer_id,),
            _transfer,
        )

    def list_transfers(
        self, from_account_id: int, to_account_id: int, limit: int, offset: int
    ) -> list[Transfer]:
        """Return transfers leaving from_account_id or reaching to_account_id, by id."""
        return self._many(
            f"SELECT {_TRANSFER_COLUMNS} FROM transfers "
            "WHERE from_account_id = ? OR to_account_id = ? "
            "ORDER BY id LIMIT ? OFFSET ?",
            (from_account_id, to_account_id, limit, offset),
            _transfer,
        )
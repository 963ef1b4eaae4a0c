"""Transactions over the bank's queries, and money transfers between accounts."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator

from .models import Account, Entry, Transfer
from .queries import Queries


@dataclass(frozen=True)
class TransferResult:
    """Everything a transfer creates or changes."""

    transfer: Transfer
    from_account: Account
    to_account: Account
    from_entry: Entry
    to_entry: Entry


class Store(Queries):
    """Runs single queries and multi-query transactions over one connection.

    The connection should be in autocommit mode (for :mod:`sqlite3`,
    ``isolation_level=None``) so that each transaction is opened explicitly.
    Transactions on one store run one at a time; transactions may not nest.
    """

    def __init__(self, conn: Any) -> None:
        super().__init__(conn)
        self._lock = threading.RLock()

    @contextmanager
    def transaction(self) -> Iterator[Queries]:
        """Open a transaction and yield queries bound to it.

        The transaction commits when the block ends normally and rolls back
        when it raises.
        """
        with self._lock:
            self.conn.cursor().execute("BEGIN")
            try:
                yield self.with_connection(self.conn)
            except BaseException as exc:
                try:
                    self.conn.rollback()
                except Exception as rollback_exc:
                    raise RuntimeError(
                        f"tx error: {exc}, rb error: {rollback_exc}"
                    ) from exc
                raise
            self.conn.commit()

    def transfer(self, from_account_id: int, to_account_id: int, amount: int) -> TransferResult:
        """Move amount from one account to another in a single transaction.

        Records the transfer, adds an entry to each account and updates both
        balances. Balances are always updated lower id first, so that two
        opposite transfers cannot lock each other out.
        """
        with self.transaction() as q:
            record = q.create_transfer(from_account_id, to_account_id, amount)
            from_entry = q.create_entry(from_account_id, -amount)
            to_entry = q.create_entry(to_account_id, amount)
            if from_account_id < to_account_id:
                from_account, to_account = _add_money(
                    q, from_account_id, -amount, to_account_id, amount
                )
            else:
                to_account, from_account = _add_money(
                    q, to_account_id, amount, from_account_id, -amount
                )
        return TransferResult(
            transfer=record,
            from_account=from_account,
            to_account=to_account,
            from_entry=from_entry,
            to_entry=to_entry,
        )


def _add_money(
    q: Queries, account_id1: int, amount1: int, account_id2: int, amount2: int
) -> tuple[Account, Account]:
    account1 = q.add_account_balance(account_id1, amount1)
    account2 = q.add_account_balance(account_id2, amount2)
    return account1, account2
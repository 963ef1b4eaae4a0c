# simplebank

A small bank ledger. It keeps accounts, the entries that change their
balances, and transfers between accounts. Each transfer is written in a
single database transaction. The queries are written for `sqlite3`
connections (`?` parameters), and the migration tool works on SQLite
databases.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## The library

- `simplebank.models` defines the frozen dataclasses `Account`, `Entry` and
  `Transfer`. Each has an `id` and a `created_at` timestamp.
- `simplebank.queries.Queries` wraps a database connection. It has one method
  for each query: `create_account`, `get_account`, `get_account_for_update`,
  `list_accounts`, `update_account`, `add_account_balance`, `delete_account`,
  `create_entry`, `get_entry`, `list_entries`, `create_transfer`,
  `get_transfer` and `list_transfers`. The list methods take a `limit` and an
  `offset` and return rows ordered by id. A lookup or update that finds no row
  raises `NotFoundError` (a `LookupError`); deleting a missing account does
  not. The queries do not commit: use a connection in autocommit mode, or
  manage the transaction yourself. `with_connection(conn)` returns the same
  queries bound to another connection.
- `simplebank.store.Store` is a `Queries` with transactions.
  `Store.transaction()` is a context manager that opens a transaction, yields
  queries bound to it, commits when the block ends normally and rolls back
  when it raises. Transactions on one store run one at a time and may not
  nest. `transfer(from_account_id, to_account_id, amount)` records the
  transfer, writes a debit entry and a credit entry, and updates both balances
  in one transaction, returning a `TransferResult` with `transfer`,
  `from_account`, `to_account`, `from_entry` and `to_entry`. Balances are
  always updated lower account id first. The amount is not checked against
  the balance.
- `simplebank.random` makes sample data: `random_int`, `random_string`,
  `random_owner`, `random_money` (0 to 1000) and `random_currency` (`USD`,
  `EUR` or `IDR`).

The tables are not created by the library. A schema that fits the queries:

```python
import sqlite3

from simplebank.store import Store

conn = sqlite3.connect("bank.db", isolation_level=None)
conn.executescript("""
CREATE TABLE accounts (
    id INTEGER PRIMARY KEY,
    owner TEXT NOT NULL,
    balance INTEGER NOT NULL,
    currency TEXT NOT NULL,
    created_at TEXT NOT NULL
);
CREATE TABLE entries (
    id INTEGER PRIMARY KEY,
    account_id INTEGER NOT NULL REFERENCES accounts (id),
    amount INTEGER NOT NULL,
    created_at TEXT NOT NULL
);
CREATE TABLE transfers (
    id INTEGER PRIMARY KEY,
    from_account_id INTEGER NOT NULL REFERENCES accounts (id),
    to_account_id INTEGER NOT NULL REFERENCES accounts (id),
    amount INTEGER NOT NULL,
    created_at TEXT NOT NULL
);
""")

store = Store(conn)
alice = store.create_account("alice", 100, "USD")
bob = store.create_account("bob", 50, "USD")

result = store.transfer(alice.id, bob.id, 10)
print(result.from_account.balance, result.to_account.balance)  # 90 60
```

## Migrations

The `simplebank-migrate` command manages SQL migration files in
`db/migration`, relative to the current directory. It reads `DB_URL` from a
`.env` file in the current directory; without that file it prints an error
and exits with status 1. `DB_URL` is a SQLite file path, optionally prefixed
with `sqlite://` or `sqlite3://`; other URL schemes are refused.

```
simplebank-migrate --action create --name add_accounts
simplebank-migrate --action up
simplebank-migrate --action up1
simplebank-migrate --action down1
simplebank-migrate --action down
```

The options may also be written with one dash (`-action`, `-name`).

`create` writes a pair of files, `NNNNNN_<name>.up.sql` and
`NNNNNN_<name>.down.sql`, each holding a single comment line. The number is
one higher than the highest number already in the directory, zero-padded to
six digits. `up` applies every pending migration and `down` reverts every
applied one; `up1` and `down1` move one step forward or back. Any other
action is rejected.

The applied version is kept in a `schema_migrations` table. A migration that
fails leaves the version marked dirty, and further runs refuse to continue
until it is fixed by hand.

From Python, `simplebank.migrate.Migrator(migration_dir, conn)` offers `up()`,
`down()` and `steps(n)`, each returning how many migrations it ran, and a
`version` property. `create_migration(name, migration_dir)` and
`next_migration_id(migration_dir)` do what `create` does.

## What it does not do

- It ships no schema or migration files; the tables must be created by you.
- It works with SQLite only; there is no support for other database servers.
- There is no server, HTTP API or user interface, and no checks on
  currencies, balances or transfer amounts.
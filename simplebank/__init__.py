"""A small bank ledger of accounts, entries and transfers on SQLite, with schema migrations."""

__version__ = "0.1.0"
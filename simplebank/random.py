"""Random test data: integers, strings, owners, money amounts and currencies."""

from __future__ import annotations

import random
import string

ALPHABET = string.ascii_lowercase
CURRENCIES = ("USD", "EUR", "IDR")


def random_int(min_value: int, max_value: int) -> int:
    """Return a random integer between min_value and max_value, both included."""
    return random.randint(min_value, max_value)


def random_string(n: int) -> str:
    """Return a random string of n lower-case letters."""
    return "".join(random.choices(ALPHABET, k=max(n, 0)))


def random_owner() -> str:
    """Return a random six-letter owner name."""
    return random_string(6)


def random_money() -> int:
    """Return a random amount of money between 0 and 1000."""
    return random_int(0, 1000)


def random_currency() -> str:
    """Return one of the supported currency codes at random."""
    return random.choice(CURRENCIES)
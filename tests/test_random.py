import pytest

from simplebank.random import (
    random_currency,
    random_int,
    random_money,
    random_owner,
    random_string,
)


def test_random_int_stays_within_bounds():
    values = [random_int(-3, 7) for _ in range(500)]
    assert all(-3 <= v <= 7 for v in values)


def test_random_int_single_value_range():
    assert random_int(5, 5) == 5


def test_random_int_reaches_both_ends():
    values = {random_int(0, 2) for _ in range(500)}
    assert values == {0, 1, 2}


def test_random_int_rejects_empty_range():
    with pytest.raises(ValueError):
        random_int(10, 1)


@pytest.mark.parametrize("n", [0, 1, 6, 32])
def test_random_string_length(n):
    assert len(random_string(n)) == n


def test_random_string_negative_length_is_empty():
    assert random_string(-4) == ""


def test_random_string_uses_lowercase_letters():
    text = random_string(200)
    assert set(text) <= set("abcdefghijklmnopqrstuvwxyz")


def test_random_owner_is_six_letters():
    owner = random_owner()
    assert len(owner) == 6
    assert owner.isalpha() and owner.islower()


def test_random_money_range():
    values = [random_money() for _ in range(500)]
    assert all(0 <= v <= 1000 for v in values)


def test_random_currency_is_supported():
    seen = {random_currency() for _ in range(300)}
    assert seen <= {"USD", "EUR", "IDR"}
    assert seen == {"USD", "EUR", "IDR"}
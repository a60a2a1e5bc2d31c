from decimal import Decimal

import pytest

from revenue_bot.services.formatting import cents_to_dollars, format_currency, format_dollars, format_expense


@pytest.mark.parametrize("cents, expected", [
    (12345, "$123.45"),
    (0, "$0.00"),
    (5, "$0.05"),
    (100, "$1.00"),
    (123456789, "$1234567.89"),
])
def test_format_currency(cents, expected):
    assert format_currency(cents) == expected


def test_cents_to_dollars_is_exact():
    assert cents_to_dollars(12345) == Decimal("123.45")
    assert cents_to_dollars(1) == Decimal("0.01")


def test_format_dollars_rounds_half_up():
    assert format_dollars(Decimal("10.005")) == "$10.01"
    assert format_dollars(7) == "$7.00"


def test_format_dollars_negative():
    assert format_dollars(Decimal("-1.5")) == "$-1.50"


@pytest.mark.parametrize("amount", [Decimal("50"), Decimal("-50"), 50])
def test_format_expense_is_always_an_outflow(amount):
    assert format_expense(amount) == "-$50.00"

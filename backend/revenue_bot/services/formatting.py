"""Currency rendering shared by every command.

Amounts are rendered with a ``$`` prefix and exactly two decimals, with no
thousands grouping. Stripe amounts arrive in cents; expenses are stored in
dollars.
"""
from decimal import ROUND_HALF_UP, Decimal

CENTS = Decimal("0.01")


def cents_to_dollars(minor_units: int) -> Decimal:
    return Decimal(minor_units) / 100


def format_dollars(amount: Decimal | int) -> str:
    value = Decimal(amount).quantize(CENTS, rounding=ROUND_HALF_UP)
    return f"${value:.2f}"


def format_currency(minor_units: int) -> str:
    """``12345`` → ``$123.45``."""
    return format_dollars(cents_to_dollars(minor_units))


def format_expense(amount: Decimal | int) -> str:
    """An expense rendered as an outflow, e.g. ``-$50.00``."""
    return f"-{format_dollars(abs(Decimal(amount)))}"

import os
from decimal import Decimal

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("SECRET_KEY", "test-secret")

from tapify.core.money import format_money, to_decimal  # noqa: E402


def test_format_money_groups_thousands_and_rounds_half_up():
    assert format_money(Decimal("1234.5")) == "$1,234.50"
    assert format_money("0.005") == "$0.01"
    assert format_money(1000000) == "$1,000,000.00"


def test_format_money_negative_and_invalid_values():
    assert format_money(Decimal("-12.3")) == "-$12.30"
    assert format_money(None) == "$0.00"
    assert format_money("not money") == "$0.00"
    assert format_money(True) == "$0.00"


def test_to_decimal_keeps_cents_exact():
    assert to_decimal("10.10") + to_decimal("20.20") == Decimal("30.30")
    assert to_decimal(None) == Decimal("0")

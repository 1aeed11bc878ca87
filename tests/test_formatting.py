from datetime import date
from decimal import Decimal

import pytest

from utils.formatting import format_bill_date, format_percent, format_rupee, round_money


@pytest.mark.parametrize(
    "amount, expected",
    [
        (Decimal("0"), "₹0.00"),
        (Decimal("90"), "₹90.00"),
        (Decimal("999.999"), "₹1,000.00"),
        (Decimal("1800"), "₹1,800.00"),
        (Decimal("123456"), "₹1,23,456.00"),
        (Decimal("1234567.5"), "₹12,34,567.50"),
        (Decimal("-2500.25"), "-₹2,500.25"),
    ],
)
def test_format_rupee(amount, expected):
    assert format_rupee(amount) == expected


def test_round_money_half_up():
    assert round_money(Decimal("2.345")) == Decimal("2.35")
    assert round_money(Decimal("2.344")) == Decimal("2.34")


def test_format_percent_drops_trailing_zeros():
    assert format_percent(Decimal("5")) == "5"
    assert format_percent(Decimal("12.50")) == "12.5"
    assert format_percent(Decimal("10.0")) == "10"


def test_format_bill_date():
    assert format_bill_date(date(2025, 3, 7)) == "07/03/2025"

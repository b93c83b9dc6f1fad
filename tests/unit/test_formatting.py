from decimal import Decimal

import pytest

from piggy.utils.formatting import format_currency, format_percentage


@pytest.mark.parametrize(
    "amount,expected",
    [
        (1234, "₹1,234"),
        (123456, "₹1,23,456"),
        (0, "₹0"),
        (999, "₹999"),
        (1000, "₹1,000"),
        (12345678, "₹1,23,45,678"),
        (Decimal("999.5"), "₹1,000"),
        (Decimal("1234.49"), "₹1,234"),
        (-1500, "-₹1,500"),
        (Decimal("1e30"), "₹10," + "00," * 13 + "000"),
    ],
)
def test_format_currency(amount, expected):
    assert format_currency(amount) == expected


@pytest.mark.parametrize(
    "value,expected",
    [
        (5.67, "+5.67%"),
        (-3.45, "-3.45%"),
        (0, "+0.00%"),
        (Decimal("-0.001"), "+0.00%"),
        (Decimal("12.345"), "+12.35%"),
        (100, "+100.00%"),
        (Decimal("1e30"), "+1" + "0" * 30 + ".00%"),
    ],
)
def test_format_percentage(value, expected):
    assert format_percentage(value) == expected

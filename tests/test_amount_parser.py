"""Tests for amount parsing and formatting."""

from decimal import Decimal

import pytest

from ledgerline.utils.amount_parser import format_money, parse_amount, parse_amount_or_zero, to_cents


@pytest.mark.parametrize(
    "text,expected",
    [
        ("123.45", Decimal("123.45")),
        ("$123.45", Decimal("123.45")),
        ("-123.45", Decimal("-123.45")),
        ("-$123.45", Decimal("-123.45")),
        ("1,234.56", Decimal("1234.56")),
        ("(123.45)", Decimal("-123.45")),
        ("($1,000.00)", Decimal("-1000.00")),
        ("  42 ", Decimal("42")),
        ("$-4.50", Decimal("-4.50")),
        ("9999999999.99", Decimal("9999999999.99")),
        ("0e999999999", Decimal("0")),
    ],
)
def test_parse_amount(text, expected):
    """Test supported amount formats."""
    assert parse_amount(text) == expected


@pytest.mark.parametrize(
    "text", ["", "   ", "abc", "1.2.3", "NaN", "Infinity", "1e999999999", "-1e999999999", "10000000000"]
)
def test_parse_amount_invalid(text):
    """Test unparseable amounts raise ValueError."""
    with pytest.raises(ValueError):
        parse_amount(text)


def test_parse_amount_or_zero():
    """Test the lenient variant used by the statement parser."""
    assert parse_amount_or_zero("junk") == Decimal("0")
    assert parse_amount_or_zero("$5") == Decimal("5")


def test_to_cents_rounds_half_up():
    assert to_cents(Decimal("1.005")) == Decimal("1.01")
    assert to_cents(Decimal("2")) == Decimal("2.00")


def test_format_money():
    assert format_money(Decimal("1234.5")) == "$1,234.50"
    assert format_money(Decimal("-4.5")) == "-$4.50"
    assert format_money(Decimal("0")) == "$0.00"

"""Tests for amount parsing and formatting."""

from decimal import Decimal

import pytest

from famfin.utils.amount_parser import format_currency, format_number, parse_amount


@pytest.mark.parametrize(
    "text,expected",
    [
        ("1.234,56", Decimal("1234.56")),
        ("R$ 1.234,56", Decimal("1234.56")),
        ("-1.000,00", Decimal("-1000.00")),
        ("+50,5", Decimal("50.5")),
        ("(123,45)", Decimal("-123.45")),
        ("1234.56", Decimal("1234.56")),
        ("  89,90 ", Decimal("89.90")),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "abc", "NaN", "1,2,3"])
def test_parse_amount_rejects_garbage(text):
    with pytest.raises(ValueError):
        parse_amount(text)


def test_format_number_uses_brazilian_separators():
    assert format_number(Decimal("1234567.891")) == "1.234.567,89"
    assert format_number(Decimal("0")) == "0,00"
    assert format_number(Decimal("-0.5")) == "-0,50"


def test_format_number_rounds_half_up():
    assert format_number(Decimal("2.345")) == "2,35"


def test_format_currency():
    assert format_currency(Decimal("1234.5")) == "R$ 1.234,50"
    assert format_currency(Decimal("-10")) == "-R$ 10,00"

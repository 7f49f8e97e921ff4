import random
from decimal import Decimal

import pytest

from backend.app.core.errors import InvalidNumber
from backend.app.services.numbers import (
    compute_tax,
    format_currency,
    format_number,
    from_target_script_digits,
    normalize_decimal,
    parse_formatted_number,
    to_decimal,
    to_target_script_currency,
    to_target_script_digits,
)


@pytest.mark.parametrize(
    "value,expected",
    [
        (0, "0"),
        (999, "999"),
        (1000, "1,000"),
        (100000, "1,00,000"),
        (403000, "4,03,000"),
        (12345678, "1,23,45,678"),
        (Decimal("164983.5"), "1,64,983.5"),
        (-1500, "-1,500"),
    ],
)
def test_format_number_indian_grouping(value, expected):
    assert format_number(value) == expected


def test_format_currency_prefixes_glyph():
    assert format_currency(194700) == "₹ 1,94,700"
    assert format_currency(-250) == "-₹ 250"


@pytest.mark.parametrize("bad", [None, True, "abc", "", float("nan"), float("inf"), "Infinity"])
def test_non_finite_or_malformed_input_is_rejected(bad):
    with pytest.raises(InvalidNumber):
        to_decimal(bad)
    with pytest.raises(InvalidNumber):
        format_number(bad)


def test_parse_formatted_number_reverses_formatting():
    assert parse_formatted_number("₹ 1,94,700") == Decimal("194700")
    assert parse_formatted_number("1,64,983.5") == Decimal("164983.5")
    assert parse_formatted_number("૧,૦૦,૦૦૦") == Decimal("100000")


def test_parse_formatted_number_rejects_garbage():
    with pytest.raises(InvalidNumber):
        parse_formatted_number("₹ ")
    with pytest.raises(InvalidNumber):
        parse_formatted_number("12 apples")


def test_compute_tax_uses_percentage_rate():
    assert compute_tax(165000) == Decimal("29700")
    assert compute_tax(Decimal("100"), 5) == Decimal("5")
    assert compute_tax(0) == 0


def test_target_script_digits():
    assert to_target_script_digits(2024) == "૨૦૨૪"
    assert to_target_script_digits("Qty 12") == "Qty ૧૨"
    assert from_target_script_digits("૨૦૨૪") == "2024"
    assert to_target_script_currency(1000) == "₹ ૧,૦૦૦"


def test_target_script_digits_rejects_non_finite():
    with pytest.raises(InvalidNumber):
        to_target_script_digits(float("nan"))


def test_normalize_decimal_never_uses_exponent():
    assert str(normalize_decimal(Decimal("164000.0000"))) == "164000"
    assert str(normalize_decimal(Decimal("33.3300"))) == "33.33"
    assert str(normalize_decimal(Decimal("0.0000"))) == "0"


@pytest.mark.parametrize("base", [0, 1, "0.05", "99.99", 165000, "1234567.891", "-250.5", Decimal("0.0001")])
def test_compute_tax_is_linear_in_base(base):
    assert compute_tax(to_decimal(base) * 2, 18) == 2 * compute_tax(base, 18)
    assert compute_tax(base, 18) + compute_tax(base, 18) == compute_tax(to_decimal(base) * 2)


@pytest.mark.parametrize(
    "value",
    [0, 5, "0.05", "0.5", 999, 1000, "1234.5", 100000, "12345678.09", "-0.05", -250, "-1234567.891", 0.25],
)
def test_format_currency_parses_back_to_the_same_value(value):
    assert parse_formatted_number(format_currency(value)) == to_decimal(value)
    assert parse_formatted_number(to_target_script_currency(value)) == to_decimal(value)


@pytest.mark.parametrize("seed", range(6))
def test_format_currency_round_trip_over_generated_amounts(seed):
    rng = random.Random(seed)
    for _ in range(25):
        value = Decimal(rng.randint(-10**12, 10**12)) / Decimal(10 ** rng.randint(0, 4))
        assert parse_formatted_number(format_currency(value)) == value

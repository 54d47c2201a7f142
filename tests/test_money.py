"""Tests for minor-unit amounts and their decimal wire form."""

import pytest

from adyen_payments import Amount, ValidationError
from adyen_payments.core.money import currency_exponent


@pytest.mark.parametrize(
    "currency, exponent",
    [("EUR", 2), ("usd", 2), ("JPY", 0), ("KRW", 0), ("KWD", 3), ("BHD", 3)],
)
def test_currency_exponent(currency, exponent):
    assert currency_exponent(currency) == exponent


@pytest.mark.parametrize(
    "currency, value, text",
    [
        ("JPY", 100, "100"),
        ("EUR", 1050, "10.50"),
        ("EUR", 5, "0.05"),
        ("EUR", 0, "0.00"),
        ("KWD", 1234, "1.234"),
    ],
)
def test_decimal_string_round_trip(currency, value, text):
    amount = Amount(currency, value)
    assert amount.to_decimal_string() == text
    assert Amount.from_decimal_string(currency, text) == amount


def test_parsing_accepts_less_precise_text():
    assert Amount.from_decimal_string("EUR", "10.5").value == 1050
    assert Amount.from_decimal_string("EUR", "10").value == 1000


@pytest.mark.parametrize("currency, text", [("EUR", "10.505"), ("JPY", "1.5"), ("EUR", "ten")])
def test_parsing_rejects_precision_loss_and_garbage(currency, text):
    with pytest.raises(ValueError):
        Amount.from_decimal_string(currency, text)


def test_currency_is_normalised_to_upper_case():
    assert Amount("eur", 1).currency == "EUR"


@pytest.mark.parametrize("value", [-1, 10.5, "100", True, None])
def test_value_must_be_non_negative_integer(value):
    with pytest.raises(ValidationError) as excinfo:
        Amount("EUR", value)
    assert excinfo.value.fields == ("amount.value",)


@pytest.mark.parametrize("currency", ["EU", "EURO", "12A", ""])
def test_currency_must_be_three_letters(currency):
    with pytest.raises(ValidationError) as excinfo:
        Amount(currency, 100)
    assert excinfo.value.fields == ("amount.currency",)


def test_coerce_from_mapping():
    assert Amount.coerce({"currency": "GBP", "value": 250}) == Amount("GBP", 250)


def test_coerce_names_missing_keys():
    with pytest.raises(ValidationError) as excinfo:
        Amount.coerce({"currency": "GBP"})
    assert excinfo.value.fields == ("amount.value",)

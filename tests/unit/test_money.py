"""Tests for the Money value object and decimal coercion."""

from decimal import Decimal

import pytest

from ledger_kernel.domain.values import Money, normalize_currency_code, to_decimal


class TestToDecimal:
    def test_float_goes_through_str(self):
        assert to_decimal(0.1) == Decimal("0.1")

    def test_int_and_str(self):
        assert to_decimal(5) == Decimal("5")
        assert to_decimal("12.30") == Decimal("12.30")

    def test_decimal_returned_as_is(self):
        value = Decimal("1.000")
        assert to_decimal(value) is value

    @pytest.mark.parametrize("bad", ["abc", True, None])
    def test_rejects_non_numbers(self, bad):
        with pytest.raises(ValueError):
            to_decimal(bad)

    def test_error_names_field(self):
        with pytest.raises(ValueError, match="credit_limit"):
            to_decimal("x", field="credit_limit")


class TestCurrencyCode:
    def test_normalized(self):
        assert normalize_currency_code(" eur ") == "EUR"

    @pytest.mark.parametrize("bad", ["EU", "EURO", "E1R", "", None])
    def test_rejected(self, bad):
        with pytest.raises(ValueError):
            normalize_currency_code(bad)


class TestMoney:
    """Tests for Money."""

    def test_of(self):
        money = Money.of("100.50", "usd")
        assert money.amount == Decimal("100.50")
        assert money.currency == "USD"

    def test_zero_and_sign(self):
        assert Money.zero("EUR").is_zero
        assert (-Money.of("1", "EUR")).is_negative

    def test_addition_and_subtraction(self):
        a = Money.of("10.25", "USD")
        b = Money.of("0.75", "USD")
        assert (a + b).amount == Decimal("11.00")
        assert (a - b).amount == Decimal("9.50")

    def test_mixed_currency_arithmetic_rejected(self):
        with pytest.raises(ValueError, match="different currencies"):
            Money.of("1", "USD") + Money.of("1", "EUR")

    def test_mixed_currency_comparison_rejected(self):
        with pytest.raises(ValueError):
            Money.of("1", "USD") < Money.of("1", "EUR")

    def test_comparison(self):
        assert Money.of("1", "USD") < Money.of("2", "USD")
        assert Money.of("2", "USD") <= Money.of("2", "USD")

    def test_round_to_minor_units(self):
        assert Money.of("1.005", "USD").round().amount == Decimal("1.01")
        assert Money.of("1234.5", "JPY").round().amount == Decimal("1235")

    def test_round_to_explicit_places(self):
        assert Money.of("1.23456", "USD").round(3).amount == Decimal("1.235")

    def test_str(self):
        assert str(Money.of("92.36", "EUR")) == "92.36 EUR"

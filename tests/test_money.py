"""
Tests for Money and Currency

Money is exact decimal arithmetic tagged with a currency; these tests pin
down construction, arithmetic, rounding and display formatting.
"""

from decimal import Decimal
from fractions import Fraction

import pytest

from budget_tracker.models import Currency, Money, MoneyError, MoneyErrorCode


class TestCurrency:
    """Tests for the currency enum."""

    def test_codes_and_symbols(self):
        assert Currency("USD") is Currency.USD
        assert Currency.EUR.code == "EUR"
        assert Currency.GBP.symbol == "£"
        assert Currency.USD.display_name == "US Dollar"

    def test_yen_has_no_minor_unit(self):
        assert Currency.JPY.decimal_places == 0
        assert Currency.USD.decimal_places == 2
        assert Currency.JPY.quantum == Decimal("1")
        assert Currency.USD.quantum == Decimal("0.01")

    def test_str_is_code(self):
        assert str(Currency.CHF) == "CHF"


class TestMoneyConstruction:
    """Construction and conversion of amounts."""

    def test_from_string_is_exact(self):
        money = Money.of("19.99", Currency.USD)
        assert money.amount == Decimal("19.99")

    def test_float_goes_through_repr(self):
        # Decimal(0.1) would carry binary noise
        assert Money.of(0.1, Currency.USD).amount == Decimal("0.1")

    def test_fraction(self):
        assert Money.of(Fraction(1, 4), Currency.USD).amount == Decimal("0.25")

    def test_equal_regardless_of_scale(self):
        assert Money.of("50", Currency.USD) == Money.of("50.00", Currency.USD)

    def test_different_currency_not_equal(self):
        assert Money.of(50, Currency.USD) != Money.of(50, Currency.EUR)

    @pytest.mark.parametrize("bad", ["abc", "NaN", "Infinity", True, None, [1]])
    def test_rejects_invalid_amounts(self, bad):
        with pytest.raises(MoneyError) as exc_info:
            Money.of(bad, Currency.USD)
        assert exc_info.value.code == MoneyErrorCode.INVALID_AMOUNT

    def test_negative_allowed_but_detectable(self):
        money = Money.of("-5", Currency.USD)
        assert money.is_negative
        with pytest.raises(MoneyError) as exc_info:
            money.validate_non_negative()
        assert exc_info.value.code == MoneyErrorCode.NEGATIVE_AMOUNT

    def test_zero(self):
        zero = Money.zero(Currency.EUR)
        assert zero.is_zero
        assert zero.currency == Currency.EUR

    def test_immutable(self):
        money = Money.of(10, Currency.USD)
        with pytest.raises(Exception):
            money.amount = Decimal("20")


class TestMoneyArithmetic:
    """Arithmetic preserves currency and refuses to mix currencies."""

    def test_add_and_subtract(self):
        a = Money.of("10.50", Currency.USD)
        b = Money.of("2.25", Currency.USD)
        assert a.add(b).amount == Decimal("12.75")
        assert a.subtract(b).amount == Decimal("8.25")

    def test_add_currency_mismatch(self):
        with pytest.raises(MoneyError) as exc_info:
            Money.of(1, Currency.USD).add(Money.of(1, Currency.EUR))
        error = exc_info.value
        assert error.code == MoneyErrorCode.CURRENCY_MISMATCH
        assert error.details["currencies"] == (Currency.USD, Currency.EUR)
        assert "USD" in error.message and "EUR" in error.message

    def test_compare_currency_mismatch(self):
        with pytest.raises(MoneyError):
            Money.of(1, Currency.USD).is_greater_than(Money.of(1, Currency.GBP))

    def test_multiply_and_divide(self):
        money = Money.of(100, Currency.USD)
        assert money.multiply(Decimal("1.5")).amount == Decimal("150")
        assert money.divide(4).amount == Decimal("25")

    def test_divide_by_zero(self):
        with pytest.raises(MoneyError) as exc_info:
            Money.of(100, Currency.USD).divide(0)
        assert exc_info.value.code == MoneyErrorCode.DIVISION_BY_ZERO

    def test_comparisons(self):
        small = Money.of(1, Currency.USD)
        large = Money.of(2, Currency.USD)
        assert large.is_greater_than(small)
        assert small.is_less_than(large)
        assert not small.is_greater_than(small)

    def test_negated_and_absolute(self):
        money = Money.of("3.50", Currency.USD)
        assert money.negated().amount == Decimal("-3.50")
        assert money.negated().absolute_value == money

    def test_total_of(self):
        values = [Money.of(v, Currency.USD) for v in ("1.10", "2.20", "3.30")]
        assert Money.total_of(values, Currency.USD).amount == Decimal("6.60")
        assert Money.total_of([], Currency.USD).is_zero

    def test_total_of_mismatch(self):
        with pytest.raises(MoneyError):
            Money.total_of([Money.of(1, Currency.EUR)], Currency.USD)

    def test_operations_do_not_mutate(self):
        money = Money.of(10, Currency.USD)
        money.add(Money.of(5, Currency.USD))
        assert money.amount == Decimal("10")


class TestMoneyFormatting:
    """Rounding and display."""

    def test_rounding_half_up(self):
        assert Money.of("2.345", Currency.USD).rounded().amount == Decimal("2.35")
        assert Money.of("100", Currency.USD).divide(3).rounded().amount == Decimal("33.33")

    def test_formatted_with_grouping(self):
        assert Money.of("1234.5", Currency.USD).formatted == "$1,234.50"
        assert str(Money.of("1234.5", Currency.USD)) == "$1,234.50"

    def test_formatted_yen(self):
        assert Money.of("1234.5", Currency.JPY).formatted == "¥1,235"

    def test_formatted_negative(self):
        assert Money.of("-5", Currency.USD).formatted == "-$5.00"

    @pytest.mark.parametrize("amount,currency,expected", [
        (Decimal("50.10"), Currency.USD, "$50.10"),
        (50.1, Currency.USD, "$50.10"),
        ("50.1", Currency.USD, "$50.10"),
        (50, Currency.USD, "$50.00"),
        (50.0, Currency.USD, "$50.00"),
        (1234, Currency.JPY, "¥1,234"),
        (1234.0, Currency.JPY, "¥1,234"),
        (Decimal("1234"), Currency.JPY, "¥1,234"),
    ])
    def test_formatting_ignores_input_type(self, amount, currency, expected):
        """The same value formats the same whether given as Decimal, float, int or text."""
        assert Money.of(amount, currency).formatted == expected

    def test_formatted_with_sign(self):
        assert Money.of(5, Currency.USD).formatted_with_sign == "+$5.00"
        assert Money.of(-5, Currency.EUR).formatted_with_sign == "-€5.00"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

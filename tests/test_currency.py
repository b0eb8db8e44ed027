"""
Test suite for currency module

Tests Money class and proper Decimal handling.
All monetary calculations must use Decimal precision.
"""

import pytest
from decimal import Decimal

from microloans.currency import Money, Currency, fits_precision, to_decimal


class TestMoney:
    """Test Money class operations"""

    def test_money_creation(self):
        """Test Money object creation and rounding"""
        money = Money(Decimal('100.50'), Currency.ZAR)
        assert money.amount == Decimal('100.50')
        assert money.currency == Currency.ZAR

        # Rounded half-up to currency precision
        assert Money(Decimal('100.555'), Currency.ZAR).amount == Decimal('100.56')
        assert Money(Decimal('100.554'), Currency.ZAR).amount == Decimal('100.55')

    def test_default_currency_is_rand(self):
        assert Money(Decimal('5')).currency == Currency.ZAR

    def test_float_input_goes_through_str(self):
        """0.1 + 0.2 style float noise must not leak into balances"""
        money = Money(0.1, Currency.ZAR) + Money(0.2, Currency.ZAR)
        assert money.amount == Decimal('0.30')

    def test_money_arithmetic(self):
        money1 = Money(Decimal('100.50'), Currency.ZAR)
        money2 = Money(Decimal('50.25'), Currency.ZAR)

        assert (money1 + money2).amount == Decimal('150.75')
        assert (money1 - money2).amount == Decimal('50.25')

    def test_currency_mismatch(self):
        rand = Money(Decimal('10'), Currency.ZAR)
        dollars = Money(Decimal('10'), Currency.USD)

        with pytest.raises(ValueError, match="Cannot add"):
            rand + dollars
        with pytest.raises(ValueError, match="Cannot compare"):
            rand < dollars

    def test_money_comparison(self):
        money1 = Money(Decimal('100.00'), Currency.ZAR)
        money2 = Money(Decimal('50.00'), Currency.ZAR)

        assert money1 == Money(Decimal('100'), Currency.ZAR)
        assert money1 != money2
        assert money1 > money2
        assert money2 <= money1
        assert money1 != Money(Decimal('100.00'), Currency.USD)
        assert money1 != Decimal('100.00')

    def test_money_is_hashable(self):
        assert len({Money(Decimal('1')), Money(Decimal('1.00'))}) == 1

    def test_sign_checks(self):
        assert Money.zero().is_zero()
        assert Money(Decimal('0.01')).is_positive()
        assert Money(Decimal('-0.01')).is_negative()
        # Sub-cent amounts round away to zero
        assert Money(Decimal('0.004')).is_zero()

    def test_formatting(self):
        money = Money(Decimal('1234.5'), Currency.ZAR)
        assert money.to_string() == "ZAR 1,234.50"


class TestDecimalConversion:
    """Test raw amount conversion"""

    def test_to_decimal(self):
        assert to_decimal("400") == Decimal('400')
        assert to_decimal(400) == Decimal('400')
        assert to_decimal(0.1) == Decimal('0.1')
        assert to_decimal(Decimal('7.25')) == Decimal('7.25')

    @pytest.mark.parametrize("value", ["abc", "", "NaN", "Infinity", True])
    def test_to_decimal_rejects_non_numeric(self, value):
        with pytest.raises(ValueError):
            to_decimal(value)

    def test_to_decimal_rejects_non_finite_decimal(self):
        with pytest.raises(ValueError, match="finite"):
            to_decimal(Decimal('NaN'))

    def test_unrepresentable_money_raises_value_error(self):
        with pytest.raises(ValueError, match="too large"):
            Money(Decimal('1e27'), Currency.ZAR)


class TestFitsPrecision:

    @pytest.mark.parametrize("value", ["0.01", "150", "12.5000", "-3.10", "0"])
    def test_fits(self, value):
        assert fits_precision(Decimal(value), Currency.ZAR)

    @pytest.mark.parametrize("value", ["0.005", "999.999", "1e30"])
    def test_does_not_fit(self, value):
        assert not fits_precision(Decimal(value), Currency.ZAR)

"""
Unit tests for operator input parsing.
"""

import pytest
from decimal import Decimal

from kegpos.utils.number_format import parse_amount, parse_quantity, quantize_money


class TestParseAmount:

    def test_plain_numbers(self):
        assert parse_amount('1500') == Decimal('1500.00')
        assert parse_amount(' 99.999 ') == Decimal('100.00')
        assert parse_amount(12.5) == Decimal('12.50')

    def test_empty_is_zero(self):
        assert parse_amount('') == Decimal('0.00')
        assert parse_amount(None) == Decimal('0.00')

    @pytest.mark.parametrize('value', ['abc', 'NaN', 'Infinity', True])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_amount(value)

    def test_negative_rejected(self):
        with pytest.raises(ValueError, match='cannot be negative'):
            parse_amount('-1', 'discount')


class TestParseQuantity:

    def test_whole_numbers(self):
        assert parse_quantity('3') == 3
        assert parse_quantity(0) == 0
        assert parse_quantity('4.0') == 4

    @pytest.mark.parametrize('value', ['1.5', '-2', 'x', None, ''])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_quantity(value)


def test_quantize_money_rounds_half_up():
    assert quantize_money(Decimal('0.005')) == Decimal('0.01')
    assert quantize_money(Decimal('2.344')) == Decimal('2.34')

"""
Unit tests for cart pricing.
"""

from decimal import Decimal

from kegpos.models import Cart, CartLine, Discount, DiscountType
from kegpos.services.pricing_service import calculate_discount, calculate_totals


def _cart(*lines):
    return Cart(lines=[CartLine(product=p, quantity=q) for p, q in lines])


class TestCalculateTotals:

    def test_subtotal_sums_lines(self, make_product):
        cart = _cart((make_product(1, 1, price='1500'), 2), (make_product(2, 9, price='9000'), 1))
        totals = calculate_totals(cart, Discount())

        assert totals.subtotal == Decimal('12000.00')
        assert totals.discount_amount == Decimal('0.00')
        assert totals.total == Decimal('12000.00')
        assert [line['line_total'] for line in totals.lines] == [Decimal('3000.00'), Decimal('9000.00')]

    def test_amount_discount(self, make_product):
        cart = _cart((make_product(1, 1, price='1500'), 2))
        totals = calculate_totals(cart, Discount(DiscountType.AMOUNT, Decimal('500')))
        assert totals.total == Decimal('2500.00')

    def test_percentage_discount(self, make_product):
        cart = _cart((make_product(1, 1, price='1500'), 2))
        totals = calculate_totals(cart, Discount(DiscountType.PERCENTAGE, Decimal('10')))
        assert totals.discount_amount == Decimal('300.00')
        assert totals.total == Decimal('2700.00')

    def test_oversized_discount_clamps_total_at_zero(self, make_product):
        cart = _cart((make_product(1, 1, price='1500'), 1))
        totals = calculate_totals(cart, Discount(DiscountType.AMOUNT, Decimal('2000')))
        # The discount itself is not capped, only the total
        assert totals.discount_amount == Decimal('2000.00')
        assert totals.total == Decimal('0.00')

    def test_percentage_over_hundred(self, make_product):
        cart = _cart((make_product(1, 1, price='1000'), 1))
        totals = calculate_totals(cart, Discount(DiscountType.PERCENTAGE, Decimal('150')))
        assert totals.total == Decimal('0.00')

    def test_empty_cart(self):
        totals = calculate_totals(Cart(), Discount(DiscountType.AMOUNT, Decimal('100')))
        assert totals.subtotal == Decimal('0.00')
        assert totals.total == Decimal('0.00')


def test_no_discount_object():
    assert calculate_discount(Decimal('100'), None) == Decimal('0.00')

"""
Unit tests for the terminal cart and draft operations.
"""

import pytest
from decimal import Decimal

from kegpos.exceptions import BusinessLogicError
from kegpos.models import CustomerAccount, DiscountType, SaleDraft
from kegpos.services import sale_draft_service
from kegpos.services.stock_service import cart_liters


class TestAddUnit:

    def test_drum_added_once_then_ignored(self, draft, make_product):
        drum = make_product(1, 9, price='9000')

        assert sale_draft_service.add_unit(draft, drum, Decimal('250')) is True
        assert sale_draft_service.add_unit(draft, drum, Decimal('250')) is False

        assert len(draft.cart) == 1
        assert draft.cart.find(1).quantity == 1

    def test_second_unit_increments_line(self, draft, make_product):
        keg = make_product(1, 1)
        sale_draft_service.add_unit(draft, keg, Decimal('100'))
        sale_draft_service.add_unit(draft, keg, Decimal('100'))
        assert len(draft.cart) == 1
        assert draft.cart.find(1).quantity == 2

    def test_out_of_stock_product_ignored(self, draft, make_product):
        keg = make_product(1, 1, stock=0)
        assert sale_draft_service.add_unit(draft, keg, Decimal('1000')) is False
        assert draft.cart.is_empty

    def test_product_from_other_catalog_rejected(self, draft, make_product):
        drum = make_product(1, 9, price='9000', sale_type='wholesale')
        with pytest.raises(BusinessLogicError):
            sale_draft_service.add_unit(draft, drum, Decimal('500'))
        assert draft.cart.is_empty

    def test_cart_never_exceeds_pool(self, draft, make_product):
        products = [make_product(1, 1), make_product(2, 3), make_product(3, 9)]
        pool = Decimal('300')
        for _ in range(10):
            for product in products:
                sale_draft_service.add_unit(draft, product, pool)
                assert cart_liters(draft.cart) <= pool


class TestSetQuantity:

    def test_zero_removes_line(self, draft, make_product):
        keg = make_product(1, 1)
        sale_draft_service.add_unit(draft, keg, Decimal('100'))
        assert sale_draft_service.set_quantity(draft, 1, 0, Decimal('100')) is True
        assert draft.cart.is_empty

    def test_increase_within_remaining(self, draft, make_product):
        keg = make_product(1, 1)
        sale_draft_service.add_unit(draft, keg, Decimal('100'))
        assert sale_draft_service.set_quantity(draft, 1, 4, Decimal('100')) is True
        assert draft.cart.find(1).quantity == 4

    def test_increase_beyond_remaining_is_ignored_entirely(self, draft, make_product):
        keg = make_product(1, 1)
        sale_draft_service.add_unit(draft, keg, Decimal('100'))
        # 75 L left, 4 more kegs need 100 L
        assert sale_draft_service.set_quantity(draft, 1, 5, Decimal('100')) is False
        assert draft.cart.find(1).quantity == 1

    def test_decrease_always_allowed(self, draft, make_product):
        keg = make_product(1, 1)
        sale_draft_service.add_unit(draft, keg, Decimal('100'))
        sale_draft_service.set_quantity(draft, 1, 3, Decimal('100'))
        # Pool shrank below the cart; decreasing still applies
        assert sale_draft_service.set_quantity(draft, 1, 2, Decimal('25')) is True
        assert draft.cart.find(1).quantity == 2

    def test_unknown_product(self, draft):
        assert sale_draft_service.set_quantity(draft, 99, 2, Decimal('100')) is False

    def test_negative_rejected(self, draft, make_product):
        sale_draft_service.add_unit(draft, make_product(1, 1), Decimal('100'))
        with pytest.raises(BusinessLogicError):
            sale_draft_service.set_quantity(draft, 1, -1, Decimal('100'))


class TestDraftSettings:

    def test_discount(self, draft):
        discount = sale_draft_service.set_discount(draft, 'Percentage', Decimal('15'))
        assert discount.type == DiscountType.PERCENTAGE
        assert discount.value == Decimal('15')

    def test_invalid_discount(self, draft):
        with pytest.raises(BusinessLogicError):
            sale_draft_service.set_discount(draft, 'coupon', Decimal('1'))
        with pytest.raises(BusinessLogicError):
            sale_draft_service.set_discount(draft, 'amount', Decimal('-1'))

    def test_payment_method(self, draft):
        assert sale_draft_service.set_payment_method(draft, 'Transfer') == 'transfer'
        with pytest.raises(BusinessLogicError):
            sale_draft_service.set_payment_method(draft, 'cheque')

    def test_tendered_amount(self, draft):
        assert sale_draft_service.set_tendered_amount(draft, Decimal('700')) == Decimal('700')
        with pytest.raises(BusinessLogicError):
            sale_draft_service.set_tendered_amount(draft, Decimal('-5'))

    def test_sale_type(self, draft):
        assert sale_draft_service.set_sale_type(draft, 'WHOLESALE') == 'wholesale'
        with pytest.raises(BusinessLogicError):
            sale_draft_service.set_sale_type(draft, 'export')

    def test_wholesale_customer_switches_catalog(self, draft):
        account = CustomerAccount(customer_id=7, customer_type='wholesale')
        sale_draft_service.select_customer(draft, account)
        assert draft.customer_id == 7
        assert draft.sale_type == 'wholesale'

        sale_draft_service.select_customer(draft, None)
        assert draft.customer_id is None

    def test_catalog_switch_refused_while_cart_has_lines(self, draft, make_product):
        sale_draft_service.add_unit(draft, make_product(1, 1), Decimal('100'))

        with pytest.raises(BusinessLogicError):
            sale_draft_service.set_sale_type(draft, 'wholesale')
        with pytest.raises(BusinessLogicError):
            sale_draft_service.select_customer(draft, CustomerAccount(customer_id=7, customer_type='wholesale'))
        assert draft.sale_type == 'retail'
        assert draft.customer_id is None

        # Same catalog is fine
        sale_draft_service.select_customer(draft, CustomerAccount(customer_id=8, customer_type='retail'))
        assert draft.customer_id == 8

    def test_clear_keeps_customer_and_method(self, draft, make_product):
        sale_draft_service.add_unit(draft, make_product(1, 1), Decimal('100'))
        sale_draft_service.set_discount(draft, 'amount', Decimal('100'))
        sale_draft_service.set_payment_method(draft, 'transfer')
        sale_draft_service.set_tendered_amount(draft, Decimal('50'))
        draft.customer_id = 3

        sale_draft_service.clear_draft(draft)

        assert draft.cart.is_empty
        assert draft.discount.value == Decimal('0')
        assert draft.tendered_amount == Decimal('0')
        assert draft.customer_id == 3
        assert draft.payment_method == 'transfer'


class TestDraftSerialization:

    def test_missing_products_dropped(self, make_product):
        keg = make_product(1, 1)
        data = {
            'lines': [[1, 2], [2, 1]],
            'discount': {'type': 'amount', 'value': '100'},
            'payment_method': 'credit',
            'tendered_amount': '0',
            'customer_id': 4,
            'sale_type': 'retail',
        }
        draft = SaleDraft.from_dict(data, {1: keg})

        assert len(draft.cart) == 1
        assert draft.cart.find(1).quantity == 2
        assert draft.discount.value == Decimal('100')
        assert draft.payment_method == 'credit'
        assert draft.customer_id == 4

    def test_empty_session(self):
        draft = SaleDraft.from_dict(None, {}, default_sale_type='wholesale')
        assert draft.cart.is_empty
        assert draft.sale_type == 'wholesale'

"""
Unit tests for account reconciliation.
"""

import pytest
from decimal import Decimal

from kegpos.services.reconciliation_service import available_credit, reconcile


class TestReconcileScenarios:

    def test_empty_account_exact_cash(self):
        rec = reconcile(Decimal('5000'), Decimal('0'), 'cash', Decimal('5000'))
        assert rec.amount_due_including_account == Decimal('5000')
        assert rec.change == Decimal('0')
        assert rec.remaining_debt == Decimal('0')
        assert rec.new_balance == Decimal('0')
        assert rec.payment_status == 'paid'

    def test_existing_debt_paying_only_the_sale(self):
        rec = reconcile(Decimal('3000'), Decimal('-2000'), 'cash', Decimal('3000'))
        assert rec.amount_due_including_account == Decimal('5000')
        assert rec.remaining_debt == Decimal('2000')
        assert rec.change == Decimal('0')
        assert rec.new_balance == Decimal('-2000')
        assert rec.payment_status == 'partial'

    def test_credit_sale_eats_existing_credit(self):
        rec = reconcile(Decimal('4000'), Decimal('6000'), 'credit')
        assert rec.needs_payment is False
        assert rec.new_balance == Decimal('2000')
        assert rec.remaining_debt == Decimal('0')
        assert rec.payment_status == 'paid'

    def test_transfer_with_nothing_tendered_is_blocked(self):
        rec = reconcile(Decimal('4000'), Decimal('6000'), 'transfer', Decimal('0'))
        assert rec.needs_payment is False
        assert rec.payment_blocked is True

    def test_nothing_due_on_empty_account_is_not_blocked(self):
        rec = reconcile(Decimal('0'), Decimal('0'), 'cash', Decimal('0'))
        assert rec.needs_payment is False
        assert rec.payment_blocked is False
        assert rec.payment_status == 'paid'

        rec = reconcile(Decimal('0'), Decimal('-500'), 'cash', Decimal('0'))
        assert rec.needs_payment is True
        assert rec.payment_blocked is True

    def test_overpayment(self):
        rec = reconcile(Decimal('1000'), Decimal('0'), 'cash', Decimal('1500'))
        assert rec.change == Decimal('500')
        assert rec.remaining_debt == Decimal('0')
        assert rec.new_balance == Decimal('500')


class TestReconcileBranches:

    def test_credit_sale_on_empty_account_becomes_debt(self):
        rec = reconcile(Decimal('2500'), Decimal('0'), 'credit')
        assert rec.new_balance == Decimal('-2500')
        assert rec.remaining_debt == Decimal('2500')
        assert rec.change == Decimal('0')
        assert rec.payment_status == 'pending'
        assert rec.payment_blocked is False

    def test_credit_sale_ignores_tender(self):
        rec = reconcile(Decimal('1000'), Decimal('0'), 'credit', Decimal('700'))
        assert rec.tendered_amount == Decimal('0')
        assert rec.new_balance == Decimal('-1000')

    def test_extra_payment_when_credit_covers_sale(self):
        rec = reconcile(Decimal('1000'), Decimal('3000'), 'cash', Decimal('500'))
        assert rec.needs_payment is False
        assert rec.amount_due_including_account == Decimal('-2000')
        assert rec.new_balance == Decimal('2500')
        assert rec.remaining_debt == Decimal('0')
        assert rec.payment_blocked is False

    def test_underpayment(self):
        rec = reconcile(Decimal('3000'), Decimal('0'), 'transfer', Decimal('1000'))
        assert rec.remaining_debt == Decimal('2000')
        assert rec.change == Decimal('0')
        assert rec.new_balance == Decimal('-2000')

    def test_payment_method_is_normalized(self):
        assert reconcile(Decimal('1'), Decimal('0'), ' CASH ', Decimal('1')).payment_method == 'cash'

    def test_unknown_payment_method(self):
        with pytest.raises(ValueError):
            reconcile(Decimal('1'), Decimal('0'), 'cheque', Decimal('1'))


@pytest.mark.parametrize('method', ['cash', 'transfer', 'credit'])
@pytest.mark.parametrize('balance', ['-2000', '0', '6000'])
@pytest.mark.parametrize('tendered', ['0', '1000', '5000', '12000'])
def test_balance_identity_and_exclusive_change(method, balance, tendered):
    total = Decimal('5000')
    balance = Decimal(balance)
    tendered = Decimal(tendered)

    rec = reconcile(total, balance, method, tendered)

    expected = balance - total + (Decimal('0') if method == 'credit' else tendered)
    assert rec.new_balance == expected
    assert rec.change >= 0 and rec.remaining_debt >= 0
    assert rec.change == 0 or rec.remaining_debt == 0


def test_available_credit():
    assert available_credit(Decimal('-2000'), Decimal('10000')) == Decimal('8000')
    assert available_credit(Decimal('3000'), Decimal('10000')) == Decimal('10000')

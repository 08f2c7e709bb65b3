"""
Account reconciliation - settles a sale total against a customer balance.

Balances are signed: positive means the store owes the customer (credit),
negative means the customer owes the store (debt). Whatever the payment
method, the account ends at::

    new_balance = balance - total + (0 if credit sale else tendered)

The branches below only decide whether the difference shows up as ``change``
(paid more than was due) or ``remaining_debt`` (paid less).
"""
from dataclasses import dataclass
from decimal import Decimal

from kegpos.models import PaymentMethod, PaymentStatus, normalize_payment_method

ZERO = Decimal('0')


@dataclass(frozen=True)
class Reconciliation:
    total: Decimal
    balance: Decimal
    payment_method: str
    tendered_amount: Decimal
    customer_debt: Decimal
    customer_credit: Decimal
    amount_due_including_account: Decimal
    needs_payment: bool
    change: Decimal
    remaining_debt: Decimal
    new_balance: Decimal

    @property
    def payment_blocked(self) -> bool:
        """
        Cash / transfer sale with nothing received while something is due
        or the customer holds credit.

        Existing credit covering the total still blocks: drawing on the
        account is what the credit method is for. Nothing due on an empty
        account (a fully discounted sale) settles without tender.
        """
        return (
            self.payment_method != PaymentMethod.CREDIT.value
            and self.tendered_amount == ZERO
            and (self.needs_payment or self.customer_credit > ZERO)
        )

    @property
    def payment_status(self) -> str:
        if self.remaining_debt == ZERO:
            return PaymentStatus.PAID.value
        if self.payment_method != PaymentMethod.CREDIT.value and self.tendered_amount > ZERO:
            return PaymentStatus.PARTIAL.value
        return PaymentStatus.PENDING.value


def reconcile(total, balance, payment_method, tendered_amount=ZERO) -> Reconciliation:
    """
    Reconcile a sale total with the customer's balance and the amount tendered.

    Args:
        total: sale total after discount (>= 0)
        balance: signed account balance before the sale
        payment_method: 'cash', 'transfer' or 'credit'
        tendered_amount: money received; ignored for credit sales

    Returns:
        Reconciliation with the amount due including the account, the change
        or remaining debt and the balance after the sale.
    """
    total = Decimal(total)
    balance = Decimal(balance)
    method = normalize_payment_method(payment_method)
    tendered = ZERO if method == PaymentMethod.CREDIT.value else Decimal(tendered_amount or 0)

    customer_debt = max(ZERO, -balance)
    customer_credit = max(ZERO, balance)
    amount_due = total + customer_debt - customer_credit
    needs_payment = amount_due > ZERO

    new_balance = balance - total + tendered

    if method == PaymentMethod.CREDIT.value:
        # Whole purchase goes on the account
        change = ZERO
        remaining_debt = max(ZERO, -new_balance)
    elif not needs_payment:
        # Existing credit covers the sale; anything tendered is extra credit
        change = tendered
        remaining_debt = ZERO
    else:
        delta = tendered - amount_due
        change = max(ZERO, delta)
        remaining_debt = max(ZERO, -delta)

    return Reconciliation(
        total=total,
        balance=balance,
        payment_method=method,
        tendered_amount=tendered,
        customer_debt=customer_debt,
        customer_credit=customer_credit,
        amount_due_including_account=amount_due,
        needs_payment=needs_payment,
        change=change,
        remaining_debt=remaining_debt,
        new_balance=new_balance,
    )


def available_credit(balance, credit_limit) -> Decimal:
    """Credit the customer can still draw: limit minus current debt."""
    return Decimal(credit_limit) + min(ZERO, Decimal(balance))

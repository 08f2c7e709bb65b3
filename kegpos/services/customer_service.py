"""Customer service - account lookups and debt payments."""
from decimal import Decimal
from typing import List, Optional
import logging

from sqlalchemy.orm import Session

from kegpos.exceptions import BusinessLogicError, NotFoundError
from kegpos.models import (
    Customer, CustomerAccount, CustomerStatus, CustomerTransaction, PaymentMethod, TransactionType
)
from kegpos.services.reconciliation_service import available_credit

logger = logging.getLogger(__name__)


def get_customer(session: Session, customer_id: int) -> Customer:
    customer = session.query(Customer).filter(Customer.id == customer_id).first()
    if not customer:
        raise NotFoundError('Customer not found')
    return customer


def get_customer_account(session: Session, customer_id: Optional[int]) -> Optional[CustomerAccount]:
    """
    Account snapshot for the settlement engine.

    Returns None when no customer is selected or the customer has been
    deleted meanwhile.
    """
    if customer_id is None:
        return None
    customer = session.query(Customer).filter(Customer.id == customer_id).first()
    return customer.to_account() if customer else None


def list_customers(session: Session, customer_type: Optional[str] = None, with_debt: bool = False) -> List[Customer]:
    query = session.query(Customer)
    if customer_type:
        query = query.filter(Customer.customer_type == customer_type)
    if with_debt:
        query = query.filter(Customer.balance < 0)
    return query.order_by(Customer.name).all()


def customer_summary(customer: Customer) -> dict:
    """Customer fields plus derived debt / credit figures."""
    balance = Decimal(str(customer.balance or 0))
    credit_limit = Decimal(str(customer.credit_limit or 0))
    return {
        'id': customer.id,
        'name': customer.name,
        'phone': customer.phone,
        'email': customer.email,
        'customer_type': customer.customer_type,
        'status': customer.status,
        'balance': str(balance),
        'debt': str(max(Decimal('0'), -balance)),
        'credit': str(max(Decimal('0'), balance)),
        'credit_limit': str(credit_limit),
        'available_credit': str(available_credit(balance, credit_limit)),
    }


def record_payment(
    session: Session,
    customer_id: int,
    amount: Decimal,
    payment_method: str = PaymentMethod.CASH.value,
    notes: Optional[str] = None
) -> CustomerTransaction:
    """
    Record money received on account (outside of a sale).

    The balance rises by ``amount``: debt shrinks, or credit grows once the
    debt is cleared.
    """
    if amount is None or amount <= 0:
        raise BusinessLogicError('The payment amount must be greater than 0')
    if payment_method not in (PaymentMethod.CASH.value, PaymentMethod.TRANSFER.value):
        raise BusinessLogicError('Account payments must be cash or transfer')

    try:
        customer = session.query(Customer).filter(Customer.id == customer_id).with_for_update().first()
        if not customer:
            raise NotFoundError('Customer not found')
        if customer.status == CustomerStatus.BLOCKED.value:
            raise BusinessLogicError(f'Customer "{customer.name}" is blocked')

        customer.balance = Decimal(str(customer.balance or 0)) + amount
        entry = CustomerTransaction(
            customer_id=customer.id,
            type=TransactionType.PAYMENT.value,
            amount=amount,
            payment_method=payment_method,
            balance_after=customer.balance,
            description=(notes or '').strip() or 'Account payment',
        )
        session.add(entry)
        session.commit()
    except Exception:
        session.rollback()
        raise

    logger.info(f"Payment of {amount} recorded for customer {customer_id}, balance now {entry.balance_after}")
    return entry

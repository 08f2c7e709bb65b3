"""
Sales service with transactional logic.
Records a settlement: sale, stock decrement and customer balance, all or nothing.
"""
from decimal import Decimal
from datetime import datetime
from typing import List, Dict, Optional, Any
import logging

from sqlalchemy.orm import Session

from kegpos.exceptions import AccountChangedError, NotFoundError, InsufficientStockError
from kegpos.models import (
    Product, Customer, CustomerTransaction, Sale, SaleLine, SaleDraft,
    CustomerAccount, SettlementResult, TransactionType
)
from kegpos.services.stock_service import get_or_create_liquid_stock
from kegpos.utils.units import KEG_CAPACITY_LITERS, liters_for

logger = logging.getLogger(__name__)


def record_settlement(
    session: Session,
    draft: SaleDraft,
    result: SettlementResult,
    account: CustomerAccount,
    keg_capacity_liters=KEG_CAPACITY_LITERS
) -> int:
    """
    Persist a validated settlement in a single transaction.

    1. Lock the liters pool and re-check the cart fits; lock the customer and
       check the balance is still the one the settlement was computed from.
    2. Create the Sale and its lines.
    3. Decrement liters and per-product unit stock.
    4. Move the customer balance to ``result.new_balance`` and log it.

    Any failure rolls everything back.

    Returns:
        sale_id
    """
    try:
        # 1. Liters pool (locked) and customer
        stock = get_or_create_liquid_stock(session, for_update=True)
        available = Decimal(str(stock.total_available_liters))
        if result.liters_consumed > available:
            raise InsufficientStockError(result.liters_consumed, available)

        customer = (
            session.query(Customer)
            .filter(Customer.id == account.customer_id)
            .with_for_update()
            .populate_existing()
            .first()
        )
        if not customer:
            raise NotFoundError('Customer not found')

        # new_balance was computed from this snapshot
        current_balance = Decimal(str(customer.balance or 0))
        if current_balance != result.previous_balance:
            raise AccountChangedError(result.previous_balance, current_balance)

        product_ids = [line.product_id for line in draft.cart]
        products = session.query(Product).filter(Product.id.in_(product_ids)).all()
        products_dict = {p.id: p for p in products}
        if len(products_dict) != len(set(product_ids)):
            raise NotFoundError('One or more products no longer exist')

        # 2. Sale header
        sale = Sale(
            datetime=datetime.now(),
            sale_type=draft.sale_type,
            customer_id=customer.id,
            payment_method=result.payment_method,
            payment_status=result.payment_status,
            subtotal=result.subtotal,
            discount_amount=result.discount_amount,
            total=result.total,
            amount_paid=result.tendered_amount,
            change_amount=result.change,
            remaining_debt=result.remaining_debt,
            previous_balance=result.previous_balance,
            new_balance=result.new_balance,
            liters_consumed=result.liters_consumed,
        )
        session.add(sale)
        session.flush()

        # 3. Lines and stock
        _create_sale_lines(session, sale.id, draft, products_dict, keg_capacity_liters)
        stock.total_available_liters = available - result.liters_consumed

        # 4. Customer account
        customer.balance = result.new_balance
        _create_account_entries(session, customer, sale, result)

        session.commit()
        logger.info(f"Sale {sale.id} recorded: {result.liters_consumed} L, customer {customer.id}")
        return sale.id

    except Exception:
        session.rollback()
        raise


def get_sale(session: Session, sale_id: int) -> Sale:
    sale = session.query(Sale).filter(Sale.id == sale_id).first()
    if not sale:
        raise NotFoundError('Sale not found')
    return sale


def list_sales(session: Session, customer_id: Optional[int] = None, limit: int = 50) -> List[Sale]:
    query = session.query(Sale)
    if customer_id:
        query = query.filter(Sale.customer_id == customer_id)
    return query.order_by(Sale.id.desc()).limit(limit).all()


# =====================================================
# PRIVATE HELPERS
# =====================================================

def _create_sale_lines(
    session: Session,
    sale_id: int,
    draft: SaleDraft,
    products_dict: Dict[Any, Product],
    keg_capacity_liters
) -> None:
    """Add the sale lines and take the units out of each product's stock."""
    for line in draft.cart:
        product = products_dict[line.product_id]
        unit_price = Decimal(str(product.price_per_unit))
        session.add(SaleLine(
            sale_id=sale_id,
            product_id=product.id,
            qty=line.quantity,
            unit_size_kegs=product.unit_size_kegs,
            unit_price=unit_price,
            line_total=(unit_price * line.quantity).quantize(Decimal('0.01')),
            liters=line.quantity * liters_for(product.unit_size_kegs, keg_capacity_liters),
        ))
        product.stock = max(0, (product.stock or 0) - line.quantity)


def _create_account_entries(session: Session, customer: Customer, sale: Sale, result: SettlementResult) -> None:
    """Charge the sale to the account, then credit what was received."""
    balance_after_sale = result.previous_balance - result.total
    session.add(CustomerTransaction(
        customer_id=customer.id,
        sale_id=sale.id,
        type=TransactionType.SALE.value,
        amount=result.total,
        payment_method=result.payment_method,
        balance_after=balance_after_sale,
        description=f'Sale #{sale.id}',
    ))

    if result.tendered_amount > 0:
        session.add(CustomerTransaction(
            customer_id=customer.id,
            sale_id=sale.id,
            type=TransactionType.PAYMENT.value,
            amount=result.tendered_amount,
            payment_method=result.payment_method,
            balance_after=result.new_balance,
            description=f'Payment for sale #{sale.id}',
        ))

"""
Stock service - liquid availability for the cart and the inventory collaborator.

All liquid is held in one pool of liters. Products are poured from it in
whole kegs, so a cart line consumes ``quantity * unit_size_kegs * keg
capacity`` liters regardless of which product it is.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional, Tuple
import logging

from sqlalchemy.orm import Session

from kegpos.exceptions import BusinessLogicError
from kegpos.models import LiquidStock, StockDelivery
from kegpos.utils.units import KEG_CAPACITY_LITERS, KEGS_PER_DRUM, liters_for, fill_details

logger = logging.getLogger(__name__)

# (low, medium) upper bounds; anything above medium is "high"
DEFAULT_THRESHOLDS = {
    'liters': (Decimal('500'), Decimal('1500')),
    'drums': (10, 30),
    'kegs': (20, 50),
}


@dataclass(frozen=True)
class StockAvailability:
    """Answer to "can one more unit of this size go in the cart?"."""
    is_available: bool
    remaining_liters: Decimal
    max_addable_units: int


def cart_liters(cart: Iterable, keg_capacity_liters=KEG_CAPACITY_LITERS) -> Decimal:
    """Liters consumed by every line of the cart."""
    return sum(
        (line.quantity * liters_for(line.product.unit_size_kegs, keg_capacity_liters) for line in cart),
        Decimal('0')
    )


def check_stock_availability(
    unit_size_kegs: int,
    total_available_liters,
    cart: Iterable,
    keg_capacity_liters=KEG_CAPACITY_LITERS
) -> StockAvailability:
    """
    Check whether a unit of ``unit_size_kegs`` kegs still fits in the tank.

    The pool can be smaller than the cart when stock shrank after the cart
    was built; the remaining liters are then reported as zero.
    """
    consumed = cart_liters(cart, keg_capacity_liters)
    remaining = max(Decimal('0'), Decimal(total_available_liters) - consumed)
    liters_per_unit = liters_for(unit_size_kegs, keg_capacity_liters)
    max_addable_units = int(remaining // liters_per_unit)

    return StockAvailability(
        is_available=max_addable_units >= 1,
        remaining_liters=remaining,
        max_addable_units=max_addable_units,
    )


def stock_status(value, thresholds: Tuple[Any, Any]) -> str:
    """Classify a stock measure as low / medium / high."""
    low, medium = thresholds
    if value <= low:
        return 'low'
    if value <= medium:
        return 'medium'
    return 'high'


def build_stock_summary(
    total_available_liters,
    keg_capacity_liters=KEG_CAPACITY_LITERS,
    kegs_per_drum=KEGS_PER_DRUM,
    thresholds: Optional[Dict[str, Tuple[Any, Any]]] = None
) -> Dict[str, Any]:
    """Drums / kegs breakdown of the pool with a status for each measure."""
    thresholds = {**DEFAULT_THRESHOLDS, **(thresholds or {})}
    liters = Decimal(total_available_liters)
    details = fill_details(liters, keg_capacity_liters, kegs_per_drum)

    return {
        'total_available_liters': liters,
        'total_drums': details['total_drums'],
        'total_kegs': details['total_kegs'],
        'remaining_kegs': details['remaining_kegs'],
        'remaining_liters': details['remaining_liters'],
        'liters_status': stock_status(liters, thresholds['liters']),
        'drums_status': stock_status(details['total_drums'], thresholds['drums']),
        'kegs_status': stock_status(details['total_kegs'], thresholds['kegs']),
    }


# =====================================================
# INVENTORY COLLABORATOR (database backed)
# =====================================================

def get_or_create_liquid_stock(session: Session, for_update: bool = False) -> LiquidStock:
    """
    Return the single liquid stock row, creating an empty one if missing.

    With ``for_update`` the row is locked until the surrounding transaction ends.
    """
    query = session.query(LiquidStock).order_by(LiquidStock.id)
    if for_update:
        query = query.with_for_update().populate_existing()
    stock = query.first()

    if not stock:
        stock = LiquidStock(total_available_liters=Decimal('0'))
        session.add(stock)
        session.flush()
    return stock


def get_total_available_liters(session: Session) -> Decimal:
    stock = session.query(LiquidStock).order_by(LiquidStock.id).first()
    if not stock:
        return Decimal('0')
    return Decimal(str(stock.total_available_liters))


def record_delivery(session: Session, liters: Decimal, supplier: Optional[str] = None) -> StockDelivery:
    """Add delivered liters to the pool and keep a delivery record."""
    if liters is None or liters <= 0:
        raise BusinessLogicError('Delivered liters must be greater than 0')

    try:
        stock = get_or_create_liquid_stock(session, for_update=True)
        stock.total_available_liters = Decimal(str(stock.total_available_liters)) + liters

        delivery = StockDelivery(
            liters=liters,
            supplier=(supplier or '').strip() or None,
            available_after=stock.total_available_liters
        )
        session.add(delivery)
        session.commit()
    except Exception:
        session.rollback()
        raise

    logger.info(f"Delivery of {liters} L recorded, pool now {delivery.available_after} L")
    return delivery

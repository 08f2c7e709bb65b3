"""Sale Draft Service - cart and draft operations for the terminal."""

from decimal import Decimal
from typing import Optional
import logging

from kegpos.exceptions import BusinessLogicError
from kegpos.models import CartLine, CustomerAccount, Discount, DiscountType, SaleDraft, SaleType, normalize_payment_method
from kegpos.services.stock_service import check_stock_availability
from kegpos.utils.units import KEG_CAPACITY_LITERS, liters_for

logger = logging.getLogger(__name__)


def add_unit(
    draft: SaleDraft,
    product,
    total_available_liters,
    keg_capacity_liters=KEG_CAPACITY_LITERS
) -> bool:
    """
    Add one unit of ``product`` to the cart.

    Does nothing (returns False) when the product is out of stock or one more
    unit would not fit in the remaining liters. Products from the other
    catalog are rejected.
    """
    product_sale_type = getattr(product, 'sale_type', None)
    if product_sale_type and product_sale_type != draft.sale_type:
        raise BusinessLogicError(
            f'{product.name} is sold {product_sale_type}, the sale is {draft.sale_type}'
        )

    if not product.stock:
        logger.debug(f"add_unit ignored: product {product.id} has no stock")
        return False

    availability = check_stock_availability(
        product.unit_size_kegs, total_available_liters, draft.cart, keg_capacity_liters
    )
    if not availability.is_available:
        logger.debug(
            f"add_unit ignored: product {product.id} needs "
            f"{liters_for(product.unit_size_kegs, keg_capacity_liters)} L, "
            f"{availability.remaining_liters} L left"
        )
        return False

    line = draft.cart.find(product.id)
    if line:
        line.quantity += 1
    else:
        draft.cart.lines.append(CartLine(product=product, quantity=1))
    return True


def set_quantity(
    draft: SaleDraft,
    product_id,
    new_quantity: int,
    total_available_liters,
    keg_capacity_liters=KEG_CAPACITY_LITERS
) -> bool:
    """
    Set the quantity of a cart line.

    0 removes the line. Increases must fit in the remaining liters or the
    whole change is ignored (returns False); decreases always apply.
    """
    if new_quantity < 0:
        raise BusinessLogicError('The quantity cannot be negative')

    line = draft.cart.find(product_id)
    if line is None:
        return False

    if new_quantity == 0:
        draft.cart.remove(product_id)
        return True

    delta_units = new_quantity - line.quantity
    if delta_units > 0:
        availability = check_stock_availability(
            line.product.unit_size_kegs, total_available_liters, draft.cart, keg_capacity_liters
        )
        delta_liters = delta_units * liters_for(line.product.unit_size_kegs, keg_capacity_liters)
        if delta_liters > availability.remaining_liters:
            logger.debug(
                f"set_quantity ignored: product {product_id} needs {delta_liters} L more, "
                f"{availability.remaining_liters} L left"
            )
            return False

    line.quantity = new_quantity
    return True


def remove_line(draft: SaleDraft, product_id) -> bool:
    """Remove a line from the cart."""
    return draft.cart.remove(product_id)


def clear_draft(draft: SaleDraft) -> None:
    """Cancel the sale in progress: empty cart, no discount, nothing tendered."""
    draft.reset()


def set_discount(draft: SaleDraft, discount_type: str, value: Decimal) -> Discount:
    """Set the whole-cart discount."""
    discount_type = (discount_type or DiscountType.AMOUNT).strip().lower()
    if discount_type not in DiscountType.ALL:
        raise BusinessLogicError(f'Invalid discount type: {discount_type}')
    if value is None or value < 0:
        raise BusinessLogicError('The discount cannot be negative')

    draft.discount = Discount(type=discount_type, value=Decimal(value))
    return draft.discount


def set_payment_method(draft: SaleDraft, method: str) -> str:
    try:
        draft.payment_method = normalize_payment_method(method)
    except ValueError as e:
        raise BusinessLogicError(str(e))
    return draft.payment_method


def set_tendered_amount(draft: SaleDraft, amount: Decimal) -> Decimal:
    """Record the cash / transfer amount received (ignored for credit sales)."""
    if amount is None or amount < 0:
        raise BusinessLogicError('The tendered amount cannot be negative')
    draft.tendered_amount = Decimal(amount)
    return draft.tendered_amount


def set_sale_type(draft: SaleDraft, sale_type: str) -> str:
    try:
        new_sale_type = SaleType((sale_type or '').strip().lower()).value
    except ValueError:
        raise BusinessLogicError(f'Invalid sale type: {sale_type}')
    _ensure_cart_matches(draft, new_sale_type)
    draft.sale_type = new_sale_type
    return draft.sale_type


def select_customer(draft: SaleDraft, account: Optional[CustomerAccount]) -> SaleDraft:
    """
    Attach (or detach, with None) the customer of the sale.

    Wholesale customers switch the draft to the wholesale catalog and retail
    customers to the retail one. The switch is refused while the cart holds
    products from the current catalog.
    """
    if account is None:
        draft.customer_id = None
        return draft

    if account.customer_type in (SaleType.RETAIL.value, SaleType.WHOLESALE.value):
        _ensure_cart_matches(draft, account.customer_type)
        draft.sale_type = account.customer_type
    draft.customer_id = account.customer_id
    return draft


def _ensure_cart_matches(draft: SaleDraft, sale_type: str) -> None:
    if sale_type == draft.sale_type or draft.cart.is_empty:
        return
    raise BusinessLogicError(
        f'The cart holds {draft.sale_type} products. Clear it before switching to {sale_type}'
    )

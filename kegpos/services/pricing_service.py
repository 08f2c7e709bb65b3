"""Pricing service - subtotal, discount and total of a cart."""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Iterable, List

from kegpos.models import Discount, DiscountType
from kegpos.utils.number_format import quantize_money


@dataclass(frozen=True)
class PricingTotals:
    subtotal: Decimal
    discount_amount: Decimal
    total: Decimal
    lines: List[Dict[str, Any]] = field(default_factory=list)


def calculate_discount(subtotal: Decimal, discount: Discount) -> Decimal:
    """
    Discount in money for the given subtotal.

    Not capped at the subtotal: an oversized discount only drives the total
    to zero.
    """
    if discount is None:
        return Decimal('0.00')
    if discount.type == DiscountType.PERCENTAGE:
        return quantize_money(subtotal * Decimal(discount.value) / Decimal('100'))
    return quantize_money(discount.value)


def calculate_totals(cart: Iterable, discount: Discount) -> PricingTotals:
    """Calculate line totals, subtotal, discount and total for a cart."""
    lines_details = []
    subtotal = Decimal('0')

    for line in cart:
        unit_price = Decimal(str(line.product.price_per_unit))
        line_total = quantize_money(unit_price * line.quantity)

        lines_details.append({
            'product_id': line.product.id,
            'product_name': getattr(line.product, 'name', None),
            'unit_size_kegs': line.product.unit_size_kegs,
            'qty': line.quantity,
            'unit_price': unit_price,
            'line_total': line_total,
        })
        subtotal += line_total

    subtotal = quantize_money(subtotal)
    discount_amount = calculate_discount(subtotal, discount)

    return PricingTotals(
        subtotal=subtotal,
        discount_amount=discount_amount,
        total=max(Decimal('0.00'), subtotal - discount_amount),
        lines=lines_details,
    )

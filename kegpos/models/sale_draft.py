"""
Sale draft value objects.

The draft is the operator's work in progress: cart lines, discount, payment
method, tendered amount and selected customer. It is a plain in-memory object
passed to the services in ``kegpos.services``; the web layer stores its
serialized form in the session between requests.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Iterator, List, Mapping, Optional


class DiscountType:
    AMOUNT = 'amount'
    PERCENTAGE = 'percentage'

    ALL = (AMOUNT, PERCENTAGE)


@dataclass
class Discount:
    """Whole-cart discount, a flat amount or a percentage of the subtotal."""
    type: str = DiscountType.AMOUNT
    value: Decimal = Decimal('0')


@dataclass
class CartLine:
    """
    Quantity of one product in the cart.

    ``product`` is shared, never owned: any object exposing ``id``,
    ``unit_size_kegs``, ``price_per_unit`` and ``stock`` (normally a
    ``Product`` row).
    """
    product: Any
    quantity: int

    @property
    def product_id(self):
        return self.product.id


@dataclass
class Cart:
    """Ordered cart lines, at most one per product."""
    lines: List[CartLine] = field(default_factory=list)

    def __iter__(self) -> Iterator[CartLine]:
        return iter(self.lines)

    def __len__(self) -> int:
        return len(self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def find(self, product_id) -> Optional[CartLine]:
        for line in self.lines:
            if line.product_id == product_id:
                return line
        return None

    def remove(self, product_id) -> bool:
        line = self.find(product_id)
        if line is None:
            return False
        self.lines.remove(line)
        return True

    def clear(self) -> None:
        self.lines.clear()


@dataclass
class SaleDraft:
    """Sale being built at the terminal."""
    cart: Cart = field(default_factory=Cart)
    discount: Discount = field(default_factory=Discount)
    payment_method: str = 'cash'
    tendered_amount: Decimal = Decimal('0')
    customer_id: Optional[int] = None
    sale_type: str = 'retail'

    def reset(self) -> None:
        """Forget the cart, discount and tendered amount after settlement."""
        self.cart.clear()
        self.discount = Discount()
        self.tendered_amount = Decimal('0')

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe form (for the session cookie)."""
        return {
            'lines': [[line.product_id, line.quantity] for line in self.cart],
            'discount': {'type': self.discount.type, 'value': str(self.discount.value)},
            'payment_method': self.payment_method,
            'tendered_amount': str(self.tendered_amount),
            'customer_id': self.customer_id,
            'sale_type': self.sale_type,
        }

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]], products_by_id: Mapping[Any, Any],
                  default_sale_type: str = 'retail') -> 'SaleDraft':
        """
        Rebuild a draft from ``to_dict`` output.

        Lines whose product is no longer in ``products_by_id`` are dropped.
        """
        data = data or {}
        cart = Cart()
        for product_id, quantity in data.get('lines', []):
            product = products_by_id.get(product_id)
            if product is not None and int(quantity) > 0:
                cart.lines.append(CartLine(product=product, quantity=int(quantity)))

        discount_data = data.get('discount') or {}
        return cls(
            cart=cart,
            discount=Discount(
                type=discount_data.get('type', DiscountType.AMOUNT),
                value=Decimal(str(discount_data.get('value', '0'))),
            ),
            payment_method=data.get('payment_method', 'cash'),
            tendered_amount=Decimal(str(data.get('tendered_amount', '0'))),
            customer_id=data.get('customer_id'),
            sale_type=data.get('sale_type', default_sale_type),
        )


@dataclass(frozen=True)
class CustomerAccount:
    """Read-only view of a customer's account for reconciliation."""
    customer_id: Optional[int]
    balance: Decimal = Decimal('0')
    credit_limit: Decimal = Decimal('0')
    customer_type: str = 'retail'


@dataclass
class SettlementResult:
    """Everything the terminal shows (and the ledger records) for a settlement."""
    subtotal: Decimal
    discount_amount: Decimal
    total: Decimal
    previous_balance: Decimal
    amount_due_including_account: Decimal
    needs_payment: bool
    change: Decimal
    remaining_debt: Decimal
    new_balance: Decimal
    payment_method: str
    tendered_amount: Decimal
    liters_consumed: Decimal
    payment_status: str
    sale_id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'subtotal': str(self.subtotal),
            'discount_amount': str(self.discount_amount),
            'total': str(self.total),
            'previous_balance': str(self.previous_balance),
            'amount_due_including_account': str(self.amount_due_including_account),
            'needs_payment': self.needs_payment,
            'change': str(self.change),
            'remaining_debt': str(self.remaining_debt),
            'new_balance': str(self.new_balance),
            'payment_method': self.payment_method,
            'tendered_amount': str(self.tendered_amount),
            'liters_consumed': str(self.liters_consumed),
            'payment_status': self.payment_status,
            'sale_id': self.sale_id,
        }

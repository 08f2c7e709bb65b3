"""Models package - exports the SQLAlchemy models and the sale draft value objects."""
# Catalog and stock
from kegpos.models.product import Product, SaleType
from kegpos.models.liquid_stock import LiquidStock, StockDelivery

# Customers
from kegpos.models.customer import Customer, CustomerStatus, CustomerTransaction, TransactionType

# Sales
from kegpos.models.sale import Sale, PaymentMethod, PaymentStatus, normalize_payment_method
from kegpos.models.sale_line import SaleLine

# Draft (not persisted)
from kegpos.models.sale_draft import (
    Cart, CartLine, CustomerAccount, Discount, DiscountType, SaleDraft, SettlementResult
)

__all__ = [
    'Product', 'SaleType', 'LiquidStock', 'StockDelivery',
    'Customer', 'CustomerStatus', 'CustomerTransaction', 'TransactionType',
    'Sale', 'PaymentMethod', 'PaymentStatus', 'normalize_payment_method', 'SaleLine',
    'Cart', 'CartLine', 'CustomerAccount', 'Discount', 'DiscountType', 'SaleDraft', 'SettlementResult',
]

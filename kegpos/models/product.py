"""Product model."""
from sqlalchemy import Column, BigInteger, Integer, String, Boolean, Numeric, DateTime, CheckConstraint
from sqlalchemy.sql import func
from kegpos.database import Base
import enum


class SaleType(str, enum.Enum):
    """Which catalog a product (or a sale) belongs to."""
    RETAIL = 'retail'
    WHOLESALE = 'wholesale'


class Product(Base):
    """
    Sellable unit of liquid.

    One unit holds ``unit_size_kegs`` kegs (1-8 for retail bundles, 9 for a
    wholesale drum). ``stock`` counts units on hand for display only; the cart
    is constrained by the shared liters pool in ``LiquidStock``.
    """

    __tablename__ = 'product'

    id = Column(BigInteger().with_variant(Integer, 'sqlite'), primary_key=True, autoincrement=True)
    name = Column(String(120), nullable=False)
    sale_type = Column(String(20), nullable=False, default=SaleType.RETAIL.value)
    unit_size_kegs = Column(Integer, nullable=False, default=1)
    price_per_unit = Column(Numeric(12, 2), nullable=False, default=0)
    stock = Column(Integer, nullable=False, default=0)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Table constraints
    __table_args__ = (
        CheckConstraint("unit_size_kegs > 0", name="check_product_unit_size_positive"),
        CheckConstraint("price_per_unit >= 0", name="check_product_price_non_negative"),
        CheckConstraint("stock >= 0", name="check_product_stock_non_negative"),
        CheckConstraint("sale_type IN ('retail', 'wholesale')", name="check_product_sale_type"),
    )

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', unit_size_kegs={self.unit_size_kegs})>"

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'sale_type': self.sale_type,
            'unit_size_kegs': self.unit_size_kegs,
            'price_per_unit': str(self.price_per_unit),
            'stock': self.stock,
            'active': self.active,
        }

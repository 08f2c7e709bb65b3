"""Liquid stock models: the shared liters pool and its deliveries."""
from decimal import Decimal
from sqlalchemy import Column, BigInteger, Integer, String, Numeric, DateTime
from sqlalchemy.sql import func
from kegpos.database import Base


class LiquidStock(Base):
    """
    Total liters available for sale.

    Single row; every product draws from it in multiples of the keg capacity.
    """

    __tablename__ = 'liquid_stock'

    id = Column(BigInteger().with_variant(Integer, 'sqlite'), primary_key=True, autoincrement=True)
    total_available_liters = Column(Numeric(12, 2), nullable=False, default=Decimal('0'))
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<LiquidStock(total_available_liters={self.total_available_liters})>"


class StockDelivery(Base):
    """Delivery of liquid from a supplier (adds to the liters pool)."""

    __tablename__ = 'stock_delivery'

    id = Column(BigInteger().with_variant(Integer, 'sqlite'), primary_key=True, autoincrement=True)
    liters = Column(Numeric(12, 2), nullable=False)
    supplier = Column(String(200), nullable=True)
    available_after = Column(Numeric(12, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self):
        return f"<StockDelivery(id={self.id}, liters={self.liters})>"

    def to_dict(self):
        return {
            'id': self.id,
            'liters': str(self.liters),
            'supplier': self.supplier,
            'available_after': str(self.available_after),
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

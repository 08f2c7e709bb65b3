"""Sale Line model."""
from sqlalchemy import Column, BigInteger, Integer, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from kegpos.database import Base


class SaleLine(Base):
    """Sale Line - one product of a settled sale."""

    __tablename__ = 'sale_line'

    id = Column(BigInteger().with_variant(Integer, 'sqlite'), primary_key=True, autoincrement=True)
    sale_id = Column(BigInteger().with_variant(Integer, 'sqlite'), ForeignKey('sale.id', ondelete='CASCADE'), nullable=False, index=True)
    product_id = Column(BigInteger().with_variant(Integer, 'sqlite'), ForeignKey('product.id'), nullable=False)
    qty = Column(Integer, nullable=False)
    unit_size_kegs = Column(Integer, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)
    line_total = Column(Numeric(12, 2), nullable=False)
    liters = Column(Numeric(12, 2), nullable=False)

    # Relationships
    sale = relationship('Sale', back_populates='lines')
    product = relationship('Product')

    def __repr__(self):
        return f"<SaleLine(id={self.id}, product_id={self.product_id}, qty={self.qty})>"

    def to_dict(self):
        return {
            'product_id': self.product_id,
            'product_name': self.product.name if self.product else None,
            'qty': self.qty,
            'unit_size_kegs': self.unit_size_kegs,
            'unit_price': str(self.unit_price),
            'line_total': str(self.line_total),
            'liters': str(self.liters),
        }

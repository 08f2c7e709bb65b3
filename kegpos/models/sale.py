"""Sale model."""
from sqlalchemy import Column, BigInteger, Integer, String, Numeric, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.sql import func
from kegpos.database import Base
import enum


class PaymentMethod(str, enum.Enum):
    """How the operator recorded the payment."""
    CASH = 'cash'
    TRANSFER = 'transfer'
    CREDIT = 'credit'


def normalize_payment_method(value) -> str:
    """
    Normalize payment method value to its lowercase string form.

    Raises:
        ValueError: If value is not cash, transfer or credit
    """
    if isinstance(value, PaymentMethod):
        return value.value

    normalized = str(value or '').strip().lower()
    if normalized in {m.value for m in PaymentMethod}:
        return normalized
    raise ValueError(f"Invalid payment method: {value}. Must be 'cash', 'transfer' or 'credit'.")


class PaymentStatus(str, enum.Enum):
    """Settlement outcome from the customer's point of view."""
    PAID = 'paid'
    PARTIAL = 'partial'
    PENDING = 'pending'


class Sale(Base):
    """Settled sale."""

    __tablename__ = 'sale'

    id = Column(BigInteger().with_variant(Integer, 'sqlite'), primary_key=True, autoincrement=True)
    datetime = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    sale_type = Column(String(20), nullable=False, default='retail')
    customer_id = Column(BigInteger().with_variant(Integer, 'sqlite'), ForeignKey('customer.id'), nullable=True)

    payment_method = Column(String(20), nullable=False)
    payment_status = Column(String(20), nullable=False, default=PaymentStatus.PAID.value)

    subtotal = Column(Numeric(12, 2), nullable=False)
    discount_amount = Column(Numeric(12, 2), nullable=False, default=0)
    total = Column(Numeric(12, 2), nullable=False)
    amount_paid = Column(Numeric(12, 2), nullable=False, default=0)
    change_amount = Column(Numeric(12, 2), nullable=False, default=0)
    remaining_debt = Column(Numeric(12, 2), nullable=False, default=0)

    # Account reconciliation snapshot
    previous_balance = Column(Numeric(12, 2), nullable=False, default=0)
    new_balance = Column(Numeric(12, 2), nullable=False, default=0)

    liters_consumed = Column(Numeric(12, 2), nullable=False, default=0)

    # Relationships
    customer = relationship('Customer', back_populates='sales')
    lines = relationship('SaleLine', back_populates='sale', cascade='all, delete-orphan')

    @hybrid_property
    def amount_due_including_account(self):
        """Total plus prior debt minus prior credit."""
        return (self.total or 0) - (self.previous_balance or 0)

    def __repr__(self):
        return f"<Sale(id={self.id}, total={self.total}, payment_method={self.payment_method})>"

    def to_dict(self, include_lines=False):
        data = {
            'id': self.id,
            'datetime': self.datetime.isoformat() if self.datetime else None,
            'sale_type': self.sale_type,
            'customer_id': self.customer_id,
            'payment_method': self.payment_method,
            'payment_status': self.payment_status,
            'subtotal': str(self.subtotal),
            'discount_amount': str(self.discount_amount),
            'total': str(self.total),
            'amount_paid': str(self.amount_paid),
            'change': str(self.change_amount),
            'remaining_debt': str(self.remaining_debt),
            'previous_balance': str(self.previous_balance),
            'new_balance': str(self.new_balance),
            'amount_due_including_account': str(self.amount_due_including_account),
            'liters_consumed': str(self.liters_consumed),
        }
        if include_lines:
            data['lines'] = [line.to_dict() for line in self.lines]
        return data

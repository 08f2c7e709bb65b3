"""Customer models."""
from decimal import Decimal
from sqlalchemy import Column, BigInteger, Integer, String, Text, Numeric, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from kegpos.database import Base
import enum


class CustomerStatus(str, enum.Enum):
    ACTIVE = 'active'
    INACTIVE = 'inactive'
    BLOCKED = 'blocked'


class TransactionType(str, enum.Enum):
    """Kind of movement on a customer account."""
    SALE = 'sale'
    PAYMENT = 'payment'


class Customer(Base):
    """
    Customer with a signed running balance.

    balance > 0: the store owes the customer (credit).
    balance < 0: the customer owes the store (debt).
    """

    __tablename__ = 'customer'

    id = Column(BigInteger().with_variant(Integer, 'sqlite'), primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    phone = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    address = Column(Text, nullable=True)
    customer_type = Column(String(20), nullable=False, default='retail')
    balance = Column(Numeric(12, 2), nullable=False, default=Decimal('0'))
    credit_limit = Column(Numeric(12, 2), nullable=False, default=Decimal('0'))
    status = Column(String(20), nullable=False, default=CustomerStatus.ACTIVE.value)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    sales = relationship('Sale', back_populates='customer')
    transactions = relationship('CustomerTransaction', back_populates='customer',
                                order_by='CustomerTransaction.id',
                                cascade='all, delete-orphan')

    def __repr__(self):
        return f"<Customer(id={self.id}, name='{self.name}', balance={self.balance})>"

    def to_account(self):
        """Snapshot of the account fields the settlement engine reads."""
        from kegpos.models.sale_draft import CustomerAccount
        return CustomerAccount(
            customer_id=self.id,
            balance=Decimal(str(self.balance or 0)),
            credit_limit=Decimal(str(self.credit_limit or 0)),
            customer_type=self.customer_type,
        )


class CustomerTransaction(Base):
    """Account history line (sale charged or payment received)."""

    __tablename__ = 'customer_transaction'

    id = Column(BigInteger().with_variant(Integer, 'sqlite'), primary_key=True, autoincrement=True)
    customer_id = Column(BigInteger().with_variant(Integer, 'sqlite'), ForeignKey('customer.id'), nullable=False, index=True)
    sale_id = Column(BigInteger().with_variant(Integer, 'sqlite'), ForeignKey('sale.id'), nullable=True)
    type = Column(String(20), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    payment_method = Column(String(20), nullable=True)
    balance_after = Column(Numeric(12, 2), nullable=False)
    description = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    customer = relationship('Customer', back_populates='transactions')

    def __repr__(self):
        return f"<CustomerTransaction(id={self.id}, type={self.type}, amount={self.amount})>"

    def to_dict(self):
        return {
            'id': self.id,
            'sale_id': self.sale_id,
            'type': self.type,
            'amount': str(self.amount),
            'payment_method': self.payment_method,
            'balance_after': str(self.balance_after),
            'description': self.description,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

"""
Integration tests for table constraints.
"""

import pytest
from decimal import Decimal
from sqlalchemy.exc import IntegrityError

from kegpos.models import Product, SaleType


def _product(**overrides):
    fields = dict(name='1 Keg', sale_type=SaleType.RETAIL.value, unit_size_kegs=1,
                  price_per_unit=Decimal('1500'), stock=10, active=True)
    fields.update(overrides)
    return Product(**fields)


@pytest.mark.parametrize('overrides', [
    {'unit_size_kegs': 0},
    {'unit_size_kegs': -9},
    {'price_per_unit': Decimal('-1')},
    {'stock': -1},
    {'sale_type': 'export'},
])
def test_invalid_product_rejected(session, overrides):
    session.add(_product(**overrides))
    with pytest.raises(IntegrityError):
        session.commit()
    session.rollback()

    assert session.query(Product).count() == 0


def test_valid_product_saved(session):
    session.add(_product(price_per_unit=Decimal('0'), stock=0))
    session.commit()
    assert session.query(Product).count() == 1

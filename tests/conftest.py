import pytest
from decimal import Decimal

from kegpos import create_app
from kegpos import database
from kegpos.models import Customer, LiquidStock, Product, SaleDraft, SaleType


@pytest.fixture(scope='session')
def app():
    """Create application instance for testing."""
    app = create_app('config.TestingConfig')
    return app


@pytest.fixture(scope='function')
def client(app, session):
    """Create test client (fresh cookie jar, so a fresh sale draft)."""
    return app.test_client()


@pytest.fixture(scope='function')
def session(app):
    """Database session on freshly created tables."""
    database.create_all()
    session = database.get_session()
    yield session
    session.rollback()
    database.get_session().remove()
    database.drop_all()


# =====================================================
# IN-MEMORY OBJECTS (no database)
# =====================================================

@pytest.fixture
def make_product():
    """Build unsaved products with explicit ids."""
    def _make(product_id, unit_size_kegs, price='1500', stock=10, sale_type=SaleType.RETAIL.value):
        return Product(
            id=product_id,
            name=f'{unit_size_kegs} Keg(s)',
            sale_type=sale_type,
            unit_size_kegs=unit_size_kegs,
            price_per_unit=Decimal(price),
            stock=stock,
            active=True,
        )
    return _make


@pytest.fixture
def draft():
    return SaleDraft()


# =====================================================
# DATABASE ROWS
# =====================================================

@pytest.fixture(scope='function')
def liquid_stock(session):
    """Pool holding 500 liters (20 kegs)."""
    stock = LiquidStock(total_available_liters=Decimal('500'))
    session.add(stock)
    session.commit()
    return stock


@pytest.fixture(scope='function')
def keg_product(session):
    """Retail single keg at 1500."""
    product = Product(name='1 Keg', sale_type=SaleType.RETAIL.value, unit_size_kegs=1,
                      price_per_unit=Decimal('1500'), stock=100, active=True)
    session.add(product)
    session.commit()
    return product


@pytest.fixture(scope='function')
def drum_product(session):
    """Wholesale drum (9 kegs) at 9000."""
    product = Product(name='Drum (9 Kegs)', sale_type=SaleType.WHOLESALE.value, unit_size_kegs=9,
                      price_per_unit=Decimal('9000'), stock=45, active=True)
    session.add(product)
    session.commit()
    return product


@pytest.fixture(scope='function')
def customer(session):
    """Retail customer with an empty account."""
    customer = Customer(name='Walk-in Customer', customer_type=SaleType.RETAIL.value,
                        balance=Decimal('0'), credit_limit=Decimal('10000'))
    session.add(customer)
    session.commit()
    return customer


@pytest.fixture(scope='function')
def indebted_customer(session):
    """Wholesale customer owing 2000."""
    customer = Customer(name='Adebayo Motors', customer_type=SaleType.WHOLESALE.value,
                        balance=Decimal('-2000'), credit_limit=Decimal('50000'))
    session.add(customer)
    session.commit()
    return customer

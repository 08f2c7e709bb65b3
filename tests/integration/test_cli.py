"""
Integration tests for the Flask CLI commands.
"""

from decimal import Decimal

from kegpos.models import Customer, LiquidStock, Product


def test_seed_demo_is_idempotent(app, session):
    runner = app.test_cli_runner()

    result = runner.invoke(args=['seed-demo'])
    assert result.exit_code == 0, result.output
    assert 'Products: 9' in result.output

    assert session.query(Product).count() == 9
    assert session.query(Product).filter(Product.sale_type == 'wholesale').count() == 1
    assert session.query(Customer).count() == 4
    assert session.query(LiquidStock).first().total_available_liters == Decimal('6000.00')

    again = runner.invoke(args=['seed-demo'])
    assert again.exit_code == 0
    assert 'Products: 0' in again.output
    assert session.query(Product).count() == 9


def test_init_db(app, session):
    result = app.test_cli_runner().invoke(args=['init-db'])
    assert result.exit_code == 0
    assert 'Database tables created' in result.output

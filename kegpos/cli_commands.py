"""
Flask CLI commands for terminal setup.

Commands:
- flask init-db: Create the database tables
- flask seed-demo: Load the demo catalog, customers and liquid stock
"""

import click
from decimal import Decimal
from kegpos import database
from kegpos.models import Customer, LiquidStock, Product, SaleType

# (name, unit_size_kegs, price_per_unit, stock)
DEMO_RETAIL_PRODUCTS = [
    ('1 Keg', 1, Decimal('1500'), 127),
    ('2 Kegs', 2, Decimal('3000'), 63),
    ('3 Kegs', 3, Decimal('4500'), 42),
    ('4 Kegs', 4, Decimal('6000'), 31),
    ('5 Kegs', 5, Decimal('7500'), 25),
    ('6 Kegs', 6, Decimal('9000'), 21),
    ('7 Kegs', 7, Decimal('10500'), 18),
    ('8 Kegs', 8, Decimal('12000'), 15),
]
DEMO_WHOLESALE_PRODUCTS = [
    ('Drum (9 Kegs)', 9, Decimal('9000'), 45),
]
# (name, customer_type, balance, credit_limit)
DEMO_CUSTOMERS = [
    ('Walk-in Customer', SaleType.RETAIL.value, Decimal('0'), Decimal('0')),
    ('Adebayo Motors', SaleType.WHOLESALE.value, Decimal('-2000'), Decimal('50000')),
    ("Kemi's Store", SaleType.RETAIL.value, Decimal('6000'), Decimal('10000')),
    ('Taiwo Enterprises', SaleType.WHOLESALE.value, Decimal('0'), Decimal('100000')),
]
DEMO_TOTAL_LITERS = Decimal('6000')


def seed_demo_data(session) -> dict:
    """Insert the demo rows that are missing. Returns how many of each were added."""
    added = {'products': 0, 'customers': 0, 'liquid_stock': 0}

    existing_products = {name for (name,) in session.query(Product.name).all()}
    for sale_type, rows in ((SaleType.RETAIL.value, DEMO_RETAIL_PRODUCTS),
                            (SaleType.WHOLESALE.value, DEMO_WHOLESALE_PRODUCTS)):
        for name, kegs, price, stock in rows:
            if name in existing_products:
                continue
            session.add(Product(name=name, sale_type=sale_type, unit_size_kegs=kegs,
                                price_per_unit=price, stock=stock, active=True))
            added['products'] += 1

    existing_customers = {name for (name,) in session.query(Customer.name).all()}
    for name, customer_type, balance, credit_limit in DEMO_CUSTOMERS:
        if name in existing_customers:
            continue
        session.add(Customer(name=name, customer_type=customer_type,
                             balance=balance, credit_limit=credit_limit))
        added['customers'] += 1

    if not session.query(LiquidStock).first():
        session.add(LiquidStock(total_available_liters=DEMO_TOTAL_LITERS))
        added['liquid_stock'] = 1

    session.commit()
    return added


def init_cli_commands(app):
    """Register CLI commands with Flask app."""

    @app.cli.command('init-db')
    @click.option('--drop', is_flag=True, help='Drop existing tables first')
    def init_db_command(drop):
        """Create the database tables."""
        if drop:
            click.confirm('This deletes every sale, customer and product. Continue?', abort=True)
            database.drop_all()
            click.echo(click.style('Tables dropped.', fg='yellow'))

        database.create_all()
        click.echo(click.style('Database tables created.', fg='green', bold=True))

    @app.cli.command('seed-demo')
    def seed_demo_command():
        """Load the demo catalog, customers and liquid stock."""
        session = database.get_session()
        try:
            added = seed_demo_data(session)
        except Exception as e:
            session.rollback()
            click.echo(click.style(f'Error while seeding demo data: {str(e)}', fg='red'))
            raise click.Abort()

        click.echo(click.style('Demo data loaded.', fg='green', bold=True))
        click.echo(f"   Products: {added['products']}")
        click.echo(f"   Customers: {added['customers']}")
        click.echo(f"   Liquid stock rows: {added['liquid_stock']}")

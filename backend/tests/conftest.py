"""
Pytest fixtures for the Dukan backend tests.

Provides an in-memory database, a test client, and small factories for
products, sales and expenses.
"""

from datetime import datetime

import pytest
from dukan import create_app
from dukan.extensions import db
from dukan.models import Expense, Product, Sale, SaleItem


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'REPORT_TIMEZONE': 'Asia/Karachi',
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def make_product(db_session):
    """Factory for products; prices are given in cents."""
    counter = {"n": 0}

    def _make(
        *,
        stock: int = 10,
        cost_cents: int = 1000,
        retail_cents: int = 1500,
        name: str | None = None,
        product_number: str | None = None,
        category: str = "General",
    ) -> Product:
        counter["n"] += 1
        n = counter["n"]
        product = Product(
            product_number=product_number or f"SKU-{n:03d}",
            name=name or f"Product {n}",
            category=category,
            cost_price_cents=cost_cents,
            retail_price_cents=retail_cents,
            wholesale_price_cents=0,
            stock=stock,
            unit="pcs",
        )
        db_session.add(product)
        db_session.commit()
        return product

    return _make


@pytest.fixture(scope='function')
def make_sale(db_session):
    """Insert a sale directly with a chosen UTC-naive created_at."""

    def _make(*, created_at: datetime, subtotal_cents: int, profit_cents: int, method: str = "Cash") -> Sale:
        tax_cents = subtotal_cents // 10
        sale = Sale(
            subtotal_cents=subtotal_cents,
            tax_cents=tax_cents,
            discount_cents=0,
            total_amount_cents=subtotal_cents + tax_cents,
            total_profit_cents=profit_cents,
            payment_method=method,
            created_at=created_at,
            items=[
                SaleItem(
                    line_number=1,
                    product_id=999,
                    name="Backfilled",
                    quantity=1,
                    unit_price_cents=subtotal_cents,
                    unit_cost_cents=subtotal_cents - profit_cents,
                )
            ],
        )
        db_session.add(sale)
        db_session.commit()
        return sale

    return _make


@pytest.fixture(scope='function')
def make_expense(db_session):
    def _make(*, created_at: datetime, amount_cents: int, category: str = "Misc") -> Expense:
        expense = Expense(amount_cents=amount_cents, category=category, created_at=created_at)
        db_session.add(expense)
        db_session.commit()
        return expense

    return _make

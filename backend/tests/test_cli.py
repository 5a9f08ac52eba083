"""CLI command tests (flask system / flask maintenance)."""

from dukan.cli import DEMO_PRODUCTS
from dukan.extensions import db
from dukan.models import Product, Sale
from dukan.services import sales_service


def test_seed_demo_is_idempotent(app, db_session):
    runner = app.test_cli_runner()

    result = runner.invoke(args=["system", "seed-demo"])
    assert result.exit_code == 0
    assert f"Seeded {len(DEMO_PRODUCTS)} product(s)." in result.output
    assert db.session.query(Product).count() == len(DEMO_PRODUCTS)

    result = runner.invoke(args=["system", "seed-demo"])
    assert result.exit_code == 0
    assert "Seeded 0 product(s)." in result.output
    assert "SKIP" in result.output


def test_init_db(app, db_session):
    result = app.test_cli_runner().invoke(args=["system", "init-db"])
    assert result.exit_code == 0
    assert "Database tables created" in result.output


def test_reset_db_aborts_without_confirmation(app, db_session, make_product):
    make_product()
    result = app.test_cli_runner().invoke(args=["system", "reset-db"], input="n\n")
    assert result.exit_code != 0
    assert db.session.query(Product).count() == 1


def test_reset_db_with_yes(app, db_session, make_product):
    make_product()
    result = app.test_cli_runner().invoke(args=["system", "reset-db", "--yes"])
    assert result.exit_code == 0
    assert "Database reset complete" in result.output
    assert db.session.query(Product).count() == 0


def test_recalculate_profit(app, db_session, make_product):
    product = make_product(stock=5, cost_cents=1000, retail_cents=1500)
    sale = sales_service.commit_sale([{"productId": product.id, "quantity": 1, "price": 15}])
    product.cost_price_cents = 1400
    db.session.commit()
    runner = app.test_cli_runner()

    dry = runner.invoke(args=["maintenance", "recalculate-profit", "--dry-run"])
    assert dry.exit_code == 0
    assert "Would update 1" in dry.output
    db.session.expire_all()
    assert db.session.get(Sale, sale.id).total_profit_cents == 500

    real = runner.invoke(args=["maintenance", "recalculate-profit"])
    assert real.exit_code == 0
    assert "Updated 1" in real.output
    db.session.expire_all()
    assert db.session.get(Sale, sale.id).total_profit_cents == 100

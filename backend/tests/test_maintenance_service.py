# Overview: Pytest coverage for the out-of-band profit recalculation.

from dukan.extensions import db
from dukan.models import Sale
from dukan.services import inventory_service, sales_service
from dukan.services.maintenance_service import recalculate_sale_profit


def _sell(product, quantity, price):
    return sales_service.commit_sale(
        [{"productId": product.id, "quantity": quantity, "price": price}], "Cash"
    )


def test_recalculates_from_current_cost(db_session, make_product):
    product = make_product(stock=10, cost_cents=1000, retail_cents=1500)
    sale = _sell(product, 2, 15.00)
    assert sale.total_profit_cents == 1000

    inventory_service.update_product(product_id=product.id, patch={"cost_price_cents": 1200})

    result = recalculate_sale_profit()

    assert result == {"scanned": 1, "updated": 1, "missing_products": [], "dry_run": False}
    refreshed = db.session.get(Sale, sale.id)
    assert refreshed.total_profit_cents == 600
    assert refreshed.items[0].unit_cost_cents == 1200


def test_dry_run_writes_nothing(db_session, make_product):
    product = make_product(stock=10, cost_cents=1000, retail_cents=1500)
    sale = _sell(product, 1, 15.00)
    inventory_service.update_product(product_id=product.id, patch={"cost_price_cents": 500})

    result = recalculate_sale_profit(dry_run=True)

    assert result["updated"] == 1
    assert result["dry_run"] is True
    db.session.expire_all()
    assert db.session.get(Sale, sale.id).total_profit_cents == 500


def test_unchanged_costs_are_left_alone(db_session, make_product):
    product = make_product(stock=10, cost_cents=1000, retail_cents=1500)
    _sell(product, 3, 15.00)

    result = recalculate_sale_profit()

    assert result["scanned"] == 1
    assert result["updated"] == 0


def test_deleted_product_keeps_snapshot_cost(db_session, make_product):
    kept = make_product(stock=10, cost_cents=1000, retail_cents=1500)
    gone = make_product(stock=10, cost_cents=200, retail_cents=500)
    sale = sales_service.commit_sale([
        {"productId": kept.id, "quantity": 1, "price": 15.00},
        {"productId": gone.id, "quantity": 2, "price": 5.00},
    ])
    gone_id = gone.id
    assert sale.total_profit_cents == 500 + 600

    inventory_service.delete_product(product_id=gone_id)
    inventory_service.update_product(product_id=kept.id, patch={"cost_price_cents": 1100})

    result = recalculate_sale_profit()

    assert result["missing_products"] == [gone_id]
    assert db.session.get(Sale, sale.id).total_profit_cents == 400 + 600


def test_empty_history(db_session):
    assert recalculate_sale_profit() == {
        "scanned": 0, "updated": 0, "missing_products": [], "dry_run": False,
    }

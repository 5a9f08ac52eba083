# Overview: Service-layer operations for maintenance; explicit, out-of-band data repair.

from __future__ import annotations

from flask import current_app

from ..extensions import db
from ..models import Product, Sale


def recalculate_sale_profit(*, dry_run: bool = False) -> dict:
    """
    Recompute every sale's total profit from current product cost prices.

    Sale profit is a commit-time snapshot; this rewrites it and is only ever
    run on demand (flask maintenance recalculate-profit). Lines whose product
    has since been deleted keep their snapshotted unit cost.
    """
    costs = dict(db.session.query(Product.id, Product.cost_price_cents).all())

    scanned = 0
    updated = 0
    missing = set()

    for sale in db.session.query(Sale).order_by(Sale.id.asc()).all():
        scanned += 1
        profit_cents = 0
        repriced = []
        for item in sale.items:
            unit_cost = costs.get(item.product_id)
            if unit_cost is None:
                missing.add(item.product_id)
                current_app.logger.warning(
                    "Product %s for sale %s no longer exists; keeping snapshotted cost",
                    item.product_id, sale.id,
                )
                unit_cost = item.unit_cost_cents
            elif unit_cost != item.unit_cost_cents:
                repriced.append((item, unit_cost))
            profit_cents += (item.unit_price_cents - unit_cost) * item.quantity

        if profit_cents != sale.total_profit_cents or repriced:
            updated += 1
            if not dry_run:
                sale.total_profit_cents = profit_cents
                for item, unit_cost in repriced:
                    item.unit_cost_cents = unit_cost

    if dry_run:
        db.session.rollback()
    else:
        db.session.commit()

    current_app.logger.info(
        "Profit recalculation %s: scanned=%d updated=%d",
        "dry run" if dry_run else "complete", scanned, updated,
    )
    return {
        "scanned": scanned,
        "updated": updated,
        "missing_products": sorted(missing),
        "dry_run": dry_run,
    }

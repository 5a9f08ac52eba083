# Overview: Flask CLI command groups for bootstrap and maintenance.

# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Use: flask --app wsgi <group> <command> [options]
#
# System bootstrap:
# - flask --app wsgi system init-db
#   Create any missing tables (idempotent). Prefer `flask db upgrade` once migrations are in use.
# - flask --app wsgi system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
# - flask --app wsgi system seed-demo
#   Insert a handful of demo products (skips ones that already exist).
#
# Maintenance:
# - flask --app wsgi maintenance recalculate-profit [--dry-run]
#   Recompute every sale's total profit from current product cost prices.

import click
from flask.cli import with_appcontext

from .extensions import db
from .models import Product
from .money_utils import from_cents
from .services import maintenance_service

DEMO_PRODUCTS = [
    # (product_number, name, category, cost, retail, wholesale, stock, unit)
    ("RICE-5KG", "Basmati Rice 5kg", "Grocery", 150000, 180000, 165000, 40, "bag"),
    ("OIL-1L", "Cooking Oil 1L", "Grocery", 52000, 60000, 56000, 25, "btl"),
    ("SOAP-01", "Bath Soap", "Toiletries", 9000, 12000, 10500, 8, "pcs"),
    ("TEA-250", "Black Tea 250g", "Beverages", 38000, 45000, 41000, 15, "pack"),
]


@click.group('system')
def system_group():
    """System bootstrap commands."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    """Create any missing tables."""
    db.create_all()
    click.echo("PASS Database tables created.")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """Drop and recreate every table. Products, sales and expenses are lost."""
    if not yes:
        click.confirm("WARN Every product, sale and expense will be erased. Continue?", abort=True)

    db.session.remove()
    db.drop_all()
    db.create_all()

    click.echo("PASS Database reset complete.")


@system_group.command('seed-demo')
@with_appcontext
def seed_demo():
    """Insert demo products for local development."""
    created = 0
    for number, name, category, cost, retail, wholesale, stock, unit in DEMO_PRODUCTS:
        exists = db.session.query(Product).filter(
            (Product.product_number == number) | (Product.name == name)
        ).first()
        if exists:
            click.echo(f"SKIP {number} already exists")
            continue
        db.session.add(Product(
            product_number=number,
            name=name,
            category=category,
            cost_price_cents=cost,
            retail_price_cents=retail,
            wholesale_price_cents=wholesale,
            stock=stock,
            unit=unit,
        ))
        created += 1
        click.echo(f"PASS {number} {name} @ {from_cents(retail):.2f}")
    db.session.commit()
    click.echo(f"Seeded {created} product(s).")


@click.group('maintenance')
def maintenance_group():
    """Maintenance commands."""


@maintenance_group.command('recalculate-profit')
@click.option('--dry-run', is_flag=True, help='Report what would change without writing')
@with_appcontext
def recalculate_profit_cli(dry_run):
    """
    Recompute sale profit from current product cost prices.

    Sale profit is normally a commit-time snapshot; run this only when cost
    prices were entered wrong and history must be corrected.
    """
    result = maintenance_service.recalculate_sale_profit(dry_run=dry_run)
    verb = "Would update" if dry_run else "Updated"
    click.echo(f"Scanned {result['scanned']} sales. {verb} {result['updated']}.")
    if result["missing_products"]:
        ids = ", ".join(str(pid) for pid in result["missing_products"])
        click.echo(f"WARN Missing products kept snapshotted cost: {ids}")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(maintenance_group)

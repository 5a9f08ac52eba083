"""Initial schema: products, sales, sale_items, expenses

Revision ID: 20261017_initial
Revises:
Create Date: 2026-10-17
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261017_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("product_number", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("category", sa.String(length=128), nullable=False),
        sa.Column("cost_price_cents", sa.Integer(), nullable=False),
        sa.Column("retail_price_cents", sa.Integer(), nullable=False),
        sa.Column("wholesale_price_cents", sa.Integer(), nullable=False),
        sa.Column("stock", sa.Integer(), nullable=False),
        sa.Column("unit", sa.String(length=32), nullable=False),
        sa.Column("version_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_products"),
        sa.UniqueConstraint("product_number", name="uq_products_product_number"),
        sa.UniqueConstraint("name", name="uq_products_name"),
        sa.CheckConstraint("stock >= 0", name="ck_products_stock_nonnegative"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_products_created_at", "products", ["created_at"], unique=False)

    op.create_table(
        "sales",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("subtotal_cents", sa.Integer(), nullable=False),
        sa.Column("tax_cents", sa.Integer(), nullable=False),
        sa.Column("discount_cents", sa.Integer(), nullable=False),
        sa.Column("total_amount_cents", sa.Integer(), nullable=False),
        sa.Column("total_profit_cents", sa.Integer(), nullable=False),
        sa.Column("payment_method", sa.String(length=16), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_sales"),
        sa.CheckConstraint("payment_method IN ('Cash', 'Card')", name="ck_sales_payment_method"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_sales_created_at", "sales", ["created_at"], unique=False)

    op.create_table(
        "sale_items",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("sale_id", sa.Integer(), nullable=False),
        sa.Column("line_number", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price_cents", sa.Integer(), nullable=False),
        sa.Column("unit_cost_cents", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["sale_id"], ["sales.id"], name="fk_sale_items_sale_id_sales"),
        sa.PrimaryKeyConstraint("id", name="pk_sale_items"),
        sa.UniqueConstraint("sale_id", "line_number", name="uq_sale_items_sale_line"),
        sa.CheckConstraint("quantity > 0", name="ck_sale_items_quantity_positive"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_sale_items_sale_id", "sale_items", ["sale_id"], unique=False)
    op.create_index("ix_sale_items_product_id", "sale_items", ["product_id"], unique=False)

    op.create_table(
        "expenses",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("amount_cents", sa.Integer(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category", sa.String(length=128), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_expenses"),
        sa.CheckConstraint("amount_cents > 0", name="ck_expenses_amount_positive"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_expenses_created_at", "expenses", ["created_at"], unique=False)


def downgrade():
    op.drop_index("ix_expenses_created_at", table_name="expenses")
    op.drop_table("expenses")
    op.drop_index("ix_sale_items_product_id", table_name="sale_items")
    op.drop_index("ix_sale_items_sale_id", table_name="sale_items")
    op.drop_table("sale_items")
    op.drop_index("ix_sales_created_at", table_name="sales")
    op.drop_table("sales")
    op.drop_index("ix_products_created_at", table_name="products")
    op.drop_table("products")

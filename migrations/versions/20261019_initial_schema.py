"""initial schema: clients, categories, products, orders

Revision ID: 20261019_initial
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261019_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
	op.create_table(
		"clients",
		sa.Column("id", sa.Integer(), primary_key=True),
		sa.Column("full_name", sa.String(255), nullable=False),
		sa.Column("phone", sa.String(32), nullable=False),
		sa.Column("address", sa.String(512), nullable=False),
		sa.Column("cashback", sa.Numeric(12, 2), nullable=False),
		sa.Column("comment", sa.Text(), nullable=True),
		sa.Column("version", sa.Integer(), nullable=False),
		sa.CheckConstraint("cashback >= 0", name="ck_clients_cashback_non_negative"),
	)
	op.create_index("ix_clients_full_name", "clients", ["full_name"])
	op.create_table(
		"categories",
		sa.Column("id", sa.Integer(), primary_key=True),
		sa.Column("name", sa.String(128), nullable=False),
		sa.UniqueConstraint("name", name="uq_categories_name"),
	)
	op.create_table(
		"products",
		sa.Column("id", sa.Integer(), primary_key=True),
		sa.Column("name", sa.String(255), nullable=False),
		sa.Column("price", sa.Numeric(10, 2), nullable=False),
		sa.Column("weight", sa.Numeric(10, 3), nullable=False),
		sa.Column("category_id", sa.Integer(), sa.ForeignKey("categories.id"), nullable=False),
	)
	op.create_table(
		"orders",
		sa.Column("id", sa.Integer(), primary_key=True),
		sa.Column("client_id", sa.Integer(), sa.ForeignKey("clients.id"), nullable=False),
		sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
		sa.Column("delivery_method", sa.String(64), nullable=False),
		sa.Column("discount_percent", sa.Numeric(5, 2), nullable=False),
		sa.Column("discount_reason", sa.Text(), nullable=True),
		sa.Column("cashback_used", sa.Numeric(12, 2), nullable=False),
		sa.Column("cashback_earned", sa.Numeric(12, 2), nullable=False),
		sa.Column("total_price", sa.Numeric(12, 2), nullable=False),
		sa.Column("status", sa.Boolean(), nullable=False),
	)
	op.create_index("ix_orders_client_id", "orders", ["client_id"])
	op.create_index("ix_orders_created_at", "orders", ["created_at"])
	op.create_table(
		"order_items",
		sa.Column("id", sa.Integer(), primary_key=True),
		sa.Column("order_id", sa.Integer(), sa.ForeignKey("orders.id"), nullable=False),
		sa.Column("product_id", sa.Integer(), sa.ForeignKey("products.id"), nullable=False),
		sa.Column("quantity", sa.Integer(), nullable=False),
		sa.Column("unit_price", sa.Numeric(10, 2), nullable=False),
	)


def downgrade() -> None:
	op.drop_table("order_items")
	op.drop_index("ix_orders_created_at", table_name="orders")
	op.drop_index("ix_orders_client_id", table_name="orders")
	op.drop_table("orders")
	op.drop_table("products")
	op.drop_table("categories")
	op.drop_index("ix_clients_full_name", table_name="clients")
	op.drop_table("clients")

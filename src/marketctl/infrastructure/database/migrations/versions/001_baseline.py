"""Baseline schema — users, products, orders, escrows, id counters.

Revision ID: 001_baseline
Revises: None
Create Date: 2026-10-18

Existing databases get stamped at this revision without running it;
databases created without version tracking get it applied during
``marketctl upgrade``.
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision: str = "001_baseline"
down_revision: str | None = None
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None

_KINDS = ("user", "product", "order", "escrow")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=False),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("email", sa.Text, nullable=False),
        sa.Column("role", sa.Text, nullable=False),
        sa.Column("reputation", sa.Integer, nullable=False, server_default="100"),
        sa.Column("created_at", sa.Text, nullable=False),
        sa.Column("updated_at", sa.Text),
    )

    op.create_table(
        "products",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=False),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("price", sa.Integer, nullable=False),
        sa.Column("stock_quantity", sa.Integer, nullable=False),
        sa.Column("seller_id", sa.Integer, nullable=False),
        sa.Column("created_at", sa.Text, nullable=False),
        sa.Column("updated_at", sa.Text),
    )
    op.create_index("ix_products_seller", "products", ["seller_id"])

    op.create_table(
        "orders",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=False),
        sa.Column("product_id", sa.Integer, nullable=False),
        sa.Column("buyer_id", sa.Integer, nullable=False),
        sa.Column("quantity", sa.Integer, nullable=False),
        sa.Column("total_price", sa.Integer, nullable=False),
        sa.Column("status", sa.Text, nullable=False),
        sa.Column("created_at", sa.Text, nullable=False),
        sa.Column("updated_at", sa.Text),
    )
    op.create_index("ix_orders_status", "orders", ["status"])
    op.create_index("ix_orders_buyer", "orders", ["buyer_id"])

    op.create_table(
        "escrows",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=False),
        sa.Column("order_id", sa.Integer, nullable=False),
        sa.Column("amount", sa.Integer, nullable=False),
        sa.Column("status", sa.Text, nullable=False),
        sa.Column("created_at", sa.Text, nullable=False),
        sa.Column("updated_at", sa.Text),
    )
    op.create_index("ix_escrows_order", "escrows", ["order_id"])

    counters = op.create_table(
        "id_counters",
        sa.Column("kind", sa.Text, primary_key=True),
        sa.Column("next_value", sa.Integer, nullable=False, server_default="1"),
    )
    op.bulk_insert(counters, [{"kind": kind, "next_value": 1} for kind in _KINDS])


def downgrade() -> None:
    op.drop_table("id_counters")
    op.drop_index("ix_escrows_order", table_name="escrows")
    op.drop_table("escrows")
    op.drop_index("ix_orders_buyer", table_name="orders")
    op.drop_index("ix_orders_status", table_name="orders")
    op.drop_table("orders")
    op.drop_index("ix_products_seller", table_name="products")
    op.drop_table("products")
    op.drop_table("users")

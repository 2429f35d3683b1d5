"""SQLAlchemy Core table definitions for the marketctl database.

One table per entity kind, each an independent id → record map.  There are
no foreign keys: referential integrity is enforced by the services, and a
record may outlive the records it references (e.g. orders of a deleted
user).
"""

from __future__ import annotations

from sqlalchemy import Column, Index, Integer, MetaData, Table, Text

from marketctl.domain.types import EntityKind

metadata = MetaData()

users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("name", Text, nullable=False),
    Column("email", Text, nullable=False),
    Column("role", Text, nullable=False),
    Column("reputation", Integer, nullable=False, default=100, server_default="100"),
    Column("created_at", Text, nullable=False),
    Column("updated_at", Text),
)

products = Table(
    "products",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("name", Text, nullable=False),
    Column("description", Text, nullable=False),
    Column("price", Integer, nullable=False),
    Column("stock_quantity", Integer, nullable=False),
    Column("seller_id", Integer, nullable=False),
    Column("created_at", Text, nullable=False),
    Column("updated_at", Text),
)

orders = Table(
    "orders",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("product_id", Integer, nullable=False),
    Column("buyer_id", Integer, nullable=False),
    Column("quantity", Integer, nullable=False),
    Column("total_price", Integer, nullable=False),
    Column("status", Text, nullable=False),
    Column("created_at", Text, nullable=False),
    Column("updated_at", Text),
)

escrows = Table(
    "escrows",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("order_id", Integer, nullable=False),
    Column("amount", Integer, nullable=False),
    Column("status", Text, nullable=False),
    Column("created_at", Text, nullable=False),
    Column("updated_at", Text),
)

# ---------------------------------------------------------------------------
# Indexes for frequently filtered columns
# ---------------------------------------------------------------------------

Index("ix_products_seller", products.c.seller_id)
Index("ix_orders_status", orders.c.status)
Index("ix_orders_buyer", orders.c.buyer_id)
Index("ix_escrows_order", escrows.c.order_id)

id_counters = Table(
    "id_counters",
    metadata,
    Column("kind", Text, primary_key=True),
    Column("next_value", Integer, nullable=False, default=1, server_default="1"),
)

ENTITY_TABLES: dict[EntityKind, Table] = {
    EntityKind.USER: users,
    EntityKind.PRODUCT: products,
    EntityKind.ORDER: orders,
    EntityKind.ESCROW: escrows,
}

"""SQLite database engine, schema, and id counters via SQLAlchemy Core."""

from marketctl.infrastructure.database.counters import next_id
from marketctl.infrastructure.database.engine import (
    create_db_engine,
    db_path_for,
    init_database,
)
from marketctl.infrastructure.database.schema import (
    ENTITY_TABLES,
    escrows,
    id_counters,
    metadata,
    orders,
    products,
    users,
)

__all__ = [
    "ENTITY_TABLES",
    "create_db_engine",
    "db_path_for",
    "escrows",
    "id_counters",
    "init_database",
    "metadata",
    "next_id",
    "orders",
    "products",
    "users",
]

"""Database engine setup for SQLite with WAL mode.

SQLite is the persistence layer: WAL mode for concurrent reads and ACID
transactions for the read-modify-write cycle of every operation.  The DB is
stored at {root}/.marketctl/marketctl.db.

Transactions start with ``BEGIN IMMEDIATE`` so a writer takes the database
write lock up front.  Two processes sharing the file therefore never
interleave the read and write halves of an operation.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event, insert, select
from sqlalchemy.engine import Engine

from marketctl.domain.types import EntityKind
from marketctl.infrastructure.database.schema import id_counters, metadata

DATA_DIRNAME = ".marketctl"
DB_FILENAME = "marketctl.db"


def db_path_for(root: Path) -> Path:
    """Location of the database file under *root*."""
    return root / DATA_DIRNAME / DB_FILENAME


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL mode and immediate transactions."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        # Let SQLAlchemy emit BEGIN itself (see _begin_immediate).
        dbapi_conn.isolation_level = None
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA busy_timeout=5000")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def init_database(root: Path) -> Engine:
    """Initialize the marketctl database at ``{root}/.marketctl/marketctl.db``.

    Creates the ``.marketctl/`` directory structure, all tables from
    :data:`schema.metadata`, and seeds the ``id_counters`` table with a
    row per entity kind.

    Idempotent — safe to call on an existing database.

    Returns the engine ready for use.
    """
    data_dir = root / DATA_DIRNAME
    data_dir.mkdir(parents=True, exist_ok=True)
    (data_dir / "backups").mkdir(exist_ok=True)

    engine = create_db_engine(db_path_for(root))
    metadata.create_all(engine)
    _seed_counters(engine)
    return engine


def _seed_counters(engine: Engine) -> None:
    """Insert initial counter rows for every entity kind that lacks one."""
    with engine.begin() as conn:
        for kind in EntityKind:
            row = conn.execute(
                select(id_counters.c.kind).where(id_counters.c.kind == kind.value)
            ).first()
            if row is None:
                conn.execute(insert(id_counters).values(kind=kind.value, next_value=1))

"""Tests for database engine setup."""

from pathlib import Path

from sqlalchemy import inspect, select, text
from sqlalchemy.engine import Engine

from marketctl.infrastructure.database.engine import (
    DATA_DIRNAME,
    DB_FILENAME,
    db_path_for,
    init_database,
)
from marketctl.infrastructure.database.schema import id_counters


class TestInitDatabase:
    def test_creates_layout(self, tmp_path: Path, db_engine: Engine) -> None:
        assert (tmp_path / DATA_DIRNAME / DB_FILENAME).is_file()
        assert (tmp_path / DATA_DIRNAME / "backups").is_dir()
        assert db_path_for(tmp_path) == tmp_path / ".marketctl" / "marketctl.db"

    def test_creates_tables(self, db_engine: Engine) -> None:
        tables = set(inspect(db_engine).get_table_names())
        assert {"users", "products", "orders", "escrows", "id_counters"} <= tables

    def test_wal_mode(self, db_engine: Engine) -> None:
        with db_engine.connect() as conn:
            mode = conn.execute(text("PRAGMA journal_mode")).scalar()
        assert mode == "wal"

    def test_seeds_counters(self, db_engine: Engine) -> None:
        with db_engine.connect() as conn:
            rows = dict(conn.execute(select(id_counters.c.kind, id_counters.c.next_value)).all())
        assert rows == {"user": 1, "product": 1, "order": 1, "escrow": 1}

    def test_idempotent(self, tmp_path: Path, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            conn.execute(id_counters.update().values(next_value=9))
        again = init_database(tmp_path)
        try:
            with again.connect() as conn:
                values = set(conn.execute(select(id_counters.c.next_value)).scalars())
            assert values == {9}
        finally:
            again.dispose()

"""Tests for per-kind id allocation."""

import pytest
from sqlalchemy.engine import Engine

from marketctl.domain.types import EntityKind
from marketctl.infrastructure.database.counters import next_id


class TestNextId:
    def test_first_id_is_one(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            assert next_id(conn, EntityKind.ORDER) == 1

    def test_sequential_increment(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            ids = [next_id(conn, "user") for _ in range(4)]
        assert ids == [1, 2, 3, 4]

    def test_independent_counters(self, db_engine: Engine) -> None:
        """Each entity kind has its own sequence."""
        with db_engine.begin() as conn:
            u1 = next_id(conn, "user")
            p1 = next_id(conn, "product")
            u2 = next_id(conn, "user")
        assert (u1, p1, u2) == (1, 1, 2)

    def test_survives_new_transaction(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            next_id(conn, "escrow")
        with db_engine.begin() as conn:
            assert next_id(conn, "escrow") == 2

    def test_rolled_back_claim_is_released(self, db_engine: Engine) -> None:
        with pytest.raises(RuntimeError), db_engine.begin() as conn:
            next_id(conn, "order")
            raise RuntimeError("boom")
        with db_engine.begin() as conn:
            assert next_id(conn, "order") == 1

    def test_unknown_kind(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn, pytest.raises(ValueError, match="Unknown entity kind"):
            next_id(conn, "invoice")

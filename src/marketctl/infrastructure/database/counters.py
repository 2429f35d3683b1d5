"""Monotonic per-kind id allocation.

Uses the ``id_counters`` table so ids survive restarts and are never
reused after a record is deleted.  Ids start at 1.

The caller owns the transaction — pass a ``Connection`` obtained from
``engine.begin()`` so the counter increment participates in the same
atomic transaction as the record write that uses the id.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select, update

from marketctl.domain.types import EntityKind
from marketctl.infrastructure.database.schema import id_counters

if TYPE_CHECKING:
    from sqlalchemy import Connection

_VALID_KINDS = frozenset(k.value for k in EntityKind)


def next_id(conn: Connection, kind: str) -> int:
    """Claim the next unused id for *kind*.

    Args:
        conn: Active SQLAlchemy connection (caller owns the transaction).
        kind: An :class:`EntityKind` value.

    Returns:
        The claimed id, strictly greater than every id previously
        returned for *kind*.

    Raises:
        ValueError: If *kind* is not a known entity kind.
    """
    if kind not in _VALID_KINDS:
        msg = f"Unknown entity kind: {kind!r}. Expected one of {sorted(_VALID_KINDS)}"
        raise ValueError(msg)

    row = conn.execute(
        select(id_counters.c.next_value).where(id_counters.c.kind == kind)
    ).one()

    current_value: int = row.next_value

    conn.execute(
        update(id_counters)
        .where(id_counters.c.kind == kind)
        .values(next_value=current_value + 1)
    )

    return current_value

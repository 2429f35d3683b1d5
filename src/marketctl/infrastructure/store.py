"""MarketStore — the entity store with serialized transactions.

The store is the single dependency injected into every service.  It owns
the database engine and exposes records through :meth:`transaction`:

- **Reads and writes** go through a :class:`StoreTransaction`, keyed by
  record class (which names its entity kind) and integer id.
- **Ids** come from the per-kind counter inside the same transaction, so a
  rolled-back creation never consumes an id.
- **Serialization**: one operation at a time.  An in-process re-entrant
  lock guards the whole read-modify-write cycle, and every SQLite
  transaction starts with ``BEGIN IMMEDIATE`` so other processes wait too.

The store enforces no referential integrity.  A record may reference an id
that does not exist; services decide when that matters.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from marketctl.domain.records import MarketRecord
from marketctl.domain.validation import MAX_STORED_INT
from marketctl.infrastructure.database.counters import next_id
from marketctl.infrastructure.database.engine import db_path_for, init_database
from marketctl.infrastructure.database.schema import ENTITY_TABLES

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

    from marketctl.config.settings import MarketSettings
    from marketctl.domain.types import EntityKind
    from marketctl.plugins.manager import PluginManager

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=MarketRecord)


# ---------------------------------------------------------------------------
# StoreTransaction: yielded to callers within transaction()
# ---------------------------------------------------------------------------


@dataclass
class StoreTransaction:
    """Active transaction context with get/put/delete/next-id access.

    Every record read here reflects the writes made earlier in the same
    transaction.  Nothing is visible to other connections until the
    transaction commits.
    """

    conn: Connection

    def get(self, record_cls: type[R], entity_id: int) -> R | None:
        """Load the record of *record_cls* with *entity_id*, or None."""
        if not 0 < entity_id <= MAX_STORED_INT:
            return None
        table = ENTITY_TABLES[record_cls.kind]
        row = self.conn.execute(select(table).where(table.c.id == entity_id)).first()
        if row is None:
            return None
        return record_cls.model_validate(dict(row._mapping))

    def put(self, record: MarketRecord) -> None:
        """Insert *record*, or overwrite the stored record with the same id."""
        table = ENTITY_TABLES[record.kind]
        values = record.model_dump(mode="json")
        stmt = sqlite_insert(table).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.id],
            set_={k: v for k, v in values.items() if k != "id"},
        )
        self.conn.execute(stmt)

    def delete(self, record_cls: type[R], entity_id: int) -> R | None:
        """Remove a record and return it, or None if it was absent."""
        existing = self.get(record_cls, entity_id)
        if existing is None:
            return None
        table = ENTITY_TABLES[record_cls.kind]
        self.conn.execute(delete(table).where(table.c.id == entity_id))
        return existing

    def next_id(self, kind: EntityKind) -> int:
        """Claim the next id for *kind* within this transaction."""
        return next_id(self.conn, kind)


# ---------------------------------------------------------------------------
# MarketStore: the repository
# ---------------------------------------------------------------------------


class MarketStore:
    """Repository encapsulating database access for all entity kinds.

    Constructed once at CLI startup from :class:`MarketSettings` and stored
    on the Click context.  Services receive the store via their
    :class:`BaseService` constructor.
    """

    def __init__(self, settings: MarketSettings) -> None:
        self._settings = settings
        self._engine: Engine = init_database(self.root)
        self._lock = threading.RLock()
        self._plugins: PluginManager | None = None

    @property
    def root(self) -> Path:
        """Directory holding ``.marketctl/``."""
        return self._settings.root

    @property
    def db_path(self) -> Path:
        """Path of the SQLite database file."""
        return db_path_for(self.root)

    @property
    def engine(self) -> Engine:
        """The underlying SQLAlchemy engine (for direct access when needed)."""
        return self._engine

    @property
    def settings(self) -> MarketSettings:
        """The resolved settings for this store."""
        return self._settings

    @property
    def plugins(self) -> PluginManager | None:
        """The plugin manager (None if not initialized)."""
        return self._plugins

    def init_plugins(self) -> None:
        """Discover entry-point plugins and attach the manager.

        Called by AppContext when the store is first accessed.  A no-op
        when plugins are disabled in settings.
        """
        if not self._settings.plugins.enabled:
            return
        from marketctl.plugins.manager import PluginManager

        pm = PluginManager()
        pm.discover_and_load()
        self._plugins = pm

    def attach_plugins(self, plugin_manager: PluginManager) -> None:
        """Use an already-configured plugin manager (tests, embedding)."""
        self._plugins = plugin_manager

    @contextmanager
    def transaction(self) -> Iterator[StoreTransaction]:
        """Serialized transaction for one operation's read-modify-write.

        Commits when the block exits normally and rolls back when it
        raises.  A service returning an error result from inside the block
        still commits, so services must decide before writing.

        Usage::

            with store.transaction() as txn:
                order = txn.get(Order, order_id)
                txn.put(order.model_copy(update={"status": "completed"}))
        """
        with self._lock, self._engine.begin() as conn:
            try:
                yield StoreTransaction(conn=conn)
            except BaseException:
                logger.debug("Store transaction rolled back", exc_info=True)
                raise

    def close(self) -> None:
        """Release pooled database connections."""
        self._engine.dispose()

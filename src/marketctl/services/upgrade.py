"""UpgradeService — schema revisions via Alembic.

``apply`` runs BACKUP → MIGRATE → REPORT.  A database created by
``init_database`` before it was ever stamped already has every table, so
it is stamped at head instead of migrated.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any

from alembic import command
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import inspect

from marketctl.infrastructure.database.migrations import build_config, stamp_head
from marketctl.services._helpers import now_compact
from marketctl.services.base import BaseService
from marketctl.services.result import ServiceError, ServiceResult

logger = logging.getLogger(__name__)


def _upgrade_error(op: str, code: str, message: str, **detail: Any) -> ServiceResult:
    return ServiceResult(
        ok=False, op=op, error=ServiceError(code=code, message=message, detail=detail)
    )


class UpgradeService(BaseService):
    """Reports, applies and stamps schema revisions."""

    def _db_url(self) -> str:
        return f"sqlite:///{self._store.db_path}"

    def _tables_exist(self) -> bool:
        """True when the entity tables predate version tracking."""
        return "orders" in inspect(self._store.engine).get_table_names()

    def _revision_state(self) -> tuple[str | None, str | None, list[dict[str, Any]]]:
        """Return ``(current, head, pending)``; pending is newest first."""
        script = ScriptDirectory.from_config(build_config(self._db_url()))
        with self._store.engine.connect() as conn:
            current = MigrationContext.configure(conn).get_current_revision()
        head = script.get_current_head()
        pending: list[dict[str, Any]] = []
        # walk_revisions runs head → base; stop at the applied revision.
        for rev in script.walk_revisions():
            if rev.revision == current:
                break
            pending.append({"revision": rev.revision, "description": rev.doc or ""})
        return current, head, pending

    def _backup_db(self) -> Path:
        """Snapshot the database into ``.marketctl/backups/``.

        Uses SQLite's online backup so pages still in the WAL are included.
        """
        target = self._store.db_path.parent / "backups" / f"marketctl-{now_compact()}.db"
        target.parent.mkdir(parents=True, exist_ok=True)
        raw = self._store.engine.raw_connection()
        try:
            dest = sqlite3.connect(target)
            try:
                raw.driver_connection.backup(dest)
            finally:
                dest.close()
        finally:
            raw.close()
        logger.debug("Database backed up to %s", target)
        return target

    def check_pending(self) -> ServiceResult:
        """List revisions between the database and head without applying them."""
        op = "upgrade"
        try:
            current, head, pending = self._revision_state()
        except Exception as exc:
            return _upgrade_error(op, "CHECK_FAILED", f"Failed to check migrations: {exc}")

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "pending_count": len(pending),
                "pending": pending,
                "current": current,
                "head": head,
            },
        )

    def apply(self) -> ServiceResult:
        """BACKUP → MIGRATE → REPORT."""
        op = "upgrade"

        checked = self.check_pending()
        if not checked.ok:
            return checked
        head = checked.data["head"]
        if not checked.data["pending_count"]:
            return ServiceResult(
                ok=True,
                op=op,
                data={
                    "applied_count": 0,
                    "current": head,
                    "message": "Database is already up to date",
                },
            )

        try:
            backup_path = self._backup_db()
        except (OSError, sqlite3.Error) as exc:
            return _upgrade_error(op, "BACKUP_FAILED", f"Backup failed: {exc}")

        cfg = build_config(self._db_url())
        try:
            if checked.data["current"] is None and self._tables_exist():
                command.stamp(cfg, "head")
            else:
                command.upgrade(cfg, "head")
        except Exception as exc:
            return _upgrade_error(
                op,
                "MIGRATION_FAILED",
                f"Migration failed: {exc}. Backup at: {backup_path}",
                backup_path=str(backup_path),
            )

        logger.debug("Database now at revision %s", head)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "applied_count": checked.data["pending_count"],
                "current": head,
                "backup_path": str(backup_path),
            },
        )

    def stamp_current(self) -> ServiceResult:
        """Mark a freshly created database as being at head."""
        op = "init"
        try:
            stamp_head(self._store.root)
            _, head, _ = self._revision_state()
        except Exception as exc:
            return _upgrade_error(op, "STAMP_FAILED", f"Failed to stamp database: {exc}")

        root = str(self._store.root)
        warnings: list[str] = []
        self._dispatch_event("post_init", {"root": root}, warnings)
        return ServiceResult(
            ok=True,
            op=op,
            data={"root": root, "database": str(self._store.db_path), "current": head},
            warnings=warnings,
        )

"""UserService — signup, profile edits, and removal.

Deleting a user does not cascade: products and orders that reference the
user stay in the store and become orphaned.
"""

from __future__ import annotations

from typing import Any

import structlog

from marketctl.domain.records import User
from marketctl.domain.types import EntityKind, UserRole
from marketctl.domain.validation import validate_user, validate_user_changes
from marketctl.services._helpers import now_iso
from marketctl.services.base import BaseService
from marketctl.services.result import ErrorCode, ServiceResult
from marketctl.services.telemetry import traced

log = structlog.get_logger(__name__)


class UserService(BaseService):
    """Handles the user lifecycle."""

    @traced
    def create_user(
        self,
        name: str,
        email: str,
        role: str,
        *,
        reputation: int | None = None,
    ) -> ServiceResult:
        """Register a new user. Reputation defaults to the configured value."""
        op = "create_user"

        vr = validate_user(name, email, role, reputation)
        if not vr.valid:
            return self._fail(op, ErrorCode.INVALID_INPUT, vr.message)

        if reputation is None:
            reputation = self._store.settings.users.default_reputation

        with self._store.transaction() as txn:
            user = User(
                id=txn.next_id(EntityKind.USER),
                name=name,
                email=email,
                role=UserRole(role),
                reputation=reputation,
                created_at=now_iso(),
            )
            txn.put(user)

        log.debug("user.created", user_id=user.id, role=user.role)
        warnings: list[str] = []
        self._dispatch_event(
            "post_create",
            {"kind": EntityKind.USER.value, "entity_id": user.id, "data": user.to_data()},
            warnings,
        )
        return self._succeed(op, user, warnings)

    @traced
    def view_user(self, user_id: int) -> ServiceResult:
        """Return a user by id."""
        op = "view_user"
        with self._store.transaction() as txn:
            user = txn.get(User, user_id)
        if user is None:
            return self._fail(op, ErrorCode.NOT_FOUND, f"User with id={user_id} not found")
        return self._succeed(op, user)

    @traced
    def update_user(self, user_id: int, *, changes: dict[str, Any]) -> ServiceResult:
        """Apply *changes* (name, email, role, reputation) to a user."""
        op = "update_user"

        vr = validate_user_changes(changes)
        if not vr.valid:
            return self._fail(op, ErrorCode.INVALID_INPUT, vr.message)

        with self._store.transaction() as txn:
            user = txn.get(User, user_id)
            if user is None:
                return self._fail(op, ErrorCode.NOT_FOUND, f"User with id={user_id} not found")

            update = dict(changes)
            if "role" in update:
                update["role"] = UserRole(update["role"])
            update["updated_at"] = now_iso()
            user = user.model_copy(update=update)
            txn.put(user)

        fields_changed = sorted(changes)
        warnings: list[str] = []
        self._dispatch_event(
            "post_update",
            {"kind": EntityKind.USER.value, "entity_id": user_id, "fields_changed": fields_changed},
            warnings,
        )
        return self._succeed(op, user, warnings)

    @traced
    def delete_user(self, user_id: int) -> ServiceResult:
        """Remove a user and return the removed record."""
        op = "delete_user"
        with self._store.transaction() as txn:
            user = txn.delete(User, user_id)
        if user is None:
            return self._fail(op, ErrorCode.NOT_FOUND, f"User with id={user_id} not found")

        log.debug("user.deleted", user_id=user_id)
        warnings: list[str] = []
        self._dispatch_event(
            "post_delete", {"kind": EntityKind.USER.value, "entity_id": user_id}, warnings
        )
        return self._succeed(op, user, warnings)

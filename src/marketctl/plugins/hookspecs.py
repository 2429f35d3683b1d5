"""Pluggy hook specifications for marketctl lifecycle events.

Hooks run synchronously after the operation's transaction has committed,
so a plugin always sees the stored state.  They observe; they cannot veto.
"""

from __future__ import annotations

from typing import Any

import pluggy

PROJECT_NAME = "marketctl"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class MarketHookSpec:
    """Hook specifications for the marketctl plugin system."""

    @hookspec
    def post_create(self, kind: str, entity_id: int, data: dict[str, Any]) -> None:
        """Called after a user, product, order or escrow is created."""

    @hookspec
    def post_update(self, kind: str, entity_id: int, fields_changed: list[str]) -> None:
        """Called after a record's fields are edited (not status changes)."""

    @hookspec
    def post_transition(
        self,
        kind: str,
        entity_id: int,
        from_status: str,
        to_status: str,
    ) -> None:
        """Called after an order or escrow changes status."""

    @hookspec
    def post_delete(self, kind: str, entity_id: int) -> None:
        """Called after a record is removed."""

    @hookspec
    def post_init(self, root: str) -> None:
        """Called after ``marketctl init`` prepares a database."""

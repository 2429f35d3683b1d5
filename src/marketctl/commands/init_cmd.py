"""Command: prepare a marketplace database in the current root."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from marketctl.commands._base import MarketCommand

if TYPE_CHECKING:
    from marketctl.commands._context import AppContext


@click.command(
    "init",
    cls=MarketCommand,
    examples="""\
  marketctl init
  marketctl --root ./shop init""",
)
@click.pass_obj
def init_cmd(app: AppContext) -> None:
    """Create the database and mark it at the latest schema revision."""
    from marketctl.services.upgrade import UpgradeService

    app.emit(UpgradeService(app.store).stamp_current())

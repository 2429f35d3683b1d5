"""Subcommand modules for marketctl.

Provides register_commands() which uses deferred imports to keep
``marketctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group.

    4 groups (one per entity kind) + 2 standalone commands.
    """
    # --- Groups ---
    from marketctl.commands.escrow import escrow
    from marketctl.commands.order import order
    from marketctl.commands.product import product
    from marketctl.commands.user import user

    cli.add_command(user)
    cli.add_command(product)
    cli.add_command(order)
    cli.add_command(escrow)

    # --- Standalone commands ---
    from marketctl.commands.init_cmd import init_cmd
    from marketctl.commands.upgrade import upgrade

    cli.add_command(init_cmd)
    cli.add_command(upgrade)

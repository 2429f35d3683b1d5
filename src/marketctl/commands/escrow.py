"""Command group: escrow custody."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from marketctl.commands._base import MarketGroup

if TYPE_CHECKING:
    from marketctl.commands._context import AppContext

_ESCROW_EXAMPLES = """\
  marketctl escrow hold 1 80
  marketctl escrow release 1
  marketctl escrow refund 1"""


@click.group(cls=MarketGroup, examples=_ESCROW_EXAMPLES)
@click.pass_obj
def escrow(app: AppContext) -> None:
    """Hold, release, and refund order funds."""


@escrow.command(examples="  marketctl escrow hold 1 80\n  marketctl -q escrow hold 1 80")
@click.argument("order_id", type=int)
@click.argument("amount", type=int)
@click.pass_obj
def hold(app: AppContext, order_id: int, amount: int) -> None:
    """Hold funds for an order."""
    from marketctl.services.escrow import EscrowService

    app.emit(EscrowService(app.store).hold_escrow(order_id, amount))


@escrow.command(examples="  marketctl escrow show 1")
@click.argument("escrow_id", type=int)
@click.pass_obj
def show(app: AppContext, escrow_id: int) -> None:
    """Show an escrow."""
    from marketctl.services.escrow import EscrowService

    app.emit(EscrowService(app.store).view_escrow(escrow_id))


@escrow.command(examples="  marketctl escrow release 1")
@click.argument("escrow_id", type=int)
@click.pass_obj
def release(app: AppContext, escrow_id: int) -> None:
    """Release held funds to the seller."""
    from marketctl.services.escrow import EscrowService

    app.emit(EscrowService(app.store).release_escrow(escrow_id))


@escrow.command(examples="  marketctl escrow refund 1")
@click.argument("escrow_id", type=int)
@click.pass_obj
def refund(app: AppContext, escrow_id: int) -> None:
    """Return held funds to the buyer."""
    from marketctl.services.escrow import EscrowService

    app.emit(EscrowService(app.store).refund_escrow(escrow_id))

"""Command group: orders and disputes."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from marketctl.commands._base import MarketGroup

if TYPE_CHECKING:
    from marketctl.commands._context import AppContext

_ORDER_EXAMPLES = """\
  marketctl order place --buyer 2 --product 1 --quantity 2 --total 80
  marketctl order complete 1
  marketctl order dispute 1
  marketctl order resolve 1 Refund"""


@click.group(cls=MarketGroup, examples=_ORDER_EXAMPLES)
@click.pass_obj
def order(app: AppContext) -> None:
    """Place orders and drive them to completion or refund."""


@order.command(
    examples="""\
  marketctl order place --buyer 2 --product 1 --quantity 2 --total 80
  marketctl -q order place --buyer 2 --product 1 --quantity 1 --total 40"""
)
@click.option("--buyer", "buyer_id", type=int, required=True, help="Id of the buying user.")
@click.option("--product", "product_id", type=int, required=True, help="Id of the product.")
@click.option("--quantity", type=int, required=True, help="Units to buy.")
@click.option("--total", "total_price", type=int, required=True, help="Total price.")
@click.pass_obj
def place(
    app: AppContext,
    buyer_id: int,
    product_id: int,
    quantity: int,
    total_price: int,
) -> None:
    """Place an order and reserve its stock."""
    from marketctl.services.orders import OrderService

    app.emit(OrderService(app.store).place_order(buyer_id, product_id, quantity, total_price))


@order.command(examples="  marketctl order show 1\n  marketctl --json order show 1")
@click.argument("order_id", type=int)
@click.pass_obj
def show(app: AppContext, order_id: int) -> None:
    """Show an order."""
    from marketctl.services.orders import OrderService

    app.emit(OrderService(app.store).view_order(order_id))


@order.command(examples="  marketctl order update 1 --quantity 3 --total 120")
@click.argument("order_id", type=int)
@click.option("--product", "product_id", type=int, default=None, help="New product id.")
@click.option("--quantity", type=int, default=None, help="New quantity.")
@click.option("--total", "total_price", type=int, default=None, help="New total price.")
@click.pass_obj
def update(
    app: AppContext,
    order_id: int,
    product_id: int | None,
    quantity: int | None,
    total_price: int | None,
) -> None:
    """Edit a pending order."""
    from marketctl.services.orders import OrderService

    changes: dict[str, object] = {}
    if product_id is not None:
        changes["product_id"] = product_id
    if quantity is not None:
        changes["quantity"] = quantity
    if total_price is not None:
        changes["total_price"] = total_price

    if not changes:
        click.echo("No changes specified. Use --help for options.", err=True)
        raise SystemExit(1)

    app.emit(OrderService(app.store).update_order(order_id, changes=changes))


@order.command(examples="  marketctl order delete 1")
@click.argument("order_id", type=int)
@click.pass_obj
def delete(app: AppContext, order_id: int) -> None:
    """Remove an order."""
    from marketctl.services.orders import OrderService

    app.emit(OrderService(app.store).delete_order(order_id))


@order.command(examples="  marketctl order complete 1")
@click.argument("order_id", type=int)
@click.pass_obj
def complete(app: AppContext, order_id: int) -> None:
    """Mark a pending order completed."""
    from marketctl.services.orders import OrderService

    app.emit(OrderService(app.store).complete_order(order_id))


@order.command(examples="  marketctl order dispute 1")
@click.argument("order_id", type=int)
@click.pass_obj
def dispute(app: AppContext, order_id: int) -> None:
    """Open a dispute on a pending order."""
    from marketctl.services.orders import OrderService

    app.emit(OrderService(app.store).dispute_order(order_id))


@order.command(
    examples="""\
  marketctl order resolve 1 Complete
  marketctl order resolve 1 Refund"""
)
@click.argument("order_id", type=int)
@click.argument("resolution")
@click.pass_obj
def resolve(app: AppContext, order_id: int, resolution: str) -> None:
    """Settle an order as Complete or Refund."""
    from marketctl.services.orders import OrderService

    app.emit(OrderService(app.store).resolve_dispute(order_id, resolution))

"""Command group: product listings and stock."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from marketctl.commands._base import MarketGroup

if TYPE_CHECKING:
    from marketctl.commands._context import AppContext

_PRODUCT_EXAMPLES = """\
  marketctl product create --seller 1 "Lamp" "Brass desk lamp" --price 40 --stock 5
  marketctl product show 1
  marketctl product update 1 --seller 1 --price 35
  marketctl product stock 1 20"""


@click.group(cls=MarketGroup, examples=_PRODUCT_EXAMPLES)
@click.pass_obj
def product(app: AppContext) -> None:
    """List, edit, and restock products."""


@product.command(
    examples="""\
  marketctl product create --seller 1 "Lamp" "Brass desk lamp" --price 40 --stock 5
  marketctl -q product create --seller 1 "Rug" "Wool rug" --price 120 --stock 1"""
)
@click.option("--seller", "seller_id", type=int, required=True, help="Id of the listing seller.")
@click.argument("name")
@click.argument("description")
@click.option("--price", type=int, required=True, help="Unit price (positive integer).")
@click.option("--stock", "stock_quantity", type=int, required=True, help="Units on hand.")
@click.pass_obj
def create(
    app: AppContext,
    seller_id: int,
    name: str,
    description: str,
    price: int,
    stock_quantity: int,
) -> None:
    """List a new product. The seller must have the seller role."""
    from marketctl.services.catalog import CatalogService

    app.emit(
        CatalogService(app.store).create_product(
            seller_id, name, description, price, stock_quantity
        )
    )


@product.command(examples="  marketctl product show 1\n  marketctl --json product show 1")
@click.argument("product_id", type=int)
@click.pass_obj
def show(app: AppContext, product_id: int) -> None:
    """Show a product."""
    from marketctl.services.catalog import CatalogService

    app.emit(CatalogService(app.store).view_product(product_id))


@product.command(
    examples="""\
  marketctl product update 1 --seller 1 --price 35
  marketctl product update 1 --seller 1 --name "Desk lamp" --description "Brass" """
)
@click.argument("product_id", type=int)
@click.option("--seller", "seller_id", type=int, required=True, help="Id of the owning seller.")
@click.option("--name", default=None, help="New name.")
@click.option("--description", default=None, help="New description.")
@click.option("--price", type=int, default=None, help="New unit price.")
@click.option("--stock", "stock_quantity", type=int, default=None, help="New stock level.")
@click.pass_obj
def update(
    app: AppContext,
    product_id: int,
    seller_id: int,
    name: str | None,
    description: str | None,
    price: int | None,
    stock_quantity: int | None,
) -> None:
    """Edit a listing owned by --seller."""
    from marketctl.services.catalog import CatalogService

    changes: dict[str, object] = {}
    if name is not None:
        changes["name"] = name
    if description is not None:
        changes["description"] = description
    if price is not None:
        changes["price"] = price
    if stock_quantity is not None:
        changes["stock_quantity"] = stock_quantity

    if not changes:
        click.echo("No changes specified. Use --help for options.", err=True)
        raise SystemExit(1)

    app.emit(
        CatalogService(app.store).update_product(product_id, seller_id, changes=changes)
    )


@product.command(examples="  marketctl product stock 1 20")
@click.argument("product_id", type=int)
@click.argument("quantity", type=int)
@click.pass_obj
def stock(app: AppContext, product_id: int, quantity: int) -> None:
    """Set the stock level of a product."""
    from marketctl.services.catalog import CatalogService

    app.emit(CatalogService(app.store).set_stock(product_id, quantity))


@product.command(examples="  marketctl product deduct 1 2")
@click.argument("product_id", type=int)
@click.argument("quantity", type=int)
@click.pass_obj
def deduct(app: AppContext, product_id: int, quantity: int) -> None:
    """Take units out of stock."""
    from marketctl.services.catalog import CatalogService

    app.emit(CatalogService(app.store).deduct_stock(product_id, quantity))


@product.command(examples="  marketctl product delete 1")
@click.argument("product_id", type=int)
@click.pass_obj
def delete(app: AppContext, product_id: int) -> None:
    """Remove a product listing."""
    from marketctl.services.catalog import CatalogService

    app.emit(CatalogService(app.store).delete_product(product_id))

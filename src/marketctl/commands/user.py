"""Command group: marketplace users."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from marketctl.commands._base import MarketGroup
from marketctl.domain.types import UserRole

if TYPE_CHECKING:
    from marketctl.commands._context import AppContext

_ROLES = [r.value for r in UserRole]

_USER_EXAMPLES = """\
  marketctl user create "Ada" ada@example.com --role seller
  marketctl user show 1
  marketctl user update 1 --reputation 80
  marketctl --json user delete 1"""


@click.group(cls=MarketGroup, examples=_USER_EXAMPLES)
@click.pass_obj
def user(app: AppContext) -> None:
    """Register, inspect, and remove users."""


@user.command(
    examples="""\
  marketctl user create "Ada" ada@example.com --role seller
  marketctl user create "Bob" bob@example.com --role buyer --reputation 50
  marketctl -q user create "Root" root@example.com --role admin"""
)
@click.argument("name")
@click.argument("email")
@click.option("--role", type=click.Choice(_ROLES), required=True, help="Account role.")
@click.option("--reputation", type=int, default=None, help="Initial reputation (0-100).")
@click.pass_obj
def create(
    app: AppContext,
    name: str,
    email: str,
    role: str,
    reputation: int | None,
) -> None:
    """Register a new user."""
    from marketctl.services.users import UserService

    app.emit(UserService(app.store).create_user(name, email, role, reputation=reputation))


@user.command(examples="  marketctl user show 1\n  marketctl --json user show 1")
@click.argument("user_id", type=int)
@click.pass_obj
def show(app: AppContext, user_id: int) -> None:
    """Show a user."""
    from marketctl.services.users import UserService

    app.emit(UserService(app.store).view_user(user_id))


@user.command(
    examples="""\
  marketctl user update 1 --name "Ada L."
  marketctl user update 1 --role buyer --reputation 75"""
)
@click.argument("user_id", type=int)
@click.option("--name", default=None, help="New display name.")
@click.option("--email", default=None, help="New email address.")
@click.option("--role", type=click.Choice(_ROLES), default=None, help="New role.")
@click.option("--reputation", type=int, default=None, help="New reputation (0-100).")
@click.pass_obj
def update(
    app: AppContext,
    user_id: int,
    name: str | None,
    email: str | None,
    role: str | None,
    reputation: int | None,
) -> None:
    """Change a user's profile fields."""
    from marketctl.services.users import UserService

    changes: dict[str, object] = {}
    if name is not None:
        changes["name"] = name
    if email is not None:
        changes["email"] = email
    if role is not None:
        changes["role"] = role
    if reputation is not None:
        changes["reputation"] = reputation

    if not changes:
        click.echo("No changes specified. Use --help for options.", err=True)
        raise SystemExit(1)

    app.emit(UserService(app.store).update_user(user_id, changes=changes))


@user.command(examples="  marketctl user delete 1")
@click.argument("user_id", type=int)
@click.pass_obj
def delete(app: AppContext, user_id: int) -> None:
    """Remove a user. Their products and orders are kept."""
    from marketctl.services.users import UserService

    app.emit(UserService(app.store).delete_user(user_id))

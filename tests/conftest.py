"""Shared pytest fixtures and test helpers for marketctl tests."""

from __future__ import annotations

import logging
import os
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from marketctl.config.settings import MarketSettings
from marketctl.infrastructure.database.engine import init_database
from marketctl.infrastructure.store import MarketStore
from marketctl.services.telemetry import disable_telemetry


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Keep MARKETCTL_* variables from the outer shell out of every test."""
    for name in list(os.environ):
        if name.startswith("MARKETCTL_"):
            monkeypatch.delenv(name, raising=False)
    root = logging.getLogger()
    handlers = root.handlers[:]
    yield
    disable_telemetry()
    root.handlers = handlers


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Engine:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def store(tmp_path: Path) -> MarketStore:
    """Ready-to-use store on a temp directory, plugins not attached."""
    settings = MarketSettings.from_cli(root=tmp_path)
    s = MarketStore(settings)
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def _isolated_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so the CLI creates an isolated database.

    Use via ``@pytest.mark.usefixtures("_isolated_root")`` on command test
    classes.
    """
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Shared test helpers (used across service test modules)
# ---------------------------------------------------------------------------


def create_user(
    store: MarketStore,
    name: str = "Ada",
    role: str = "buyer",
    **kwargs: Any,
) -> dict[str, Any]:
    """Create a user via UserService, asserting success."""
    from marketctl.services.users import UserService

    email = kwargs.pop("email", f"{name.lower()}@example.com")
    result = UserService(store).create_user(name, email, role, **kwargs)
    assert result.ok, result.error
    return result.data


def create_seller(store: MarketStore, name: str = "Sam") -> dict[str, Any]:
    """Create a user with the seller role."""
    return create_user(store, name, role="seller")


def create_product(
    store: MarketStore,
    seller_id: int,
    *,
    name: str = "Lamp",
    price: int = 100,
    stock: int = 5,
) -> dict[str, Any]:
    """List a product via CatalogService, asserting success."""
    from marketctl.services.catalog import CatalogService

    result = CatalogService(store).create_product(
        seller_id, name, f"{name} description", price, stock
    )
    assert result.ok, result.error
    return result.data


def place_order(
    store: MarketStore,
    buyer_id: int,
    product_id: int,
    quantity: int = 1,
    total_price: int = 100,
) -> dict[str, Any]:
    """Place an order via OrderService, asserting success."""
    from marketctl.services.orders import OrderService

    result = OrderService(store).place_order(buyer_id, product_id, quantity, total_price)
    assert result.ok, result.error
    return result.data


def setup_listing(store: MarketStore, stock: int = 5) -> tuple[int, int, int]:
    """Seller, buyer and one product. Returns (seller_id, buyer_id, product_id)."""
    seller = create_seller(store)
    buyer = create_user(store, "Bea", role="buyer")
    product = create_product(store, seller["id"], stock=stock)
    return seller["id"], buyer["id"], product["id"]

"""Tests for the product command group."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from marketctl.cli import cli


def _invoke_json(cli_runner: CliRunner, *args: str) -> dict:
    r = cli_runner.invoke(cli, ["--json", *args])
    assert r.exit_code == 0, r.output
    return json.loads(r.stdout)["data"]


def _seller(cli_runner: CliRunner, name: str = "Sam") -> int:
    data = _invoke_json(
        cli_runner, "user", "create", name, f"{name.lower()}@example.com", "--role", "seller"
    )
    return data["id"]


def _listing(cli_runner: CliRunner, seller_id: int, stock: int = 5) -> int:
    data = _invoke_json(
        cli_runner,
        "product",
        "create",
        "--seller",
        str(seller_id),
        "Lamp",
        "Brass desk lamp",
        "--price",
        "40",
        "--stock",
        str(stock),
    )
    return data["id"]


@pytest.mark.usefixtures("_isolated_root")
class TestProductCommands:
    def test_create(self, cli_runner: CliRunner) -> None:
        seller_id = _seller(cli_runner)
        product_id = _listing(cli_runner, seller_id)
        data = _invoke_json(cli_runner, "product", "show", str(product_id))
        assert data["seller_id"] == seller_id
        assert data["price"] == 40

    def test_buyer_cannot_list(self, cli_runner: CliRunner) -> None:
        _invoke_json(cli_runner, "user", "create", "Bea", "bea@example.com", "--role", "buyer")
        result = cli_runner.invoke(
            cli,
            ["product", "create", "--seller", "1", "Lamp", "Brass", "--price", "4", "--stock", "1"],
        )
        assert result.exit_code == 1
        assert "UNAUTHORIZED" in result.stderr

    def test_update_by_owner(self, cli_runner: CliRunner) -> None:
        seller_id = _seller(cli_runner)
        product_id = _listing(cli_runner, seller_id)
        data = _invoke_json(
            cli_runner,
            "product",
            "update",
            str(product_id),
            "--seller",
            str(seller_id),
            "--price",
            "35",
        )
        assert data["price"] == 35

    def test_update_by_other_seller(self, cli_runner: CliRunner) -> None:
        owner = _seller(cli_runner, "Sam")
        other = _seller(cli_runner, "Sue")
        product_id = _listing(cli_runner, owner)
        result = cli_runner.invoke(
            cli, ["product", "update", str(product_id), "--seller", str(other), "--price", "1"]
        )
        assert result.exit_code == 1
        assert "UNAUTHORIZED" in result.stderr

    def test_stock_and_deduct(self, cli_runner: CliRunner) -> None:
        product_id = _listing(cli_runner, _seller(cli_runner), stock=5)
        restocked = _invoke_json(cli_runner, "product", "stock", str(product_id), "20")
        assert restocked["stock_quantity"] == 20
        deducted = _invoke_json(cli_runner, "product", "deduct", str(product_id), "3")
        assert deducted["stock_quantity"] == 17

    def test_stock_zero_rejected(self, cli_runner: CliRunner) -> None:
        product_id = _listing(cli_runner, _seller(cli_runner))
        result = cli_runner.invoke(cli, ["product", "stock", str(product_id), "0"])
        assert result.exit_code == 1

    def test_delete(self, cli_runner: CliRunner) -> None:
        product_id = _listing(cli_runner, _seller(cli_runner))
        assert cli_runner.invoke(cli, ["product", "delete", str(product_id)]).exit_code == 0
        assert cli_runner.invoke(cli, ["product", "show", str(product_id)]).exit_code == 1

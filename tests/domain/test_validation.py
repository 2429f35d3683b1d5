"""Tests for payload validators."""

import pytest

from marketctl.domain.validation import (
    MAX_STORED_INT,
    ValidationResult,
    validate_escrow,
    validate_order,
    validate_order_changes,
    validate_product,
    validate_product_changes,
    validate_stock,
    validate_user,
    validate_user_changes,
)


class TestValidationResult:
    def test_message_joins_errors(self) -> None:
        vr = ValidationResult(valid=False, errors=["a", "b"])
        assert vr.message == "a; b"


class TestUserValidation:
    def test_valid(self) -> None:
        assert validate_user("Ada", "ada@example.com", "seller").valid

    def test_collects_every_problem(self) -> None:
        vr = validate_user("", "nope", "wizard")
        assert not vr.valid
        assert len(vr.errors) == 3
        assert "name must be a non-empty string" in vr.errors

    @pytest.mark.parametrize("reputation", [-1, 101, "50", True])
    def test_reputation_out_of_range(self, reputation: object) -> None:
        assert not validate_user("Ada", "a@x.io", "buyer", reputation).valid

    def test_reputation_bounds_inclusive(self) -> None:
        assert validate_user("Ada", "a@x.io", "buyer", 0).valid
        assert validate_user("Ada", "a@x.io", "buyer", 100).valid

    def test_changes_empty(self) -> None:
        vr = validate_user_changes({})
        assert vr.errors == ["No changes specified"]

    def test_changes_immutable_and_unknown(self) -> None:
        vr = validate_user_changes({"id": 4, "favourite_colour": "red"})
        assert "Cannot change immutable field: id" in vr.errors
        assert "Unknown field: favourite_colour" in vr.errors

    def test_changes_role(self) -> None:
        assert validate_user_changes({"role": "admin"}).valid
        assert not validate_user_changes({"role": "Admin"}).valid


class TestProductValidation:
    def test_valid(self) -> None:
        assert validate_product("Lamp", "Brass", 40, 5).valid

    @pytest.mark.parametrize(("price", "stock"), [(0, 5), (-1, 5), (40, 0), (40, -2)])
    def test_non_positive_numbers(self, price: int, stock: int) -> None:
        assert not validate_product("Lamp", "Brass", price, stock).valid

    def test_seller_cannot_be_changed(self) -> None:
        vr = validate_product_changes({"seller_id": 2})
        assert vr.errors == ["Cannot change immutable field: seller_id"]

    def test_changes_price(self) -> None:
        assert validate_product_changes({"price": 12}).valid
        assert not validate_product_changes({"price": 0}).valid


class TestStockAndOrders:
    def test_stock_rejects_zero(self) -> None:
        vr = validate_stock(0)
        assert not vr.valid
        assert vr.message == "quantity must be a positive integer, got 0"

    def test_stock_rejects_bool(self) -> None:
        assert not validate_stock(True).valid

    def test_order(self) -> None:
        assert validate_order(1, 10).valid
        vr = validate_order(0, 0)
        assert len(vr.errors) == 2

    def test_order_status_is_not_editable(self) -> None:
        vr = validate_order_changes({"status": "completed"})
        assert vr.errors == ["Cannot change immutable field: status"]

    def test_order_changes(self) -> None:
        assert validate_order_changes({"quantity": 3, "total_price": 30}).valid
        assert not validate_order_changes({"buyer_id": 9}).valid

    def test_escrow(self) -> None:
        assert validate_escrow(1, 50).valid
        assert not validate_escrow(1, 0).valid
        assert not validate_escrow(1, -5).valid
        assert not validate_escrow(0, 50).valid

    @pytest.mark.parametrize("value", [2**63, 2**64 - 1])
    def test_values_beyond_sqlite_integer(self, value: int) -> None:
        vr = validate_order(1, value)
        assert vr.errors == [f"total_price must not exceed {MAX_STORED_INT}, got {value}"]
        assert not validate_escrow(value, 10).valid
        assert not validate_stock(value).valid

    def test_largest_storable_value(self) -> None:
        assert validate_order(1, MAX_STORED_INT).valid

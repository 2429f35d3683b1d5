"""Payload validation for creation and update requests.

Pure functions: they inspect the payload only and never touch the store.
Services run them before any lookup so a malformed request is rejected
without reading or writing anything.

Every validator returns a :class:`ValidationResult`; errors are collected
rather than short-circuited so a caller sees every problem at once.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from marketctl.domain.types import UserRole

MIN_REPUTATION = 0
MAX_REPUTATION = 100

# SQLite INTEGER is signed 64-bit; larger ids and amounts cannot be stored.
MAX_STORED_INT = 2**63 - 1

USER_MUTABLE_FIELDS: frozenset[str] = frozenset({"name", "email", "role", "reputation"})
PRODUCT_MUTABLE_FIELDS: frozenset[str] = frozenset(
    {"name", "description", "price", "stock_quantity"}
)
ORDER_MUTABLE_FIELDS: frozenset[str] = frozenset({"product_id", "quantity", "total_price"})

_IMMUTABLE_FIELDS: frozenset[str] = frozenset(
    {"id", "created_at", "updated_at", "seller_id", "buyer_id", "status"}
)


@dataclass(frozen=True)
class ValidationResult:
    """Result of a payload validation check."""

    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        return "; ".join(self.errors)


# ---------------------------------------------------------------------------
# Field checks: each appends to *errors* and returns nothing
# ---------------------------------------------------------------------------


def _is_int(value: Any) -> bool:
    # bool is an int subclass; True must not pass as a quantity.
    return isinstance(value, int) and not isinstance(value, bool)


def _check_text(errors: list[str], name: str, value: Any) -> None:
    if not isinstance(value, str) or not value.strip():
        errors.append(f"{name} must be a non-empty string")


def _check_positive(errors: list[str], name: str, value: Any) -> None:
    if not _is_int(value) or value <= 0:
        errors.append(f"{name} must be a positive integer, got {value!r}")
    elif value > MAX_STORED_INT:
        errors.append(f"{name} must not exceed {MAX_STORED_INT}, got {value!r}")


def _check_email(errors: list[str], value: Any) -> None:
    _check_text(errors, "email", value)
    if isinstance(value, str) and value.strip() and "@" not in value:
        errors.append(f"email must contain '@', got {value!r}")


def _check_role(errors: list[str], value: Any) -> None:
    allowed = [r.value for r in UserRole]
    if value not in allowed:
        errors.append(f"role must be one of {allowed}, got {value!r}")


def _check_reputation(errors: list[str], value: Any) -> None:
    if not _is_int(value) or not MIN_REPUTATION <= value <= MAX_REPUTATION:
        errors.append(
            f"reputation must be an integer between {MIN_REPUTATION} "
            f"and {MAX_REPUTATION}, got {value!r}"
        )


def _check_change_keys(
    errors: list[str],
    changes: dict[str, Any],
    allowed: frozenset[str],
) -> None:
    if not changes:
        errors.append("No changes specified")
        return
    for key in sorted(changes):
        if key in _IMMUTABLE_FIELDS:
            errors.append(f"Cannot change immutable field: {key}")
        elif key not in allowed:
            errors.append(f"Unknown field: {key}")


def _result(errors: list[str]) -> ValidationResult:
    return ValidationResult(valid=not errors, errors=errors)


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


def validate_user(
    name: Any,
    email: Any,
    role: Any,
    reputation: Any = None,
) -> ValidationResult:
    """Validate a signup payload."""
    errors: list[str] = []
    _check_text(errors, "name", name)
    _check_email(errors, email)
    _check_role(errors, role)
    if reputation is not None:
        _check_reputation(errors, reputation)
    return _result(errors)


def validate_user_changes(changes: dict[str, Any]) -> ValidationResult:
    """Validate a partial user update."""
    errors: list[str] = []
    _check_change_keys(errors, changes, USER_MUTABLE_FIELDS)
    if "name" in changes:
        _check_text(errors, "name", changes["name"])
    if "email" in changes:
        _check_email(errors, changes["email"])
    if "role" in changes:
        _check_role(errors, changes["role"])
    if "reputation" in changes:
        _check_reputation(errors, changes["reputation"])
    return _result(errors)


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------


def validate_product(
    name: Any,
    description: Any,
    price: Any,
    stock_quantity: Any,
) -> ValidationResult:
    """Validate a new listing."""
    errors: list[str] = []
    _check_text(errors, "name", name)
    _check_text(errors, "description", description)
    _check_positive(errors, "price", price)
    _check_positive(errors, "stock_quantity", stock_quantity)
    return _result(errors)


def validate_product_changes(changes: dict[str, Any]) -> ValidationResult:
    """Validate a partial listing update. Ownership cannot be transferred."""
    errors: list[str] = []
    _check_change_keys(errors, changes, PRODUCT_MUTABLE_FIELDS)
    for key in ("name", "description"):
        if key in changes:
            _check_text(errors, key, changes[key])
    for key in ("price", "stock_quantity"):
        if key in changes:
            _check_positive(errors, key, changes[key])
    return _result(errors)


def validate_stock(quantity: Any) -> ValidationResult:
    """Validate an absolute stock level. Zero is rejected, not treated as sold out."""
    errors: list[str] = []
    _check_positive(errors, "quantity", quantity)
    return _result(errors)


# ---------------------------------------------------------------------------
# Orders and escrow
# ---------------------------------------------------------------------------


def validate_order(quantity: Any, total_price: Any) -> ValidationResult:
    """Validate the numeric part of an order placement."""
    errors: list[str] = []
    _check_positive(errors, "quantity", quantity)
    _check_positive(errors, "total_price", total_price)
    return _result(errors)


def validate_order_changes(changes: dict[str, Any]) -> ValidationResult:
    """Validate a partial order update."""
    errors: list[str] = []
    _check_change_keys(errors, changes, ORDER_MUTABLE_FIELDS)
    for key in ("product_id", "quantity", "total_price"):
        if key in changes:
            _check_positive(errors, key, changes[key])
    return _result(errors)


def validate_escrow(order_id: Any, amount: Any) -> ValidationResult:
    """Validate an escrow hold. The order itself is not looked up."""
    errors: list[str] = []
    _check_positive(errors, "order_id", order_id)
    _check_positive(errors, "amount", amount)
    return _result(errors)

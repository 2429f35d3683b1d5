"""Order and escrow status lifecycles.

Status changes are driven by events, not set directly. Each transition map
is keyed by the current status and maps an event to the next status; an
event missing from the current status's row is not allowed.

Terminal statuses have an empty row.
"""

from __future__ import annotations

from enum import StrEnum

# --- Status enums ---


class OrderStatus(StrEnum):
    """Order status."""

    PENDING = "pending"
    COMPLETED = "completed"
    REFUNDED = "refunded"
    IN_DISPUTE = "in_dispute"


class EscrowStatus(StrEnum):
    """Escrow custody status."""

    HELD = "held"
    RELEASED = "released"
    REFUNDED = "refunded"


# --- Events ---


class OrderEvent(StrEnum):
    """Inputs that move an order between statuses."""

    COMPLETE = "complete"
    DISPUTE = "dispute"
    RESOLVE_COMPLETE = "resolve_complete"
    RESOLVE_REFUND = "resolve_refund"


class EscrowEvent(StrEnum):
    """Inputs that move an escrow between statuses."""

    RELEASE = "release"
    REFUND = "refund"


# --- Transition maps ---

# Resolving straight from pending is allowed; a plain refund is not.
ORDER_TRANSITIONS: dict[str, dict[str, str]] = {
    "pending": {
        "complete": "completed",
        "dispute": "in_dispute",
        "resolve_complete": "completed",
        "resolve_refund": "refunded",
    },
    "in_dispute": {
        "resolve_complete": "completed",
        "resolve_refund": "refunded",
    },
    "completed": {},
    "refunded": {},
}

ESCROW_TRANSITIONS: dict[str, dict[str, str]] = {
    "held": {
        "release": "released",
        "refund": "refunded",
    },
    "released": {},
    "refunded": {},
}

# Orders whose quantity, product and price may still change.
EDITABLE_ORDER_STATUSES: frozenset[str] = frozenset({"pending"})


def next_status(
    current: str,
    event: str,
    transitions: dict[str, dict[str, str]],
) -> str | None:
    """Return the status reached by applying *event* in *current*, or None."""
    return transitions.get(current, {}).get(event)


def is_terminal(status: str, transitions: dict[str, dict[str, str]]) -> bool:
    """True when no event leads out of *status*."""
    return not transitions.get(status)

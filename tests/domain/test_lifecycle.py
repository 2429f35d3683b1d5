"""Tests for order and escrow status transitions."""

import pytest

from marketctl.domain.lifecycle import (
    EDITABLE_ORDER_STATUSES,
    ESCROW_TRANSITIONS,
    ORDER_TRANSITIONS,
    EscrowEvent,
    EscrowStatus,
    OrderEvent,
    OrderStatus,
    is_terminal,
    next_status,
)


class TestOrderStatus:
    def test_members(self) -> None:
        assert {s.value for s in OrderStatus} == {
            "pending",
            "completed",
            "refunded",
            "in_dispute",
        }

    def test_every_status_has_a_row(self) -> None:
        assert set(ORDER_TRANSITIONS) == {s.value for s in OrderStatus}

    @pytest.mark.parametrize(
        ("current", "event", "expected"),
        [
            ("pending", OrderEvent.COMPLETE, "completed"),
            ("pending", OrderEvent.DISPUTE, "in_dispute"),
            ("pending", OrderEvent.RESOLVE_COMPLETE, "completed"),
            ("pending", OrderEvent.RESOLVE_REFUND, "refunded"),
            ("in_dispute", OrderEvent.RESOLVE_COMPLETE, "completed"),
            ("in_dispute", OrderEvent.RESOLVE_REFUND, "refunded"),
        ],
    )
    def test_allowed(self, current: str, event: OrderEvent, expected: str) -> None:
        assert next_status(current, event, ORDER_TRANSITIONS) == expected

    @pytest.mark.parametrize(
        ("current", "event"),
        [
            ("in_dispute", OrderEvent.COMPLETE),
            ("in_dispute", OrderEvent.DISPUTE),
            ("completed", OrderEvent.COMPLETE),
            ("completed", OrderEvent.RESOLVE_REFUND),
            ("refunded", OrderEvent.RESOLVE_COMPLETE),
        ],
    )
    def test_rejected(self, current: str, event: OrderEvent) -> None:
        assert next_status(current, event, ORDER_TRANSITIONS) is None

    def test_terminal(self) -> None:
        assert is_terminal("completed", ORDER_TRANSITIONS)
        assert is_terminal("refunded", ORDER_TRANSITIONS)
        assert not is_terminal("pending", ORDER_TRANSITIONS)
        assert not is_terminal("in_dispute", ORDER_TRANSITIONS)

    def test_no_way_back_to_pending(self) -> None:
        for row in ORDER_TRANSITIONS.values():
            assert "pending" not in row.values()

    def test_only_pending_is_editable(self) -> None:
        assert frozenset({"pending"}) == EDITABLE_ORDER_STATUSES


class TestEscrowStatus:
    def test_members(self) -> None:
        assert {s.value for s in EscrowStatus} == {"held", "released", "refunded"}

    def test_held_leaves_once(self) -> None:
        assert next_status("held", EscrowEvent.RELEASE, ESCROW_TRANSITIONS) == "released"
        assert next_status("held", EscrowEvent.REFUND, ESCROW_TRANSITIONS) == "refunded"
        assert next_status("released", EscrowEvent.REFUND, ESCROW_TRANSITIONS) is None
        assert next_status("refunded", EscrowEvent.RELEASE, ESCROW_TRANSITIONS) is None

    def test_never_reenters_held(self) -> None:
        for row in ESCROW_TRANSITIONS.values():
            assert "held" not in row.values()

    def test_unknown_status_has_no_transitions(self) -> None:
        assert next_status("lost", EscrowEvent.RELEASE, ESCROW_TRANSITIONS) is None
        assert is_terminal("lost", ESCROW_TRANSITIONS)

"""Tests for EscrowService."""

from __future__ import annotations

import pytest

from marketctl.infrastructure.store import MarketStore
from marketctl.services.escrow import EscrowService
from marketctl.services.result import ErrorCode
from tests.conftest import place_order, setup_listing


class TestHoldEscrow:
    def test_hold(self, store: MarketStore) -> None:
        _, buyer_id, product_id = setup_listing(store)
        order = place_order(store, buyer_id, product_id)
        result = EscrowService(store).hold_escrow(order["id"], 50)
        assert result.ok
        assert result.data["status"] == "held"
        assert result.data["amount"] == 50
        assert result.data["order_id"] == order["id"]

    def test_order_is_not_checked(self, store: MarketStore) -> None:
        svc = EscrowService(store)
        first = svc.hold_escrow(404, 10)
        second = svc.hold_escrow(404, 20)
        assert first.ok
        assert second.ok
        assert second.data["id"] == first.data["id"] + 1

    @pytest.mark.parametrize("amount", [0, -10])
    def test_amount_must_be_positive(self, store: MarketStore, amount: int) -> None:
        result = EscrowService(store).hold_escrow(1, amount)
        assert result.error.code == ErrorCode.INVALID_INPUT


    @pytest.mark.parametrize("value", [2**63, 2**64 - 1])
    def test_values_beyond_integer_range(self, store: MarketStore, value: int) -> None:
        svc = EscrowService(store)
        assert svc.hold_escrow(1, value).error.code == ErrorCode.INVALID_INPUT
        assert svc.hold_escrow(value, 10).error.code == ErrorCode.INVALID_INPUT
        assert svc.view_escrow(value).error.code == ErrorCode.NOT_FOUND
        assert svc.release_escrow(value).error.code == ErrorCode.NOT_FOUND
        assert svc.hold_escrow(1, 10).data["id"] == 1


class TestSettlement:

    def test_release_once(self, store: MarketStore) -> None:
        svc = EscrowService(store)
        escrow = svc.hold_escrow(1, 50).data
        assert svc.release_escrow(escrow["id"]).data["status"] == "released"
        again = svc.release_escrow(escrow["id"])
        assert again.error.code == ErrorCode.INVALID_INPUT

    def test_refund_once(self, store: MarketStore) -> None:
        svc = EscrowService(store)
        escrow = svc.hold_escrow(1, 50).data
        assert svc.refund_escrow(escrow["id"]).data["status"] == "refunded"
        assert svc.refund_escrow(escrow["id"]).error.code == ErrorCode.INVALID_INPUT
        assert svc.release_escrow(escrow["id"]).error.code == ErrorCode.INVALID_INPUT

    def test_missing(self, store: MarketStore) -> None:
        svc = EscrowService(store)
        assert svc.view_escrow(3).error.message == "Escrow with id=3 not found"
        assert svc.release_escrow(3).error.code == ErrorCode.NOT_FOUND
        assert svc.refund_escrow(3).error.code == ErrorCode.NOT_FOUND

    def test_view(self, store: MarketStore) -> None:
        svc = EscrowService(store)
        held = svc.hold_escrow(1, 50).data
        assert svc.view_escrow(held["id"]).data == held


class TestEscrowScenario:
    def test_hold_release_then_refund(self, store: MarketStore) -> None:
        _, buyer_id, product_id = setup_listing(store)
        order = place_order(store, buyer_id, product_id)
        svc = EscrowService(store)

        held = svc.hold_escrow(order["id"], 50)
        assert held.data["status"] == "held"
        released = svc.release_escrow(held.data["id"])
        assert released.data["status"] == "released"

        refund = svc.refund_escrow(held.data["id"])
        assert refund.error.code == ErrorCode.INVALID_INPUT
        assert refund.error.message == "Escrow is not in a held state"
        assert svc.view_escrow(held.data["id"]).data["status"] == "released"

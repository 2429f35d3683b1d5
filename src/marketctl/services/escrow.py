"""EscrowService — custody of funds for an order.

An escrow starts ``held`` and leaves that state exactly once, to
``released`` or ``refunded``.  It never re-enters ``held``.

The referenced order is not checked: an escrow may name an order id that
does not exist, and several escrows may name the same order.
"""

from __future__ import annotations

import structlog

from marketctl.domain.lifecycle import (
    ESCROW_TRANSITIONS,
    EscrowEvent,
    EscrowStatus,
    next_status,
)
from marketctl.domain.records import Escrow
from marketctl.domain.types import EntityKind
from marketctl.domain.validation import validate_escrow
from marketctl.services._helpers import now_iso
from marketctl.services.base import BaseService
from marketctl.services.result import ErrorCode, ServiceResult
from marketctl.services.telemetry import traced

log = structlog.get_logger(__name__)


def _not_found(escrow_id: int) -> str:
    return f"Escrow with id={escrow_id} not found"


class EscrowService(BaseService):
    """Handles escrow creation, release, and refund."""

    @traced
    def hold_escrow(self, order_id: int, amount: int) -> ServiceResult:
        """Hold *amount* in custody for *order_id*."""
        op = "hold_escrow"

        vr = validate_escrow(order_id, amount)
        if not vr.valid:
            return self._fail(op, ErrorCode.INVALID_INPUT, vr.message)

        with self._store.transaction() as txn:
            escrow = Escrow(
                id=txn.next_id(EntityKind.ESCROW),
                order_id=order_id,
                amount=amount,
                status=EscrowStatus.HELD,
                created_at=now_iso(),
            )
            txn.put(escrow)

        log.debug("escrow.held", escrow_id=escrow.id, order_id=order_id, amount=amount)
        warnings: list[str] = []
        self._dispatch_event(
            "post_create",
            {"kind": EntityKind.ESCROW.value, "entity_id": escrow.id, "data": escrow.to_data()},
            warnings,
        )
        return self._succeed(op, escrow, warnings)

    @traced
    def view_escrow(self, escrow_id: int) -> ServiceResult:
        """Return an escrow by id."""
        op = "view_escrow"
        with self._store.transaction() as txn:
            escrow = txn.get(Escrow, escrow_id)
        if escrow is None:
            return self._fail(op, ErrorCode.NOT_FOUND, _not_found(escrow_id))
        return self._succeed(op, escrow)

    @traced
    def release_escrow(self, escrow_id: int) -> ServiceResult:
        """Release held funds to the seller."""
        return self._apply_event("release_escrow", escrow_id, EscrowEvent.RELEASE)

    @traced
    def refund_escrow(self, escrow_id: int) -> ServiceResult:
        """Return held funds to the buyer."""
        return self._apply_event("refund_escrow", escrow_id, EscrowEvent.REFUND)

    def _apply_event(self, op: str, escrow_id: int, event: EscrowEvent) -> ServiceResult:
        with self._store.transaction() as txn:
            escrow = txn.get(Escrow, escrow_id)
            if escrow is None:
                return self._fail(op, ErrorCode.NOT_FOUND, _not_found(escrow_id))

            current = escrow.status
            target = next_status(current, event, ESCROW_TRANSITIONS)
            if target is None:
                return self._fail(
                    op,
                    ErrorCode.INVALID_INPUT,
                    "Escrow is not in a held state",
                    status=current.value,
                )

            escrow = escrow.model_copy(
                update={"status": EscrowStatus(target), "updated_at": now_iso()}
            )
            txn.put(escrow)

        log.debug(
            "escrow.transition",
            escrow_id=escrow_id,
            from_status=current.value,
            to_status=target,
        )
        warnings: list[str] = []
        self._dispatch_event(
            "post_transition",
            {
                "kind": EntityKind.ESCROW.value,
                "entity_id": escrow_id,
                "from_status": current.value,
                "to_status": target,
            },
            warnings,
        )
        return self._succeed(op, escrow, warnings)

"""OrderService — order placement and the order lifecycle.

Lifecycle (see :data:`marketctl.domain.lifecycle.ORDER_TRANSITIONS`)::

    pending ──complete──────────────▶ completed
    pending ──dispute──▶ in_dispute ──resolve(Complete)──▶ completed
                                    └─resolve(Refund)────▶ refunded

``resolve_dispute`` also accepts a ``pending`` order directly; there is
no other path to ``refunded``.  ``completed`` and ``refunded`` are
terminal.

Placement writes the order and deducts stock in one transaction: either
both land or neither does.  A successful placement is not idempotent, so
callers must not blindly retry it.
"""

from __future__ import annotations

from typing import Any

import structlog

from marketctl.domain.lifecycle import (
    EDITABLE_ORDER_STATUSES,
    ORDER_TRANSITIONS,
    OrderEvent,
    OrderStatus,
    is_terminal,
    next_status,
)
from marketctl.domain.records import Order, Product, User
from marketctl.domain.types import EntityKind, Resolution
from marketctl.domain.validation import validate_order, validate_order_changes
from marketctl.services._helpers import now_iso
from marketctl.services.base import BaseService
from marketctl.services.catalog import CatalogService
from marketctl.services.result import ErrorCode, ServiceResult
from marketctl.services.telemetry import trace_span, traced

log = structlog.get_logger(__name__)

_RESOLUTION_EVENTS: dict[str, OrderEvent] = {
    Resolution.COMPLETE.value: OrderEvent.RESOLVE_COMPLETE,
    Resolution.REFUND.value: OrderEvent.RESOLVE_REFUND,
}


def _not_found(order_id: int) -> str:
    return f"Order with id={order_id} not found"


class OrderService(BaseService):
    """Handles order placement, edits, completion, and disputes."""

    # ------------------------------------------------------------------
    # Placement and CRUD
    # ------------------------------------------------------------------

    @traced
    def place_order(
        self,
        buyer_id: int,
        product_id: int,
        quantity: int,
        total_price: int,
    ) -> ServiceResult:
        """Place a pending order and reserve its stock.

        Any role may buy.  Fails without touching stock when *quantity*
        exceeds what the product has on hand.
        """
        op = "place_order"

        vr = validate_order(quantity, total_price)
        if not vr.valid:
            return self._fail(op, ErrorCode.INVALID_INPUT, vr.message)

        with self._store.transaction() as txn:
            if txn.get(User, buyer_id) is None:
                return self._fail(op, ErrorCode.NOT_FOUND, f"Buyer with id={buyer_id} not found")
            product = txn.get(Product, product_id)
            if product is None:
                return self._fail(
                    op, ErrorCode.NOT_FOUND, f"Product with id={product_id} not found"
                )
            if quantity > product.stock_quantity:
                return self._fail(
                    op,
                    ErrorCode.INVALID_INPUT,
                    f"Insufficient stock: requested {quantity}, "
                    f"available {product.stock_quantity}",
                    available=product.stock_quantity,
                )

            with trace_span("persist_order"):
                order = Order(
                    id=txn.next_id(EntityKind.ORDER),
                    product_id=product_id,
                    buyer_id=buyer_id,
                    quantity=quantity,
                    total_price=total_price,
                    status=OrderStatus.PENDING,
                    created_at=now_iso(),
                )
                txn.put(order)

            with trace_span("deduct_stock"):
                CatalogService.take_stock(txn, product, quantity)

        log.debug(
            "order.placed",
            order_id=order.id,
            product_id=product_id,
            quantity=quantity,
        )
        warnings: list[str] = []
        self._dispatch_event(
            "post_create",
            {"kind": EntityKind.ORDER.value, "entity_id": order.id, "data": order.to_data()},
            warnings,
        )
        return self._succeed(op, order, warnings)

    @traced
    def view_order(self, order_id: int) -> ServiceResult:
        """Return an order by id."""
        op = "view_order"
        with self._store.transaction() as txn:
            order = txn.get(Order, order_id)
        if order is None:
            return self._fail(op, ErrorCode.NOT_FOUND, _not_found(order_id))
        return self._succeed(op, order)

    @traced
    def update_order(self, order_id: int, *, changes: dict[str, Any]) -> ServiceResult:
        """Edit product_id, quantity or total_price of a pending order.

        Stock is not re-checked against a new quantity, and a new
        product_id is not checked for existence.
        """
        op = "update_order"

        vr = validate_order_changes(changes)
        if not vr.valid:
            return self._fail(op, ErrorCode.INVALID_INPUT, vr.message)

        with self._store.transaction() as txn:
            order = txn.get(Order, order_id)
            if order is None:
                return self._fail(op, ErrorCode.NOT_FOUND, _not_found(order_id))
            if order.status not in EDITABLE_ORDER_STATUSES:
                return self._fail(
                    op,
                    ErrorCode.INVALID_INPUT,
                    "Only pending orders can be updated",
                    status=order.status.value,
                )
            order = order.model_copy(update={**changes, "updated_at": now_iso()})
            txn.put(order)

        warnings: list[str] = []
        self._dispatch_event(
            "post_update",
            {
                "kind": EntityKind.ORDER.value,
                "entity_id": order_id,
                "fields_changed": sorted(changes),
            },
            warnings,
        )
        return self._succeed(op, order, warnings)

    @traced
    def delete_order(self, order_id: int) -> ServiceResult:
        """Remove an order. Stock it reserved is not returned."""
        op = "delete_order"
        with self._store.transaction() as txn:
            order = txn.delete(Order, order_id)
        if order is None:
            return self._fail(op, ErrorCode.NOT_FOUND, _not_found(order_id))

        warnings: list[str] = []
        self._dispatch_event(
            "post_delete", {"kind": EntityKind.ORDER.value, "entity_id": order_id}, warnings
        )
        return self._succeed(op, order, warnings)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @traced
    def complete_order(self, order_id: int) -> ServiceResult:
        """Mark a pending order completed."""
        return self._apply_event(
            "complete_order",
            order_id,
            OrderEvent.COMPLETE,
            rejection="Only pending orders can be completed",
        )

    @traced
    def dispute_order(self, order_id: int) -> ServiceResult:
        """Open a dispute on a pending order."""
        return self._apply_event(
            "dispute_order",
            order_id,
            OrderEvent.DISPUTE,
            rejection="Only pending orders can be disputed",
        )

    @traced
    def resolve_dispute(self, order_id: int, resolution: str) -> ServiceResult:
        """Settle a pending or disputed order as ``"Complete"`` or ``"Refund"``.

        Checks run in order: the order exists, it is still open, then the
        token matches exactly.  Any failure leaves the order untouched.
        """
        op = "resolve_dispute"
        with self._store.transaction() as txn:
            order = txn.get(Order, order_id)
            if order is None:
                return self._fail(op, ErrorCode.NOT_FOUND, _not_found(order_id))
            if is_terminal(order.status, ORDER_TRANSITIONS):
                return self._fail(
                    op,
                    ErrorCode.INVALID_INPUT,
                    "Order is not in a disputable state",
                    status=order.status.value,
                )
        event = _RESOLUTION_EVENTS.get(resolution)
        if event is None:
            return self._fail(
                op,
                ErrorCode.INVALID_INPUT,
                f"Invalid resolution {resolution!r}. "
                f"Expected one of {sorted(_RESOLUTION_EVENTS)}",
            )
        return self._apply_event(
            op,
            order_id,
            event,
            rejection="Order is not in a disputable state",
        )

    def _apply_event(
        self,
        op: str,
        order_id: int,
        event: OrderEvent,
        *,
        rejection: str,
    ) -> ServiceResult:
        """Move an order through the transition table, or explain why not."""
        with self._store.transaction() as txn:
            order = txn.get(Order, order_id)
            if order is None:
                return self._fail(op, ErrorCode.NOT_FOUND, _not_found(order_id))

            current = order.status
            target = next_status(current, event, ORDER_TRANSITIONS)
            if target is None:
                return self._fail(
                    op, ErrorCode.INVALID_INPUT, rejection, status=current.value
                )

            order = order.model_copy(
                update={"status": OrderStatus(target), "updated_at": now_iso()}
            )
            txn.put(order)

        log.debug(
            "order.transition",
            order_id=order_id,
            event=event.value,
            from_status=current.value,
            to_status=target,
        )
        warnings: list[str] = []
        self._dispatch_event(
            "post_transition",
            {
                "kind": EntityKind.ORDER.value,
                "entity_id": order_id,
                "from_status": current.value,
                "to_status": target,
            },
            warnings,
        )
        return self._succeed(op, order, warnings)

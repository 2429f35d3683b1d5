"""CatalogService — product listings and stock.

Only a user whose role is ``seller`` may list a product, and only the
owning seller may edit it.  Ownership is fixed at creation.

Stock is never negative.  ``deduct_stock`` refuses to take more than is
on hand; ``set_stock`` overwrites the level but rejects zero.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from marketctl.domain.records import Product, User
from marketctl.domain.types import EntityKind, UserRole
from marketctl.domain.validation import (
    validate_product,
    validate_product_changes,
    validate_stock,
)
from marketctl.services._helpers import now_iso
from marketctl.services.base import BaseService
from marketctl.services.result import ErrorCode, ServiceResult
from marketctl.services.telemetry import traced

if TYPE_CHECKING:
    from marketctl.infrastructure.store import StoreTransaction

log = structlog.get_logger(__name__)


def _not_found(product_id: int) -> str:
    return f"Product with id={product_id} not found"


class CatalogService(BaseService):
    """Handles listings, ownership checks, and inventory."""

    # ------------------------------------------------------------------
    # Transaction-scoped helpers
    # ------------------------------------------------------------------

    @staticmethod
    def take_stock(txn: StoreTransaction, product: Product, quantity: int) -> Product:
        """Subtract *quantity* from *product* and persist it in *txn*.

        The caller has already checked ``quantity <= product.stock_quantity``
        against a record read in the same transaction.
        """
        updated = product.model_copy(
            update={
                "stock_quantity": product.stock_quantity - quantity,
                "updated_at": now_iso(),
            }
        )
        txn.put(updated)
        return updated

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @traced
    def create_product(
        self,
        seller_id: int,
        name: str,
        description: str,
        price: int,
        stock_quantity: int,
    ) -> ServiceResult:
        """List a new product for *seller_id*."""
        op = "create_product"

        vr = validate_product(name, description, price, stock_quantity)
        if not vr.valid:
            return self._fail(op, ErrorCode.INVALID_INPUT, vr.message)

        with self._store.transaction() as txn:
            seller = txn.get(User, seller_id)
            if seller is None:
                return self._fail(
                    op, ErrorCode.NOT_FOUND, f"Seller with id={seller_id} not found"
                )
            if seller.role != UserRole.SELLER:
                return self._fail(
                    op,
                    ErrorCode.UNAUTHORIZED,
                    f"User with id={seller_id} is not authorized to add products",
                    role=seller.role.value,
                )

            product = Product(
                id=txn.next_id(EntityKind.PRODUCT),
                name=name,
                description=description,
                price=price,
                stock_quantity=stock_quantity,
                seller_id=seller_id,
                created_at=now_iso(),
            )
            txn.put(product)

        log.debug("product.created", product_id=product.id, seller_id=seller_id)
        warnings: list[str] = []
        self._dispatch_event(
            "post_create",
            {"kind": EntityKind.PRODUCT.value, "entity_id": product.id, "data": product.to_data()},
            warnings,
        )
        return self._succeed(op, product, warnings)

    @traced
    def view_product(self, product_id: int) -> ServiceResult:
        """Return a product by id."""
        op = "view_product"
        with self._store.transaction() as txn:
            product = txn.get(Product, product_id)
        if product is None:
            return self._fail(op, ErrorCode.NOT_FOUND, _not_found(product_id))
        return self._succeed(op, product)

    @traced
    def update_product(
        self,
        product_id: int,
        seller_id: int,
        *,
        changes: dict[str, Any],
    ) -> ServiceResult:
        """Edit a listing. *seller_id* must own the stored product.

        The check is ownership, not role: a seller cannot edit another
        seller's listing, and a demoted former seller can still edit their own.
        """
        op = "update_product"

        vr = validate_product_changes(changes)
        if not vr.valid:
            return self._fail(op, ErrorCode.INVALID_INPUT, vr.message)

        with self._store.transaction() as txn:
            product = txn.get(Product, product_id)
            if product is None:
                return self._fail(op, ErrorCode.NOT_FOUND, _not_found(product_id))
            if product.seller_id != seller_id:
                return self._fail(
                    op,
                    ErrorCode.UNAUTHORIZED,
                    f"User with id={seller_id} does not own product id={product_id}",
                )

            product = product.model_copy(update={**changes, "updated_at": now_iso()})
            txn.put(product)

        warnings: list[str] = []
        self._dispatch_event(
            "post_update",
            {
                "kind": EntityKind.PRODUCT.value,
                "entity_id": product_id,
                "fields_changed": sorted(changes),
            },
            warnings,
        )
        return self._succeed(op, product, warnings)

    @traced
    def deduct_stock(self, product_id: int, quantity: int) -> ServiceResult:
        """Take *quantity* units out of stock."""
        op = "deduct_stock"

        vr = validate_stock(quantity)
        if not vr.valid:
            return self._fail(op, ErrorCode.INVALID_INPUT, vr.message)

        with self._store.transaction() as txn:
            product = txn.get(Product, product_id)
            if product is None:
                return self._fail(op, ErrorCode.NOT_FOUND, _not_found(product_id))
            if quantity > product.stock_quantity:
                return self._fail(
                    op,
                    ErrorCode.INVALID_INPUT,
                    f"Insufficient stock: requested {quantity}, "
                    f"available {product.stock_quantity}",
                )
            product = self.take_stock(txn, product, quantity)

        log.debug("product.stock_deducted", product_id=product_id, quantity=quantity)
        return self._succeed(op, product)

    @traced
    def set_stock(self, product_id: int, quantity: int) -> ServiceResult:
        """Overwrite the stock level. Zero is rejected."""
        op = "set_stock"

        vr = validate_stock(quantity)
        if not vr.valid:
            return self._fail(op, ErrorCode.INVALID_INPUT, vr.message)

        with self._store.transaction() as txn:
            product = txn.get(Product, product_id)
            if product is None:
                return self._fail(op, ErrorCode.NOT_FOUND, _not_found(product_id))
            product = product.model_copy(
                update={"stock_quantity": quantity, "updated_at": now_iso()}
            )
            txn.put(product)

        warnings: list[str] = []
        self._dispatch_event(
            "post_update",
            {
                "kind": EntityKind.PRODUCT.value,
                "entity_id": product_id,
                "fields_changed": ["stock_quantity"],
            },
            warnings,
        )
        return self._succeed(op, product, warnings)

    @traced
    def delete_product(self, product_id: int) -> ServiceResult:
        """Remove a product, regardless of orders that reference it."""
        op = "delete_product"
        with self._store.transaction() as txn:
            product = txn.delete(Product, product_id)
        if product is None:
            return self._fail(op, ErrorCode.NOT_FOUND, _not_found(product_id))

        warnings: list[str] = []
        self._dispatch_event(
            "post_delete", {"kind": EntityKind.PRODUCT.value, "entity_id": product_id}, warnings
        )
        return self._succeed(op, product, warnings)

"""Record models for the four entity kinds.

Records are frozen: a change produces a new record via
``record.model_copy(update=...)`` which is then written back through the
store.  Each record class names its :class:`EntityKind` so the store can
route it to the right table and id sequence.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, Field

from marketctl.domain.lifecycle import EscrowStatus, OrderStatus
from marketctl.domain.types import EntityKind, UserRole

DEFAULT_REPUTATION = 100


class MarketRecord(BaseModel):
    """Base for all stored records."""

    model_config = {"frozen": True}

    kind: ClassVar[EntityKind]

    id: int
    created_at: str
    updated_at: str | None = None

    def to_data(self) -> dict[str, Any]:
        """JSON-safe dict used as ``ServiceResult.data``."""
        return self.model_dump(mode="json")


class User(MarketRecord):
    """A marketplace participant."""

    kind: ClassVar[EntityKind] = EntityKind.USER

    name: str
    email: str
    role: UserRole
    reputation: int = Field(default=DEFAULT_REPUTATION, ge=0, le=100)


class Product(MarketRecord):
    """A listing owned by a seller."""

    kind: ClassVar[EntityKind] = EntityKind.PRODUCT

    name: str
    description: str
    price: int
    stock_quantity: int = Field(ge=0)
    seller_id: int


class Order(MarketRecord):
    """A buyer's order against a product."""

    kind: ClassVar[EntityKind] = EntityKind.ORDER

    product_id: int
    buyer_id: int
    quantity: int
    total_price: int
    status: OrderStatus = OrderStatus.PENDING


class Escrow(MarketRecord):
    """Funds held in custody for an order."""

    kind: ClassVar[EntityKind] = EntityKind.ESCROW

    order_id: int
    amount: int
    status: EscrowStatus = EscrowStatus.HELD


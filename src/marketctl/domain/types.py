"""Entity kinds and classification enums."""

from __future__ import annotations

from enum import StrEnum


class EntityKind(StrEnum):
    """The four record kinds held by the entity store.

    Each kind owns an independent id sequence and an independent table.
    """

    USER = "user"
    PRODUCT = "product"
    ORDER = "order"
    ESCROW = "escrow"


class UserRole(StrEnum):
    """Marketplace roles. Only sellers may list products."""

    BUYER = "buyer"
    SELLER = "seller"
    ADMIN = "admin"


class Resolution(StrEnum):
    """Dispute resolution tokens accepted by ``resolve_dispute``.

    Tokens are case-sensitive and must be sent exactly as listed.
    """

    COMPLETE = "Complete"
    REFUND = "Refund"

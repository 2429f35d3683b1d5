"""Tests for shared domain enums."""

from marketctl.domain.types import EntityKind, Resolution, UserRole


class TestEnums:
    def test_entity_kinds(self) -> None:
        assert {k.value for k in EntityKind} == {"user", "product", "order", "escrow"}

    def test_roles(self) -> None:
        assert {r.value for r in UserRole} == {"buyer", "seller", "admin"}

    def test_resolution_tokens_are_capitalized(self) -> None:
        assert Resolution.COMPLETE == "Complete"
        assert Resolution.REFUND == "Refund"

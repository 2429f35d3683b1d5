"""Tests for shared service-layer helper functions."""

from __future__ import annotations

import re
from datetime import datetime

from marketctl.services._helpers import now_compact, now_iso


class TestNowIso:
    def test_parses_with_timezone(self) -> None:
        parsed = datetime.fromisoformat(now_iso())
        assert parsed.tzinfo is not None

    def test_contains_colons(self) -> None:
        assert ":" in now_iso()


class TestNowCompact:
    def test_format(self) -> None:
        assert re.fullmatch(r"\d{8}T\d{6}", now_compact())

    def test_no_colons(self) -> None:
        """Compact format must be filename-safe (no colons)."""
        assert ":" not in now_compact()

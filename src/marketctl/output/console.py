"""Rich Console factory and theme for marketctl output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

MARKET_THEME = Theme(
    {
        "mkt.ok": "bold green",
        "mkt.error": "bold red",
        "mkt.warning": "bold yellow",
        "mkt.op": "bold cyan",
        "mkt.key": "dim",
        "mkt.id": "bold blue",
        "mkt.money": "magenta",
        "mkt.status.open": "yellow",
        "mkt.status.done": "green",
        "mkt.status.reversed": "red",
        "mkt.status.contested": "bold yellow",
    }
)

# Order and escrow statuses share a palette: open, done, reversed, contested.
_STATUS_STYLES: dict[str, str] = {
    "pending": "mkt.status.open",
    "held": "mkt.status.open",
    "completed": "mkt.status.done",
    "released": "mkt.status.done",
    "refunded": "mkt.status.reversed",
    "in_dispute": "mkt.status.contested",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=MARKET_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_status(status: str) -> str:
    """Return the Rich style name for an order or escrow status."""
    return _STATUS_STYLES.get(status, "")

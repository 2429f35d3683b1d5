"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from marketctl.output.console import create_console, get_output, style_for_status

if TYPE_CHECKING:
    from rich.console import Console

    from marketctl.services.result import ServiceResult

_MONEY_KEYS = frozenset({"price", "total_price", "amount"})


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode: the record id, or the error."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    record_id = result.data.get("id")
    if record_id is not None:
        return str(record_id)
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="mkt.ok")
    op = Text(f"  {result.op}", style="mkt.op")
    console.print(label, op, end="")
    console.print()


def _styled_value(key: str, value: Any) -> Text:
    if key == "id" or key.endswith("_id"):
        return Text(str(value), style="mkt.id")
    if key in _MONEY_KEYS:
        return Text(str(value), style="mkt.money")
    if key == "status":
        return Text(str(value), style=style_for_status(str(value)))
    if value is None:
        return Text("-", style="dim")
    return Text(str(value))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    console.print(Text.assemble(Text(f"  {key}: ", style="mkt.key"), _styled_value(key, value)))


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="mkt.error")
    op = Text(f"  {result.op}", style="mkt.op")
    code = Text(f" [{err.code}]" if err else "", style="dim")
    console.print(label, op, code, Text(" — "), Text(msg))

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Record renderer ───────────────────────────────────────────────────


def _render_record(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a user, product, order or escrow as a two-column table."""
    _status_line(console, result)

    table = Table(show_header=False, show_lines=False, pad_edge=False, box=None)
    table.add_column("Field", style="mkt.key", no_wrap=True)
    table.add_column("Value")
    for key, value in result.data.items():
        if not verbose and key in ("created_at", "updated_at"):
            continue
        table.add_row(f"  {key}", _styled_value(key, value))
    console.print(table)

    if verbose:
        _render_meta(console, result)


# ── Upgrade renderers ────────────────────────────────────────────────


def _render_upgrade(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render upgrade/migration results."""
    _status_line(console, result)
    d = result.data
    for key in (
        "applied_count",
        "pending_count",
        "current",
        "head",
        "backup_path",
        "message",
    ):
        if key in d:
            _field(console, key, d[key])
    if verbose and d.get("pending"):
        console.print()
        for p in d["pending"]:
            console.print(f"  {p['revision']}: {p['description']}")


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_RECORD_OPS = (
    "create_user",
    "view_user",
    "update_user",
    "delete_user",
    "create_product",
    "view_product",
    "update_product",
    "delete_product",
    "deduct_stock",
    "set_stock",
    "place_order",
    "view_order",
    "update_order",
    "delete_order",
    "complete_order",
    "dispute_order",
    "resolve_dispute",
    "hold_escrow",
    "view_escrow",
    "release_escrow",
    "refund_escrow",
)

_OP_RENDERERS: dict[str, Any] = {
    **{op: _render_record for op in _RECORD_OPS},
    "upgrade": _render_upgrade,
}

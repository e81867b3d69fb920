"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer. Text coming from
model documents is wrapped in ``Text`` so it is never parsed as markup.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from htcdl.output.console import render_to_string

if TYPE_CHECKING:
    from rich.console import Console

    from htcdl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    renderer = _OP_RENDERERS.get(result.op, _render_generic) if result.ok else _render_error
    return render_to_string(lambda console: renderer(result, console, verbose=verbose))


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"
    if result.op == "unused":
        return "\n".join([*result.data.get("unused_events", []), *result.data.get("unused_schemas", [])])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="htc.ok"), Text(f"  {result.op}", style="htc.op"))


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="htc.key")
    style = "htc.id" if key in ("id", "dtmi") else ""
    console.print(k, Text(str(value), style=style), sep="")


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including the timing span tree (verbose only)."""
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_span(console, v, indent=4)
        else:
            console.print(Text(f"    {k}: {v}"))


def _render_span(console: Console, span: dict[str, Any], indent: int) -> None:
    duration = span.get("duration_ms", 0.0)
    style = "yellow" if duration > 100 else "dim"
    line = Text(" " * indent)
    line.append(f"{duration:>8.2f}ms", style=style)
    line.append(f"  {span.get('name', '?')}")
    annotations = span.get("annotations") or {}
    if annotations:
        line.append("  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")")
    console.print(line)
    for child in span.get("children", []):
        _render_span(console, child, indent + 4)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="htc.error"),
        Text(f"  {result.op}", style="htc.op"),
        Text(" — "),
        Text(msg),
        sep="",
    )
    if err is None:
        return

    defects = err.detail.get("defects")
    if defects:
        _render_defects(console, defects)
    elif verbose and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))

    for warning in result.warnings:
        console.print(Text("  warning: ", style="htc.warning"), Text(warning), sep="")
    if verbose:
        _render_meta(console, result)


def _render_defects(console: Console, defects: list[dict[str, Any]]) -> None:
    """List defects grouped by kind, preserving discovery order within a kind."""
    by_kind: dict[str, list[dict[str, Any]]] = {}
    for defect in defects:
        by_kind.setdefault(str(defect.get("kind", "unknown")), []).append(defect)

    for kind, group in by_kind.items():
        console.print()
        console.print(Text(kind, style="htc.kind"))
        for defect in group:
            console.print(Text(f"  - {defect.get('message', '')}"))
    console.print(Text(f"\n{len(defects)} defect(s)", style="htc.count"))


# ── Op renderers ──────────────────────────────────────────────────────


def _render_validate(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in ("id", "display_name", "source"):
        if key in result.data:
            _field(console, key, result.data[key])
    console.print(Text("  no defects found", style="htc.ok"))
    if verbose:
        _render_meta(console, result)


def _render_check_id(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "dtmi", result.data.get("dtmi", ""))


_COUNT_LABELS: tuple[tuple[str, str], ...] = (
    ("property_count", "Properties"),
    ("telemetry_count", "Telemetry"),
    ("command_count", "Commands"),
    ("event_count", "Events"),
    ("relationship_count", "Relationships"),
    ("state_count", "States"),
    ("transition_count", "Transitions"),
    ("rule_count", "Rules"),
    ("goal_count", "Goals"),
    ("ai_model_count", "AI models"),
)


def _render_analyze(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "id", result.data.get("id", ""))

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Element")
    table.add_column("Count", style="htc.count", justify="right")
    for key, label in _COUNT_LABELS:
        table.add_row(label, str(result.data.get(key, 0)))
    console.print(table)

    _field(console, "state machine", "yes" if result.data.get("has_state_machine") else "no")
    _field(console, "physics", "yes" if result.data.get("has_physics") else "no")
    if verbose:
        _render_meta(console, result)


def _render_unused(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    if result.data.get("count", 0) == 0:
        console.print(Text("OK", style="htc.ok"), Text("  No unused elements."))
        return
    _status_line(console, result)
    for key, label in (("unused_events", "events"), ("unused_schemas", "schemas")):
        entries = result.data.get(key, [])
        if entries:
            console.print(Text(f"\n  unused {label}:", style="htc.warning"))
            for name in entries:
                console.print(Text(f"    - {name}"))
    if verbose:
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


_OP_RENDERERS: dict[str, Any] = {
    "validate": _render_validate,
    "check_id": _render_check_id,
    "analyze": _render_analyze,
    "unused": _render_unused,
}

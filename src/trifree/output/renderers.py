"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from trifree.output.console import create_console, get_output, style_for_flag, style_for_verdict

if TYPE_CHECKING:
    from rich.console import Console

    from trifree.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False, max_triangles: int = 50) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose, max_triangles=max_triangles)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    data = result.data
    if result.op == "triangles":
        return "\n".join(_join(t) for t in data.get("items", []))
    if result.op == "structure":
        keys = ("triangle_free", "edge_disjoint", "locally_linear")
        return " ".join(f"{k}={str(data.get(k)).lower()}" for k in keys)
    if result.op == "packing_bound":
        return "holds" if data.get("holds") else "fails"
    if result.op == "certify":
        return "certified" if data.get("certified") else "not certified"
    if result.op == "decide":
        return str(data.get("verdict", ""))
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _join(vertices: list[Any]) -> str:
    return " ".join(str(v) for v in vertices)


def _braces(vertices: list[Any]) -> str:
    return "{" + ", ".join(str(v) for v in vertices) + "}"


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    console.print(Text.assemble(("OK", "tri.ok"), (f"  {result.op}", "tri.op")))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="tri.key")
    if isinstance(value, bool):
        v = Text(str(value).lower(), style=style_for_flag(value))
    elif isinstance(value, int):
        v = Text(str(value), style="tri.count")
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


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


def _triangle_table(rows: list[list[Any]], *, limit: int) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("a", style="tri.vertex")
    table.add_column("b", style="tri.vertex")
    table.add_column("c", style="tri.vertex")
    for i, row in enumerate(rows[:limit], start=1):
        table.add_row(str(i), *(str(v) for v in row))
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(Text.assemble(("ERROR", "tri.error"), (f"  {result.op}", "tri.op"), ": ", msg))

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Triangle renderers ────────────────────────────────────────────────


def _render_triangles(
    result: ServiceResult, console: Console, *, verbose: bool = False, max_triangles: int = 50
) -> None:
    """Render the triangle list as a table."""
    data = result.data
    items = data.get("items", [])
    _status_line(console, result)
    _field(console, "vertices", data.get("vertex_count", 0))
    _field(console, "edges", data.get("edge_count", 0))
    _field(console, "triangles", data.get("count", len(items)))
    if items and max_triangles:
        console.print(_triangle_table(items, limit=max_triangles))
        if len(items) > max_triangles:
            console.print(f"[dim]… {len(items) - max_triangles} more[/dim]")
    if verbose:
        _render_meta(console, result)


def _render_structure(
    result: ServiceResult, console: Console, *, verbose: bool = False, max_triangles: int = 50
) -> None:
    """Render structure checks with their witnesses."""
    data = result.data
    _status_line(console, result)
    for key in ("vertex_count", "edge_count", "triangle_count"):
        _field(console, key, data.get(key, 0))
    for key in ("triangle_free", "edge_disjoint", "locally_linear"):
        _field(console, key, bool(data.get(key)))

    pair = data.get("overlapping_pair")
    if pair:
        first, second = (_braces(t) for t in pair)
        console.print(f"  [tri.warning]overlap[/tri.warning]: {first} and {second}")
    uncovered = data.get("uncovered_edges") or []
    if uncovered:
        shown = ", ".join(_braces(e) for e in uncovered[:max_triangles])
        console.print(f"  [tri.warning]uncovered[/tri.warning]: {shown}")

    identity = data.get("edge_identity")
    if identity:
        relation = "=" if identity["relation"] == "equal" else "<="
        console.print(f"  3·|T| = {identity['incidences']} {relation} |E| = {identity['edges']}")
    if verbose:
        _render_meta(console, result)


# ── Packing / farness renderers ───────────────────────────────────────


def _render_packing_bound(
    result: ServiceResult, console: Console, *, verbose: bool = False, max_triangles: int = 50
) -> None:
    """Render the packing inequality and its charging map."""
    data = result.data
    _status_line(console, result)
    _field(console, "packing", data.get("packing_source", ""))
    console.print(
        f"  |packing| = {data.get('packing_size')} <= "
        f"|E(G)| - |E(H)| = {data.get('graph_edges')} - {data.get('subgraph_edges')} "
        f"= {data.get('deleted_edges')}"
    )
    if verbose:
        table = Table(show_header=True, pad_edge=False, expand=False)
        table.add_column("Triangle", style="tri.vertex")
        table.add_column("Charged edge")
        for w in data.get("witnesses", [])[:max_triangles]:
            table.add_row(_braces(w["triangle"]), _braces(w["edge"]))
        console.print(table)
        _render_meta(console, result)


def _render_certify(
    result: ServiceResult, console: Console, *, verbose: bool = False, max_triangles: int = 50
) -> None:
    data = result.data
    _status_line(console, result)
    _field(console, "epsilon", data.get("epsilon"))
    _field(console, "packing_size", data.get("packing_size", 0))
    _field(console, "required", data.get("required"))
    _field(console, "certified", bool(data.get("certified")))
    if verbose:
        _render_meta(console, result)


def _render_decide(
    result: ServiceResult, console: Console, *, verbose: bool = False, max_triangles: int = 50
) -> None:
    """Render the far-from-triangle-free verdict with its evidence."""
    data = result.data
    verdict = str(data.get("verdict", "undetermined"))
    style = style_for_verdict(verdict)
    _status_line(console, result)
    console.print(f"  verdict: [{style}]{verdict}[/{style}]")
    _field(console, "epsilon", data.get("epsilon"))
    _field(console, "required", data.get("required"))
    _field(console, "packing_lower_bound", data.get("lower", 0))
    if data.get("upper") is not None:
        _field(console, "deletion_upper_bound", data["upper"])
    for violation in data.get("violations", []):
        console.print(f"  [tri.false]{violation['condition']}[/tri.false]: {violation['message']}")
    if verbose:
        if data.get("packing"):
            console.print(_triangle_table(data["packing"], limit=max_triangles))
        _render_meta(console, result)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(
    result: ServiceResult, console: Console, *, verbose: bool = False, max_triangles: int = 50
) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "triangles": _render_triangles,
    "structure": _render_structure,
    "packing_bound": _render_packing_bound,
    "certify": _render_certify,
    "decide": _render_decide,
}

"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from reqkey.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from reqkey.services.result import ServiceResult


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
    """Render minimal output for ``--quiet`` mode: bare keys where possible."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"

    data = result.data
    if result.op == "export_keys":
        return str(data.get("yaml", "")).rstrip("\n")
    items = data.get("items")
    if isinstance(items, list):
        return "\n".join(str(item["key"]) for item in items if "key" in item)
    for field in ("preened", "key"):
        if data.get(field) is not None:
            return str(data[field])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="reqkey.ok")
    op = Text(f"  {result.op}", style="reqkey.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="reqkey.field")
    if key in ("key", "parent", "preened"):
        v = Text(str(value), style="reqkey.key")
    elif key == "kind":
        v = Text(str(value), style="reqkey.kind")
    elif key == "path":
        v = Text(str(value), style="reqkey.path")
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


def _key_table(items: list[dict[str, Any]], *, verbose: bool = False) -> Table:
    """Build a key/kind table, with parent and created columns when verbose."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Key", style="reqkey.key", no_wrap=True)
    table.add_column("Kind", style="reqkey.kind")
    if verbose:
        table.add_column("Parent", style="dim")
        table.add_column("Created", style="dim")
    for item in items:
        row = [str(item.get("key", "")), str(item.get("kind", ""))]
        if verbose:
            row.append(str(item.get("parent_key") or ""))
            row.append(str(item.get("created", "")))
        table.add_row(*row)
    return table


def _issue_table(issues: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Path", style="reqkey.path")
    table.add_column("Code", style="reqkey.error")
    table.add_column("Message")
    for issue in issues:
        table.add_row(
            Text(str(issue.get("path", ""))),
            str(issue.get("code", "")),
            Text(str(issue.get("message", ""))),
        )
    return table


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="reqkey.error")
    op = Text(f"  {result.op}", style="reqkey.op")
    code = Text(f"  [{err.code}]" if err else "", style="reqkey.error")
    console.print(label, op, code, Text(f"  {msg}"))

    if err is None or not err.detail:
        return
    issues = err.detail.get("issues")
    if issues:
        console.print(_issue_table(issues))
    if verbose:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            if k != "issues":
                console.print(Text(f"    {k}: {v}"))


# ── Key renderers ─────────────────────────────────────────────────────


def _render_key(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render build_key, parse_key and show_key results."""
    _status_line(console, result)
    d = result.data
    for key in ("model", "key", "kind", "name", "qualifier", "parent", "created"):
        if d.get(key) is not None:
            _field(console, key, d[key])

    if verbose:
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("Kind", style="reqkey.kind")
        table.add_column("Qualifier")
        table.add_column("Name")
        for segment in d.get("segments", []):
            table.add_row(segment["kind"], segment.get("qualifier", ""), segment["name"])
        console.print(table)
        for ancestor in d.get("lineage", []):
            console.print(f"    {ancestor}")

    children = d.get("children")
    if children is not None:
        _field(console, "children", len(children))
        for child in children:
            console.print(f"    [reqkey.key]{child}[/reqkey.key]")


def _render_preen(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "input", repr(result.data["input"]))
    _field(console, "preened", result.data["preened"])


def _render_lint(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render lint_name advice; a clean name gets a single OK line."""
    d = result.data
    if d["snake_case"]:
        console.print(Text("OK", style="reqkey.ok"), Text(f" {d['name']!r} is snake_case."))
        return
    console.print(Text("LINT", style="reqkey.warning"), Text(f" {d['name']!r}"))
    for suggestion in d["suggestions"]:
        console.print(Text(f"  - {suggestion}"))
    if d.get("preened") is not None:
        _field(console, "preened", d["preened"])


# ── Manifest and registry renderers ───────────────────────────────────


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a clean manifest check: per-kind counts, the keys when verbose."""
    d = result.data
    console.print(f"[reqkey.ok]OK[/reqkey.ok]  {d['count']} keys, no issues found.")
    kinds = d.get("kinds", {})
    if kinds:
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("Kind", style="reqkey.kind")
        table.add_column("Count", justify="right")
        for kind, count in kinds.items():
            table.add_row(kind, str(count))
        console.print(table)
    if verbose and d.get("items"):
        console.print(_key_table(d["items"]))


def _render_load(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in ("model", "inserted", "total"):
        _field(console, key, result.data[key])


def _render_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    if items:
        console.print(_key_table(items, verbose=verbose))
    console.print(f"\n{result.data.get('count', len(items))} keys in {result.data.get('model')}")


def _render_remove(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "model", result.data["model"])
    _field(console, "key", result.data["key"])


def _render_export(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Export prints the manifest itself so it can be redirected to a file."""
    console.print(Text(str(result.data.get("yaml", "")).rstrip("\n")), soft_wrap=True)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Keys
    "build_key": _render_key,
    "parse_key": _render_key,
    "preen_key": _render_preen,
    "lint_name": _render_lint,
    # Manifest
    "check_manifest": _render_check,
    # Registry
    "load_manifest": _render_load,
    "list_keys": _render_list,
    "show_key": _render_key,
    "remove_key": _render_remove,
    "export_keys": _render_export,
}

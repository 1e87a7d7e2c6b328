"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO); the caller
gets the text back from :func:`render_result`. Renderers are dispatched
by ``result.op``; unknown ops fall through to a generic key-value one.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from scout.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from scout.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if "source" in result.data:
        return str(result.data["source"]).rstrip("\n")
    if "path" in result.data:
        return str(result.data["path"])
    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(str(item.get("key", "")) for item in items)
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="scout.ok")
    op = Text(f"  {result.op}", style="scout.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="scout.key")
    if key in ("type_name", "qualified_name", "name"):
        v = Text(str(value), style="scout.type")
    elif key == "path":
        v = Text(str(value), style="scout.path")
    elif isinstance(value, (dict, list)):
        v = Text(_json.dumps(value, separators=(",", ":")))
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(Text(f"    {k}: {v}"))


def _render_warnings(console: Console, result: ServiceResult) -> None:
    for warning in result.warnings:
        console.print(Text("  warning: ", style="scout.warning"), Text(warning))


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="scout.error")
    op = Text(f"  {result.op}", style="scout.op")
    code = Text(f" [{err.code}]" if err else "", style="dim")
    console.print(label, op, code, Text(" — "), Text(msg))

    if err is None:
        return
    for issue in err.detail.get("issues", []):
        console.print(
            Text(f"  {issue['path']}", style="scout.path"),
            Text(f"  {issue['message']}"),
        )
    for error in err.detail.get("errors", []):
        console.print(
            Text(f"  {error['path']}", style="scout.path"),
            Text(f"  {error['key']}", style="scout.check"),
            Text(f"  {error['message']}"),
        )

    if verbose:
        rest = {k: v for k, v in err.detail.items() if k not in ("issues", "errors")}
        if rest:
            console.print(Text("  detail:", style="dim"))
            for k, v in rest.items():
                console.print(Text(f"    {k}: {v}"))


# ── Compile renderers ─────────────────────────────────────────────────


def _render_compile(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Print generated source verbatim so stdout can be redirected to a file."""
    source = result.data.get("source")
    if source is not None:
        console.print(source, markup=False, highlight=False, soft_wrap=True, end="")
        return
    _status_line(console, result)
    for key in ("type_name", "qualified_name", "path", "attributes", "nested_types", "depth"):
        if key in result.data:
            _field(console, key, result.data[key])
    if verbose:
        _render_meta(console, result)


def _field_label(field: dict[str, Any]) -> Text:
    label = Text(f"{field['name']}", style="scout.field")
    label.append(f": {field['type']}")
    if field.get("required"):
        label.append("  required", style="scout.key")
    if field.get("validations"):
        label.append(f"  ({', '.join(field['validations'])})", style="scout.check")
    return label


def _add_scope(tree: Tree, scope: dict[str, Any]) -> None:
    for field in scope.get("fields", []):
        tree.add(_field_label(field))
    for embed in scope.get("embeds", []):
        label = Text(f"{embed['field_name']}", style="scout.field")
        label.append(" → ")
        label.append(embed["type_name"], style="scout.type")
        flags = embed["cardinality"] + (", required" if embed.get("required") else "")
        label.append(f"  ({flags})", style="scout.key")
        _add_scope(tree.add(label), embed)


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a spec summary as a tree of fields and embeds."""
    d = result.data
    _status_line(console, result)
    tree = Tree(Text(str(d.get("type_name", "?")), style="scout.type"))
    _add_scope(tree, d)
    console.print(tree)
    console.print(
        Text(
            f"\n{d.get('attributes', 0)} attributes, "
            f"{d.get('nested_types', 0)} nested types, depth {d.get('depth', 0)}"
        )
    )
    _render_warnings(console, result)
    if verbose:
        _render_meta(console, result)


def _render_catalog(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the validation catalog as a table."""
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Key", style="scout.check", no_wrap=True)
    table.add_column("Value")
    table.add_column("Applies to")
    table.add_column("Message", style="dim")
    for item in items:
        table.add_row(
            Text(str(item.get("key", ""))),
            Text(str(item.get("value_kind", ""))),
            Text(str(item.get("applies_to", ""))),
            Text(str(item.get("message", ""))),
        )
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} validations")


def _render_payload(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "type_name", result.data.get("type_name", "?"))
    if verbose:
        console.print(
            Text(_json.dumps(result.data.get("data", {}), indent=2, ensure_ascii=False))
        )
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    _render_warnings(console, result)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "compile_schema": _render_compile,
    "check_spec": _render_check,
    "catalog": _render_catalog,
    "validate_payload": _render_payload,
    "register_schema": _render_generic,
}

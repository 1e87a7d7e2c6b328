"""Rich console factory and the scout color theme.

Renderers draw into an in-memory console and hand back plain strings;
Rich leaves out escape codes whenever the buffer is not a terminal.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

DEFAULT_WIDTH = 120

_STYLES = {
    "ok": "bold green",
    "error": "bold red",
    "warning": "bold yellow",
    "op": "bold cyan",
    "key": "dim",
    "type": "bold blue",
    "field": "bold",
    "path": "dim",
    "check": "magenta",
}

SCOUT_THEME = Theme({f"scout.{name}": style for name, style in _STYLES.items()})


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """In-memory console using :data:`SCOUT_THEME`."""
    return Console(
        file=StringIO(),
        theme=SCOUT_THEME,
        width=width or DEFAULT_WIDTH,
        no_color=no_color,
        highlight=False,
    )


def get_output(console: Console) -> str:
    """Everything written to a console made by :func:`create_console`."""
    buffer = console.file
    if not isinstance(buffer, StringIO):
        raise TypeError("console does not write to an in-memory buffer")
    return buffer.getvalue()

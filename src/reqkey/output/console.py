"""Rich Console factory and theme for reqkey output.

Consoles render into a StringIO buffer so renderers keep the
``format_result() -> str`` contract. Rich drops color codes on its own when
the output is not a terminal (tests, pipes).
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

REQKEY_THEME = Theme(
    {
        "reqkey.ok": "bold green",
        "reqkey.error": "bold red",
        "reqkey.warning": "bold yellow",
        "reqkey.op": "bold cyan",
        "reqkey.field": "dim",
        "reqkey.key": "bold blue",
        "reqkey.kind": "magenta",
        "reqkey.path": "dim",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes.
        width: Override the terminal width (stable output in tests).
    """
    return Console(
        file=StringIO(),
        theme=REQKEY_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()

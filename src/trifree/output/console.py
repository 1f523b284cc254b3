"""Rich Console factory and theme for trifree output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract. In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

TRIFREE_THEME = Theme(
    {
        "tri.ok": "bold green",
        "tri.error": "bold red",
        "tri.warning": "bold yellow",
        "tri.op": "bold cyan",
        "tri.key": "dim",
        "tri.vertex": "bold blue",
        "tri.true": "green",
        "tri.false": "red",
        "tri.count": "magenta",
        "tri.verdict.far": "bold green",
        "tri.verdict.not_far": "bold red",
        "tri.verdict.undetermined": "bold yellow",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=TRIFREE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_flag(value: bool) -> str:
    """Rich style for a yes/no property."""
    return "tri.true" if value else "tri.false"


def style_for_verdict(verdict: str) -> str:
    return f"tri.verdict.{verdict}"

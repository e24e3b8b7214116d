"""Rich Console factory and theme for wsldisplay messages.

Consoles render into a StringIO buffer so formatting stays a pure
``-> str`` step. ``color=True`` forces ANSI codes for a real terminal;
otherwise (tests, pipes) Rich emits plain text.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

WSL_THEME = Theme(
    {
        "wsl.error": "bold red",
        "wsl.warning": "bold yellow",
        "wsl.step": "bold cyan",
        "wsl.key": "dim",
    }
)


def create_console(*, color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=WSL_THEME,
        force_terminal=color,
        no_color=not color,
        highlight=False,
        soft_wrap=True,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()

"""Rich Console factory and theme for cmdkit output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

from cmdkit.services.context import (
    ERROR_PREFIX,
    INFO_PREFIX,
    REPLY_PREFIX,
    SUCCESS_PREFIX,
    WARNING_PREFIX,
)

CMDKIT_THEME = Theme(
    {
        "cmd.ok": "bold green",
        "cmd.error": "bold red",
        "cmd.warning": "bold yellow",
        "cmd.info": "cyan",
        "cmd.reply": "white",
        "cmd.op": "bold cyan",
        "cmd.key": "dim",
        "cmd.usage": "yellow",
        "cmd.help": "blue",
    }
)

_PREFIX_STYLES: tuple[tuple[str, str], ...] = (
    (SUCCESS_PREFIX, "cmd.ok"),
    (ERROR_PREFIX, "cmd.error"),
    (WARNING_PREFIX, "cmd.warning"),
    (INFO_PREFIX, "cmd.info"),
    (REPLY_PREFIX, "cmd.reply"),
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=CMDKIT_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_message(message: str) -> str:
    """Return the Rich style for a subject message, keyed by its prefix."""
    for prefix, style in _PREFIX_STYLES:
        if message.startswith(prefix):
            return style
    if message.startswith("/"):
        return "cmd.usage"
    return ""

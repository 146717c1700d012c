"""Rich/JSON output helpers.

The CLI renders a DispatchResult (plus whatever the subject received)
for humans or machines (--json).
"""

from __future__ import annotations

import json as _json
from collections.abc import Sequence
from typing import TYPE_CHECKING

from rich.table import Table
from rich.text import Text

from cmdkit.output.console import create_console, get_output, style_for_message

if TYPE_CHECKING:
    from cmdkit.domain.node import CommandNode
    from cmdkit.services.result import DispatchResult


def render_messages(messages: Sequence[str]) -> str:
    """Render subject messages, one per line, styled by prefix."""
    console = create_console()
    for message in messages:
        console.print(Text(message, style=style_for_message(message)))
    return get_output(console).rstrip("\n")


def format_result(
    result: DispatchResult,
    *,
    output: Sequence[str] = (),
    json_output: bool = False,
) -> str:
    """Format a DispatchResult for display.

    Args:
        result: The dispatch outcome.
        output: Messages the subject received during dispatch.
        json_output: If True, return JSON; otherwise human-readable text.
    """
    if json_output:
        payload = result.model_dump(mode="json")
        payload["output"] = list(output)
        return _json.dumps(payload, indent=2, ensure_ascii=False)
    if output:
        return render_messages(output)
    if result.ok:
        return f"OK: {result.op}"
    error_msg = result.error.message if result.error else "Unknown error"
    return f"ERROR: {result.op} - {error_msg}"


def format_completions(suggestions: Sequence[str], *, json_output: bool = False) -> str:
    if json_output:
        return _json.dumps(list(suggestions))
    return "\n".join(suggestions)


def format_commands(rows: Sequence[tuple[str, CommandNode]], *, json_output: bool = False) -> str:
    """Render ``(qualified path, node)`` rows as a table or JSON list."""
    if json_output:
        return _json.dumps(
            [
                {
                    "path": path,
                    "usage": node.usage,
                    "description": node.description,
                    "permission": node.permission,
                    "aliases": list(node.aliases),
                    "cooldown": node.cooldown_seconds,
                }
                for path, node in rows
            ],
            indent=2,
        )

    console = create_console()
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Command", style="cmd.op")
    table.add_column("Usage", style="cmd.usage")
    table.add_column("Permission", style="cmd.key")
    table.add_column("Description")
    for path, node in rows:
        table.add_row(path, node.usage, node.permission or "-", node.description)
    console.print(table)
    return get_output(console).rstrip("\n")

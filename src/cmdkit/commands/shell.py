"""Command: interactive dispatch loop sharing one runtime.

Each input line is ``label [tokens...]``; a leading ``/`` is optional.
A line starting with ``?`` prints completions instead (a trailing space
completes a fresh position). ``exit`` or ``quit`` ends the session.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from cmdkit.commands._base import CmdkitCommand, subject_options
from cmdkit.output.formatters import format_completions, render_messages

if TYPE_CHECKING:
    from cmdkit.commands._context import AppContext

EXIT_WORDS = frozenset({"exit", "quit"})


def split_line(line: str) -> list[str]:
    """Whitespace-split *line*, keeping an empty trailing token after a space."""
    tokens = line.split()
    if line.endswith((" ", "\t")) and tokens:
        tokens.append("")
    return tokens


@click.command(
    cls=CmdkitCommand,
    examples="""\
  cmdkit shell --as alex
  printf 'roll d6\\nroll stats\\n' | cmdkit shell""",
)
@subject_options
@click.pass_obj
def shell(
    app: AppContext,
    as_name: str | None,
    console: bool,
    permissions: tuple[str, ...],
) -> None:
    """Read commands from stdin and dispatch them as one subject."""
    output: list[str] = []
    subject = app.subject(
        as_name=as_name,
        console=console,
        permissions=permissions,
        sink=output.append,
    )
    runtime = app.runtime
    stdin = click.get_text_stream("stdin")

    for raw in stdin:
        line = raw.rstrip("\r\n").lstrip()
        if not line.strip():
            continue
        if line.strip().lower() in EXIT_WORDS:
            break

        if line.startswith("?"):
            tokens = split_line(line[1:].lstrip("/"))
            if len(tokens) <= 1:
                partial = tokens[0] if tokens else ""
                suggestions = runtime.completion.complete_labels(subject, partial)
            else:
                suggestions = runtime.complete(subject, tokens[0], tokens[1:])
            click.echo(format_completions(suggestions) or "(no suggestions)")
            continue

        label, *tokens = line.lstrip("/").split()
        output.clear()
        result = runtime.dispatch(subject, label, tokens)
        if not result.handled:
            click.echo(f"Unknown command: {label}", err=True)
        elif output:
            click.echo(render_messages(output))

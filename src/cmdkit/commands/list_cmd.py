"""Command: list registered commands."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

import click

from cmdkit.commands._base import CmdkitCommand, subject_options
from cmdkit.output.formatters import format_commands

if TYPE_CHECKING:
    from cmdkit.commands._context import AppContext
    from cmdkit.domain.node import CommandNode
    from cmdkit.domain.subject import Subject


def _visible(
    node: CommandNode, subject: Subject, prefix: str, show_all: bool
) -> Iterator[tuple[str, CommandNode]]:
    """Yield paths under *node*, pruning subtrees the subject cannot enter."""
    if not show_all and not node.permits(subject):
        return
    path = f"{prefix} {node.name}".strip()
    yield path, node
    for child in node.subcommands():
        yield from _visible(child, subject, path, show_all)


@click.command(
    "list",
    cls=CmdkitCommand,
    examples="""\
  cmdkit list
  cmdkit list --all
  cmdkit list -p cmdkit.admin""",
)
@click.option("--all", "show_all", is_flag=True, help="Include commands the subject cannot use.")
@subject_options
@click.pass_obj
def list_cmd(
    app: AppContext,
    show_all: bool,
    as_name: str | None,
    console: bool,
    permissions: tuple[str, ...],
) -> None:
    """List every command path with usage and permission."""
    subject = app.subject(as_name=as_name, console=console, permissions=permissions)
    rows: list[tuple[str, CommandNode]] = []
    for top in app.runtime.registry.list_all():
        rows.extend(_visible(top, subject, "", show_all))
    rows.sort(key=lambda row: row[0])
    click.echo(format_commands(rows, json_output=app.settings.json_output))

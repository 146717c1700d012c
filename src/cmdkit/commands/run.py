"""Command: dispatch one command invocation."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from cmdkit.commands._base import CmdkitCommand, subject_options

if TYPE_CHECKING:
    from cmdkit.commands._context import AppContext


@click.command(
    cls=CmdkitCommand,
    context_settings={"ignore_unknown_options": True},
    examples="""\
  cmdkit run roll 2d6+1
  cmdkit run roll stats --as alex
  cmdkit run cooldown peek alex 3 roll -p cmdkit.admin
  cmdkit --json run roll d20 --console""",
)
@click.argument("label")
@click.argument("tokens", nargs=-1, type=click.UNPROCESSED)
@subject_options
@click.pass_obj
def run(
    app: AppContext,
    label: str,
    tokens: tuple[str, ...],
    as_name: str | None,
    console: bool,
    permissions: tuple[str, ...],
) -> None:
    """Dispatch LABEL with TOKENS as one subject."""
    subject = app.subject(as_name=as_name, console=console, permissions=permissions)
    result = app.runtime.dispatch(subject, label, list(tokens))
    app.emit(result, getattr(subject, "messages", ()))

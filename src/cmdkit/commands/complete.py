"""Command: completion suggestions for partial input."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from cmdkit.commands._base import CmdkitCommand, subject_options
from cmdkit.output.formatters import format_completions

if TYPE_CHECKING:
    from cmdkit.commands._context import AppContext


@click.command(
    cls=CmdkitCommand,
    context_settings={"ignore_unknown_options": True},
    examples="""\
  cmdkit complete roll ""
  cmdkit complete roll st
  cmdkit complete cooldown "" -p cmdkit.admin""",
)
@click.argument("label")
@click.argument("tokens", nargs=-1, type=click.UNPROCESSED)
@subject_options
@click.pass_obj
def complete(
    app: AppContext,
    label: str,
    tokens: tuple[str, ...],
    as_name: str | None,
    console: bool,
    permissions: tuple[str, ...],
) -> None:
    """Print suggestions for the last of TOKENS typed after LABEL.

    Pass an empty string as the last token to complete a fresh position.
    """
    subject = app.subject(as_name=as_name, console=console, permissions=permissions)
    suggestions = app.runtime.complete(subject, label, list(tokens))
    text = format_completions(suggestions, json_output=app.settings.json_output)
    if text:
        click.echo(text)

"""Custom Click base classes with --examples support, plus shared options.

Provides CmdkitCommand and CmdkitGroup that accept an ``examples``
parameter. When ``--examples`` is passed, the command prints usage
examples and exits.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import click


def _add_examples_option(cmd: click.Command | click.Group, examples: str) -> None:
    """Attach an eager ``--examples`` flag to a Click command or group."""

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


class CmdkitCommand(click.Command):
    """Click Command subclass that supports an ``--examples`` flag."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


class CmdkitGroup(click.Group):
    """Click Group subclass that supports an ``--examples`` flag."""

    command_class = CmdkitCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


def subject_options[F: Callable[..., Any]](func: F) -> F:
    """Add ``--as``, ``--console`` and ``-p/--permission`` to a command."""
    func = click.option(
        "-p",
        "--permission",
        "permissions",
        multiple=True,
        help="Grant a permission to the subject (repeatable).",
    )(func)
    func = click.option("--console", is_flag=True, help="Dispatch as the console.")(func)
    func = click.option("--as", "as_name", default=None, help="Subject name.")(func)
    return func

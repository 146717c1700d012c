"""Subcommand modules for the cmdkit CLI.

Provides register_commands() which uses deferred imports to keep
``cmdkit --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from cmdkit.commands.complete import complete
    from cmdkit.commands.list_cmd import list_cmd
    from cmdkit.commands.run import run
    from cmdkit.commands.shell import shell

    cli.add_command(run)
    cli.add_command(complete)
    cli.add_command(list_cmd)
    cli.add_command(shell)

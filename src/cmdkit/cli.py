"""Root CLI group for cmdkit with global flags and command registration."""

from __future__ import annotations

import click

from cmdkit import __version__
from cmdkit.commands import register_commands
from cmdkit.commands._base import CmdkitGroup
from cmdkit.commands._context import AppContext
from cmdkit.config.settings import CmdkitSettings


@click.group(
    cls=CmdkitGroup,
    invoke_without_command=True,
    examples="""\
  cmdkit run roll 2d6+1
  cmdkit --json list --all
  cmdkit -c ./cmdkit.toml shell --as alex
  cmdkit --log-json -v run cooldown list""",
)
@click.version_option(version=__version__, prog_name="cmdkit")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging to stderr.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """cmdkit: typed command dispatch and completion."""
    ctx.ensure_object(dict)
    settings = CmdkitSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        verbose=verbose,
        log_json=log_json,
    )
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)

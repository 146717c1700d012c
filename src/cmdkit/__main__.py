from cmdkit.cli import cli

cli()

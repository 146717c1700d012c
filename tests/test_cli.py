"""Tests for the root cmdkit CLI."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from cmdkit import __version__
from cmdkit.cli import cli


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "cmdkit" in result.output
    for name in ("run", "complete", "list", "shell"):
        assert name in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


@pytest.mark.usefixtures("_isolated_cwd")
def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


@pytest.mark.usefixtures("_isolated_cwd")
def test_invalid_config_is_reported(cli_runner: CliRunner) -> None:
    with open("cmdkit.toml", "w") as fh:
        fh.write("[arguments\n")
    result = cli_runner.invoke(cli, ["list"])
    assert result.exit_code == 1
    assert "Invalid TOML" in result.output


@pytest.mark.usefixtures("_isolated_cwd")
def test_config_flag(cli_runner: CliRunner, tmp_path: Path) -> None:
    custom = tmp_path / "elsewhere.toml"
    custom.write_text('[plugins]\nbuiltins = false\nentry_points = false\n')
    result = cli_runner.invoke(cli, ["-c", str(custom), "--json", "list", "--all"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "[]"

"""Shared pytest fixtures and test helpers for cmdkit tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from click.testing import CliRunner

from cmdkit.domain.subject import ConsoleSubject, SessionSubject
from cmdkit.services.cooldowns import CooldownGate
from cmdkit.services.runtime import CommandRuntime


class FakeClock:
    """Manually advanced millisecond clock for cooldown tests."""

    def __init__(self, start: int = 1_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += int(seconds * 1000)


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """Undo the root handler and level changes made by configure_logging."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    names = ("", "cmdkit", "cmdkit.dispatch", "cmdkit.plugins", "pluggy")
    levels = {name: logging.getLogger(name).level for name in names}
    yield
    root.handlers = handlers
    for name, level in levels.items():
        logging.getLogger(name).setLevel(level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def gate(clock: FakeClock) -> CooldownGate:
    return CooldownGate(clock)


@pytest.fixture
def player() -> SessionSubject:
    """An interactive subject with ``kit.use`` granted."""
    return SessionSubject("Alex", ["kit.use"])


@pytest.fixture
def console() -> ConsoleSubject:
    return ConsoleSubject()


@pytest.fixture
def runtime(clock: FakeClock) -> Iterator[CommandRuntime]:
    """A runtime with an injected clock, shut down after the test."""
    rt = CommandRuntime(clock=clock)
    try:
        yield rt
    finally:
        rt.shutdown()


@pytest.fixture
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run from an empty temp directory so no stray cmdkit.toml is found.

    Use via ``@pytest.mark.usefixtures("_isolated_cwd")`` on CLI test classes.
    """
    monkeypatch.delenv("CMDKIT_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)

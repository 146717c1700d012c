"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging

import pytest
import structlog

from cmdkit.config.logging import DISPATCH_LOGGER, configure_logging, resolve_levels
from cmdkit.domain.node import NodeBuilder
from cmdkit.domain.subject import SessionSubject
from cmdkit.services.context import CommandContext
from cmdkit.services.runtime import CommandRuntime


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True, log_json=False)
        assert logging.getLogger("cmdkit").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False, log_json=False)
        assert logging.getLogger("cmdkit").level == logging.WARNING

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        log = structlog.get_logger("cmdkit.dispatch")
        log.warning("command_rejected", op="kit give", code="no_permission")
        captured = capfd.readouterr()
        parsed = json.loads(captured.err.strip())
        assert parsed["event"] == "command_rejected"
        assert parsed["op"] == "kit give"
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "cmdkit.dispatch"
        assert "timestamp" in parsed

    def test_stdlib_logger_gets_structured_fields(
        self, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("cmdkit.services.registry").debug("Registered command: kit")
        captured = capfd.readouterr()
        parsed = json.loads(captured.err.strip())
        assert parsed["event"] == "Registered command: kit"
        assert parsed["level"] == "debug"
        assert parsed["logger"] == "cmdkit.services.registry"

    def test_quiet_by_default(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=False, log_json=True)
        logging.getLogger("cmdkit.services.registry").debug("hidden")
        logging.getLogger("pluggy").debug("hidden too")
        assert capfd.readouterr().err == ""


class TestLevels:
    def test_defaults(self) -> None:
        assert resolve_levels(False) == {"cmdkit": logging.WARNING, "pluggy": logging.WARNING}
        assert resolve_levels(True)["cmdkit"] == logging.DEBUG

    def test_overrides_win_over_verbose(self) -> None:
        levels = resolve_levels(True, {"cmdkit.plugins": "error", "pluggy": "DEBUG"})
        assert levels["cmdkit"] == logging.DEBUG
        assert levels["cmdkit.plugins"] == logging.ERROR
        assert levels["pluggy"] == logging.DEBUG

    def test_configure_applies_overrides(self) -> None:
        configure_logging(levels={DISPATCH_LOGGER: "INFO"})
        assert logging.getLogger("cmdkit").level == logging.WARNING
        assert logging.getLogger(DISPATCH_LOGGER).level == logging.INFO


class TestDispatchEvents:
    def test_rejections_visible_at_info(
        self, runtime: CommandRuntime, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(log_json=True, levels={DISPATCH_LOGGER: "INFO"})
        runtime.register(NodeBuilder("ban").permission("mod.ban").executes(lambda ctx: None))
        runtime.dispatch(SessionSubject("alex"), "ban", ["sam"])
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "command_rejected"
        assert parsed["logger"] == DISPATCH_LOGGER
        assert parsed["op"] == "ban"
        assert parsed["code"] == "no_permission"

    def test_handler_logs_carry_command_context(
        self, runtime: CommandRuntime, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(log_json=True)

        def give(ctx: CommandContext) -> None:
            logging.getLogger("cmdkit.kits").warning("kit out of stock")

        kit = NodeBuilder("kit")
        kit.subcommand("give").executes(give)
        runtime.register(kit)
        runtime.dispatch(SessionSubject("Alex"), "kit", ["give"])
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "kit out of stock"
        assert parsed["op"] == "kit give"
        assert parsed["subject"] == "alex"
        assert structlog.contextvars.get_contextvars() == {}

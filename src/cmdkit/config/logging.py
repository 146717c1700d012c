"""structlog setup for the engine and the reference CLI.

Library modules log through ``logging.getLogger(__name__)``; dispatch
outcomes are structured events on :data:`DISPATCH_LOGGER`. While a handler
runs, the dispatcher binds ``op`` and ``subject`` as structlog context
variables, so anything a handler logs carries the command path.

Levels, lowest precedence first:

1. ``cmdkit`` at WARNING (DEBUG with ``verbose``); pluggy at WARNING
2. ``[logging] levels`` from ``cmdkit.toml``
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping

import structlog

DISPATCH_LOGGER = "cmdkit.dispatch"


def dispatch_events() -> structlog.stdlib.BoundLogger:
    """The structured logger dispatch outcomes are reported on."""
    return structlog.get_logger(DISPATCH_LOGGER)


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def _stderr_handler(
    pre_chain: list[structlog.types.Processor],
    renderer: structlog.types.Processor,
) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )
    return handler


def resolve_levels(verbose: bool, overrides: Mapping[str, str] | None = None) -> dict[str, int]:
    """Logger name -> numeric level after applying defaults and *overrides*."""
    levels: dict[str, int] = {
        "cmdkit": logging.DEBUG if verbose else logging.WARNING,
        "pluggy": logging.WARNING,
    }
    for name, level in (overrides or {}).items():
        levels[name] = logging.getLevelNamesMapping()[level.upper()]
    return levels


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    levels: Mapping[str, str] | None = None,
) -> None:
    """Route stdlib and structlog records to stderr.

    Args:
        verbose: Enable DEBUG output for every ``cmdkit`` logger.
        log_json: Render JSON lines instead of console output.
        levels: Per-logger level names, e.g. ``{"cmdkit.dispatch": "info"}``.
    """
    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(_stderr_handler(pre_chain, _renderer(log_json)))
    root.setLevel(logging.WARNING)

    for name, level in resolve_levels(verbose, levels).items():
        logging.getLogger(name).setLevel(level)

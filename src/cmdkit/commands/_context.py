"""AppContext: shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy runtime initialization and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

import click

from cmdkit.domain.subject import ConsoleSubject, SessionSubject
from cmdkit.output.formatters import format_result

if TYPE_CHECKING:
    from cmdkit.config.settings import CmdkitSettings
    from cmdkit.domain.subject import Subject
    from cmdkit.services.result import DispatchResult
    from cmdkit.services.runtime import CommandRuntime


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The runtime is lazily initialized on first use so ``--help`` and
    ``--version`` never load plugins.
    """

    def __init__(self, settings: CmdkitSettings) -> None:
        self.settings = settings
        self._runtime: CommandRuntime | None = None

        from cmdkit.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose,
            log_json=settings.log_json,
            levels=settings.logging.levels,
        )

    @property
    def runtime(self) -> CommandRuntime:
        """The command runtime (created lazily on first access)."""
        if self._runtime is None:
            self._runtime = build_runtime(self.settings)
        return self._runtime

    def subject(
        self,
        *,
        as_name: str | None = None,
        console: bool = False,
        permissions: Sequence[str] = (),
        sink: Callable[[str], None] | None = None,
    ) -> Subject:
        """Build the subject a command dispatches as.

        CLI options win over the ``[subject]`` config section.
        """
        defaults = self.settings.subject
        name = as_name or defaults.name
        granted = tuple(permissions) or defaults.permissions
        if console or defaults.console:
            return ConsoleSubject(name if as_name else "console", granted or ("*",), sink=sink)
        return SessionSubject(name, granted, sink=sink)

    def emit(self, result: DispatchResult, output: Sequence[str] = ()) -> None:
        """Format and output a DispatchResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
        * Failure: writes to stderr, exits with code 1.
        """
        text = format_result(result, output=output, json_output=self.settings.json_output)
        if result.ok:
            click.echo(text)
        else:
            click.echo(text, err=True)
            raise SystemExit(1)

    def close(self) -> None:
        if self._runtime is not None:
            self._runtime.shutdown()
            self._runtime = None


def build_runtime(settings: CmdkitSettings) -> CommandRuntime:
    """Wire a runtime with built-in and entry-point plugins per settings."""
    from cmdkit.plugins.builtins import BUILTIN_PLUGINS
    from cmdkit.plugins.manager import PluginManager
    from cmdkit.services.runtime import CommandRuntime

    plugins = settings.plugins
    manager = PluginManager()
    if plugins.entry_points:
        manager.discover_and_load(disabled=plugins.disabled)
    if plugins.builtins:
        for plugin_cls in BUILTIN_PLUGINS:
            if plugin_cls.__name__ not in plugins.disabled:
                manager.register_plugin(plugin_cls(), name=plugin_cls.__name__)

    runtime = CommandRuntime(settings.to_config(), plugin_manager=manager)
    runtime.load_plugins()
    return runtime

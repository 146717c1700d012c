"""CommandRuntime: process-scoped bundle of the engine's collaborators.

Owns one :class:`CommandRegistry`, one :class:`CooldownGate`, one
:class:`ResolverRegistry` and the :class:`Dispatcher` and
:class:`CompletionEngine` wired to them. Cooldown state lives exactly as
long as the runtime; :meth:`CommandRuntime.shutdown` releases it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from typing import TYPE_CHECKING

from cmdkit.config.models import CmdkitConfig
from cmdkit.domain.node import CommandNode, NodeBuilder
from cmdkit.domain.resolvers import ResolverRegistry
from cmdkit.services.completion import CompletionEngine
from cmdkit.services.cooldowns import CooldownGate, monotonic_millis
from cmdkit.services.dispatcher import Dispatcher
from cmdkit.services.registry import CommandRegistry

if TYPE_CHECKING:
    from cmdkit.domain.subject import Subject
    from cmdkit.plugins.manager import PluginManager
    from cmdkit.services.result import DispatchResult

logger = logging.getLogger(__name__)


class CommandRuntime:
    """Registry, cooldowns, resolvers, dispatch and completion in one place.

    Usage::

        runtime = CommandRuntime(config)
        runtime.register(NodeBuilder("ping").executes(lambda ctx: ctx.reply("pong")))
        runtime.dispatch(subject, "ping", [])
        runtime.shutdown()
    """

    def __init__(
        self,
        config: CmdkitConfig | None = None,
        *,
        clock: Callable[[], int] = monotonic_millis,
        plugin_manager: PluginManager | None = None,
    ) -> None:
        self.config = config or CmdkitConfig()
        self.registry = CommandRegistry()
        self.cooldowns = CooldownGate(clock)
        self.resolvers = ResolverRegistry()
        self.plugin_manager = plugin_manager

        limits = self.config.arguments.to_limits()
        self.dispatcher = Dispatcher(
            self.registry,
            self.cooldowns,
            self.resolvers,
            limits=limits,
            messages=self.config.messages,
            cooldowns_enabled=self.config.cooldowns.enabled,
            plugin_manager=plugin_manager,
        )
        self.completion = CompletionEngine(self.registry, self.resolvers, limits=limits)

    def register(self, node: CommandNode | NodeBuilder) -> CommandNode:
        """Register a frozen node, building it first when given a builder."""
        built = node.build() if isinstance(node, NodeBuilder) else node
        self.registry.register(built)
        return built

    def register_all(self, nodes: Iterable[CommandNode | NodeBuilder]) -> list[CommandNode]:
        return [self.register(node) for node in nodes]

    def load_plugins(self) -> list[str]:
        """Register commands and resolvers contributed by the plugin manager.

        Returns the keys of the registered commands.
        """
        if self.plugin_manager is None:
            return []
        for tag, resolver in self.plugin_manager.collect_resolvers().items():
            self.resolvers.register(tag, resolver)
        names: list[str] = []
        for node in self.plugin_manager.collect_commands():
            self.register(node)
            names.append(node.name)
        logger.debug("Loaded %d plugin command(s)", len(names))
        return names

    def dispatch(self, subject: Subject, label: str, tokens: Sequence[str] = ()) -> DispatchResult:
        return self.dispatcher.dispatch(subject, label, tokens)

    def complete(self, subject: Subject, label: str, tokens: Sequence[str] = ()) -> list[str]:
        return self.completion.complete(subject, label, tokens)

    def shutdown(self) -> None:
        """Unregister every command and drop all cooldown state."""
        self.registry.unregister_all()
        self.cooldowns.clear_everything()
        logger.debug("Command runtime shut down")

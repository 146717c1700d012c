"""Plugin discovery and loading.

Discovery: entry points (pip-installed) via pluggy setuptools entrypoints,
plus built-in plugins registered directly.
Capabilities: command trees, domain resolvers, dispatch events.

INVARIANT: Plugin failures are warnings, never errors.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Iterable
from typing import Any

import pluggy

from cmdkit.domain.node import CommandNode, NodeBuilder
from cmdkit.domain.resolvers import Resolver
from cmdkit.plugins.hookspecs import CmdkitHookSpec

PROJECT_NAME = "cmdkit"
ENTRY_POINT_GROUP = "cmdkit.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, loading, and hook dispatch."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(CmdkitHookSpec)
        self._loaded: bool = False

    def discover_and_load(self, *, disabled: Iterable[str] = ()) -> list[str]:
        """Load plugins from the ``cmdkit.plugins`` entry point group.

        Names in *disabled* are blocked before loading.
        Returns a list of loaded plugin names.
        """
        for name in disabled:
            self._pm.set_blocked(name)
        try:
            self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        except Exception:
            logger.warning("Failed to load entry-point plugins", exc_info=True)
        self._normalize_plugin_instances()
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly (e.g. built-in plugins)."""
        resolved_name = name or plugin.__class__.__name__
        if self._pm.is_blocked(resolved_name):
            logger.debug("Skipping blocked plugin: %s", resolved_name)
            return
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        """Unregister a plugin instance."""
        self._pm.unregister(plugin)

    @property
    def is_loaded(self) -> bool:
        """Whether discover_and_load() has been called."""
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        """Access the hook relay for dispatching events."""
        return self._pm.hook

    def get_plugins(self) -> list[object]:
        """Return all registered plugins."""
        return list(self._pm.get_plugins())

    def list_plugin_names(self) -> list[str]:
        """Return names of all registered plugins."""
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    # ------------------------------------------------------------------
    # Contributions
    # ------------------------------------------------------------------

    def collect_commands(self) -> list[CommandNode]:
        """Build every command tree contributed through ``register_commands``."""
        nodes: list[CommandNode] = []
        for plugin_name, items in self._call_each("register_commands"):
            if not isinstance(items, list | tuple):
                logger.warning("Plugin %s returned non-list command registrations", plugin_name)
                continue
            for item in items:
                try:
                    node = item.build() if isinstance(item, NodeBuilder) else item
                except ValueError:
                    logger.warning(
                        "Skipping invalid command from plugin %s",
                        plugin_name,
                        exc_info=True,
                    )
                    continue
                if not isinstance(node, CommandNode):
                    logger.warning(
                        "Plugin %s returned %s instead of a command node",
                        plugin_name,
                        type(node).__name__,
                    )
                    continue
                nodes.append(node)
        return nodes

    def collect_resolvers(self) -> dict[str, Resolver]:
        """Merge every resolver map contributed through ``register_resolvers``."""
        resolvers: dict[str, Resolver] = {}
        for plugin_name, mapping in self._call_each("register_resolvers"):
            if not isinstance(mapping, dict):
                logger.warning("Plugin %s returned non-dict resolver registrations", plugin_name)
                continue
            for tag, resolver in mapping.items():
                if not isinstance(resolver, Resolver):
                    logger.warning(
                        "Skipping resolver %r from plugin %s: not a Resolver",
                        tag,
                        plugin_name,
                    )
                    continue
                resolvers[str(tag).lower()] = resolver
        return resolvers

    def _call_each(self, hook_name: str) -> list[tuple[str, Any]]:
        """Call *hook_name* on each plugin separately so one failure stays local."""
        results: list[tuple[str, Any]] = []
        for plugin in self._pm.get_plugins():
            plugin_name = self._pm.get_name(plugin) or plugin.__class__.__name__
            hook = getattr(plugin, hook_name, None)
            if hook is None:
                continue
            try:
                value = hook()
            except Exception:
                logger.warning(
                    "Plugin %s failed in %s",
                    plugin_name,
                    hook_name,
                    exc_info=True,
                )
                continue
            if value is not None:
                results.append((plugin_name, value))
        return results

    def _normalize_plugin_instances(self) -> None:
        """Replace registered plugin classes with instantiated objects.

        Entry-point loading may register a plugin class directly. Hook dispatch
        against class objects leaves ``self`` unbound and fails at runtime.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin):
                continue
            if not self._has_hook_impls(plugin):
                continue

            plugin_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)

            try:
                instance = plugin()
            except Exception:
                logger.warning(
                    "Failed to instantiate entry-point plugin %s",
                    plugin_name,
                    exc_info=True,
                )
                continue

            self._pm.register(instance, name=plugin_name)
            logger.debug("Instantiated entry-point plugin: %s", plugin_name)

    @staticmethod
    def _has_hook_impls(cls: type) -> bool:
        """Check whether *cls* has any methods decorated with ``@hookimpl``.

        Pluggy's ``HookimplMarker("cmdkit")`` sets a ``cmdkit_impl``
        attribute on decorated methods.
        """
        for name in dir(cls):
            if name.startswith("_"):
                continue
            method = getattr(cls, name, None)
            if callable(method) and getattr(method, "cmdkit_impl", None):
                return True
        return False

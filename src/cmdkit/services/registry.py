"""CommandRegistry: top-level command nodes addressed by name or alias.

The registry only stores and looks up nodes; it knows nothing about
dispatch. Keys are lowercase. Registering a node whose name or alias
collides with an existing key replaces that key (last registration wins).
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cmdkit.domain.node import CommandNode

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Thread-safe name/alias -> :class:`CommandNode` table."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._commands: dict[str, CommandNode] = {}

    def register(self, node: CommandNode) -> None:
        with self._lock:
            for key in node.keys:
                previous = self._commands.get(key)
                if previous is not None and previous is not node:
                    logger.warning(
                        "Command key %r re-registered: %s replaces %s",
                        key,
                        node.name,
                        previous.name,
                    )
                self._commands[key] = node
        logger.debug("Registered command: %s", node.name)

    def unregister(self, name: str) -> CommandNode | None:
        """Remove the node reached by *name* along with all of its keys."""
        with self._lock:
            node = self._commands.pop(name.lower(), None)
            if node is None:
                return None
            for key in [k for k, v in self._commands.items() if v is node]:
                del self._commands[key]
        logger.debug("Unregistered command: %s", node.name)
        return node

    def unregister_all(self) -> None:
        with self._lock:
            self._commands.clear()

    def get(self, name: str) -> CommandNode | None:
        return self._commands.get(name.lower())

    def is_registered(self, name: str) -> bool:
        return name.lower() in self._commands

    def list_all(self) -> list[CommandNode]:
        """Snapshot of the distinct registered nodes, in registration order."""
        with self._lock:
            values = list(self._commands.values())
        distinct: dict[int, CommandNode] = {}
        for node in values:
            distinct.setdefault(id(node), node)
        return list(distinct.values())

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._commands)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.is_registered(name)

    def __len__(self) -> int:
        return len(self.list_all())

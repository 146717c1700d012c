"""Subjects: the actors that invoke commands.

A subject is either an interactive actor (a connected session, which is
the only kind subject to player-only checks and cooldowns) or a
non-interactive caller such as a console. Hosts adapt their own sender
types to the :class:`Subject` protocol.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Protocol, runtime_checkable


@runtime_checkable
class Subject(Protocol):
    """Structural type every invoking actor must satisfy."""

    @property
    def key(self) -> str:
        """Stable identity used to scope cooldown records."""
        ...

    @property
    def name(self) -> str: ...

    @property
    def is_player(self) -> bool:
        """True for interactive actors."""
        ...

    def has_permission(self, permission: str) -> bool: ...

    def send(self, message: str) -> None: ...


def permission_matches(granted: str, permission: str) -> bool:
    """Check one granted node against a required permission.

    Supports exact matches plus ``*`` and ``prefix.*`` wildcards.

    Examples:
        >>> permission_matches("kit.*", "kit.give")
        True
        >>> permission_matches("kit.give", "kit.take")
        False
    """
    if granted == "*" or granted == permission:
        return True
    if granted.endswith(".*"):
        return permission.startswith(granted[:-1])
    return False


class _BaseSubject:
    def __init__(
        self,
        name: str,
        permissions: Iterable[str] = (),
        *,
        sink: Callable[[str], None] | None = None,
    ) -> None:
        self._name = name
        self._permissions = frozenset(permissions)
        self._sink = sink
        self.messages: list[str] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def permissions(self) -> frozenset[str]:
        return self._permissions

    def has_permission(self, permission: str) -> bool:
        return any(permission_matches(granted, permission) for granted in self._permissions)

    def send(self, message: str) -> None:
        self.messages.append(message)
        if self._sink is not None:
            self._sink(message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._name!r})"


class SessionSubject(_BaseSubject):
    """An interactive actor holding an explicit permission set."""

    def __init__(
        self,
        name: str,
        permissions: Iterable[str] = (),
        *,
        key: str | None = None,
        sink: Callable[[str], None] | None = None,
    ) -> None:
        super().__init__(name, permissions, sink=sink)
        self._key = key or name.lower()

    @property
    def key(self) -> str:
        return self._key

    @property
    def is_player(self) -> bool:
        return True


class ConsoleSubject(_BaseSubject):
    """Non-interactive caller. Holds every permission by default."""

    def __init__(
        self,
        name: str = "console",
        permissions: Iterable[str] = ("*",),
        *,
        sink: Callable[[str], None] | None = None,
    ) -> None:
        super().__init__(name, permissions, sink=sink)

    @property
    def key(self) -> str:
        return f"console:{self.name}"

    @property
    def is_player(self) -> bool:
        return False

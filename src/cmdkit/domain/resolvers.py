"""Named resolvers for domain argument kinds.

Domain kinds (a connected session, a loaded world, a catalog entry) are
not known to the engine. The host registers a :class:`Resolver` under a
tag before any command using that tag is dispatched; the
:class:`~cmdkit.domain.arguments.DomainKind` only stores the tag.

INVARIANT: An unregistered tag always fails to parse and never completes.
Exceptions raised by a host resolver propagate to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any

from cmdkit.domain.results import ParseResult, failure, success
from cmdkit.domain.types import ErrorCode

logger = logging.getLogger(__name__)


def prefix_filter(options: list[str] | tuple[str, ...], current: str) -> list[str]:
    """Keep the options starting with *current*, case-insensitively."""
    lowered = current.lower()
    return [option for option in options if option.lower().startswith(lowered)]


@dataclass(frozen=True)
class Resolver:
    """Resolve/complete pair supplied by the host for one domain tag.

    Attributes:
        resolve: Maps a token to a domain object, or ``None`` if not found.
        complete: Returns every candidate name; results are prefix-filtered
            by the resolver, so hosts may return the full candidate list.
        label: Human noun used in failure messages (``"Player"``).
    """

    resolve: Callable[[str], Any]
    complete: Callable[[str], list[str]] | None = None
    label: str = "Value"

    def parse(self, token: str) -> ParseResult[Any]:
        value = self.resolve(token)
        if value is None:
            return failure(f"{self.label} '{token}' not found", ErrorCode.UNRESOLVED)
        return success(value)

    def suggestions(self, current: str) -> list[str]:
        if self.complete is None:
            return []
        return prefix_filter(list(self.complete(current)), current)


def _normalize(tag: str) -> str:
    return tag.strip().lower()


class ResolverRegistry:
    """Tag -> :class:`Resolver` table shared by parsing and completion."""

    def __init__(self) -> None:
        self._resolvers: dict[str, Resolver] = {}

    def register(
        self,
        tag: str,
        resolve: Callable[[str], Any] | Resolver,
        complete: Callable[[str], list[str]] | None = None,
        *,
        label: str | None = None,
    ) -> Resolver:
        """Register (or replace) the resolver for *tag*.

        Accepts either a ready :class:`Resolver` or a bare resolve callable
        plus optional completer.
        """
        normalized = _normalize(tag)
        if not normalized:
            msg = "Resolver tag must not be empty"
            raise ValueError(msg)
        if isinstance(resolve, Resolver):
            resolver = resolve
        else:
            resolver = Resolver(
                resolve=resolve,
                complete=complete,
                label=label or normalized.replace("_", " ").capitalize(),
            )
        if normalized in self._resolvers:
            logger.debug("Replacing resolver for tag %s", normalized)
        self._resolvers[normalized] = resolver
        return resolver

    def unregister(self, tag: str) -> None:
        self._resolvers.pop(_normalize(tag), None)

    def get(self, tag: str) -> Resolver | None:
        return self._resolvers.get(_normalize(tag))

    def parse(self, tag: str, token: str) -> ParseResult[Any]:
        resolver = self.get(tag)
        if resolver is None:
            return failure(f"No resolver registered for '{tag}'", ErrorCode.UNRESOLVED)
        return resolver.parse(token)

    def complete(self, tag: str, current: str) -> list[str]:
        resolver = self.get(tag)
        if resolver is None:
            return []
        return resolver.suggestions(current)

    def clear(self) -> None:
        self._resolvers.clear()

    def __contains__(self, tag: object) -> bool:
        return isinstance(tag, str) and _normalize(tag) in self._resolvers

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._resolvers))

    def __len__(self) -> int:
        return len(self._resolvers)

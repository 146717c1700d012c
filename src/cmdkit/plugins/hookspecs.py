"""Pluggy hook specifications for cmdkit.

Two setup-time hooks let plugins contribute command trees and domain
resolvers. One event hook fires after every handled dispatch.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from cmdkit.domain.node import CommandNode, NodeBuilder
    from cmdkit.domain.resolvers import Resolver

hookspec = pluggy.HookspecMarker("cmdkit")


class CmdkitHookSpec:
    """Hook specifications for the cmdkit plugin system."""

    @hookspec
    def register_commands(self) -> list[CommandNode | NodeBuilder] | None:
        """Return top-level command nodes (or builders) to register."""

    @hookspec
    def register_resolvers(self) -> dict[str, Resolver] | None:
        """Return domain resolvers keyed by tag."""

    @hookspec
    def post_dispatch(
        self,
        label: str,
        subject_key: str,
        code: str | None,
        ok: bool,
    ) -> None:
        """Called after a dispatch the engine handled."""

"""Plugin system for cmdkit (pluggy-based).

Public API for plugin authors::

    from cmdkit.plugins import hookimpl

    class MyPlugin:
        @hookimpl
        def register_commands(self) -> list[CommandNode]:
            ...
"""

from __future__ import annotations

import pluggy

hookimpl = pluggy.HookimplMarker("cmdkit")

__all__ = ["hookimpl"]

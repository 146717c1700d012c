"""Built-in plugins shipped with cmdkit."""

from __future__ import annotations

from cmdkit.plugins.builtins.admin import CooldownAdminPlugin
from cmdkit.plugins.builtins.dice import DicePlugin

BUILTIN_PLUGINS: tuple[type, ...] = (DicePlugin, CooldownAdminPlugin)

__all__ = ["BUILTIN_PLUGINS", "CooldownAdminPlugin", "DicePlugin"]

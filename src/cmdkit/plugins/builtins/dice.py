"""Dice roller (``/roll``) built on a custom argument kind.

Notation::

    /roll [N]d<S>[+|-<modifier>]

    /roll d20        ->  d20 -> [14] = 14
    /roll 2d8+5      ->  2d8+5 -> [7, 3] + 5 = 15
    /roll stats      ->  your roll history

``/roll`` with no notation rolls a d20. Each subject may roll once every
:data:`ROLL_COOLDOWN_SECONDS`; holders of ``cmdkit.dice.bypass`` may roll
freely. The history subcommand is not rate limited.
"""

from __future__ import annotations

import random
import re
import threading
from dataclasses import dataclass

from cmdkit.domain.arguments import ArgParser
from cmdkit.domain.node import CommandNode, NodeBuilder
from cmdkit.domain.resolvers import prefix_filter
from cmdkit.domain.results import ParseResult, failure, success
from cmdkit.domain.types import ErrorCode
from cmdkit.plugins import hookimpl
from cmdkit.services.context import CommandContext
from cmdkit.services.cooldowns import format_remaining

_DICE_PATTERN = re.compile(r"^(\d*)d(\d+)(?:([+-])(\d+))?$", re.IGNORECASE)

MAX_DICE = 100
MIN_SIDES = 2
MAX_SIDES = 1000
MAX_MODIFIER = 10000
ROLL_COOLDOWN_SECONDS = 3
BYPASS_PERMISSION = "cmdkit.dice.bypass"
COMMON_ROLLS = ("d4", "d6", "d8", "d10", "d12", "d20", "d100", "2d6", "4d6")


@dataclass(frozen=True)
class DiceExpression:
    """Parsed dice notation."""

    count: int
    sides: int
    modifier: int = 0

    def __str__(self) -> str:
        base = f"{self.count}d{self.sides}" if self.count > 1 else f"d{self.sides}"
        if self.modifier > 0:
            return f"{base}+{self.modifier}"
        if self.modifier < 0:
            return f"{base}{self.modifier}"
        return base


@dataclass(frozen=True)
class DiceRoll:
    expression: DiceExpression
    rolls: tuple[int, ...]
    total: int

    @property
    def subtotal(self) -> int:
        return sum(self.rolls)

    def format_summary(self) -> str:
        rolls = ", ".join(str(r) for r in self.rolls)
        mod = self.expression.modifier
        if mod > 0:
            return f"{self.expression} -> [{rolls}] + {mod} = {self.total}"
        if mod < 0:
            return f"{self.expression} -> [{rolls}] - {abs(mod)} = {self.total}"
        return f"{self.expression} -> [{rolls}] = {self.total}"


class DiceParser(ArgParser[DiceExpression]):
    """Argument parser for ``[N]d<S>[+|-M]`` notation."""

    def parse(self, token: str) -> ParseResult[DiceExpression]:
        match = _DICE_PATTERN.match(token.strip())
        if match is None:
            return failure(f"'{token}' is not dice notation (try 2d6+1)")
        count_str, sides_str, op, mod_str = match.groups()
        count = int(count_str) if count_str else 1
        sides = int(sides_str)
        modifier = int(mod_str) if mod_str else 0
        if op == "-":
            modifier = -modifier

        if not 1 <= count <= MAX_DICE:
            return failure(f"Dice count must be between 1 and {MAX_DICE}", ErrorCode.OUT_OF_RANGE)
        if not MIN_SIDES <= sides <= MAX_SIDES:
            return failure(
                f"Dice sides must be between {MIN_SIDES} and {MAX_SIDES}",
                ErrorCode.OUT_OF_RANGE,
            )
        if abs(modifier) > MAX_MODIFIER:
            return failure(f"Modifier must be at most {MAX_MODIFIER}", ErrorCode.OUT_OF_RANGE)
        return success(DiceExpression(count, sides, modifier))

    def complete(self, current: str) -> list[str]:
        return prefix_filter(COMMON_ROLLS, current)


def roll_dice(expression: DiceExpression, rng: random.Random) -> DiceRoll:
    rolls = tuple(rng.randint(1, expression.sides) for _ in range(expression.count))
    return DiceRoll(expression, rolls, sum(rolls) + expression.modifier)


@dataclass
class RollStats:
    rolls: int = 0
    best: int | None = None
    last: str | None = None


class DicePlugin:
    """Contributes ``/roll`` (alias ``/r``) and keeps per-subject history."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()
        self._lock = threading.Lock()
        self._stats: dict[str, RollStats] = {}

    @hookimpl
    def register_commands(self) -> list[CommandNode]:
        return [self.build()]

    def build(self) -> CommandNode:
        roll = (
            NodeBuilder("roll")
            .describe("Roll dice using [N]d<S>[+M] notation")
            .aliases("r")
            .custom("dice", DiceParser(), optional=True)
            .executes(self._roll)
        )
        roll.subcommand("stats").describe("Show your roll history").executes(self._show_stats)
        return roll.build()

    def stats_for(self, subject_key: str) -> RollStats:
        with self._lock:
            return self._stats.get(subject_key, RollStats())

    def _roll(self, ctx: CommandContext) -> None:
        failed = ctx.arguments.failure_for("dice")
        if failed is not None:
            ctx.error(failed.message)
            return
        expression = ctx.arguments.get_as("dice", DiceExpression) or DiceExpression(1, 20)

        if not ctx.subject.has_permission(BYPASS_PERMISSION):
            left = ctx.cooldown_remaining("roll", ROLL_COOLDOWN_SECONDS)
            if left > 0:
                ctx.warn(f"Your dice are still rolling ({format_remaining(left)})")
                return

        result = roll_dice(expression, self._rng)
        with self._lock:
            stats = self._stats.setdefault(ctx.subject.key, RollStats())
            stats.rolls += 1
            stats.best = result.total if stats.best is None else max(stats.best, result.total)
            stats.last = result.format_summary()
        ctx.reply(result.format_summary())

    def _show_stats(self, ctx: CommandContext) -> None:
        stats = self.stats_for(ctx.subject.key)
        if stats.rolls == 0:
            ctx.info("You have not rolled yet.")
            return
        ctx.info(f"Rolls: {stats.rolls}, best total: {stats.best}, last: {stats.last}")

"""Admin ``/cooldown`` command for inspecting and resetting cooldowns.

Cooldown keys are qualified command paths, so ``kit give`` is typed as
two trailing tokens and captured by a greedy argument.
"""

from __future__ import annotations

from cmdkit.domain.node import CommandNode, NodeBuilder
from cmdkit.plugins import hookimpl
from cmdkit.services.context import CommandContext
from cmdkit.services.cooldowns import format_remaining

ADMIN_PERMISSION = "cmdkit.admin"


def _peek(ctx: CommandContext) -> None:
    gate = ctx.cooldowns
    subject_key = ctx.get_str("subject")
    seconds = ctx.get_int("seconds")
    key = ctx.get_str("command")
    if gate is None or subject_key is None or seconds is None or key is None:
        ctx.error(f"Usage: {ctx.node.usage if ctx.node else '/cooldown peek'}")
        return
    left = gate.peek(subject_key, key.lower(), seconds)
    if left == 0:
        ctx.info(f"{subject_key} may use /{key}")
    else:
        ctx.info(f"{subject_key} must wait {format_remaining(left)} for /{key}")


def _clear(ctx: CommandContext) -> None:
    gate = ctx.cooldowns
    subject_key = ctx.get_str("subject")
    if gate is None or subject_key is None:
        ctx.error(f"Usage: {ctx.node.usage if ctx.node else '/cooldown clear'}")
        return
    key = ctx.get_str("command")
    if key is None:
        gate.clear_subject(subject_key)
        ctx.success(f"Cleared every cooldown for {subject_key}")
    else:
        gate.clear(subject_key, key.lower())
        ctx.success(f"Cleared /{key} for {subject_key}")


def _list(ctx: CommandContext) -> None:
    gate = ctx.cooldowns
    subjects = sorted(gate.subjects()) if gate is not None else []
    if not subjects:
        ctx.info("No cooldowns recorded.")
        return
    ctx.info("Subjects with cooldowns: " + ", ".join(subjects))


def build_cooldown_command() -> CommandNode:
    root = (
        NodeBuilder("cooldown")
        .describe("Inspect and reset command cooldowns")
        .aliases("cd")
        .permission(ADMIN_PERMISSION)
    )
    (
        root.subcommand("peek")
        .describe("Seconds left for a subject without arming")
        .text("subject")
        .integer("seconds", min=1)
        .greedy("command")
        .executes(_peek)
    )
    (
        root.subcommand("clear")
        .describe("Reset one cooldown, or all of a subject's cooldowns")
        .text("subject")
        .greedy("command", optional=True)
        .executes(_clear)
    )
    root.subcommand("list").describe("Subjects holding cooldown records").executes(_list)
    return root.build()


class CooldownAdminPlugin:
    @hookimpl
    def register_commands(self) -> list[CommandNode]:
        return [build_cooldown_command()]

"""Dispatcher: routes (subject, label, tokens) through the command tree.

Each node runs a five-stage pipeline and stops at the first failure:

1. player-only gate
2. permission gate
3. cooldown gate (interactive subjects only; bypass skips it entirely)
4. subcommand routing on the first trailing token
5. argument parsing and handler invocation, or generated help

INVARIANT: Every branch reaches the subject as a message and reports
``handled=True``. Only an unknown top-level label is unhandled.
INVARIANT: Plugin failures are warnings, never errors.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

import structlog

from cmdkit.config.logging import dispatch_events
from cmdkit.config.models import MessagesConfig
from cmdkit.domain.arguments import DEFAULT_LIMITS, ArgumentLimits
from cmdkit.domain.parsing import parse_arguments
from cmdkit.domain.types import ErrorCode
from cmdkit.services.context import ERROR_PREFIX, CommandContext
from cmdkit.services.cooldowns import CooldownGate, format_remaining
from cmdkit.services.result import DispatchResult, error_result, ok_result

if TYPE_CHECKING:
    from cmdkit.domain.node import CommandNode
    from cmdkit.domain.resolvers import ResolverRegistry
    from cmdkit.domain.subject import Subject
    from cmdkit.plugins.manager import PluginManager
    from cmdkit.services.registry import CommandRegistry

logger = logging.getLogger(__name__)
events = dispatch_events()


def _fill(template: str, **values: object) -> str:
    """Substitute ``{name}`` placeholders, leaving unknown braces untouched."""
    for key, value in values.items():
        template = template.replace(f"{{{key}}}", str(value))
    return template


class Dispatcher:
    """Runs the gate pipeline for registered commands.

    Parameters:
        registry: Top-level command table.
        cooldowns: Shared cooldown bookkeeping.
        resolvers: Domain-kind resolvers used while parsing.
        limits: Length limits and numeric examples for built-in parsers.
        messages: Gate and help message templates.
        cooldowns_enabled: When False the cooldown stage is skipped.
        plugin_manager: Receives ``post_dispatch`` after every handled dispatch.
    """

    def __init__(
        self,
        registry: CommandRegistry,
        cooldowns: CooldownGate | None = None,
        resolvers: ResolverRegistry | None = None,
        *,
        limits: ArgumentLimits = DEFAULT_LIMITS,
        messages: MessagesConfig | None = None,
        cooldowns_enabled: bool = True,
        plugin_manager: PluginManager | None = None,
    ) -> None:
        self._registry = registry
        self._cooldowns = cooldowns if cooldowns is not None else CooldownGate()
        self._resolvers = resolvers
        self._limits = limits
        self._messages = messages or MessagesConfig()
        self._cooldowns_enabled = cooldowns_enabled
        self._plugin_manager = plugin_manager

    @property
    def cooldowns(self) -> CooldownGate:
        return self._cooldowns

    def dispatch(self, subject: Subject, label: str, tokens: Sequence[str]) -> DispatchResult:
        """Look *label* up in the registry and execute it.

        Returns an unhandled result when no command answers to *label*.
        """
        node = self._registry.get(label)
        if node is None:
            logger.debug("Unknown command label: %s", label)
            return error_result(
                label,
                label,
                ErrorCode.NO_HANDLER,
                f"Unknown command: {label}",
                handled=False,
            )
        result = self.execute(node, subject, tokens, label=label)
        self._dispatch_event(result, subject)
        return result

    def execute(
        self,
        node: CommandNode,
        subject: Subject,
        tokens: Sequence[str],
        *,
        label: str | None = None,
        path: str | None = None,
    ) -> DispatchResult:
        """Run the pipeline for *node* with *tokens* as its trailing input."""
        label = label or node.name
        path = path or node.name
        args = list(tokens)

        if node.player_only and not subject.is_player:
            return self._reject(
                subject, path, label, ErrorCode.PLAYER_ONLY, self._messages.player_only
            )

        if not node.permits(subject):
            return self._reject(
                subject,
                path,
                label,
                ErrorCode.NO_PERMISSION,
                self._messages.no_permission,
                permission=node.permission,
            )

        if self._cooldown_applies(node, subject):
            remaining = self._cooldowns.remaining(subject.key, path, node.cooldown_seconds)
            if remaining > 0:
                template = node.cooldown_message or self._messages.cooldown
                message = _fill(
                    template,
                    remaining=remaining,
                    formatted=format_remaining(remaining),
                )
                return self._reject(
                    subject,
                    path,
                    label,
                    ErrorCode.ON_COOLDOWN,
                    message,
                    remaining=remaining,
                )

        if args:
            child = node.child(args[0])
            if child is not None:
                child_path = f"{path} {child.name}"
                return self.execute(child, subject, args[1:], label=label, path=child_path)

        if node.handler is not None:
            arguments = parse_arguments(
                args,
                node.arguments,
                limits=self._limits,
                resolvers=self._resolvers,
            )
            ctx = CommandContext(
                subject,
                args,
                arguments,
                label,
                node=node,
                path=path,
                cooldowns=self._cooldowns,
            )
            with structlog.contextvars.bound_contextvars(op=path, subject=subject.key):
                node.handler(ctx)
                events.debug("command_executed", args=len(args))
            return ok_result(path, label)

        if node.children:
            lines = self._send_help(node, subject, path)
            return ok_result(path, label, help_shown=True, messages=lines)

        return self._reject(
            subject,
            path,
            label,
            ErrorCode.NO_HANDLER,
            _fill(self._messages.no_handler, path=path, name=node.name),
        )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _cooldown_applies(self, node: CommandNode, subject: Subject) -> bool:
        if not self._cooldowns_enabled or node.cooldown_seconds <= 0 or not subject.is_player:
            return False
        bypass = node.cooldown_bypass_permission
        return bypass is None or not subject.has_permission(bypass)

    def _reject(
        self,
        subject: Subject,
        path: str,
        label: str,
        code: ErrorCode,
        message: str,
        **detail: object,
    ) -> DispatchResult:
        subject.send(f"{ERROR_PREFIX}{message}")
        events.info("command_rejected", op=path, subject=subject.key, code=code.value)
        return error_result(path, label, code, message, **detail)

    def _send_help(self, node: CommandNode, subject: Subject, path: str) -> list[str]:
        """Send generated help listing the children *subject* may use."""
        msgs = self._messages
        lines = [_fill(msgs.help_header, name=node.name, path=path)]
        visible = [child for child in node.subcommands() if child.permits(subject)]
        if not visible:
            lines.append(msgs.help_empty)
        for child in visible:
            lines.append(
                _fill(
                    msgs.help_line,
                    path=path,
                    name=child.name,
                    description=child.description,
                )
            )
        lines.append(msgs.help_footer)
        for line in lines:
            subject.send(line)
        return lines

    def _dispatch_event(self, result: DispatchResult, subject: Subject) -> None:
        """Fire ``post_dispatch``. No-op without a plugin manager."""
        if self._plugin_manager is None:
            return
        code = result.error.code.value if result.error is not None else None
        try:
            self._plugin_manager.hook.post_dispatch(
                label=result.label,
                subject_key=subject.key,
                code=code,
                ok=result.ok,
            )
        except Exception:
            logger.warning("post_dispatch hook failed for %s", result.op, exc_info=True)

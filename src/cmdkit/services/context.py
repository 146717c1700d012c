"""Handler and completion contexts.

A handler receives one :class:`CommandContext` per invocation carrying the
subject, the raw trailing tokens, the parsed arguments, and the label the
subject typed. A completion override receives a :class:`CompletionContext`
describing the partial input.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Any

from cmdkit.domain.arguments import DEFAULT_LIMITS, ArgParser, ArgumentLimits
from cmdkit.domain.resolvers import prefix_filter
from cmdkit.domain.results import Failure, ParseResult, failure
from cmdkit.domain.types import ErrorCode
from cmdkit.domain.values import EMPTY_ARGUMENTS, ParsedArguments

if TYPE_CHECKING:
    from cmdkit.domain.node import CommandNode
    from cmdkit.domain.resolvers import ResolverRegistry
    from cmdkit.domain.subject import Subject
    from cmdkit.services.cooldowns import CooldownGate

SUCCESS_PREFIX = "✔ "
ERROR_PREFIX = "✖ "
WARNING_PREFIX = "⚠ "
INFO_PREFIX = "✦ "
REPLY_PREFIX = "» "


class CommandContext:
    """Everything a handler needs about the current invocation."""

    def __init__(
        self,
        subject: Subject,
        tokens: list[str],
        arguments: ParsedArguments = EMPTY_ARGUMENTS,
        label: str = "",
        *,
        node: CommandNode | None = None,
        path: str = "",
        cooldowns: CooldownGate | None = None,
    ) -> None:
        self.subject = subject
        self.tokens = tokens
        self.arguments = arguments
        self.label = label
        self.node = node
        self.path = path
        self._cooldowns = cooldowns

    @property
    def cooldowns(self) -> CooldownGate | None:
        """The gate backing this dispatch, or None outside a dispatcher."""
        return self._cooldowns

    @property
    def is_player(self) -> bool:
        return self.subject.is_player

    @property
    def is_console(self) -> bool:
        return not self.subject.is_player

    # ------------------------------------------------------------------
    # Named argument access
    # ------------------------------------------------------------------

    def __getitem__(self, key: str) -> Any:
        return self.arguments.get(key)

    def get_str(self, key: str) -> str | None:
        return self.arguments.get_str(key)

    def get_int(self, key: str) -> int | None:
        return self.arguments.get_int(key)

    def get_float(self, key: str) -> float | None:
        return self.arguments.get_float(key)

    def get_bool(self, key: str) -> bool | None:
        return self.arguments.get_bool(key)

    # ------------------------------------------------------------------
    # Positional access
    # ------------------------------------------------------------------

    @property
    def arg_count(self) -> int:
        return len(self.tokens)

    def arg(self, index: int) -> str | None:
        if 0 <= index < len(self.tokens):
            return self.tokens[index]
        return None

    def arg_or(self, index: int, default: str) -> str:
        value = self.arg(index)
        return default if value is None else value

    def join_args(self, start: int = 0) -> str:
        return " ".join(self.tokens[start:])

    def parse[T](self, index: int, parser: ArgParser[T]) -> ParseResult[T]:
        """Parse the positional token at *index* with *parser*."""
        token = self.arg(index)
        if token is None:
            return failure(f"Missing argument at position {index + 1}", ErrorCode.MISSING_ARGUMENT)
        return parser.parse(token)

    def with_parsed[T](self, index: int, parser: ArgParser[T], block: Callable[[T], Any]) -> bool:
        """Run *block* with the parsed value, or report the failure.

        Returns True when *block* ran.
        """
        result = self.parse(index, parser)
        if isinstance(result, Failure):
            self.error(result.message)
            return False
        block(result.value)
        return True

    def require_args(self, count: int, usage: str = "Not enough arguments!") -> bool:
        if len(self.tokens) >= count:
            return True
        self.error(usage)
        return False

    def require_permission(self, permission: str) -> bool:
        if self.subject.has_permission(permission):
            return True
        self.error("You don't have permission to do this!")
        return False

    # ------------------------------------------------------------------
    # Cooldowns
    # ------------------------------------------------------------------

    def cooldown_remaining(self, key: str, seconds: int) -> int:
        """Read-and-arm *key* for this subject. Consoles are never limited."""
        if self._cooldowns is None or not self.is_player:
            return 0
        return self._cooldowns.remaining(self.subject.key, key, seconds)

    def check_cooldown(self, key: str, seconds: int) -> int:
        """Seconds left on *key* without arming it."""
        if self._cooldowns is None or not self.is_player:
            return 0
        return self._cooldowns.peek(self.subject.key, key, seconds)

    def is_on_cooldown(self, key: str, seconds: int, bypass_permission: str | None = None) -> bool:
        if self._cooldowns is None or not self.is_player:
            return False
        bypass = bypass_permission is not None and self.subject.has_permission(bypass_permission)
        return self._cooldowns.is_on_cooldown(self.subject.key, key, seconds, bypass=bypass)

    # ------------------------------------------------------------------
    # Responses
    # ------------------------------------------------------------------

    def send(self, message: str) -> None:
        self.subject.send(message)

    def reply(self, message: str) -> None:
        self.send(f"{REPLY_PREFIX}{message}")

    def success(self, message: str) -> None:
        self.send(f"{SUCCESS_PREFIX}{message}")

    def error(self, message: str) -> None:
        self.send(f"{ERROR_PREFIX}{message}")

    def warn(self, message: str) -> None:
        self.send(f"{WARNING_PREFIX}{message}")

    def info(self, message: str) -> None:
        self.send(f"{INFO_PREFIX}{message}")


class CompletionContext:
    """Partial input handed to a node's completion override."""

    def __init__(
        self,
        subject: Subject,
        tokens: list[str],
        *,
        node: CommandNode | None = None,
        limits: ArgumentLimits = DEFAULT_LIMITS,
        resolvers: ResolverRegistry | None = None,
    ) -> None:
        self.subject = subject
        self.tokens = tokens
        self.node = node
        self.limits = limits
        self.resolvers = resolvers

    @property
    def current(self) -> str:
        """The token being completed (empty when there is none)."""
        return self.tokens[-1] if self.tokens else ""

    @property
    def index(self) -> int:
        return max(len(self.tokens) - 1, 0)

    def filter(self, *options: str) -> list[str]:
        return prefix_filter(options, self.current)

    def filter_all(self, options: Iterable[str]) -> list[str]:
        return prefix_filter(tuple(options), self.current)

    def none(self) -> list[str]:
        return []

    def combine(self, *sources: Callable[[], list[str]]) -> list[str]:
        merged: dict[str, None] = {}
        for source in sources:
            for item in source():
                merged.setdefault(item, None)
        return list(merged)

    def when_arg(self, target: int, block: Callable[[], list[str]]) -> list[str]:
        return block() if self.index == target else []

    def by_index(
        self,
        handlers: Mapping[int, Callable[[], list[str]]],
        default: Callable[[], list[str]] | None = None,
    ) -> list[str]:
        handler = handlers.get(self.index, default)
        return handler() if handler is not None else []

    def complete_with(self, index: int, parser: ArgParser[Any]) -> list[str]:
        return parser.complete(self.current) if self.index == index else []

    def resolve(self, tag: str) -> list[str]:
        """Suggestions from the host resolver registered under *tag*."""
        if self.resolvers is None:
            return []
        return self.resolvers.complete(tag, self.current)

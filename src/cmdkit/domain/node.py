"""Command nodes: the frozen tree that dispatch and completion walk.

A :class:`CommandNode` is a command or subcommand definition. Nodes are
built top-down with the mutable :class:`NodeBuilder` (or from a
:class:`NodeConfig` option model) and are immutable afterwards: the
children mapping is a read-only view and every collection is a tuple.

Child lookup keys are the lowercase name and aliases of each child. When
two children claim the same key the one added last wins.

INVARIANT: The tree owns its children exclusively. Passing a node into
its own subtree is a caller error and is not detected.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cmdkit.domain.arguments import (
    ArgParser,
    ArgumentKind,
    BooleanKind,
    ChoiceKind,
    CustomKind,
    DomainKind,
    DurationKind,
    EnumKind,
    GreedyKind,
    IntegerKind,
    RealKind,
    TextKind,
    UuidKind,
    validate_schema,
)
from cmdkit.domain.parsing import render_usage

if TYPE_CHECKING:
    from cmdkit.domain.subject import Subject
    from cmdkit.services.context import CommandContext, CompletionContext

type Handler = Callable[[CommandContext], Any]
type Completer = Callable[[CompletionContext], list[str]]

_NAME_RE = re.compile(r"^\S+$")


def _check_name(name: str, what: str = "Command") -> str:
    if not name or not _NAME_RE.match(name):
        msg = f"{what} name must be a non-empty token without whitespace: {name!r}"
        raise ValueError(msg)
    return name


@dataclass(frozen=True, eq=False)
class CommandNode:
    """A named, permission- and cooldown-checked unit of the command tree.

    Attributes:
        name: Primary name; also the first routing key.
        description: One-line summary shown in generated help.
        usage: Usage line; defaults to ``/<name>`` plus the schema.
        permission: Required permission, or None for everyone.
        aliases: Extra routing keys.
        player_only: Reject non-interactive subjects.
        cooldown_seconds: Per-subject cooldown; 0 disables it.
        cooldown_bypass_permission: Permission that skips the cooldown.
        cooldown_message: Template with ``{remaining}``/``{formatted}``.
        arguments: Ordered positional schema.
        children: Lowercase name/alias -> child node.
        handler: Called with a ``CommandContext`` after parsing.
        completer: Custom completion provider.
    """

    name: str
    description: str = ""
    usage: str = ""
    permission: str | None = None
    aliases: tuple[str, ...] = ()
    player_only: bool = False
    cooldown_seconds: int = 0
    cooldown_bypass_permission: str | None = None
    cooldown_message: str | None = None
    arguments: tuple[ArgumentKind, ...] = ()
    children: Mapping[str, CommandNode] = field(default_factory=lambda: MappingProxyType({}))
    handler: Handler | None = None
    completer: Completer | None = None

    @property
    def keys(self) -> tuple[str, ...]:
        """Lowercase routing keys: name first, then aliases."""
        seen: dict[str, None] = {self.name.lower(): None}
        for alias in self.aliases:
            seen.setdefault(alias.lower(), None)
        return tuple(seen)

    def child(self, token: str) -> CommandNode | None:
        """Return the child routed to by *token*, case-insensitively."""
        return self.children.get(token.lower())

    def subcommands(self) -> list[CommandNode]:
        """Distinct children in registration order."""
        distinct: dict[int, CommandNode] = {}
        for node in self.children.values():
            distinct.setdefault(id(node), node)
        return list(distinct.values())

    def permits(self, subject: Subject) -> bool:
        return self.permission is None or subject.has_permission(self.permission)

    def walk(self, prefix: str = "") -> Iterator[tuple[str, CommandNode]]:
        """Yield ``(qualified path, node)`` for this node and every descendant."""
        path = f"{prefix} {self.name}".strip()
        yield path, self
        for node in self.subcommands():
            yield from node.walk(path)

    def __repr__(self) -> str:
        return f"CommandNode({self.name!r}, children={sorted(self.children)!r})"


class NodeBuilder:
    """Mutable, fluent builder producing a frozen :class:`CommandNode`.

    Usage::

        kit = NodeBuilder("kit").describe("Starter kits").permission("kit.use")
        give = kit.subcommand("give").domain("target", "player").integer("amount", min=1)

        @give.on_execute
        def _give(ctx: CommandContext) -> None:
            ...

        node = kit.build()
    """

    def __init__(self, name: str) -> None:
        self._name = _check_name(name)
        self._description = ""
        self._usage: str | None = None
        self._permission: str | None = None
        self._aliases: list[str] = []
        self._player_only = False
        self._cooldown_seconds = 0
        self._cooldown_message: str | None = None
        self._cooldown_bypass: str | None = None
        self._arguments: list[ArgumentKind] = []
        self._children: list[NodeBuilder | CommandNode] = []
        self._handler: Handler | None = None
        self._completer: Completer | None = None

    @property
    def name(self) -> str:
        return self._name

    # --- metadata -------------------------------------------------------

    def describe(self, description: str) -> Self:
        self._description = description
        return self

    def usage(self, usage: str) -> Self:
        self._usage = usage
        return self

    def permission(self, permission: str | None) -> Self:
        self._permission = permission
        return self

    def aliases(self, *names: str) -> Self:
        self._aliases = [_check_name(n, "Alias") for n in names]
        return self

    def player_only(self, value: bool = True) -> Self:
        self._player_only = value
        return self

    def cooldown(
        self,
        seconds: int,
        *,
        message: str | None = None,
        bypass_permission: str | None = None,
    ) -> Self:
        if seconds < 0:
            msg = f"Cooldown must be >= 0 seconds, got {seconds}"
            raise ValueError(msg)
        self._cooldown_seconds = seconds
        self._cooldown_message = message
        self._cooldown_bypass = bypass_permission
        return self

    # --- arguments ------------------------------------------------------

    def argument(self, kind: ArgumentKind) -> Self:
        self._arguments.append(kind)
        return self

    def text(self, name: str, *, optional: bool = False, max_length: int | None = None) -> Self:
        return self.argument(TextKind(name, optional, max_length))

    def greedy(self, name: str, *, optional: bool = False, max_length: int | None = None) -> Self:
        return self.argument(GreedyKind(name, optional, max_length))

    def integer(
        self,
        name: str,
        *,
        min: int | None = None,
        max: int | None = None,
        optional: bool = False,
    ) -> Self:
        return self.argument(IntegerKind(name, optional, min, max))

    def real(
        self,
        name: str,
        *,
        min: float | None = None,
        max: float | None = None,
        optional: bool = False,
    ) -> Self:
        return self.argument(RealKind(name, optional, min, max))

    def boolean(self, name: str, *, optional: bool = False) -> Self:
        return self.argument(BooleanKind(name, optional))

    def duration(self, name: str, *, optional: bool = False) -> Self:
        return self.argument(DurationKind(name, optional))

    def uuid(self, name: str, *, optional: bool = False) -> Self:
        return self.argument(UuidKind(name, optional))

    def choice(self, name: str, *choices: str, optional: bool = False) -> Self:
        return self.argument(ChoiceKind(name, choices, optional))

    def enum(self, name: str, enum_cls: type[Enum], *, optional: bool = False) -> Self:
        return self.argument(EnumKind(name, enum_cls, optional))

    def domain(self, name: str, resolver: str, *, optional: bool = False) -> Self:
        return self.argument(DomainKind(name, resolver, optional))

    def custom(self, name: str, parser: ArgParser[Any], *, optional: bool = False) -> Self:
        return self.argument(CustomKind(name, parser, optional))

    # --- tree -----------------------------------------------------------

    def subcommand(self, name: str) -> NodeBuilder:
        """Create, attach, and return a child builder."""
        child = NodeBuilder(name)
        self._children.append(child)
        return child

    def add(self, child: NodeBuilder | CommandNode) -> Self:
        """Attach an existing builder or frozen node as a child."""
        self._children.append(child)
        return self

    # --- behaviour ------------------------------------------------------

    def executes(self, handler: Handler | None) -> Self:
        self._handler = handler
        return self

    def completes(self, completer: Completer | None) -> Self:
        self._completer = completer
        return self

    def on_execute(self, handler: Handler) -> Handler:
        """Decorator form of :meth:`executes`."""
        self._handler = handler
        return handler

    def on_complete(self, completer: Completer) -> Completer:
        """Decorator form of :meth:`completes`."""
        self._completer = completer
        return completer

    def build(self) -> CommandNode:
        """Freeze this builder (and every child builder) into a node.

        Raises:
            ValueError: If the argument schema is invalid.
        """
        schema = validate_schema(self._arguments)
        children: dict[str, CommandNode] = {}
        for entry in self._children:
            node = entry.build() if isinstance(entry, NodeBuilder) else entry
            for key in node.keys:
                children[key] = node

        return CommandNode(
            name=self._name,
            description=self._description,
            usage=self._usage or render_usage(self._name, schema),
            permission=self._permission,
            aliases=tuple(self._aliases),
            player_only=self._player_only,
            cooldown_seconds=self._cooldown_seconds,
            cooldown_bypass_permission=self._cooldown_bypass,
            cooldown_message=self._cooldown_message,
            arguments=schema,
            children=MappingProxyType(children),
            handler=self._handler,
            completer=self._completer,
        )


class NodeConfig(BaseModel):
    """Declarative node options, validated before the node is built."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    description: str = ""
    usage: str | None = None
    permission: str | None = None
    aliases: tuple[str, ...] = ()
    player_only: bool = False
    cooldown_seconds: int = Field(default=0, ge=0)
    cooldown_message: str | None = None
    cooldown_bypass_permission: str | None = None
    arguments: tuple[ArgumentKind, ...] = ()
    children: tuple[Any, ...] = ()
    handler: Callable[..., Any] | None = None
    completer: Callable[..., Any] | None = None

    @field_validator("children", mode="before")
    @classmethod
    def _coerce_children(cls, value: Any) -> tuple[Any, ...]:
        """Accept nested configs as dicts; frozen nodes pass through untouched."""
        children: list[Any] = []
        for item in value or ():
            if isinstance(item, dict):
                item = NodeConfig.model_validate(item)
            if not isinstance(item, NodeConfig | CommandNode):
                msg = f"Child must be a NodeConfig or CommandNode, got {type(item).__name__}"
                raise ValueError(msg)
            children.append(item)
        return tuple(children)


def build_node(config: NodeConfig) -> CommandNode:
    """Build a frozen node (and its subtree) from a :class:`NodeConfig`."""
    builder = (
        NodeBuilder(config.name)
        .describe(config.description)
        .permission(config.permission)
        .aliases(*config.aliases)
        .player_only(config.player_only)
        .cooldown(
            config.cooldown_seconds,
            message=config.cooldown_message,
            bypass_permission=config.cooldown_bypass_permission,
        )
        .executes(config.handler)
        .completes(config.completer)
    )
    if config.usage:
        builder.usage(config.usage)
    for kind in config.arguments:
        builder.argument(kind)
    for child in config.children:
        builder.add(build_node(child) if isinstance(child, NodeConfig) else child)
    return builder.build()


def build_tree(configs: Sequence[NodeConfig]) -> list[CommandNode]:
    return [build_node(config) for config in configs]

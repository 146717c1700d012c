"""Argument kinds and the parsers behind them.

An :class:`ArgumentKind` is one entry of a command's positional schema. It
knows its result-mapping ``name``, whether it is advisory-``optional``,
and how to build the :class:`ArgParser` that converts a token into a value.

Built-in parsers enforce the same limits everywhere:

- text tokens longer than ``max_input_length`` (default 256) fail;
- greedy text longer than ``max_greedy_length`` (default 1024) fails;
- numeric values outside ``[min, max]`` fail;
- choices and enum members match case-insensitively.

Failures are never truncated or clamped into a value.
"""

from __future__ import annotations

import math
import re
import uuid
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar

from cmdkit.domain.resolvers import prefix_filter
from cmdkit.domain.results import ParseResult, failure, success
from cmdkit.domain.types import ErrorCode, KindTag

if TYPE_CHECKING:
    from cmdkit.domain.resolvers import ResolverRegistry

DEFAULT_MAX_INPUT_LENGTH = 256
DEFAULT_MAX_GREEDY_LENGTH = 1024
NUMERIC_EXAMPLES: tuple[str, ...] = ("1", "5", "10", "50", "100")
DURATION_EXAMPLES: tuple[str, ...] = ("1h", "30m", "1d", "12h", "7d")

TRUE_WORDS = frozenset({"true", "yes", "on", "1", "enable", "y"})
FALSE_WORDS = frozenset({"false", "no", "off", "0", "disable", "n"})

_INTEGER_RE = re.compile(r"^[+-]?\d+$")
_DURATION_RE = re.compile(r"^(?:(\d+)d)?(?:(\d+)h)?(?:(\d+)m)?(?:(\d+)s)?$")


@dataclass(frozen=True)
class ArgumentLimits:
    """Length limits and suggestion sets applied by the built-in parsers."""

    max_input_length: int = DEFAULT_MAX_INPUT_LENGTH
    max_greedy_length: int = DEFAULT_MAX_GREEDY_LENGTH
    numeric_examples: tuple[str, ...] = NUMERIC_EXAMPLES
    duration_examples: tuple[str, ...] = DURATION_EXAMPLES


DEFAULT_LIMITS = ArgumentLimits()


# ---------------------------------------------------------------------------
# Parser contract
# ---------------------------------------------------------------------------


class ArgParser[T](ABC):
    """Converts a single token into ``T`` and suggests completions."""

    @abstractmethod
    def parse(self, token: str) -> ParseResult[T]: ...

    def complete(self, current: str) -> list[str]:
        return []


class FunctionParser[T](ArgParser[T]):
    """Adapt a parse callable (and optional completer) to :class:`ArgParser`."""

    def __init__(
        self,
        parse: Callable[[str], ParseResult[T]],
        complete: Callable[[str], list[str]] | None = None,
    ) -> None:
        self._parse = parse
        self._complete = complete

    def parse(self, token: str) -> ParseResult[T]:
        return self._parse(token)

    def complete(self, current: str) -> list[str]:
        if self._complete is None:
            return []
        return list(self._complete(current))


class TextParser(ArgParser[str]):
    def __init__(self, max_length: int = DEFAULT_MAX_INPUT_LENGTH) -> None:
        self.max_length = max_length

    def parse(self, token: str) -> ParseResult[str]:
        if len(token) > self.max_length:
            return failure(
                f"Input too long (max {self.max_length} characters)",
                ErrorCode.TOO_LONG,
            )
        return success(token)


def _bounds_failure(low: float | None, high: float | None) -> ParseResult[Any]:
    if low is not None and high is not None:
        text = f"Number must be between {low} and {high}"
    elif low is not None:
        text = f"Number must be at least {low}"
    else:
        text = f"Number must be at most {high}"
    return failure(text, ErrorCode.OUT_OF_RANGE)


def _in_bounds(value: float, low: float | None, high: float | None) -> bool:
    return (low is None or value >= low) and (high is None or value <= high)


class IntegerParser(ArgParser[int]):
    def __init__(
        self,
        min: int | None = None,
        max: int | None = None,
        examples: Sequence[str] = NUMERIC_EXAMPLES,
    ) -> None:
        self.min = min
        self.max = max
        self.examples = tuple(examples)

    def parse(self, token: str) -> ParseResult[int]:
        if not _INTEGER_RE.match(token):
            return failure(f"'{token}' is not a valid number")
        value = int(token)
        if not _in_bounds(value, self.min, self.max):
            return _bounds_failure(self.min, self.max)
        return success(value)

    def complete(self, current: str) -> list[str]:
        return list(self.examples) if not current else []


class RealParser(ArgParser[float]):
    def __init__(
        self,
        min: float | None = None,
        max: float | None = None,
        examples: Sequence[str] = NUMERIC_EXAMPLES,
    ) -> None:
        self.min = min
        self.max = max
        self.examples = tuple(examples)

    def parse(self, token: str) -> ParseResult[float]:
        try:
            value = float(token)
        except ValueError:
            return failure(f"'{token}' is not a valid decimal")
        if not math.isfinite(value) or "_" in token:
            return failure(f"'{token}' is not a valid decimal")
        if not _in_bounds(value, self.min, self.max):
            return _bounds_failure(self.min, self.max)
        return success(value)

    def complete(self, current: str) -> list[str]:
        return list(self.examples) if not current else []


class BooleanParser(ArgParser[bool]):
    def parse(self, token: str) -> ParseResult[bool]:
        lowered = token.lower()
        if lowered in TRUE_WORDS:
            return success(True)
        if lowered in FALSE_WORDS:
            return success(False)
        return failure(f"'{token}' is not a valid boolean (true/false)")

    def complete(self, current: str) -> list[str]:
        return prefix_filter(("true", "false"), current)


class DurationParser(ArgParser[timedelta]):
    """Compact durations: ``1d``, ``2h``, ``30m``, ``45s``, ``1d2h30m``."""

    def __init__(self, examples: Sequence[str] = DURATION_EXAMPLES) -> None:
        self.examples = tuple(examples)

    def parse(self, token: str) -> ParseResult[timedelta]:
        match = _DURATION_RE.match(token.lower())
        if match is None:
            return failure("Invalid duration format. Use: 1d2h30m45s")
        days, hours, minutes, seconds = (int(group or 0) for group in match.groups())
        if not (days or hours or minutes or seconds):
            return failure("Invalid duration. Use formats like: 1d, 2h, 30m, 45s")
        return success(timedelta(days=days, hours=hours, minutes=minutes, seconds=seconds))

    def complete(self, current: str) -> list[str]:
        return list(self.examples) if not current else []


class UuidParser(ArgParser[uuid.UUID]):
    def parse(self, token: str) -> ParseResult[uuid.UUID]:
        try:
            return success(uuid.UUID(token))
        except ValueError:
            return failure(f"'{token}' is not a valid UUID")


class ChoiceParser(ArgParser[str]):
    """Fixed, ordered choices. Returns the declared spelling."""

    def __init__(self, choices: Sequence[str]) -> None:
        self.choices = tuple(choices)
        self._by_lower: dict[str, str] = {}
        for option in self.choices:
            self._by_lower.setdefault(option.lower(), option)

    def parse(self, token: str) -> ParseResult[str]:
        option = self._by_lower.get(token.lower())
        if option is None:
            return failure(
                f"Invalid choice. Options: {', '.join(self.choices)}",
                ErrorCode.UNKNOWN_CHOICE,
            )
        return success(option)

    def complete(self, current: str) -> list[str]:
        return prefix_filter(self.choices, current)


class EnumParser[E: Enum](ArgParser[E]):
    """Match members of *enum_cls* by name, case-insensitively."""

    def __init__(self, enum_cls: type[E]) -> None:
        self.enum_cls = enum_cls
        self._names = [member.name.lower() for member in enum_cls]

    def parse(self, token: str) -> ParseResult[E]:
        lowered = token.lower()
        for member in self.enum_cls:
            if member.name.lower() == lowered:
                return success(member)
        return failure(
            f"Invalid option '{token}'. Available: {', '.join(self._names)}",
            ErrorCode.UNKNOWN_CHOICE,
        )

    def complete(self, current: str) -> list[str]:
        return prefix_filter(self._names, current)


class _DomainParser(ArgParser[Any]):
    def __init__(self, tag: str, resolvers: ResolverRegistry | None) -> None:
        self.tag = tag
        self.resolvers = resolvers

    def parse(self, token: str) -> ParseResult[Any]:
        if self.resolvers is None:
            return failure(f"No resolver registered for '{self.tag}'", ErrorCode.UNRESOLVED)
        return self.resolvers.parse(self.tag, token)

    def complete(self, current: str) -> list[str]:
        if self.resolvers is None:
            return []
        return self.resolvers.complete(self.tag, current)


# Ready-made parsers for handlers that parse positional tokens themselves.
STRING = TextParser()
GREEDY_STRING = TextParser(DEFAULT_MAX_GREEDY_LENGTH)
INTEGER = IntegerParser()
REAL = RealParser()
BOOLEAN = BooleanParser()
DURATION = DurationParser()
UUID = UuidParser()
POSITIVE_INT = IntegerParser(min=1)
NON_NEGATIVE_INT = IntegerParser(min=0)
PERCENTAGE = IntegerParser(min=0, max=100)


def choice(*options: str) -> ChoiceParser:
    return ChoiceParser(options)


def enum_of[E: Enum](enum_cls: type[E]) -> EnumParser[E]:
    return EnumParser(enum_cls)


# ---------------------------------------------------------------------------
# Argument kinds
# ---------------------------------------------------------------------------


class ArgumentKind(ABC):
    """One positional entry in a command schema."""

    tag: ClassVar[KindTag]
    name: str
    optional: bool

    @property
    def greedy(self) -> bool:
        """Whether this kind consumes every remaining token."""
        return False

    @abstractmethod
    def parser(
        self,
        limits: ArgumentLimits = DEFAULT_LIMITS,
        resolvers: ResolverRegistry | None = None,
    ) -> ArgParser[Any]: ...

    def usage(self) -> str:
        label = f"{self.name}..." if self.greedy else self.name
        return f"[{label}]" if self.optional else f"<{label}>"


@dataclass(frozen=True)
class TextKind(ArgumentKind):
    tag: ClassVar[KindTag] = KindTag.TEXT

    name: str
    optional: bool = False
    max_length: int | None = None

    def parser(
        self,
        limits: ArgumentLimits = DEFAULT_LIMITS,
        resolvers: ResolverRegistry | None = None,
    ) -> ArgParser[Any]:
        return TextParser(limits.max_input_length if self.max_length is None else self.max_length)


@dataclass(frozen=True)
class GreedyKind(ArgumentKind):
    tag: ClassVar[KindTag] = KindTag.GREEDY

    name: str
    optional: bool = False
    max_length: int | None = None

    @property
    def greedy(self) -> bool:
        return True

    def parser(
        self,
        limits: ArgumentLimits = DEFAULT_LIMITS,
        resolvers: ResolverRegistry | None = None,
    ) -> ArgParser[Any]:
        return TextParser(limits.max_greedy_length if self.max_length is None else self.max_length)


@dataclass(frozen=True)
class IntegerKind(ArgumentKind):
    tag: ClassVar[KindTag] = KindTag.INTEGER

    name: str
    optional: bool = False
    min: int | None = None
    max: int | None = None

    def parser(
        self,
        limits: ArgumentLimits = DEFAULT_LIMITS,
        resolvers: ResolverRegistry | None = None,
    ) -> ArgParser[Any]:
        return IntegerParser(self.min, self.max, limits.numeric_examples)


@dataclass(frozen=True)
class RealKind(ArgumentKind):
    tag: ClassVar[KindTag] = KindTag.REAL

    name: str
    optional: bool = False
    min: float | None = None
    max: float | None = None

    def parser(
        self,
        limits: ArgumentLimits = DEFAULT_LIMITS,
        resolvers: ResolverRegistry | None = None,
    ) -> ArgParser[Any]:
        return RealParser(self.min, self.max, limits.numeric_examples)


@dataclass(frozen=True)
class BooleanKind(ArgumentKind):
    tag: ClassVar[KindTag] = KindTag.BOOLEAN

    name: str
    optional: bool = False

    def parser(
        self,
        limits: ArgumentLimits = DEFAULT_LIMITS,
        resolvers: ResolverRegistry | None = None,
    ) -> ArgParser[Any]:
        return BOOLEAN


@dataclass(frozen=True)
class DurationKind(ArgumentKind):
    tag: ClassVar[KindTag] = KindTag.DURATION

    name: str
    optional: bool = False

    def parser(
        self,
        limits: ArgumentLimits = DEFAULT_LIMITS,
        resolvers: ResolverRegistry | None = None,
    ) -> ArgParser[Any]:
        return DurationParser(limits.duration_examples)


@dataclass(frozen=True)
class UuidKind(ArgumentKind):
    tag: ClassVar[KindTag] = KindTag.UUID

    name: str
    optional: bool = False

    def parser(
        self,
        limits: ArgumentLimits = DEFAULT_LIMITS,
        resolvers: ResolverRegistry | None = None,
    ) -> ArgParser[Any]:
        return UUID


@dataclass(frozen=True)
class ChoiceKind(ArgumentKind):
    tag: ClassVar[KindTag] = KindTag.CHOICE

    name: str
    choices: tuple[str, ...]
    optional: bool = False

    def __post_init__(self) -> None:
        if not self.choices:
            msg = f"Choice argument {self.name!r} needs at least one option"
            raise ValueError(msg)
        # Accept any sequence but store a tuple so the kind stays hashable.
        object.__setattr__(self, "choices", tuple(self.choices))

    def parser(
        self,
        limits: ArgumentLimits = DEFAULT_LIMITS,
        resolvers: ResolverRegistry | None = None,
    ) -> ArgParser[Any]:
        return ChoiceParser(self.choices)


@dataclass(frozen=True)
class EnumKind(ArgumentKind):
    tag: ClassVar[KindTag] = KindTag.ENUM

    name: str
    enum_cls: type[Enum]
    optional: bool = False

    def parser(
        self,
        limits: ArgumentLimits = DEFAULT_LIMITS,
        resolvers: ResolverRegistry | None = None,
    ) -> ArgParser[Any]:
        return EnumParser(self.enum_cls)


@dataclass(frozen=True)
class DomainKind(ArgumentKind):
    """Delegates to the host resolver registered under ``resolver``."""

    tag: ClassVar[KindTag] = KindTag.DOMAIN

    name: str
    resolver: str
    optional: bool = False

    def parser(
        self,
        limits: ArgumentLimits = DEFAULT_LIMITS,
        resolvers: ResolverRegistry | None = None,
    ) -> ArgParser[Any]:
        return _DomainParser(self.resolver, resolvers)


@dataclass(frozen=True)
class CustomKind(ArgumentKind):
    tag: ClassVar[KindTag] = KindTag.CUSTOM

    name: str
    custom: ArgParser[Any]
    optional: bool = False

    def parser(
        self,
        limits: ArgumentLimits = DEFAULT_LIMITS,
        resolvers: ResolverRegistry | None = None,
    ) -> ArgParser[Any]:
        return self.custom


def validate_schema(schema: Sequence[ArgumentKind]) -> tuple[ArgumentKind, ...]:
    """Check a positional schema and return it as a tuple.

    Raises:
        ValueError: If a name is empty or repeated, or a greedy kind is
            not the last entry.
    """
    seen: set[str] = set()
    for index, kind in enumerate(schema):
        if not kind.name:
            msg = f"Argument at position {index} has an empty name"
            raise ValueError(msg)
        if kind.name in seen:
            msg = f"Duplicate argument name {kind.name!r}"
            raise ValueError(msg)
        seen.add(kind.name)
        if kind.greedy and index != len(schema) - 1:
            msg = f"Greedy argument {kind.name!r} must be the last argument"
            raise ValueError(msg)
    return tuple(schema)

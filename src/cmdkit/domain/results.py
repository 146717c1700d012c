"""ParseResult: the outcome of converting one token into a typed value.

``Success`` carries the converted value; ``Failure`` carries a message and
an :class:`~cmdkit.domain.types.ErrorCode`. A failure never holds a partial
value, so callers either get a fully converted value or nothing.

Results compose without branching at every step::

    parsed = INTEGER.parse("12").map(lambda n: n * 2).chain(check_even)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, NoReturn

from cmdkit.domain.types import ErrorCode


class ParseError(ValueError):
    """Raised by :meth:`Failure.get_or_raise`."""

    def __init__(self, message: str, code: ErrorCode) -> None:
        super().__init__(message)
        self.code = code


@dataclass(frozen=True, slots=True)
class Success[T]:
    """A successfully parsed value."""

    value: T

    @property
    def is_success(self) -> bool:
        return True

    @property
    def is_failure(self) -> bool:
        return False

    def map[R](self, transform: Callable[[T], R]) -> Success[R]:
        return Success(transform(self.value))

    def chain[R](self, transform: Callable[[T], ParseResult[R]]) -> ParseResult[R]:
        return transform(self.value)

    def on_success(self, block: Callable[[T], Any]) -> Success[T]:
        block(self.value)
        return self

    def on_failure(self, block: Callable[[str], Any]) -> Success[T]:
        return self

    def get_or_none(self) -> T | None:
        return self.value

    def get_or_else(self, default: T) -> T:
        return self.value

    def get_or_raise(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Failure:
    """A failed parse with a user-facing message."""

    message: str
    code: ErrorCode = ErrorCode.INVALID_VALUE

    @property
    def is_success(self) -> bool:
        return False

    @property
    def is_failure(self) -> bool:
        return True

    def map(self, transform: Callable[[Any], Any]) -> Failure:
        return self

    def chain(self, transform: Callable[[Any], Any]) -> Failure:
        return self

    def on_success(self, block: Callable[[Any], Any]) -> Failure:
        return self

    def on_failure(self, block: Callable[[str], Any]) -> Failure:
        block(self.message)
        return self

    def get_or_none(self) -> None:
        return None

    def get_or_else[T](self, default: T) -> T:
        return default

    def get_or_raise(self) -> NoReturn:
        raise ParseError(self.message, self.code)


type ParseResult[T] = Success[T] | Failure


def success[T](value: T) -> Success[T]:
    """Build a :class:`Success`."""
    return Success(value)


def failure(message: str, code: ErrorCode = ErrorCode.INVALID_VALUE) -> Failure:
    """Build a :class:`Failure`."""
    return Failure(message, code)

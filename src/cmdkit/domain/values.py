"""ParsedArguments: the named, typed values produced for one invocation.

Values are stored as produced by the argument parsers (``str``, ``int``,
``float``, ``bool``, ``timedelta``, ``UUID``, enum members, or whatever a
domain resolver or custom parser returns). Typed accessors check the
stored value with ``isinstance`` and return ``None`` on a mismatch, so a
handler never receives a value of the wrong type.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from types import MappingProxyType
from typing import Any

from cmdkit.domain.types import ErrorCode


@dataclass(frozen=True)
class ArgumentFailure:
    """Why one schema entry produced no value."""

    name: str
    position: int
    code: ErrorCode
    message: str
    token: str | None = None


class ParsedArguments(Mapping[str, Any]):
    """Immutable name -> value mapping with typed accessors.

    Keys whose token failed to parse are absent; the reason is kept in
    :attr:`failures` so handlers can report it or ignore it.
    """

    __slots__ = ("_failures", "_values")

    def __init__(
        self,
        values: Mapping[str, Any] | None = None,
        failures: Mapping[str, ArgumentFailure] | None = None,
    ) -> None:
        self._values: Mapping[str, Any] = MappingProxyType(dict(values or {}))
        self._failures: Mapping[str, ArgumentFailure] = MappingProxyType(dict(failures or {}))

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ParsedArguments({dict(self._values)!r})"

    @property
    def failures(self) -> Mapping[str, ArgumentFailure]:
        return self._failures

    def failure_for(self, name: str) -> ArgumentFailure | None:
        return self._failures.get(name)

    # ------------------------------------------------------------------
    # Typed accessors
    # ------------------------------------------------------------------

    def get_as[T](self, key: str, expected: type[T]) -> T | None:
        """Return the value for *key* if it is an instance of *expected*."""
        value = self._values.get(key)
        if isinstance(value, expected):
            return value
        return None

    def get_str(self, key: str) -> str | None:
        return self.get_as(key, str)

    def get_int(self, key: str) -> int | None:
        value = self._values.get(key)
        # bool is an int subclass; a boolean argument is never an integer.
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        return None

    def get_float(self, key: str) -> float | None:
        return self.get_as(key, float)

    def get_bool(self, key: str) -> bool | None:
        return self.get_as(key, bool)

    def get_duration(self, key: str) -> timedelta | None:
        return self.get_as(key, timedelta)

    def get_uuid(self, key: str) -> uuid.UUID | None:
        return self.get_as(key, uuid.UUID)

    def get_enum[E: Enum](self, key: str, enum_cls: type[E]) -> E | None:
        return self.get_as(key, enum_cls)


EMPTY_ARGUMENTS = ParsedArguments()

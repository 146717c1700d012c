"""Error taxonomy and argument-kind tags.

Every failure the engine can report to a subject carries one of the
:class:`ErrorCode` values below. Codes are stable strings so hosts can
match on them without importing this module.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    """Failure categories reported by dispatch and argument parsing."""

    PLAYER_ONLY = "player_only"
    NO_PERMISSION = "no_permission"
    ON_COOLDOWN = "on_cooldown"
    MISSING_ARGUMENT = "missing_argument"
    OUT_OF_RANGE = "out_of_range"
    TOO_LONG = "too_long"
    UNKNOWN_CHOICE = "unknown_choice"
    INVALID_VALUE = "invalid_value"
    UNRESOLVED = "unresolved"
    NO_HANDLER = "no_handler"


class KindTag(StrEnum):
    """Discriminator for :class:`~cmdkit.domain.arguments.ArgumentKind` variants."""

    TEXT = "text"
    GREEDY = "greedy"
    INTEGER = "integer"
    REAL = "real"
    BOOLEAN = "boolean"
    DURATION = "duration"
    UUID = "uuid"
    CHOICE = "choice"
    ENUM = "enum"
    DOMAIN = "domain"
    CUSTOM = "custom"

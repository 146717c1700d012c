"""Tests for ParsedArguments typed accessors."""

from __future__ import annotations

import uuid
from datetime import timedelta
from enum import Enum

import pytest

from cmdkit.domain.values import EMPTY_ARGUMENTS, ParsedArguments


class Color(Enum):
    RED = 1
    BLUE = 2


@pytest.fixture
def args() -> ParsedArguments:
    return ParsedArguments(
        {
            "name": "alex",
            "count": 3,
            "ratio": 0.5,
            "flag": True,
            "wait": timedelta(minutes=5),
            "id": uuid.UUID(int=1),
            "color": Color.RED,
        }
    )


class TestParsedArguments:
    def test_mapping_protocol(self, args: ParsedArguments) -> None:
        assert len(args) == 7
        assert "name" in args
        assert args["count"] == 3
        assert args.get("missing") is None

    def test_immutable(self, args: ParsedArguments) -> None:
        with pytest.raises(TypeError):
            args["name"] = "bob"  # type: ignore[index]

    def test_typed_accessors(self, args: ParsedArguments) -> None:
        assert args.get_str("name") == "alex"
        assert args.get_int("count") == 3
        assert args.get_float("ratio") == 0.5
        assert args.get_bool("flag") is True
        assert args.get_duration("wait") == timedelta(minutes=5)
        assert args.get_uuid("id") == uuid.UUID(int=1)
        assert args.get_enum("color", Color) is Color.RED

    def test_mismatch_returns_none_never_casts(self, args: ParsedArguments) -> None:
        assert args.get_int("name") is None
        assert args.get_str("count") is None
        assert args.get_float("count") is None
        assert args.get_bool("count") is None

    def test_bool_is_not_an_int(self, args: ParsedArguments) -> None:
        assert args.get_int("flag") is None

    def test_missing_key(self) -> None:
        assert EMPTY_ARGUMENTS.get_str("anything") is None
        assert EMPTY_ARGUMENTS.failure_for("anything") is None

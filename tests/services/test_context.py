"""Tests for CommandContext and CompletionContext helpers."""

from __future__ import annotations

from cmdkit.domain.arguments import INTEGER, POSITIVE_INT, choice
from cmdkit.domain.resolvers import ResolverRegistry
from cmdkit.domain.results import Failure, Success
from cmdkit.domain.subject import ConsoleSubject, SessionSubject
from cmdkit.domain.types import ErrorCode
from cmdkit.domain.values import ParsedArguments
from cmdkit.services.context import CommandContext, CompletionContext
from cmdkit.services.cooldowns import CooldownGate
from tests.conftest import FakeClock


class TestCommandContext:
    def test_positional_helpers(self, player: SessionSubject) -> None:
        ctx = CommandContext(player, ["a", "b", "c"], label="say")
        assert ctx.arg_count == 3
        assert ctx.arg(1) == "b"
        assert ctx.arg(5) is None
        assert ctx.arg_or(5, "x") == "x"
        assert ctx.join_args(1) == "b c"
        assert ctx.is_player is True
        assert ctx.is_console is False

    def test_named_access(self, player: SessionSubject) -> None:
        ctx = CommandContext(player, ["5"], ParsedArguments({"n": 5, "who": "sam"}))
        assert ctx["n"] == 5
        assert ctx.get_int("n") == 5
        assert ctx.get_str("who") == "sam"
        assert ctx.get_float("n") is None
        assert ctx.get_bool("missing") is None

    def test_parse(self, player: SessionSubject) -> None:
        ctx = CommandContext(player, ["12"])
        assert ctx.parse(0, INTEGER) == Success(12)
        missing = ctx.parse(1, INTEGER)
        assert isinstance(missing, Failure)
        assert missing.code is ErrorCode.MISSING_ARGUMENT

    def test_with_parsed_runs_block_or_reports(self, player: SessionSubject) -> None:
        ctx = CommandContext(player, ["0"])
        seen: list[int] = []
        assert ctx.with_parsed(0, POSITIVE_INT, seen.append) is False
        assert seen == []
        assert player.messages == ["✖ Number must be at least 1"]
        ok_ctx = CommandContext(player, ["3"])
        assert ok_ctx.with_parsed(0, POSITIVE_INT, seen.append) is True
        assert seen == [3]

    def test_requirements(self, player: SessionSubject) -> None:
        ctx = CommandContext(player, ["one"])
        assert ctx.require_args(1) is True
        assert ctx.require_args(2, "Usage: /x <a> <b>") is False
        assert ctx.require_permission("kit.use") is True
        assert ctx.require_permission("kit.admin") is False
        assert player.messages == [
            "✖ Usage: /x <a> <b>",
            "✖ You don't have permission to do this!",
        ]

    def test_response_prefixes(self, player: SessionSubject) -> None:
        ctx = CommandContext(player, [])
        ctx.success("done")
        ctx.error("bad")
        ctx.warn("careful")
        ctx.info("fyi")
        ctx.reply("hi")
        ctx.send("raw")
        assert player.messages == ["✔ done", "✖ bad", "⚠ careful", "✦ fyi", "» hi", "raw"]

    def test_cooldown_helpers(self, player: SessionSubject, clock: FakeClock) -> None:
        gate = CooldownGate(clock)
        ctx = CommandContext(player, [], cooldowns=gate)
        assert ctx.check_cooldown("daily", 60) == 0
        assert ctx.cooldown_remaining("daily", 60) == 0
        clock.advance(10)
        assert ctx.check_cooldown("daily", 60) == 50
        assert ctx.cooldown_remaining("daily", 60) == 50
        assert ctx.is_on_cooldown("daily", 60) is True
        assert ctx.is_on_cooldown("daily", 60, bypass_permission="kit.use") is False
        assert ctx.cooldowns is gate

    def test_consoles_are_never_limited(self, clock: FakeClock) -> None:
        gate = CooldownGate(clock)
        ctx = CommandContext(ConsoleSubject(), [], cooldowns=gate)
        assert ctx.cooldown_remaining("daily", 60) == 0
        assert ctx.cooldown_remaining("daily", 60) == 0
        assert gate.subjects() == []

    def test_without_gate(self, player: SessionSubject) -> None:
        ctx = CommandContext(player, [])
        assert ctx.cooldown_remaining("x", 5) == 0
        assert ctx.is_on_cooldown("x", 5) is False
        assert ctx.cooldowns is None


class TestCompletionContext:
    def test_current_and_index(self, player: SessionSubject) -> None:
        ctx = CompletionContext(player, ["give", "Al"])
        assert ctx.current == "Al"
        assert ctx.index == 1
        empty = CompletionContext(player, [])
        assert empty.current == ""
        assert empty.index == 0

    def test_filters(self, player: SessionSubject) -> None:
        ctx = CompletionContext(player, ["s"])
        assert ctx.filter("sun", "rain", "Snow") == ["sun", "Snow"]
        assert ctx.filter_all(iter(["sky", "moon"])) == ["sky"]
        assert ctx.none() == []

    def test_combine_dedupes(self, player: SessionSubject) -> None:
        ctx = CompletionContext(player, [""])
        assert ctx.combine(lambda: ["a", "b"], lambda: ["b", "c"]) == ["a", "b", "c"]

    def test_index_helpers(self, player: SessionSubject) -> None:
        ctx = CompletionContext(player, ["x", ""])
        assert ctx.when_arg(1, lambda: ["hit"]) == ["hit"]
        assert ctx.when_arg(0, lambda: ["miss"]) == []
        assert ctx.by_index({0: lambda: ["zero"], 1: lambda: ["one"]}) == ["one"]
        assert ctx.by_index({0: lambda: ["zero"]}) == []
        assert ctx.by_index({}, default=lambda: ["fallback"]) == ["fallback"]
        assert ctx.complete_with(1, choice("on", "off")) == ["on", "off"]
        assert ctx.complete_with(0, choice("on", "off")) == []

    def test_resolve(self, player: SessionSubject) -> None:
        resolvers = ResolverRegistry()
        resolvers.register("warp", lambda t: t, lambda _: ["spawn", "shop"])
        ctx = CompletionContext(player, ["sh"], resolvers=resolvers)
        assert ctx.resolve("warp") == ["shop"]
        assert ctx.resolve("unknown") == []
        assert CompletionContext(player, ["sh"]).resolve("warp") == []

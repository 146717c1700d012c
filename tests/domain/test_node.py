"""Tests for CommandNode, NodeBuilder and NodeConfig."""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import ValidationError

from cmdkit.domain.arguments import IntegerKind, TextKind
from cmdkit.domain.node import CommandNode, NodeBuilder, NodeConfig, build_node, build_tree
from cmdkit.domain.subject import SessionSubject


def _noop(ctx: Any) -> None:
    return None


class TestNodeBuilder:
    def test_defaults(self) -> None:
        node = NodeBuilder("ping").build()
        assert node.name == "ping"
        assert node.usage == "/ping"
        assert node.permission is None
        assert node.cooldown_seconds == 0
        assert node.children == {}
        assert node.handler is None

    def test_fluent_metadata(self) -> None:
        node = (
            NodeBuilder("Give")
            .describe("Give items")
            .permission("items.give")
            .aliases("G", "gift")
            .player_only()
            .cooldown(30, message="Wait {remaining}", bypass_permission="items.nocd")
            .text("target")
            .integer("amount", min=1)
            .executes(_noop)
            .build()
        )
        assert node.keys == ("give", "g", "gift")
        assert node.player_only is True
        assert node.cooldown_seconds == 30
        assert node.cooldown_message == "Wait {remaining}"
        assert node.cooldown_bypass_permission == "items.nocd"
        assert node.usage == "/Give <target> <amount>"
        assert node.arguments == (TextKind("target"), IntegerKind("amount", min=1))
        assert node.handler is _noop

    def test_subcommands_are_case_insensitive(self) -> None:
        kit = NodeBuilder("kit")
        kit.subcommand("Give").aliases("g")
        node = kit.build()
        assert set(node.children) == {"give", "g"}
        assert node.child("GIVE") is node.child("g")
        assert len(node.subcommands()) == 1

    def test_last_registration_wins_for_colliding_key(self) -> None:
        first = NodeBuilder("list").describe("first").build()
        second = NodeBuilder("ls").aliases("list").describe("second").build()
        node = NodeBuilder("root").add(first).add(second).build()
        assert node.child("list") is second
        assert node.child("ls") is second

    def test_decorator_forms(self) -> None:
        builder = NodeBuilder("hello")

        @builder.on_execute
        def _handler(ctx: Any) -> None:
            pass

        @builder.on_complete
        def _completer(ctx: Any) -> list[str]:
            return ["x"]

        node = builder.build()
        assert node.handler is _handler
        assert node.completer is _completer

    def test_explicit_usage(self) -> None:
        assert NodeBuilder("x").usage("/x <thing>").text("y").build().usage == "/x <thing>"

    @pytest.mark.parametrize("name", ["", "two words"])
    def test_invalid_names(self, name: str) -> None:
        with pytest.raises(ValueError, match="whitespace"):
            NodeBuilder(name)

    def test_negative_cooldown(self) -> None:
        with pytest.raises(ValueError, match=">= 0"):
            NodeBuilder("x").cooldown(-1)

    def test_invalid_schema_raises_at_build(self) -> None:
        with pytest.raises(ValueError):
            NodeBuilder("x").greedy("rest").text("after").build()


class TestCommandNode:
    def test_frozen(self) -> None:
        node = NodeBuilder("x").build()
        with pytest.raises(AttributeError):
            node.name = "y"  # type: ignore[misc]

    def test_children_read_only(self) -> None:
        node = NodeBuilder("x").build()
        with pytest.raises(TypeError):
            node.children["y"] = node  # type: ignore[index]

    def test_permits(self) -> None:
        node = NodeBuilder("x").permission("x.use").build()
        assert node.permits(SessionSubject("a", ["x.use"])) is True
        assert node.permits(SessionSubject("b")) is False
        assert NodeBuilder("open").build().permits(SessionSubject("b")) is True

    def test_walk_yields_qualified_paths(self) -> None:
        kit = NodeBuilder("kit")
        give = kit.subcommand("give")
        give.subcommand("all")
        kit.subcommand("list")
        paths = [path for path, _ in kit.build().walk()]
        assert paths == ["kit", "kit give", "kit give all", "kit list"]


class TestNodeConfig:
    def test_build_node_with_nested_dict_children(self) -> None:
        config = NodeConfig(
            name="warp",
            description="Warps",
            permission="warp.use",
            cooldown_seconds=5,
            arguments=(TextKind("name"),),
            handler=_noop,
            children=[{"name": "set", "description": "Create a warp"}],
        )
        node = build_node(config)
        assert isinstance(node, CommandNode)
        assert node.cooldown_seconds == 5
        assert node.usage == "/warp <name>"
        child = node.child("set")
        assert child is not None
        assert child.description == "Create a warp"

    def test_accepts_frozen_node_children(self) -> None:
        leaf = NodeBuilder("leaf").build()
        node = build_node(NodeConfig(name="root", children=[leaf]))
        assert node.child("leaf") is leaf

    def test_rejects_negative_cooldown(self) -> None:
        with pytest.raises(ValidationError):
            NodeConfig(name="x", cooldown_seconds=-5)

    def test_rejects_unknown_child_type(self) -> None:
        with pytest.raises(ValidationError):
            NodeConfig(name="x", children=["not a node"])

    def test_build_tree(self) -> None:
        nodes = build_tree([NodeConfig(name="a"), NodeConfig(name="b")])
        assert [n.name for n in nodes] == ["a", "b"]

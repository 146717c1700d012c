"""Tests for PluginManager: discovery, registration, and contributions."""

from __future__ import annotations

import logging

import pytest

from cmdkit.domain.node import NodeBuilder
from cmdkit.domain.resolvers import Resolver
from cmdkit.plugins import hookimpl
from cmdkit.plugins.builtins import DicePlugin
from cmdkit.plugins.manager import PluginManager


class _DummyPlugin:
    """Minimal plugin for registration tests."""

    @hookimpl
    def post_dispatch(self, label: str, subject_key: str, code: str | None, ok: bool) -> None:
        pass


class _CommandsPlugin:
    @hookimpl
    def register_commands(self) -> list[object]:
        return [NodeBuilder("ping").aliases("p"), NodeBuilder("pong").build()]


class _BrokenCommandsPlugin:
    @hookimpl
    def register_commands(self) -> list[object]:
        raise RuntimeError("boom")


class _MixedCommandsPlugin:
    @hookimpl
    def register_commands(self) -> list[object]:
        bad = NodeBuilder("bad").greedy("rest").text("after")
        return [bad, "not a node", NodeBuilder("good")]


class _NotAListPlugin:
    @hookimpl
    def register_commands(self) -> object:
        return NodeBuilder("lonely")


class _ResolverPlugin:
    @hookimpl
    def register_resolvers(self) -> dict[str, object]:
        return {
            "World": Resolver(resolve=lambda token: token if token == "overworld" else None),
            "junk": object(),
        }


class TestPluginManager:
    """Tests for the PluginManager class."""

    def test_hook_relay_accessible(self) -> None:
        pm = PluginManager()
        assert hasattr(pm.hook, "register_commands")
        assert hasattr(pm.hook, "register_resolvers")
        assert hasattr(pm.hook, "post_dispatch")

    def test_register_plugin(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_DummyPlugin(), name="dummy")
        assert "dummy" in pm.list_plugin_names()

    def test_register_plugin_default_name(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_DummyPlugin())
        assert "_DummyPlugin" in pm.list_plugin_names()

    def test_unregister_plugin(self) -> None:
        pm = PluginManager()
        plugin = _DummyPlugin()
        pm.register_plugin(plugin, name="dummy")
        pm.unregister(plugin)
        assert "dummy" not in pm.list_plugin_names()

    def test_is_loaded_false_before_discover(self) -> None:
        pm = PluginManager()
        assert pm.is_loaded is False

    def test_discover_marks_loaded(self) -> None:
        pm = PluginManager()
        names = pm.discover_and_load()
        assert pm.is_loaded is True
        assert isinstance(names, list)

    def test_disabled_plugin_is_blocked(self) -> None:
        pm = PluginManager()
        pm.discover_and_load(disabled=["DicePlugin"])
        pm.register_plugin(DicePlugin())
        assert "DicePlugin" not in pm.list_plugin_names()

    def test_get_plugins_returns_registered(self) -> None:
        pm = PluginManager()
        plugin = _DummyPlugin()
        pm.register_plugin(plugin, name="test")
        assert plugin in pm.get_plugins()

    def test_plugin_classes_are_instantiated(self) -> None:
        pm = PluginManager()
        pm._pm.register(_CommandsPlugin, name="commands")
        pm.discover_and_load()
        plugins = pm.get_plugins()
        assert _CommandsPlugin not in plugins
        assert any(isinstance(p, _CommandsPlugin) for p in plugins)
        assert [node.name for node in pm.collect_commands()] == ["ping", "pong"]


class TestCollectCommands:
    def test_builders_are_built(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_CommandsPlugin())
        nodes = pm.collect_commands()
        assert [node.name for node in nodes] == ["ping", "pong"]
        assert nodes[0].aliases == ("p",)

    def test_failing_plugin_is_a_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        pm = PluginManager()
        pm.register_plugin(_BrokenCommandsPlugin())
        pm.register_plugin(_CommandsPlugin())
        with caplog.at_level(logging.WARNING, logger="cmdkit.plugins.manager"):
            nodes = pm.collect_commands()
        assert [node.name for node in nodes] == ["ping", "pong"]
        assert "_BrokenCommandsPlugin failed in register_commands" in caplog.text

    def test_invalid_entries_are_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        pm = PluginManager()
        pm.register_plugin(_MixedCommandsPlugin())
        with caplog.at_level(logging.WARNING, logger="cmdkit.plugins.manager"):
            nodes = pm.collect_commands()
        assert [node.name for node in nodes] == ["good"]
        assert "Skipping invalid command" in caplog.text
        assert "instead of a command node" in caplog.text

    def test_non_list_return_is_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        pm = PluginManager()
        pm.register_plugin(_NotAListPlugin())
        with caplog.at_level(logging.WARNING, logger="cmdkit.plugins.manager"):
            assert pm.collect_commands() == []
        assert "non-list command registrations" in caplog.text


class TestCollectResolvers:
    def test_tags_are_lowercased_and_junk_dropped(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        pm = PluginManager()
        pm.register_plugin(_ResolverPlugin())
        with caplog.at_level(logging.WARNING, logger="cmdkit.plugins.manager"):
            resolvers = pm.collect_resolvers()
        assert list(resolvers) == ["world"]
        assert resolvers["world"].resolve("overworld") == "overworld"
        assert "not a Resolver" in caplog.text

    def test_no_plugins_no_resolvers(self) -> None:
        assert PluginManager().collect_resolvers() == {}

"""Tests for cmdkit.toml location, reading and loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from cmdkit.config.discovery import (
    CONFIG_ENV_VAR,
    ConfigError,
    ConfigOrigin,
    find_config,
    load_config,
    locate_config,
    read_config,
)


@pytest.fixture(autouse=True)
def _no_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)


class TestLocateConfig:
    def test_walks_up(self, tmp_path: Path) -> None:
        (tmp_path / "cmdkit.toml").write_text("")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        location = locate_config(start=nested)
        assert location is not None
        assert location.path == tmp_path / "cmdkit.toml"
        assert location.origin is ConfigOrigin.WALK_UP
        assert find_config(nested) == tmp_path / "cmdkit.toml"

    def test_not_found(self, tmp_path: Path) -> None:
        assert locate_config(start=tmp_path) is None
        assert find_config(tmp_path) is None

    def test_env_var_beats_walk_up(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        custom = tmp_path / "custom.toml"
        custom.write_text("")
        (tmp_path / "cmdkit.toml").write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(custom))
        location = locate_config(start=tmp_path)
        assert location is not None
        assert location.path == custom
        assert location.origin is ConfigOrigin.ENV

    def test_flag_beats_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        flag = tmp_path / "flag.toml"
        env = tmp_path / "env.toml"
        flag.write_text("")
        env.write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(env))
        location = locate_config(flag, start=tmp_path)
        assert location is not None
        assert location.path == flag
        assert location.origin is ConfigOrigin.FLAG

    def test_missing_env_file_is_an_error(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "cmdkit.toml").write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "nope.toml"))
        with pytest.raises(ConfigError, match="CMDKIT_CONFIG not found"):
            locate_config(start=tmp_path)

    def test_missing_flag_file_is_an_error(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="--config not found"):
            locate_config(tmp_path / "nope.toml", start=tmp_path)


class TestReadConfig:
    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "cmdkit.toml"
        path.write_text("")
        assert read_config(path) == {}

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "cmdkit.toml"
        path.write_text("[arguments\n")
        with pytest.raises(ConfigError, match="Invalid TOML"):
            read_config(path)


class TestLoadConfig:
    def test_loads_sections(self, tmp_path: Path) -> None:
        path = tmp_path / "cmdkit.toml"
        path.write_text(
            '[messages]\nplayer_only = "Players only."\n'
            "[cooldowns]\nenabled = false\n"
            '[logging]\nlevels = { "cmdkit.dispatch" = "info" }\n'
        )
        config = load_config(path)
        assert config.messages.player_only == "Players only."
        assert config.cooldowns.enabled is False
        assert config.logging.levels == {"cmdkit.dispatch": "INFO"}
        assert config.arguments.max_input_length == 256

    def test_defaults_when_missing(self, tmp_path: Path) -> None:
        config = load_config(cwd=tmp_path)
        assert config.cooldowns.enabled is True

    def test_invalid_values(self, tmp_path: Path) -> None:
        path = tmp_path / "cmdkit.toml"
        path.write_text("[arguments]\nmax_input_length = 0\n")
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_config(path)

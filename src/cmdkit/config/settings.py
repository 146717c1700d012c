"""Unified settings: CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs: CLI flags passed by Click
  2. Env vars: ``CMDKIT_*`` prefix (``CMDKIT_COOLDOWNS__ENABLED=false``)
  3. TOML file: ``--config``, ``CMDKIT_CONFIG``, or ``cmdkit.toml`` walk-up
  4. Code defaults: baked into the section models
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

import click
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from cmdkit.config.discovery import ConfigError, locate_config, read_config
from cmdkit.config.models import (
    ArgumentsConfig,
    CmdkitConfig,
    CooldownConfig,
    LoggingConfig,
    MessagesConfig,
    PluginsConfig,
    SubjectConfig,
)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Serve already-parsed ``cmdkit.toml`` sections to pydantic-settings."""

    def __init__(self, settings_cls: type[BaseSettings], data: dict[str, Any] | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = data or {}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# Thread-local storage for parsed TOML during construction.
_tls = threading.local()


class CmdkitSettings(BaseSettings):
    """Unified settings for the cmdkit CLI.

    Attributes:
        config_path: The TOML file that was read, or None.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "CMDKIT_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    arguments: ArgumentsConfig = Field(default_factory=ArgumentsConfig)
    messages: MessagesConfig = Field(default_factory=MessagesConfig)
    cooldowns: CooldownConfig = Field(default_factory=CooldownConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
    subject: SubjectConfig = Field(default_factory=SubjectConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_data = getattr(_tls, "toml_data", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_data),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        start: Path | None = None,
        **cli_flags: Any,
    ) -> CmdkitSettings:
        """Construct settings from CLI invocation.

        The file comes from *config_path*, ``CMDKIT_CONFIG`` or walk-up
        discovery from *start*; CLI flags override everything.
        """
        try:
            location = locate_config(config_path, start=start)
            toml_data = read_config(location.path) if location else None
        except ConfigError as exc:
            raise click.ClickException(str(exc)) from exc

        _tls.toml_data = toml_data
        try:
            return cls(config_path=location.path if location else None, **cli_flags)
        except ValidationError as exc:
            msg = f"Invalid configuration:\n{exc}"
            raise click.ClickException(msg) from exc
        finally:
            _tls.toml_data = None

    def to_config(self) -> CmdkitConfig:
        """The engine-facing configuration sections."""
        return CmdkitConfig(
            arguments=self.arguments,
            messages=self.messages,
            cooldowns=self.cooldowns,
            plugins=self.plugins,
            subject=self.subject,
            logging=self.logging,
        )

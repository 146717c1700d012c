"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults are baked here and ``cmdkit.toml`` only
carries overrides. An empty file (or no file) is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from cmdkit.domain.arguments import (
    DEFAULT_MAX_GREEDY_LENGTH,
    DEFAULT_MAX_INPUT_LENGTH,
    DURATION_EXAMPLES,
    NUMERIC_EXAMPLES,
    ArgumentLimits,
)


class ArgumentsConfig(BaseModel):
    """[arguments] section."""

    model_config = {"frozen": True}

    max_input_length: int = Field(default=DEFAULT_MAX_INPUT_LENGTH, gt=0)
    max_greedy_length: int = Field(default=DEFAULT_MAX_GREEDY_LENGTH, gt=0)
    numeric_examples: tuple[str, ...] = NUMERIC_EXAMPLES
    duration_examples: tuple[str, ...] = DURATION_EXAMPLES

    def to_limits(self) -> ArgumentLimits:
        return ArgumentLimits(
            max_input_length=self.max_input_length,
            max_greedy_length=self.max_greedy_length,
            numeric_examples=self.numeric_examples,
            duration_examples=self.duration_examples,
        )


class MessagesConfig(BaseModel):
    """[messages] section.

    ``cooldown`` accepts ``{remaining}`` (whole seconds) and ``{formatted}``
    (``2m 5s``). Help templates accept ``{name}``, ``{path}`` and
    ``{description}``.
    """

    model_config = {"frozen": True}

    player_only: str = "This command can only be used by players!"
    no_permission: str = "You don't have permission to use this command!"
    cooldown: str = "Please wait {remaining} seconds before using this again."
    no_handler: str = "Nothing to run for /{path}."
    help_header: str = "---------- {name} ----------"
    help_line: str = "/{path} {name} - {description}"
    help_empty: str = "No available commands."
    help_footer: str = "-----------------------------"


class LoggingConfig(BaseModel):
    """[logging] section.

    ``levels`` maps logger names to level names and is applied after
    ``--verbose``, e.g. ``levels = { "cmdkit.dispatch" = "info" }``.
    """

    model_config = {"frozen": True}

    levels: dict[str, str] = Field(default_factory=dict)

    @field_validator("levels")
    @classmethod
    def _known_levels(cls, value: dict[str, str]) -> dict[str, str]:
        allowed = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
        normalized: dict[str, str] = {}
        for name, level in value.items():
            if level.upper() not in allowed:
                msg = f"Unknown log level {level!r} for logger {name!r}"
                raise ValueError(msg)
            normalized[name] = level.upper()
        return normalized


class CooldownConfig(BaseModel):
    """[cooldowns] section."""

    model_config = {"frozen": True}

    enabled: bool = True


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    entry_points: bool = True
    builtins: bool = True
    disabled: tuple[str, ...] = ()


class SubjectConfig(BaseModel):
    """[subject] section: who the reference CLI dispatches as."""

    model_config = {"frozen": True}

    name: str = "player"
    console: bool = False
    permissions: tuple[str, ...] = ()


class CmdkitConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    arguments: ArgumentsConfig = Field(default_factory=ArgumentsConfig)
    messages: MessagesConfig = Field(default_factory=MessagesConfig)
    cooldowns: CooldownConfig = Field(default_factory=CooldownConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
    subject: SubjectConfig = Field(default_factory=SubjectConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

"""Locate and read ``cmdkit.toml``.

Resolution order, first match wins:

1. an explicit path (the ``-c/--config`` flag)
2. the ``CMDKIT_CONFIG`` environment variable
3. ``cmdkit.toml`` in the start directory or any parent

An explicit path or env var naming a missing file is an error rather than
a silent fall-through to walk-up discovery.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from cmdkit.config.models import CmdkitConfig

CONFIG_FILENAME = "cmdkit.toml"
CONFIG_ENV_VAR = "CMDKIT_CONFIG"

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """A config file could not be found, parsed, or validated."""


class ConfigOrigin(StrEnum):
    FLAG = "flag"
    ENV = "env"
    WALK_UP = "walk-up"


@dataclass(frozen=True)
class ConfigLocation:
    path: Path
    origin: ConfigOrigin


def _required_file(raw: str | Path, origin: ConfigOrigin) -> ConfigLocation:
    path = Path(raw).expanduser()
    if not path.is_file():
        source = "--config" if origin is ConfigOrigin.FLAG else CONFIG_ENV_VAR
        msg = f"Config file from {source} not found: {path}"
        raise ConfigError(msg)
    return ConfigLocation(path, origin)


def _walk_up(start: Path) -> Path | None:
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def locate_config(
    explicit: str | Path | None = None,
    *,
    start: Path | None = None,
) -> ConfigLocation | None:
    """Resolve which config file applies, or None when there is none.

    Raises:
        ConfigError: If *explicit* or ``CMDKIT_CONFIG`` names a missing file.
    """
    if explicit:
        location = _required_file(explicit, ConfigOrigin.FLAG)
    elif env_path := os.environ.get(CONFIG_ENV_VAR):
        location = _required_file(env_path, ConfigOrigin.ENV)
    else:
        found = _walk_up((start or Path.cwd()).resolve())
        if found is None:
            return None
        location = ConfigLocation(found, ConfigOrigin.WALK_UP)
    logger.debug("Using config %s (%s)", location.path, location.origin)
    return location


def find_config(start: Path | None = None) -> Path | None:
    """Path of the applicable config file, ignoring any explicit flag."""
    location = locate_config(start=start)
    return location.path if location else None


def read_config(path: Path) -> dict[str, Any]:
    """Parse *path* as TOML. An empty file yields an empty mapping."""
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise ConfigError(msg) from exc


def load_config(path: Path | None = None, cwd: Path | None = None) -> CmdkitConfig:
    """Build a :class:`CmdkitConfig` for embedding hosts that skip the CLI.

    Without *path* the file is located from *cwd*; with no file at all the
    code defaults apply.
    """
    location = locate_config(path, start=cwd)
    if location is None:
        return CmdkitConfig()
    try:
        return CmdkitConfig.model_validate(read_config(location.path))
    except ValidationError as exc:
        msg = f"Invalid configuration in {location.path}:\n{exc}"
        raise ConfigError(msg) from exc

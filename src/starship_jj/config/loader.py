"""Load configuration from defaults, a config file and the environment.

Priority: environment variables > config file > defaults.

Environment variables use the ``SJJ__`` prefix with ``__`` between nested
keys, e.g. ``SJJ__BOOKMARKS__SEARCH_DEPTH=20``.  pydantic-settings reads them
and merges them over the file; list and table values are given as JSON, e.g.
``SJJ__MODULE='[{"type": "Commit"}]'``.
"""

from __future__ import annotations

import json
import logging
import tomllib
from pathlib import Path
from typing import Any, Optional

import click
from dotenv import find_dotenv, load_dotenv
from pydantic import ValidationError
from pydantic_settings import JsonConfigSettingsSource, SettingsError, TomlConfigSettingsSource

from starship_jj.config.models import Config
from starship_jj.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

APP_NAME = "starship-jj"
_CONFIG_FILENAME = "starship-jj.toml"


def default_config_path() -> Path:
    """Per-user configuration file, e.g. ``~/.config/starship-jj/starship-jj.toml``."""
    return Path(click.get_app_dir(APP_NAME)) / _CONFIG_FILENAME


def read_config_file(path: Path) -> dict[str, Any]:
    """Parse a TOML or JSON configuration file into a plain dict."""
    try:
        if path.suffix == ".json":
            source = JsonConfigSettingsSource(Config, json_file=path)
        else:
            source = TomlConfigSettingsSource(Config, toml_file=path)
    except OSError as exc:
        raise ConfigurationError(f"Cannot read config file {path}: {exc}") from exc
    except (tomllib.TOMLDecodeError, json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Invalid config file {path}: {exc}") from exc

    return source()


def load_config(config_path: Optional[Path] = None, *, dotenv: bool = True) -> Config:
    """Build the effective configuration.

    Args:
        config_path: Explicit config file.  It must exist.  When omitted the
            per-user file is read if present.
        dotenv: Load ``.env`` from the working directory into the environment
            first.

    Raises:
        ConfigurationError: The file cannot be parsed or the merged settings
            fail validation.
    """
    if dotenv:
        load_dotenv(find_dotenv(usecwd=True))

    data: dict[str, Any] = {}
    if config_path is not None:
        if not config_path.is_file():
            raise ConfigurationError(f"Config file not found: {config_path}")
        data = read_config_file(config_path)
    else:
        candidate = default_config_path()
        if candidate.is_file():
            data = read_config_file(candidate)
            config_path = candidate

    source = config_path or "defaults"
    logger.debug("Loading config from %s", source)
    try:
        return Config(**data)
    except (ValidationError, SettingsError) as exc:
        raise ConfigurationError(f"Invalid configuration ({source}):\n{exc}") from exc

"""starship-jj starship -- print the prompt segment and manage its config."""

from __future__ import annotations

import os
import sys
import time
from pathlib import Path

import click

from starship_jj.cli.formatting import (
    format_error,
    format_json,
    format_timing,
    format_toml,
    get_console,
    get_stdout_console,
)

TIMING_ENV = "STARSHIP_JJ_TIMING"


@click.group()
def starship() -> None:
    """Integration with the starship prompt."""


@starship.command()
@click.option(
    "--starship-config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file to use instead of the per-user one (TOML or JSON).",
)
@click.pass_context
def prompt(ctx: click.Context, config_file: Path | None) -> None:
    """Print the jj segment of the prompt.

    Writes ANSI-styled text without a trailing newline.  Exits with status 1
    when the repository cannot be read and 2 when the configuration is
    invalid.
    """
    from starship_jj.cli import _get_engine
    from starship_jj.config import load_config
    from starship_jj.exceptions import ConfigurationError, EngineError
    from starship_jj.render import RenderPipeline
    from starship_jj.state import RepoStateCache

    console = get_console()
    started = time.perf_counter()
    try:
        settings = load_config(config_file)
    except ConfigurationError as e:
        format_error(str(e), console)
        raise SystemExit(2) from None

    stream = sys.stdout
    snapshot = not ctx.find_root().obj["ignore_working_copy"]
    try:
        cache = RepoStateCache(_get_engine(ctx), snapshot=snapshot)
        RenderPipeline(settings, cache, stream).run()
    except EngineError as e:
        stream.flush()
        format_error(str(e), console)
        raise SystemExit(1) from None

    if os.environ.get(TIMING_ENV):
        stream.write(f" {format_timing(time.perf_counter() - started)}")
        stream.flush()


@starship.group()
def config() -> None:
    """Inspect the prompt configuration."""


@config.command("path")
def config_path() -> None:
    """Print the path of the per-user config file."""
    from starship_jj.config import default_config_path

    click.echo(default_config_path())


@config.command("default")
def config_default() -> None:
    """Print the default configuration as TOML.

    The output can be saved to the path printed by `config path`.
    """
    from starship_jj.config import Config

    format_toml(Config.defaults().dump(), get_stdout_console())


@config.command("schema")
def config_schema() -> None:
    """Print the JSON schema of the configuration."""
    from starship_jj.config import Config

    format_json(Config.model_json_schema(), get_stdout_console())

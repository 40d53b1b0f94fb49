"""starship-jj command line interface.

Usage:
    starship-jj starship prompt
    starship-jj -R ~/src/project starship prompt --starship-config prompt.toml
    starship-jj starship config default > ~/.config/starship-jj/starship-jj.json
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

import click

from starship_jj._version import __version__
from starship_jj.cli.commands.starship import starship
from starship_jj.engine import Engine, JjCliEngine

LOG_ENV = "STARSHIP_JJ_LOG"


def _configure_logging() -> None:
    """Send log records to stderr when STARSHIP_JJ_LOG names a level."""
    level_name = os.environ.get(LOG_ENV)
    if not level_name:
        return
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        return
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _get_engine(ctx: click.Context) -> Engine:
    """Build the engine from the global options."""
    obj = ctx.find_root().obj
    return JjCliEngine(cwd=obj["repository"], executable=obj["jj"])


@click.group()
@click.version_option(__version__, prog_name="starship-jj")
@click.option(
    "-R",
    "--repository",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Path to the jj repository (default: current directory).",
)
@click.option(
    "--ignore-working-copy",
    is_flag=True,
    help="Don't snapshot the working copy before reading the repository.",
)
@click.option("--jj", "jj", default="jj", show_default=True, help="jj executable to run.")
@click.pass_context
def cli(ctx: click.Context, repository: Path | None, ignore_working_copy: bool, jj: str) -> None:
    """Jujutsu status for the starship prompt."""
    _configure_logging()
    ctx.ensure_object(dict)
    ctx.obj["repository"] = repository
    ctx.obj["ignore_working_copy"] = ignore_working_copy
    ctx.obj["jj"] = jj


cli.add_command(starship)


def main() -> None:
    """Entry point for the starship-jj console script."""
    cli(obj={})

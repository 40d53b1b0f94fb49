"""Rich helpers for the CLI's diagnostic output.

The prompt itself goes to stdout as raw ANSI text; everything written through
these helpers goes to stderr so it never ends up inside the prompt.
"""

from __future__ import annotations

import json
from typing import Any

import tomli_w
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax


def get_console() -> Console:
    """Console for diagnostics, bound to stderr."""
    return Console(stderr=True)


def get_stdout_console() -> Console:
    """Console for command results that belong on stdout."""
    return Console(soft_wrap=True)


def format_error(message: str, console: Console) -> None:
    """Print an error message in red."""
    console.print(f"[bold red]Error:[/bold red] {escape(message)}", markup=True, highlight=False)


def format_timing(elapsed: float) -> str:
    """Elapsed render time as appended to the prompt."""
    if elapsed < 1:
        return f"{elapsed * 1000:.1f}ms"
    return f"{elapsed:.2f}s"


def format_json(data: Any, console: Console) -> None:
    """Pretty-print ``data`` as highlighted JSON when attached to a terminal."""
    text = json.dumps(data, indent=2, ensure_ascii=False)
    if console.is_terminal:
        console.print(Syntax(text, "json", background_color="default"))
    else:
        console.print(text, markup=False, highlight=False, emoji=False)


def format_toml(data: dict[str, Any], console: Console) -> None:
    """Write ``data`` as a TOML document, highlighted when attached to a terminal."""
    text = tomli_w.dumps(data)
    if console.is_terminal:
        console.print(Syntax(text, "toml", background_color="default"))
    else:
        console.print(text, markup=False, highlight=False, emoji=False, end="")

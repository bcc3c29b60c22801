"""Shared CLI output helpers.

Standardised error reporting and JSON output so that every command
prints the same way.  Errors and notices go to stderr; diagnostics and
reports go to stdout.
"""

from __future__ import annotations

import json
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from codex.linter import EXIT_FAIL

_err_console = Console(stderr=True)


def error_exit(msg: str, *, json_mode: bool = False, code: int = EXIT_FAIL) -> NoReturn:
    """Print *msg* as an error and ``raise typer.Exit(code)``."""
    if json_mode:
        print(json.dumps({"error": msg}, indent=2))
    else:
        _err_console.print(f"[red bold]error:[/red bold] {escape(msg)}", highlight=False)
    raise typer.Exit(code=code)


def notice(msg: str) -> None:
    """Print an informational line (mode overrides, overflow) to stderr."""
    style = "yellow" if msg.startswith("Warning") else "cyan"
    _err_console.print(msg, style=style, markup=False, highlight=False)


def json_print(data: dict[str, Any] | list[Any]) -> None:
    """Print *data* as pretty-printed JSON to stdout."""
    print(json.dumps(data, indent=2))

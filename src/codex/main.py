"""main.py - Command-line entry point for codex.

Analyses C source files line by line for C89/C99 conformance, Amiga
compiler and platform conventions, and memory-safety pitfalls.

Usage::

    codex --amiga --c89 src/*.c
    codex --vbcc --json main.c
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from codex import __version__
from codex.cli import error_exit, json_print, notice
from codex.config import load_config
from codex.diagnostics import (
    COMMENT,
    COMPILER,
    STYLE,
    SYNTAX,
    WARNING,
    Diagnostic,
    DiagnosticSink,
    format_diagnostic,
)
from codex.dispatcher import Dispatcher
from codex.linter import EXIT_OK, LintRun, lint_files
from codex.modes import Modes, modes_from_names, resolve_modes

out_console = Console(soft_wrap=True, highlight=False)

_CATEGORY_STYLES = {
    SYNTAX: "red",
    STYLE: "blue",
    WARNING: "yellow",
    COMPILER: "magenta",
    COMMENT: "dim",
}

OVERFLOW_NOTICE = "Warning: Maximum error count reached. Further errors will be ignored."


def diagnostic_text(diag: Diagnostic) -> Text:
    """:func:`format_diagnostic` output with the location and category styled."""
    text = Text(format_diagnostic(diag))
    location = f"{diag.file}:{diag.line}:{diag.column}:"
    text.stylize("bold", 0, len(location))
    start = len(location) + 1
    text.stylize(_CATEGORY_STYLES.get(diag.category, ""), start, start + len(diag.category) + 2)
    return text


def _print_summary(run: LintRun, modes: Modes) -> None:
    out_console.print("Codex analysis complete.")
    out_console.print(Text(f"Active validation modes: {', '.join(modes.active_names())}"))
    issues = len(run.sink)
    files = run.total_files
    lines = run.total_lines
    if issues:
        out_console.print(
            Text(f"Found {issues} issues in {files} files ({lines} lines processed).", style="bold")
        )
    else:
        out_console.print(
            Text(f"No issues found in {files} files ({lines} lines processed).", style="green")
        )


def _print_category_table(run: LintRun) -> None:
    counts = run.sink.count_by_category()
    if not counts:
        return
    out_console.print()
    table = Table(title="Issues by category", show_lines=False, pad_edge=False)
    table.add_column("Category")
    table.add_column("Count", justify="right")
    for category, count in sorted(counts.items(), key=lambda kv: -kv[1]):
        table.add_row(Text(category, style=_CATEGORY_STYLES.get(category, "")), str(count))
    out_console.print(table)


app = typer.Typer(
    help="Line-oriented static analyzer for C89/C99 and Amiga C sources.",
    rich_markup_mode="rich",
    epilog="""\
[bold]Validation modes:[/bold]

--c89       Strict C89 conformance (default when no standard is implied)

--c99       Note C99 features that need a C99 compiler

--amiga     Amiga types and PascalCase naming (implies --ndk)

--ndk       NDK compiler-specific.h universal keyword syntax

--sasc      SAS/C compatibility (forces C89)

--vbcc      VBCC compatibility (forces C99)

--dice      DICE compatibility (implies --c89 and --ndk)

--memsafe   Memory-unsafe library calls (implies --c89)

[bold]Exit codes:[/bold] 0 no issues, 5 issues found, 20 failure.

[dim]Settings may also be given in a codex.toml [codex] table found in the
current directory or any parent.[/dim]""",
)


@app.command()
def main(
    files: list[Path] = typer.Argument(None, help="C source files to analyse."),
    c89: bool = typer.Option(False, "--c89", help="Enable C89 validation."),
    c99: bool = typer.Option(False, "--c99", help="Enable C99 feature notes."),
    amiga: bool = typer.Option(False, "--amiga", help="Enable Amiga platform conventions."),
    ndk: bool = typer.Option(False, "--ndk", help="Enable NDK keyword checks."),
    sasc: bool = typer.Option(False, "--sasc", help="Enable SAS/C compatibility checks."),
    vbcc: bool = typer.Option(False, "--vbcc", help="Enable VBCC compatibility checks."),
    dice: bool = typer.Option(False, "--dice", help="Enable DICE compatibility checks."),
    memsafe: bool = typer.Option(False, "--memsafe", help="Enable memory-safety checks."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only print diagnostics."),
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON"),
    line_length: int | None = typer.Option(
        None, "--line-length", help="Maximum line length (default 256)."
    ),
    config: Path | None = typer.Option(None, "--config", help="Path to a codex.toml file."),
    version: bool = typer.Option(False, "--version", help="Print the version and exit."),
) -> None:
    """Analyse C source files."""
    if version:
        out_console.print(f"codex {__version__}")
        raise typer.Exit(code=EXIT_OK)

    if not files:
        error_exit("No input files specified.", json_mode=json_output)

    try:
        cfg = load_config(path=config)
    except (FileNotFoundError, ValueError) as e:
        error_exit(str(e), json_mode=json_output)

    if line_length is not None and line_length <= 0:
        error_exit(f"--line-length must be positive, got {line_length}", json_mode=json_output)

    flags = {
        "c89": c89,
        "c99": c99,
        "amiga": amiga,
        "ndk": ndk,
        "sasc": sasc,
        "vbcc": vbcc,
        "dice": dice,
        "memsafe": memsafe,
    }
    names = list(cfg.modes) + [name for name, on in flags.items() if on]
    quiet = quiet or cfg.quiet
    try:
        requested = modes_from_names(names, quiet=quiet)
    except ValueError as e:
        error_exit(str(e), json_mode=json_output)

    modes, notices = resolve_modes(requested)
    chatty = not quiet and not json_output
    if chatty:
        for msg in notices:
            notice(msg)

    sink = DiagnosticSink(capacity=cfg.max_diagnostics)
    dispatcher = Dispatcher(
        modes,
        sink,
        line_length=line_length or cfg.line_length,
        on_overflow=None if json_output else lambda: notice(OVERFLOW_NOTICE),
    )

    def _announce(path: Path) -> None:
        if chatty:
            out_console.print(Text(f"Analyzing: {path}"))

    run = lint_files(files, dispatcher, on_file=_announce)

    if json_output:
        output = {"modes": modes.active_names(), **run.to_dict()}
        json_print(output)
    else:
        for path, err in run.unreadable:
            notice(f"Error: Cannot open file {path}: {err}")
        if chatty:
            _print_summary(run, modes)
        for diag in sink:
            out_console.print(diagnostic_text(diag))
        if chatty:
            _print_category_table(run)

    if run.exit_code != EXIT_OK:
        raise typer.Exit(code=run.exit_code)


def main_entry() -> None:
    """Package entry point for ``codex``."""
    app()


if __name__ == "__main__":
    main_entry()

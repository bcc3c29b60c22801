"""linter.py - File-level driver around the line dispatcher.

Reads each source file, feeds its lines through a
:class:`~codex.dispatcher.Dispatcher` with a fresh
:class:`~codex.state.ParseState`, and collects the totals the CLI
reports.  Files are processed one at a time in the order given.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from codex.diagnostics import Diagnostic, DiagnosticSink
from codex.dispatcher import Dispatcher
from codex.state import ParseState

# Process exit codes
EXIT_OK = 0
EXIT_WARN = 5
EXIT_FAIL = 20


def read_source_lines(path: Path) -> list[str]:
    """Read *path* as UTF-8 (undecodable bytes replaced) and split into lines.

    Both ``\\n`` and ``\\r\\n`` terminators are stripped.  A trailing
    newline does not produce an extra empty line.

    Raises:
        OSError: if the file cannot be read.
    """
    text = path.read_text(encoding="utf-8", errors="replace")
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


@dataclass
class FileResult:
    """Outcome of analysing one file."""

    path: Path
    lines: int = 0
    diagnostics: list[Diagnostic] = field(default_factory=list)


@dataclass
class LintRun:
    """Totals for a whole run over several files."""

    sink: DiagnosticSink
    files: list[FileResult] = field(default_factory=list)
    unreadable: list[tuple[Path, str]] = field(default_factory=list)

    @property
    def total_files(self) -> int:
        return len(self.files)

    @property
    def total_lines(self) -> int:
        return sum(f.lines for f in self.files)

    @property
    def exit_code(self) -> int:
        """``EXIT_FAIL`` if any file was unreadable, ``EXIT_WARN`` on findings."""
        if self.unreadable:
            return EXIT_FAIL
        if len(self.sink) > 0 or self.sink.overflowed:
            return EXIT_WARN
        return EXIT_OK

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "files": self.total_files,
            "lines": self.total_lines,
            "issues": len(self.sink),
            "dropped": self.sink.dropped,
            "by_category": self.sink.count_by_category(),
            "unreadable": [{"path": str(p), "error": err} for p, err in self.unreadable],
            "diagnostics": [d.to_dict() for d in self.sink],
            "exit_code": self.exit_code,
        }


def lint_lines(lines: list[str], file: str, dispatcher: Dispatcher) -> list[Diagnostic]:
    """Run *lines* (already split) through *dispatcher* as one file."""
    state = ParseState()
    found: list[Diagnostic] = []
    for line_num, raw in enumerate(lines, start=1):
        found.extend(dispatcher.process_line(raw, line_num, file, state))
    found.extend(dispatcher.finish_file(file, len(lines), state))
    return found


def lint_file(path: Path, dispatcher: Dispatcher) -> FileResult:
    """Analyse a single file.

    Raises:
        OSError: if the file cannot be read.
    """
    lines = read_source_lines(path)
    diagnostics = lint_lines(lines, str(path), dispatcher)
    return FileResult(path=path, lines=len(lines), diagnostics=diagnostics)


def lint_files(
    paths: list[Path],
    dispatcher: Dispatcher,
    on_file: Callable[[Path], None] | None = None,
) -> LintRun:
    """Analyse *paths* in order, skipping files that cannot be read.

    *on_file*, when given, is called with each path before it is read.
    """
    run = LintRun(sink=dispatcher.sink)
    for path in paths:
        if on_file is not None:
            on_file(path)
        try:
            result = lint_file(path, dispatcher)
        except OSError as e:
            run.unreadable.append((path, str(e)))
            continue
        run.files.append(result)
    return run

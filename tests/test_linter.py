"""Tests for the file-level driver."""

from pathlib import Path

from codex.diagnostics import DiagnosticSink
from codex.dispatcher import Dispatcher
from codex.linter import (
    EXIT_FAIL,
    EXIT_OK,
    EXIT_WARN,
    lint_file,
    lint_files,
    read_source_lines,
)
from codex.modes import Modes

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_c(tmp_path: Path, name: str, content: str) -> Path:
    """Create a .c file in tmp_path and return its Path."""
    p = tmp_path / name
    p.write_text(content, encoding="utf-8")
    return p


def _dispatcher(capacity: int = 1000) -> Dispatcher:
    return Dispatcher(Modes(c89=True), DiagnosticSink(capacity=capacity))


CLEAN_SOURCE = """\
#include <stdio.h>

int main(void)
{
    printf("hello\\n");
    return 0;
}
"""


# ---------------------------------------------------------------------------
# read_source_lines()
# ---------------------------------------------------------------------------


class TestReadSourceLines:
    def test_trailing_newline(self, tmp_path: Path) -> None:
        p = _write_c(tmp_path, "a.c", "a;\nb;\n")
        assert read_source_lines(p) == ["a;", "b;"]

    def test_crlf(self, tmp_path: Path) -> None:
        p = tmp_path / "crlf.c"
        p.write_bytes(b"a;\r\nb;\r\n")
        assert read_source_lines(p) == ["a;", "b;"]

    def test_no_trailing_newline(self, tmp_path: Path) -> None:
        p = _write_c(tmp_path, "a.c", "a;\n\nb;")
        assert read_source_lines(p) == ["a;", "", "b;"]

    def test_empty_file(self, tmp_path: Path) -> None:
        p = _write_c(tmp_path, "empty.c", "")
        assert read_source_lines(p) == []

    def test_invalid_utf8_replaced(self, tmp_path: Path) -> None:
        p = tmp_path / "latin1.c"
        p.write_bytes(b"/* caf\xe9 */\n")
        assert read_source_lines(p) == ["/* caf\ufffd */"]


# ---------------------------------------------------------------------------
# lint_file() / lint_files()
# ---------------------------------------------------------------------------


class TestLintFile:
    def test_clean_file(self, tmp_path: Path) -> None:
        p = _write_c(tmp_path, "clean.c", CLEAN_SOURCE)
        result = lint_file(p, _dispatcher())
        assert result.lines == 7
        assert result.diagnostics == []

    def test_findings_carry_path(self, tmp_path: Path) -> None:
        p = _write_c(tmp_path, "bad.c", "x = 42;\n")
        result = lint_file(p, _dispatcher())
        assert [d.file for d in result.diagnostics] == [str(p)]
        assert result.diagnostics[0].line == 1


class TestLintFiles:
    def test_clean_run(self, tmp_path: Path) -> None:
        p = _write_c(tmp_path, "clean.c", CLEAN_SOURCE)
        run = lint_files([p], _dispatcher())
        assert run.total_files == 1
        assert run.total_lines == 7
        assert run.exit_code == EXIT_OK

    def test_findings_warn(self, tmp_path: Path) -> None:
        a = _write_c(tmp_path, "a.c", CLEAN_SOURCE)
        b = _write_c(tmp_path, "b.c", "x = 42;\n")
        run = lint_files([a, b], _dispatcher())
        assert run.total_files == 2
        assert len(run.sink) == 1
        assert run.exit_code == EXIT_WARN

    def test_state_reset_between_files(self, tmp_path: Path) -> None:
        a = _write_c(tmp_path, "a.c", "/* never closed\n")
        b = _write_c(tmp_path, "b.c", "y = 7;\n")
        run = lint_files([a, b], _dispatcher())
        assert [(d.file, d.line) for d in run.sink] == [(str(a), 1), (str(b), 1)]

    def test_unreadable_file_skipped(self, tmp_path: Path) -> None:
        missing = tmp_path / "missing.c"
        good = _write_c(tmp_path, "good.c", CLEAN_SOURCE)
        seen: list[Path] = []
        run = lint_files([missing, good], _dispatcher(), on_file=seen.append)
        assert seen == [missing, good]
        assert [p for p, _ in run.unreadable] == [missing]
        assert run.total_files == 1
        assert run.exit_code == EXIT_FAIL

    def test_overflow_still_warns(self, tmp_path: Path) -> None:
        p = _write_c(tmp_path, "many.c", "x = 1;\ny = 2;\n")
        run = lint_files([p], _dispatcher(capacity=1))
        assert run.sink.dropped == 1
        data = run.to_dict()
        assert data["issues"] == 1
        assert data["dropped"] == 1
        assert data["exit_code"] == EXIT_WARN

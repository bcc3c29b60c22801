"""Tests for the codex command line and shared CLI helpers."""

import json
from pathlib import Path

import pytest
import typer
from typer.testing import CliRunner

from codex.cli import error_exit, json_print
from codex.diagnostics import STYLE, Diagnostic, format_diagnostic
from codex.linter import EXIT_FAIL, EXIT_OK, EXIT_WARN
from codex.main import app, diagnostic_text

runner = CliRunner()

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_c(tmp_path: Path, name: str, content: str) -> Path:
    """Create a .c file in tmp_path and return its Path."""
    p = tmp_path / name
    p.write_text(content, encoding="utf-8")
    return p


CLEAN_SOURCE = """\
#include <stdio.h>

int main(void)
{
    printf("hello\\n");
    return 0;
}
"""


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep codex.toml discovery inside the test's own directory."""
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# error_exit() / json_print()
# ---------------------------------------------------------------------------


class TestErrorExit:
    def test_plain_stderr_and_exit(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(typer.Exit) as exc_info:
            error_exit("something broke")
        assert exc_info.value.exit_code == EXIT_FAIL
        captured = capsys.readouterr()
        assert "something broke" in captured.err
        assert captured.out == ""

    def test_brackets_not_markup(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(typer.Exit):
            error_exit("bad [codex] table")
        assert "bad [codex] table" in capsys.readouterr().err

    def test_json_mode_stdout(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(typer.Exit) as exc_info:
            error_exit("bad input", json_mode=True, code=3)
        assert exc_info.value.exit_code == 3
        captured = capsys.readouterr()
        assert json.loads(captured.out) == {"error": "bad input"}
        assert captured.err == ""


class TestJsonPrint:
    def test_dict_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        json_print({"status": "ok", "count": 42})
        assert json.loads(capsys.readouterr().out) == {"status": "ok", "count": 42}


class TestDiagnosticText:
    def test_matches_plain_format(self) -> None:
        diag = Diagnostic("a.c", 3, 5, STYLE, "Magic number found.", excerpt="x = 42;")
        assert diagnostic_text(diag).plain == format_diagnostic(diag)


# ---------------------------------------------------------------------------
# codex command
# ---------------------------------------------------------------------------


class TestMain:
    def test_clean_file(self, tmp_path: Path) -> None:
        p = _write_c(tmp_path, "clean.c", CLEAN_SOURCE)
        result = runner.invoke(app, [str(p)])
        assert result.exit_code == EXIT_OK
        assert f"Analyzing: {p}" in result.output
        assert "Active validation modes: C89" in result.output
        assert "No issues found in 1 files (7 lines processed)." in result.output

    def test_findings(self, tmp_path: Path) -> None:
        p = _write_c(tmp_path, "bad.c", "x = 42;\n")
        result = runner.invoke(app, [str(p)])
        assert result.exit_code == EXIT_WARN
        assert "Found 1 issues in 1 files (1 lines processed)." in result.output
        assert f"{p}:1:5: [STYLE] Magic number found. Consider using a named constant." in result.output
        assert "    | x = 42;" in result.output

    def test_quiet_prints_only_diagnostics(self, tmp_path: Path) -> None:
        p = _write_c(tmp_path, "bad.c", "x = 42;\n")
        result = runner.invoke(app, ["--quiet", str(p)])
        assert result.exit_code == EXIT_WARN
        assert result.output.splitlines() == [
            f"{p}:1:5: [STYLE] Magic number found. Consider using a named constant.",
            "    | x = 42;",
        ]

    def test_json_output(self, tmp_path: Path) -> None:
        p = _write_c(tmp_path, "bad.c", "x = 42;\n")
        result = runner.invoke(app, ["--json", str(p)])
        assert result.exit_code == EXIT_WARN
        data = json.loads(result.stdout)
        assert data["modes"] == ["C89"]
        assert data["files"] == 1
        assert data["issues"] == 1
        assert data["diagnostics"][0]["category"] == "STYLE"
        assert data["exit_code"] == EXIT_WARN

    def test_unreadable_file(self, tmp_path: Path) -> None:
        good = _write_c(tmp_path, "good.c", CLEAN_SOURCE)
        result = runner.invoke(app, ["--json", str(tmp_path / "missing.c"), str(good)])
        assert result.exit_code == EXIT_FAIL
        data = json.loads(result.stdout)
        assert data["files"] == 1
        assert data["unreadable"][0]["path"] == str(tmp_path / "missing.c")

    def test_no_files(self) -> None:
        result = runner.invoke(app, [])
        assert result.exit_code == EXIT_FAIL
        assert "No input files specified." in result.output

    def test_mode_notice(self, tmp_path: Path) -> None:
        p = _write_c(tmp_path, "clean.c", CLEAN_SOURCE)
        result = runner.invoke(app, ["--sasc", "--c99", str(p)])
        assert "Warning: SAS/C mode overrides C99 mode (SAS/C is C89-only)" in result.output
        assert "Active validation modes: C89, SAS/C" in result.output

    def test_amiga_mode(self, tmp_path: Path) -> None:
        p = _write_c(tmp_path, "types.c", "char *name;\n")
        result = runner.invoke(app, ["--amiga", "--quiet", str(p)])
        assert result.exit_code == EXIT_WARN
        assert "[WARNING] Use Amiga types (UBYTE* or STRPTR) instead of char*" in result.output

    def test_line_length_option(self, tmp_path: Path) -> None:
        p = _write_c(tmp_path, "long.c", "x = y; /* a fairly long comment */\n")
        result = runner.invoke(app, ["--c99", "--line-length", "20", "--quiet", str(p)])
        assert result.exit_code == EXIT_WARN
        assert f"{p}:1:21: [STYLE] Line exceeds maximum length." in result.output

    def test_bad_line_length(self, tmp_path: Path) -> None:
        p = _write_c(tmp_path, "clean.c", CLEAN_SOURCE)
        result = runner.invoke(app, ["--line-length", "0", str(p)])
        assert result.exit_code == EXIT_FAIL


class TestConfigFile:
    def test_modes_from_config(self, tmp_path: Path) -> None:
        (tmp_path / "codex.toml").write_text('[codex]\nmodes = ["amiga"]\n', encoding="utf-8")
        p = _write_c(tmp_path, "types.c", "char *name;\n")
        result = runner.invoke(app, ["--quiet", str(p)])
        assert result.exit_code == EXIT_WARN
        assert "Use Amiga types" in result.output

    def test_invalid_config(self, tmp_path: Path) -> None:
        (tmp_path / "codex.toml").write_text("[codex]\nline_length = -1\n", encoding="utf-8")
        p = _write_c(tmp_path, "clean.c", CLEAN_SOURCE)
        result = runner.invoke(app, [str(p)])
        assert result.exit_code == EXIT_FAIL
        assert "line_length" in result.output

    def test_missing_explicit_config(self, tmp_path: Path) -> None:
        p = _write_c(tmp_path, "clean.c", CLEAN_SOURCE)
        result = runner.invoke(app, ["--config", str(tmp_path / "nope.toml"), str(p)])
        assert result.exit_code == EXIT_FAIL
        assert "Config not found" in result.output

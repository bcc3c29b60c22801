"""Tests for diagnostic records and the bounded sink."""

import pytest

from codex.diagnostics import (
    EXCERPT_LIMIT,
    MAX_MESSAGE_LENGTH,
    STYLE,
    WARNING,
    Diagnostic,
    DiagnosticSink,
    format_diagnostic,
    make_excerpt,
)


class TestExcerpt:
    def test_short_line_kept(self) -> None:
        assert make_excerpt("x = 1;") == "x = 1;"

    def test_empty(self) -> None:
        assert make_excerpt("") == ""
        assert make_excerpt(None) == ""

    def test_exact_limit_kept(self) -> None:
        line = "a" * EXCERPT_LIMIT
        assert make_excerpt(line) == line

    def test_long_line_truncated(self) -> None:
        excerpt = make_excerpt("b" * 300)
        assert len(excerpt) == EXCERPT_LIMIT
        assert excerpt == "b" * 117 + "..."


class TestDiagnostic:
    def test_unknown_category_rejected(self) -> None:
        with pytest.raises(ValueError, match="category"):
            Diagnostic("t.c", 1, 1, "NOISE", "x")

    def test_message_bounded(self) -> None:
        diag = Diagnostic("t.c", 1, 1, STYLE, "m" * 400)
        assert len(diag.message) == MAX_MESSAGE_LENGTH

    def test_long_excerpt_bounded(self) -> None:
        diag = Diagnostic("t.c", 1, 1, STYLE, "m", excerpt="e" * 200)
        assert diag.excerpt.endswith("...")
        assert len(diag.excerpt) == EXCERPT_LIMIT

    def test_format_without_excerpt(self) -> None:
        diag = Diagnostic("src/a.c", 12, 5, WARNING, "Forbid() usage detected")
        assert format_diagnostic(diag) == "src/a.c:12:5: [WARNING] Forbid() usage detected"

    def test_format_with_excerpt(self) -> None:
        diag = Diagnostic("a.c", 3, 5, STYLE, "Magic number found.", excerpt="x = 42;")
        assert format_diagnostic(diag) == "a.c:3:5: [STYLE] Magic number found.\n    | x = 42;"

    def test_to_dict_omits_empty_excerpt(self) -> None:
        data = Diagnostic("a.c", 1, 2, STYLE, "m").to_dict()
        assert data == {"file": "a.c", "line": 1, "column": 2, "category": "STYLE", "message": "m"}


class TestSink:
    def _diag(self, n: int, category: str = STYLE) -> Diagnostic:
        return Diagnostic("a.c", n, 1, category, f"issue {n}")

    def test_append_until_full(self) -> None:
        sink = DiagnosticSink(capacity=2)
        assert sink.append(self._diag(1))
        assert sink.append(self._diag(2))
        assert not sink.append(self._diag(3))
        assert not sink.append(self._diag(4))
        assert len(sink) == 2
        assert sink.dropped == 2
        assert sink.overflowed

    def test_iteration_order(self) -> None:
        sink = DiagnosticSink()
        for n in (3, 1, 2):
            sink.append(self._diag(n))
        assert [d.line for d in sink] == [3, 1, 2]
        assert not sink.overflowed

    def test_count_by_category(self) -> None:
        sink = DiagnosticSink()
        sink.append(self._diag(1, STYLE))
        sink.append(self._diag(2, WARNING))
        sink.append(self._diag(3, WARNING))
        assert sink.count_by_category() == {"STYLE": 1, "WARNING": 2}

"""dispatcher.py - Runs the ordered checker pipeline over each line.

The pipeline is a plain list of :class:`Checker` entries built from the
effective :class:`~codex.modes.Modes`.  For every line the dispatcher
scans out comments, runs the checkers in order and forwards whatever
they report to the :class:`~codex.diagnostics.DiagnosticSink`.  With
``stop_at_first`` (the default) the remaining checkers are skipped as
soon as one of them reports for the line.

Brace depth is updated after the pipeline on every line, whether or not
it was cut short.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from codex.context import DEFAULT_LINE_LENGTH, LineContext
from codex.declarations import check_declaration_order, update_brace_depth
from codex.diagnostics import WARNING, Diagnostic, DiagnosticSink
from codex.modes import Modes
from codex.pairing import check_pairing, finalize_pairing
from codex.rules import (
    check_c89,
    check_c99,
    check_comment_style,
    check_line_length,
    check_magic_numbers,
    check_marker,
    check_memsafe,
    check_platform,
    check_vendor,
)
from codex.scanner import is_blank, scan_line
from codex.state import ParseState
from codex.tables import DEFAULT_TABLES, RuleTables


@dataclass(frozen=True)
class Checker:
    """One pipeline stage.

    ``requires_code`` stages are skipped when the line has no code left
    after comment stripping.
    """

    name: str
    func: Callable[[LineContext], list[Diagnostic]]
    requires_code: bool = True


def _declaration_order(ctx: LineContext) -> list[Diagnostic]:
    diag = check_declaration_order(ctx)
    return [diag] if diag is not None else []


def build_pipeline(modes: Modes) -> list[Checker]:
    """Ordered checkers for *modes*."""
    pipeline = [
        Checker("comment-style", check_comment_style, requires_code=False),
        Checker("marker", check_marker),
    ]
    if modes.c89:
        pipeline.append(Checker("c89", check_c89))
    if modes.c99:
        pipeline.append(Checker("c99", check_c99))
    for vendor in modes.enabled_vendors():
        pipeline.append(Checker(vendor, check_vendor(vendor)))
    if modes.amiga:
        pipeline.append(Checker("platform", check_platform))
    if modes.memsafe:
        pipeline.append(Checker("memsafe", check_memsafe))
    pipeline.append(Checker("magic-numbers", check_magic_numbers))
    pipeline.append(Checker("pairing", check_pairing))
    if modes.c89:
        pipeline.append(Checker("declaration-order", _declaration_order))
    pipeline.append(Checker("line-length", check_line_length))
    return pipeline


class Dispatcher:
    """Feeds lines through the checker pipeline into a sink.

    One dispatcher serves a whole run; per-file context lives in the
    :class:`ParseState` the caller passes in.

    Args:
        modes: Effective (already resolved) modes.
        sink: Destination for diagnostics.
        tables: Keyword tables the checkers consult.
        line_length: Longest allowed raw line.
        stop_at_first: Skip the rest of the pipeline once a checker has
            reported for the line.
        on_overflow: Called once, the first time the sink rejects a
            diagnostic.
    """

    def __init__(
        self,
        modes: Modes,
        sink: DiagnosticSink,
        tables: RuleTables = DEFAULT_TABLES,
        line_length: int = DEFAULT_LINE_LENGTH,
        stop_at_first: bool = True,
        on_overflow: Callable[[], None] | None = None,
    ) -> None:
        self.modes = modes
        self.sink = sink
        self.tables = tables
        self.line_length = line_length
        self.stop_at_first = stop_at_first
        self.on_overflow = on_overflow
        self.pipeline = build_pipeline(modes)
        self._overflow_reported = False

    def _emit(self, diags: list[Diagnostic]) -> None:
        for diag in diags:
            if not self.sink.append(diag) and not self._overflow_reported:
                self._overflow_reported = True
                if self.on_overflow is not None:
                    self.on_overflow()

    def process_line(
        self, raw: str, line_num: int, file: str, state: ParseState
    ) -> list[Diagnostic]:
        """Check one line and return the diagnostics it produced."""
        scan = scan_line(raw, state)
        ctx = LineContext(
            file=file,
            line_num=line_num,
            raw=raw,
            scan=scan,
            state=state,
            modes=self.modes,
            tables=self.tables,
            line_length=self.line_length,
        )
        blank = is_blank(scan.code)

        found: list[Diagnostic] = []
        for checker in self.pipeline:
            if blank and checker.requires_code:
                continue
            diags = checker.func(ctx)
            if diags:
                found.extend(diags)
                if self.stop_at_first:
                    break

        update_brace_depth(scan.code, state)
        self._emit(found)
        return found

    def finish_file(self, file: str, last_line: int, state: ParseState) -> list[Diagnostic]:
        """End-of-file checks: unterminated block comment, then pairing totals."""
        found: list[Diagnostic] = []
        if state.in_multiline_comment:
            found.append(
                Diagnostic(
                    file,
                    max(last_line, 1),
                    1,
                    WARNING,
                    "File ends with an unterminated '/*' comment.",
                )
            )
        found.extend(
            finalize_pairing(file, state, self.tables.disable_call, self.tables.enable_call)
        )
        self._emit(found)
        return found

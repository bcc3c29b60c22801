"""context.py - Everything a per-line checker may look at."""

from __future__ import annotations

from dataclasses import dataclass

from codex.diagnostics import Diagnostic, make_excerpt
from codex.modes import Modes
from codex.scanner import ScanResult
from codex.state import ParseState
from codex.tables import DEFAULT_TABLES, RuleTables

DEFAULT_LINE_LENGTH = 256


@dataclass
class LineContext:
    """One source line as seen by the checkers.

    ``raw`` is the line as read from the file; ``code`` is the scanner's
    comment-free rendition.  ``state`` is the file's mutable
    :class:`ParseState`; only the stateful trackers touch it.
    """

    file: str
    line_num: int
    raw: str
    scan: ScanResult
    state: ParseState
    modes: Modes = Modes(c89=True)
    tables: RuleTables = DEFAULT_TABLES
    line_length: int = DEFAULT_LINE_LENGTH

    @property
    def code(self) -> str:
        return self.scan.code

    def report(
        self, column: int, category: str, message: str, *, excerpt: bool = True
    ) -> Diagnostic:
        """Build a diagnostic for this line, attaching the raw line as excerpt."""
        return Diagnostic(
            file=self.file,
            line=self.line_num,
            column=column,
            category=category,
            message=message,
            excerpt=make_excerpt(self.raw) if excerpt else "",
        )

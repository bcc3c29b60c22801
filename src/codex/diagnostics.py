"""diagnostics.py - Diagnostic records and the bounded diagnostic sink.

Every checker in codex produces :class:`Diagnostic` records.  They are
immutable once created and are collected by a :class:`DiagnosticSink`,
which holds at most ``capacity`` records for the whole run.  When the
sink is full, :meth:`DiagnosticSink.append` returns ``False`` so that the
caller can decide how to report the overflow (the dispatcher reports it
once and keeps going).
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

SYNTAX = "SYNTAX"
STYLE = "STYLE"
WARNING = "WARNING"
COMPILER = "COMPILER"
COMMENT = "COMMENT"

CATEGORIES = (SYNTAX, STYLE, WARNING, COMPILER, COMMENT)

# ---------------------------------------------------------------------------
# Size limits
# ---------------------------------------------------------------------------

MAX_DIAGNOSTICS = 1000
MAX_MESSAGE_LENGTH = 255
EXCERPT_LIMIT = 120
_ELLIPSIS = "..."


def make_excerpt(line: str | None) -> str:
    """Return *line* bounded to :data:`EXCERPT_LIMIT` characters.

    Overlong lines keep their first 117 characters followed by ``...``
    so the excerpt never exceeds the limit.
    """
    if not line:
        return ""
    if len(line) <= EXCERPT_LIMIT:
        return line
    return line[: EXCERPT_LIMIT - len(_ELLIPSIS)] + _ELLIPSIS


@dataclass(frozen=True)
class Diagnostic:
    """A single finding at ``file:line:column``."""

    file: str
    line: int
    column: int
    category: str
    message: str
    excerpt: str = ""

    def __post_init__(self) -> None:
        if self.category not in CATEGORIES:
            raise ValueError(f"Unknown diagnostic category: {self.category!r}")
        if len(self.message) > MAX_MESSAGE_LENGTH:
            object.__setattr__(self, "message", self.message[:MAX_MESSAGE_LENGTH])
        if len(self.excerpt) > EXCERPT_LIMIT:
            object.__setattr__(self, "excerpt", make_excerpt(self.excerpt))

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        data: dict[str, Any] = {
            "file": self.file,
            "line": self.line,
            "column": self.column,
            "category": self.category,
            "message": self.message,
        }
        if self.excerpt:
            data["excerpt"] = self.excerpt
        return data


def format_diagnostic(diag: Diagnostic) -> str:
    """Render *diag* as ``file:line:col: [CATEGORY] message`` plus excerpt."""
    text = f"{diag.file}:{diag.line}:{diag.column}: [{diag.category}] {diag.message}"
    if diag.excerpt:
        text += f"\n    | {diag.excerpt}"
    return text


# ---------------------------------------------------------------------------
# Sink
# ---------------------------------------------------------------------------


@dataclass
class DiagnosticSink:
    """Append-only, capacity-bounded list of diagnostics."""

    capacity: int = MAX_DIAGNOSTICS
    _items: list[Diagnostic] = field(default_factory=list)
    dropped: int = 0

    def append(self, diag: Diagnostic) -> bool:
        """Store *diag*; return ``False`` (and drop it) when the sink is full."""
        if len(self._items) >= self.capacity:
            self.dropped += 1
            return False
        self._items.append(diag)
        return True

    @property
    def overflowed(self) -> bool:
        """True once at least one diagnostic has been dropped."""
        return self.dropped > 0

    def count_by_category(self) -> dict[str, int]:
        """Number of stored diagnostics per category."""
        return dict(Counter(d.category for d in self._items))

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

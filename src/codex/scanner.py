"""scanner.py - Comment and literal aware line scanner.

Strips comments from a single line of C source while tracking string
and character literal context, so that keyword rules never fire on text
inside a comment.  Block comments may span lines: the open/closed flag
lives in :class:`~codex.state.ParseState` and is carried from one call
to the next for the same file.

String and char literals are copied through verbatim (escape pairs
included); only their delimiters change the scanner's mode.  A literal
left open at the end of a line is not carried to the next line.
"""

from __future__ import annotations

from dataclasses import dataclass

from codex.state import ParseState


@dataclass(frozen=True)
class ScanResult:
    """Output of :func:`scan_line`.

    Attributes:
        code: The line with comments removed.
        line_comment_column: 1-based column where a ``//`` comment starts,
            or ``None``.
        opened_block_comment: True if a ``/*`` was opened on this line
            (whether or not it also closed here).
    """

    code: str
    line_comment_column: int | None = None
    opened_block_comment: bool = False


def scan_line(raw: str, state: ParseState) -> ScanResult:
    """Strip comments from *raw*, updating ``state.in_multiline_comment``."""
    out: list[str] = []
    in_string = False
    in_char = False
    opened = False
    line_comment_column = None
    i = 0
    n = len(raw)

    while i < n:
        ch = raw[i]
        nxt = raw[i + 1] if i + 1 < n else ""

        if state.in_multiline_comment:
            if ch == "*" and nxt == "/":
                state.in_multiline_comment = False
                i += 2
            else:
                i += 1
            continue

        if in_string or in_char:
            if ch == "\\" and nxt:
                out.append(ch + nxt)
                i += 2
                continue
            if in_string and ch == '"':
                in_string = False
            elif in_char and ch == "'":
                in_char = False
            out.append(ch)
            i += 1
            continue

        if ch == "/" and nxt == "*":
            state.in_multiline_comment = True
            opened = True
            i += 2
            continue

        if ch == "/" and nxt == "/":
            line_comment_column = i + 1
            break

        if ch == '"':
            in_string = True
        elif ch == "'":
            in_char = True
        out.append(ch)
        i += 1

    return ScanResult(
        code="".join(out),
        line_comment_column=line_comment_column,
        opened_block_comment=opened,
    )


def is_blank(code: str) -> bool:
    """True if *code* has nothing but whitespace (e.g. a comment-only line)."""
    return not code.strip()

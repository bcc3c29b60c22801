"""declarations.py - C89 declaration placement tracking.

C89 requires every declaration in a block to come before the first
statement.  We approximate this per line: the first word of the line
decides whether it is a declaration (type or storage-class keyword) or
a statement, and :class:`~codex.state.ParseState` remembers, for each
brace depth, whether a statement has been seen yet.

The check only flags *simple* declarations: a ``;`` must appear before
any ``(`` on the line.  Function pointers and other complex
declarations are deliberately let through.
"""

from __future__ import annotations

from codex.context import LineContext
from codex.diagnostics import SYNTAX, Diagnostic
from codex.state import MAX_DEPTH, ParseState

DECLARATION_KEYWORDS = frozenset({
    "auto", "char", "const", "double", "enum", "extern", "float", "int", "long",
    "register", "short", "signed", "static", "struct", "typedef", "union",
    "unsigned", "void", "volatile",
})

_LABELS = ("case", "default")


def is_simple_declaration(trimmed: str) -> bool:
    """True if a ``;`` occurs on the line before any ``(``."""
    semi = trimmed.find(";")
    if semi < 0:
        return False
    paren = trimmed.find("(")
    return paren < 0 or semi < paren


def check_declaration_order(ctx: LineContext) -> Diagnostic | None:
    """Flag a declaration that follows a statement in the same block.

    Marks the current depth as having seen a statement when the line is
    neither a declaration, a ``case``/``default`` label, nor a closing
    brace.  File-scope lines (depth 0) are ignored.
    """
    state = ctx.state
    code = ctx.code
    trimmed = code.lstrip()
    if not trimmed or state.brace_depth <= 0:
        return None

    first_word = trimmed.split(None, 1)[0]

    if first_word in DECLARATION_KEYWORDS:
        if is_simple_declaration(trimmed) and state.statement_seen[state.brace_depth]:
            return ctx.report(
                len(code) - len(trimmed) + 1,
                SYNTAX,
                "Variable declaration after a statement is not allowed in C89.",
            )
    elif first_word.rstrip(":") not in _LABELS and not trimmed.startswith("}"):
        state.statement_seen[state.brace_depth] = True
    return None


def update_brace_depth(code: str, state: ParseState) -> None:
    """Track ``{``/``}`` nesting after all checks for a line have run."""
    for ch in code:
        if ch == "{":
            if state.brace_depth < MAX_DEPTH - 1:
                state.brace_depth += 1
                state.statement_seen[state.brace_depth] = False
        elif ch == "}":
            if state.brace_depth > 0:
                state.statement_seen[state.brace_depth] = False
                state.brace_depth -= 1

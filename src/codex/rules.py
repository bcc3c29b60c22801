"""rules.py - Stateless per-line rule checkers.

Every checker takes a :class:`~codex.context.LineContext` and returns a
list with at most one :class:`~codex.diagnostics.Diagnostic`: within a
checker the first match wins.  Checkers never raise; anything they do
not recognise simply produces no diagnostic.

Most checkers look at ``ctx.code`` (comments already stripped, string
literals still present).  Keyword lookups go through ``ctx.tables`` so
the tables can be replaced without touching this module.

These are line-granular heuristics, not a parser.  Expect the odd false
positive or negative.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from functools import lru_cache

from codex.context import LineContext
from codex.diagnostics import COMMENT, COMPILER, STYLE, SYNTAX, WARNING, Diagnostic

MARKER = "$CODEX:"

_TOKEN_RE = re.compile(r"[^\s*();,]+")
_CALL_RE = re.compile(r"\b([A-Za-z_]\w*)\s*\(")
_INCLUDE_RE = re.compile(r"^\s*#\s*include\b")

# ---------------------------------------------------------------------------
# C99 constructs
# ---------------------------------------------------------------------------

_FOR_DECL_RE = re.compile(
    r"\bfor\s*\(\s*(?:(?:const|register|static|volatile)\s+)*"
    r"(?:int|char|long|short|float|double|unsigned|signed|_Bool|struct\s+\w+)\b"
)
_DESIGNATED_INIT_RE = re.compile(r"[{,]\s*(?:\.\s*[A-Za-z_]\w*|\[[^\]]+\])\s*=")
_COMPOUND_LITERAL_RE = re.compile(
    r"\(\s*(?:(?:unsigned|signed|const)\s+)*(?:int|char|long|short|float|double)"
    r"\s*\[\s*\w*\s*\]\s*\)\s*\{"
    r"|\(\s*(?:struct|union)\s+\w+\s*\)\s*\{"
)
_VARIADIC_MACRO_RE = re.compile(r"__VA_ARGS__|__VA_OPT__|#\s*define\s+\w+\([^)]*\.\.\.")
_FLEXIBLE_ARRAY_RE = re.compile(
    r"^\s*(?:(?:unsigned|signed|const|struct)\s+)*[A-Za-z_]\w*[\s*]+[A-Za-z_]\w*\s*\[\s*\]\s*;"
)

# (regex, message in C89 mode, message in C99 mode)
_C99_CONSTRUCTS: tuple[tuple[re.Pattern[str], str, str], ...] = (
    (
        _FOR_DECL_RE,
        "Variable declaration in for loop not allowed in C89",
        "C99 for-loop declaration detected - ensure your compiler supports C99",
    ),
    (
        _DESIGNATED_INIT_RE,
        "C99 designated initializer found - not available in C89",
        "C99 designated initializer detected - ensure your compiler supports C99",
    ),
    (
        _COMPOUND_LITERAL_RE,
        "C99 compound literal found - not available in C89",
        "C99 compound literal detected - ensure your compiler supports C99",
    ),
    (
        _VARIADIC_MACRO_RE,
        "C99 variadic macro found - not available in C89",
        "C99 variadic macro detected - ensure your compiler supports C99",
    ),
    (
        _FLEXIBLE_ARRAY_RE,
        "C99 flexible array member found - not available in C89",
        "C99 flexible array member detected - ensure your compiler supports C99",
    ),
)

_C89_MISSING_KEYWORDS = (
    (re.compile(r"\binline\b"), "'inline' keyword is not available in C89"),
    (re.compile(r"\b_Bool\b"), "_Bool type is not available in C89"),
    (re.compile(r"\brestrict\b"), "'restrict' keyword is not available in C89"),
)

LineCheck = Callable[[LineContext], list[Diagnostic]]


def _find_c99_function(ctx: LineContext) -> re.Match[str] | None:
    for m in _CALL_RE.finditer(ctx.code):
        if m.group(1) in ctx.tables.c99_functions:
            return m
    return None


def _find_c99_header(ctx: LineContext) -> int:
    code = ctx.code
    if not _INCLUDE_RE.match(code):
        return -1
    for header in ctx.tables.c99_headers:
        pos = code.find(header)
        if pos >= 0:
            return pos
    return -1


# ---------------------------------------------------------------------------
# Comment style / test markers
# ---------------------------------------------------------------------------


def check_comment_style(ctx: LineContext) -> list[Diagnostic]:
    """C89 has no ``//`` comments; SAS/C accepts them anyway."""
    col = ctx.scan.line_comment_column
    if col is None or not ctx.modes.c89 or ctx.modes.sasc:
        return []
    return [ctx.report(col, SYNTAX, "C++ comments ('//') are not allowed in C89.")]


def extract_marker(raw: str) -> str:
    """Return the text of the first ``$CODEX:`` marker on *raw*, or ``""``.

    The text runs up to the first ``/`` or ``*`` so a trailing ``*/`` is
    not included.
    """
    pos = raw.find(MARKER)
    if pos < 0:
        return ""
    text = raw[pos + len(MARKER) :].lstrip(" \t")
    end = len(text)
    for stop in ("/", "*"):
        idx = text.find(stop)
        if 0 <= idx < end:
            end = idx
    return text[:end].strip()


def check_marker(ctx: LineContext) -> list[Diagnostic]:
    """Echo an inline ``$CODEX:`` expectation as a COMMENT diagnostic."""
    text = extract_marker(ctx.raw)
    if not text:
        return []
    return [ctx.report(1, COMMENT, text, excerpt=False)]


# ---------------------------------------------------------------------------
# Language standards
# ---------------------------------------------------------------------------


def check_c89(ctx: LineContext) -> list[Diagnostic]:
    """Flag C99-only keywords, constructs, functions and headers."""
    code = ctx.code
    for pattern, message in _C89_MISSING_KEYWORDS:
        m = pattern.search(code)
        if m:
            return [ctx.report(m.start() + 1, SYNTAX, message, excerpt=False)]

    for pattern, message, _ in _C99_CONSTRUCTS:
        m = pattern.search(code)
        if m:
            return [ctx.report(m.start() + 1, SYNTAX, message, excerpt=False)]

    fm = _find_c99_function(ctx)
    if fm:
        return [
            ctx.report(
                fm.start() + 1,
                SYNTAX,
                f"C99+ standard library function '{fm.group(1)}' found - not available in C89",
                excerpt=False,
            )
        ]

    pos = _find_c99_header(ctx)
    if pos >= 0:
        return [
            ctx.report(
                pos + 1, SYNTAX, "C99+ header file found - not available in C89", excerpt=False
            )
        ]
    return []


def check_c99(ctx: LineContext) -> list[Diagnostic]:
    """Note C99 features so users know the code needs a C99 compiler."""
    code = ctx.code
    for keyword in ctx.tables.c99_keywords:
        m = re.search(rf"\b{re.escape(keyword)}\b", code)
        if m:
            return [
                ctx.report(
                    m.start() + 1,
                    WARNING,
                    f"C99 keyword '{keyword}' detected - ensure your compiler supports C99",
                )
            ]

    for pattern, _, message in _C99_CONSTRUCTS:
        m = pattern.search(code)
        if m:
            return [ctx.report(m.start() + 1, WARNING, message)]

    fm = _find_c99_function(ctx)
    if fm:
        return [
            ctx.report(
                fm.start() + 1,
                WARNING,
                f"C99+ standard library function '{fm.group(1)}' detected - "
                "ensure your compiler supports C99",
            )
        ]

    pos = _find_c99_header(ctx)
    if pos >= 0:
        return [
            ctx.report(
                pos + 1, WARNING, "C99+ header file detected - ensure your compiler supports C99"
            )
        ]
    return []


# ---------------------------------------------------------------------------
# Compiler keyword compatibility
# ---------------------------------------------------------------------------


def check_vendor(vendor: str) -> LineCheck:
    """Build the keyword checker for one compiler mode (``sasc``, ``vbcc``, ...)."""

    def _check(ctx: LineContext) -> list[Diagnostic]:
        table = ctx.tables.vendors.get(vendor)
        if table is None:
            return []
        for m in _TOKEN_RE.finditer(ctx.code):
            token = m.group(0)
            if not table.matches(token):
                continue
            replacement = ctx.tables.universal_replacement(token)
            if replacement.has_replacement:
                message = (
                    f"Keyword '{token}' is incompatible with {table.label}. "
                    f"Use universal syntax '{replacement.text}' instead."
                )
            else:
                message = (
                    f"Keyword '{token}' is incompatible with {table.label} "
                    "and has no direct universal equivalent."
                )
            return [ctx.report(m.start() + 1, COMPILER, message, excerpt=False)]
        return []

    _check.__name__ = f"check_{vendor}"
    return _check


# ---------------------------------------------------------------------------
# Amiga naming / typing conventions
# ---------------------------------------------------------------------------

_FUNC_DEF_RE = re.compile(r"^\s*(?:[A-Za-z_]\w*\s+|\*\s*)+?\**\s*([A-Za-z_]\w*)\s*\(")
_NOT_A_TYPE = frozenset({
    "return", "if", "else", "while", "for", "switch", "do", "case", "goto", "sizeof",
})
_ZERO_POINTER_RE = re.compile(r"\b[A-Za-z_]\w*\s*\*+\s*[A-Za-z_]\w*\s*=\s*0\s*[;,)]")


@lru_cache(maxsize=None)
def _compile_hints(
    hints: tuple[tuple[str, str, str], ...],
) -> tuple[tuple[re.Pattern[str], str, str], ...]:
    return tuple((re.compile(pattern), category, message) for pattern, category, message in hints)


def function_definition_name(code: str) -> tuple[str, int] | None:
    """Name and 0-based offset of the function a line appears to define.

    Lines ending in ``;`` (prototypes and calls) and control statements
    are not definitions.
    """
    stripped = code.rstrip()
    if not stripped or stripped.endswith(";"):
        return None
    m = _FUNC_DEF_RE.match(code)
    if not m:
        return None
    first = code.split(None, 1)[0]
    if first in _NOT_A_TYPE:
        return None
    return m.group(1), m.start(1)


def check_platform(ctx: LineContext) -> list[Diagnostic]:
    """Amiga types instead of bare C types, PascalCase function names, NULL."""
    code = ctx.code
    for pattern, category, message in _compile_hints(ctx.tables.platform_type_hints):
        m = pattern.search(code)
        if m:
            return [ctx.report(m.start() + 1, category, message)]

    found = function_definition_name(code)
    if found:
        name, offset = found
        if (
            name[0].islower()
            and name not in ctx.tables.stdlib_functions
            and name not in ctx.tables.platform_functions
        ):
            return [ctx.report(offset + 1, WARNING, "Use PascalCase function names")]

    m = _ZERO_POINTER_RE.search(code)
    if m:
        return [
            ctx.report(
                m.start() + 1,
                STYLE,
                "Assigning 0 to a pointer. Use the Amiga constant NULL instead.",
            )
        ]
    return []


# ---------------------------------------------------------------------------
# Memory safety
# ---------------------------------------------------------------------------


def check_memsafe(ctx: LineContext) -> list[Diagnostic]:
    """Flag C library functions with a well-known safer alternative."""
    for m in _TOKEN_RE.finditer(ctx.code):
        token = m.group(0)
        replacement = ctx.tables.memsafe_replacements.get(token)
        if replacement is None or not replacement.has_replacement:
            continue
        if token == "realpath":
            message = (
                "Unsafe use of 'realpath' suspected. "
                "Ensure the second argument is a valid buffer, not NULL."
            )
        elif token in ("scanf", "sscanf"):
            message = (
                f"Unsafe use of '{token}' suspected. Ensure format string uses width "
                "specifiers (e.g., '%10s') and check the return value."
            )
        else:
            message = (
                f"Memory-unsafe function '{token}' found - "
                f"consider using '{replacement.text}' instead"
            )
        return [ctx.report(m.start() + 1, WARNING, message, excerpt=False)]
    return []


# ---------------------------------------------------------------------------
# Magic numbers / line length
# ---------------------------------------------------------------------------

_OPERATOR_CHARS = "+-*/%=(<>"


def find_magic_number(code: str) -> int:
    """0-based offset of the first magic number on *code*, or -1.

    A number counts when the nearest non-blank character before it is an
    operator or ``(``.  Numbers after ``{`` or ``,`` (aggregate
    initializers, argument lists) and inside literals are ignored.
    """
    prev = ""
    quote = ""
    i = 0
    n = len(code)
    while i < n:
        ch = code[i]
        if quote:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = ""
                prev = ch
            i += 1
            continue
        if ch in "\"'":
            quote = ch
            i += 1
            continue
        if ch.isdigit():
            if prev and prev in _OPERATOR_CHARS:
                return i
            while i < n and (code[i].isalnum() or code[i] in "._"):
                i += 1
            prev = code[i - 1]
            continue
        if not ch.isspace():
            prev = ch
        i += 1
    return -1


def check_magic_numbers(ctx: LineContext) -> list[Diagnostic]:
    pos = find_magic_number(ctx.code)
    if pos < 0:
        return []
    return [ctx.report(pos + 1, STYLE, "Magic number found. Consider using a named constant.")]


def check_line_length(ctx: LineContext) -> list[Diagnostic]:
    limit = ctx.line_length
    if len(ctx.raw) <= limit:
        return []
    return [ctx.report(limit + 1, STYLE, "Line exceeds maximum length.")]

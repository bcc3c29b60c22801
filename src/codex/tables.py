"""tables.py - Keyword, function and header lookup tables.

These tables are data, not logic: the rule checkers only ever see them
through a :class:`RuleTables` bundle, so callers (and tests) can swap in
their own tables without touching the checkers.

Replacement suggestions are stored as ``keyword -> Replacement`` so a
keyword and its suggestion can never drift out of step.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Replacement:
    """Suggested portable replacement for a keyword or function."""

    text: str = ""
    has_replacement: bool = True


_NO_EQUIVALENT = Replacement("", has_replacement=False)


@dataclass(frozen=True)
class VendorTable:
    """Reserved words one compiler mode refuses.

    ``prefixes`` match any token starting with the prefix (``__builtin_``
    covers every GCC builtin).
    """

    name: str
    label: str
    keywords: frozenset[str]
    prefixes: tuple[str, ...] = ()

    def matches(self, token: str) -> bool:
        return token in self.keywords or any(token.startswith(p) for p in self.prefixes)


# ---------------------------------------------------------------------------
# Compiler keywords -> NDK <clib/compiler-specific.h> universal macros
# ---------------------------------------------------------------------------

UNIVERSAL_REPLACEMENTS: dict[str, Replacement] = {
    "__saveds": Replacement("__SAVE_DS__"),
    "__save_ds": Replacement("__SAVE_DS__"),
    "__asm": Replacement("__ASM__"),
    "__reg": Replacement("__REG__"),
    "__stdargs": Replacement("__STDARGS__"),
    "__far": Replacement("__FAR__"),
    "__interrupt": Replacement("__INTERRUPT__"),
    "__amigainterrupt": Replacement("__INTERRUPT__"),
    "__chip": Replacement("__CHIP__"),
    "__fast": Replacement("__FAST__"),
    "__stkargs": Replacement("__STDARGS__"),
    "__attribute__": _NO_EQUIVALENT,
    "__builtin_expect": _NO_EQUIVALENT,
}

# GCC extensions no Amiga compiler other than GCC understands.
_GCC_ONLY = frozenset({"__attribute__", "__volatile__", "__const__", "__restrict__"})

SASC_TABLE = VendorTable(
    name="sasc",
    label="SAS/C",
    keywords=frozenset({"__amigainterrupt", "__stkargs"}) | _GCC_ONLY,
    prefixes=("__builtin_",),
)

VBCC_TABLE = VendorTable(
    name="vbcc",
    label="VBCC",
    keywords=frozenset({"__saveds", "__save_ds", "__stkargs"}) | _GCC_ONLY,
    prefixes=("__builtin_",),
)

# Non-universal words from the NDK's compiler-specific.h.
_NDK_RESERVED = frozenset({"__saveds", "__save_ds", "__stkargs", "__amigainterrupt"})

DICE_TABLE = VendorTable(name="dice", label="DICE", keywords=_NDK_RESERVED)

NDK_TABLE = VendorTable(name="ndk", label="the NDK", keywords=_NDK_RESERVED)

# ---------------------------------------------------------------------------
# C89 / C99 language surface
# ---------------------------------------------------------------------------

C99_KEYWORDS = ("inline", "restrict", "_Bool", "_Complex", "_Imaginary", "typeof")

C99_STDLIB_FUNCTIONS = frozenset({
    # <stdio.h> / <string.h>
    "snprintf", "vsnprintf", "strdup", "strndup", "strnlen", "strlcpy", "strlcat",
    "asprintf", "vasprintf", "open_memstream", "fmemopen", "getline", "getdelim",
    "strtok_r", "strerror_r", "memset_s", "strcpy_s", "strcat_s", "strncpy_s",
    "strncat_s", "strlen_s", "strtok_s",
    # <math.h>
    "round", "lround", "llround", "trunc", "remainder", "fma", "nan",
    # <stdlib.h>
    "atoll", "strtof", "strtold", "llabs",
    # <inttypes.h>
    "strtoimax", "strtoumax",
})

C99_HEADERS = (
    "<stdint.h>", "<stdbool.h>", "<complex.h>", "<tgmath.h>", "<fenv.h>",
    "<inttypes.h>", "<wchar.h>", "<wctype.h>", "<uchar.h>", "<threads.h>",
    "<stdatomic.h>", "<stdnoreturn.h>", "<stdalign.h>", "<stdbit.h>",
)

# ---------------------------------------------------------------------------
# Function naming
# ---------------------------------------------------------------------------

STDLIB_FUNCTIONS = frozenset({
    "printf", "scanf", "malloc", "free", "strcpy", "strlen", "fopen", "fclose", "fgets",
    "fputs", "fread", "fwrite", "fseek", "ftell", "rewind", "feof", "ferror", "clearerr",
    "strcat", "strcmp", "strncmp", "strncpy", "strncat", "strchr", "strrchr", "strstr",
    "strtok", "strerror", "strdup", "strndup", "strnlen", "strlcpy", "strlcat",
    "sprintf", "vsprintf", "snprintf", "vsnprintf", "sscanf", "fscanf",
    "calloc", "realloc", "memcpy", "memmove", "memcmp", "memset", "memchr",
    "abs", "labs", "llabs", "div", "ldiv", "lldiv", "rand", "srand",
    "atoi", "atol", "atoll", "strtol", "strtoul", "strtoll", "strtoull",
    "exit", "abort", "atexit", "system", "getenv", "setenv", "unsetenv",
    "time", "ctime", "gmtime", "localtime", "mktime", "strftime", "asctime",
    "isalpha", "isdigit", "isalnum", "isspace", "isupper", "islower", "toupper", "tolower",
    "sin", "cos", "tan", "asin", "acos", "atan", "atan2", "sinh", "cosh", "tanh",
    "exp", "log", "log10", "pow", "sqrt", "ceil", "floor", "fabs", "fmod",
    "setjmp", "longjmp", "signal", "raise", "qsort", "bsearch", "main",
})

AMIGA_FUNCTIONS = frozenset({
    "OpenLibrary", "CloseLibrary", "AllocMem", "FreeMem", "CreateMsgPort", "DeleteMsgPort",
    "DoIO", "OpenDevice", "CloseDevice", "ReadArgs", "Open", "Close", "Read", "Write",
})

# ---------------------------------------------------------------------------
# Amiga type conventions: (regex, category, message), first match wins.
# More specific spellings come before the general ones.
# ---------------------------------------------------------------------------

PLATFORM_TYPE_HINTS: tuple[tuple[str, str, str], ...] = (
    (r"\bconst\s+char\s*\*", "WARNING", "Use Amiga types (CONST_STRPTR) instead of const char*"),
    (r"\bunsigned\s+char\s*\*", "WARNING", "Use Amiga types (STRPTR) instead of unsigned char* for strings"),
    (r"\bunsigned\s+(?:long|char|short|int)\b", "STYLE",
     "Use Amiga primitive types (ULONG, UBYTE, UWORD) instead of standard C types"),
    (r"\bchar\s*\*", "WARNING", "Use Amiga types (UBYTE* or STRPTR) instead of char*"),
    (r"\blong\s", "WARNING", "Use Amiga types (LONG) instead of long"),
    (r"\bint\s", "WARNING", "Use Amiga types (ULONG) instead of int"),
    (r"\bshort\s", "WARNING", "Use Amiga types (WORD) instead of short"),
    (r"\bUSHORT\b", "WARNING", "USHORT is deprecated - use UWORD instead"),
    (r"\bSHORT\b", "WARNING", "SHORT is deprecated - use WORD instead"),
    (r"\bUCOUNT\b", "WARNING", "UCOUNT is deprecated - use UWORD instead"),
    (r"\bCOUNT\b", "WARNING", "COUNT is deprecated - use WORD instead"),
    (r"\bCPTR\b", "WARNING", "CPTR is deprecated - use ULONG instead"),
    (r"\b(?:LONG|WORD|BYTE)BITS\b", "WARNING",
     "LONGBITS/WORDBITS/BYTEBITS are for bit manipulation - consider if you really need this"),
    (r"\bRPTR\b", "WARNING", "RPTR is for relative pointers - consider if you really need this"),
    (r"\bfloat\s", "WARNING", "Use Amiga types (FLOAT) instead of float"),
    (r"\bdouble\s", "WARNING", "Use Amiga types (DOUBLE) instead of double"),
    (r"\bbool\s", "WARNING", "Use Amiga types (BOOL) instead of bool"),
    (r"\bvoid\s*\*", "WARNING", "Consider using Amiga types (APTR) instead of void* for untyped pointers"),
)

# ---------------------------------------------------------------------------
# Memory safety
# ---------------------------------------------------------------------------

MEMSAFE_REPLACEMENTS: dict[str, Replacement] = {
    # Buffer overflow prone
    "strcpy": Replacement("strncpy"),
    "strcat": Replacement("strncat"),
    "sprintf": Replacement("snprintf"),
    "gets": Replacement("fgets"),
    "scanf": Replacement("check_return_and_width"),
    "fscanf": Replacement("check_return_and_width"),
    "sscanf": Replacement("check_return_and_width"),
    "strtok": Replacement("strtok_r"),
    "strerror": Replacement("strerror_r"),
    "tmpnam": Replacement("tmpnam_r"),
    "mktemp": Replacement("mkstemp"),
    "realpath": Replacement("realpath"),
    "vsprintf": Replacement("vsnprintf"),
    # Poor error handling
    "atoi": Replacement("strtol"),
    "atol": Replacement("strtol"),
    "atof": Replacement("strtod"),
    # Thread-unsafe
    "getenv": Replacement("getenv_s or use mutex protection"),
}

# ---------------------------------------------------------------------------
# Forbid()/Permit() critical sections
# ---------------------------------------------------------------------------

DISABLE_CALL = "Forbid"
ENABLE_CALL = "Permit"


@dataclass(frozen=True)
class RuleTables:
    """Every lookup table the rule checkers consult."""

    universal_replacements: dict[str, Replacement] = field(
        default_factory=lambda: dict(UNIVERSAL_REPLACEMENTS)
    )
    vendors: dict[str, VendorTable] = field(
        default_factory=lambda: {
            t.name: t for t in (SASC_TABLE, VBCC_TABLE, DICE_TABLE, NDK_TABLE)
        }
    )
    c99_keywords: tuple[str, ...] = C99_KEYWORDS
    c99_functions: frozenset[str] = C99_STDLIB_FUNCTIONS
    c99_headers: tuple[str, ...] = C99_HEADERS
    stdlib_functions: frozenset[str] = STDLIB_FUNCTIONS
    platform_functions: frozenset[str] = AMIGA_FUNCTIONS
    platform_type_hints: tuple[tuple[str, str, str], ...] = PLATFORM_TYPE_HINTS
    memsafe_replacements: dict[str, Replacement] = field(
        default_factory=lambda: dict(MEMSAFE_REPLACEMENTS)
    )
    disable_call: str = DISABLE_CALL
    enable_call: str = ENABLE_CALL

    def universal_replacement(self, keyword: str) -> Replacement:
        """Replacement for *keyword*; unknown keywords have none."""
        return self.universal_replacements.get(keyword, _NO_EQUIVALENT)


DEFAULT_TABLES = RuleTables()

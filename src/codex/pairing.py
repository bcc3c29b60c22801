"""pairing.py - Forbid()/Permit() critical-section tracking.

Exec's ``Forbid()`` stops task switching until the matching
``Permit()``.  Every ``Forbid()`` must be balanced by a ``Permit()``
within a few lines.  The tracker records what it sees on each line in
:class:`~codex.state.ParseState` and validates the totals once the file
has been read.
"""

from __future__ import annotations

import re
from functools import lru_cache

from codex.context import LineContext
from codex.diagnostics import WARNING, Diagnostic
from codex.state import ParseState

# Longest allowed distance, in lines, from Forbid() to its Permit().
MAX_PAIR_SPAN = 5


@lru_cache(maxsize=None)
def _call_re(name: str) -> re.Pattern[str]:
    return re.compile(rf"\b{re.escape(name)}\s*\(")


def find_call(code: str, name: str) -> int:
    """0-based offset of the first ``name(`` / ``name (`` call, or -1."""
    m = _call_re(name).search(code)
    return m.start() if m else -1


def _on_disable(ctx: LineContext, column: int) -> Diagnostic:
    state = ctx.state
    name = ctx.tables.disable_call
    partner = ctx.tables.enable_call
    state.forbid_count += 1
    if state.forbid_active:
        return ctx.report(
            column,
            WARNING,
            f"{name}() called without matching {partner}() from previous {name}()",
        )
    state.forbid_active = True
    state.forbid_line = ctx.line_num
    return ctx.report(column, WARNING, f"{name}() usage detected")


def _on_enable(ctx: LineContext, column: int) -> Diagnostic | None:
    state = ctx.state
    name = ctx.tables.enable_call
    partner = ctx.tables.disable_call
    state.permit_count += 1
    if not state.forbid_active:
        return ctx.report(column, WARNING, f"{name}() called without matching {partner}()")

    diag = None
    if ctx.line_num - state.forbid_line > MAX_PAIR_SPAN:
        diag = ctx.report(
            column,
            WARNING,
            f"Too many lines (>{MAX_PAIR_SPAN}) between {partner}() and {name}()",
        )
    state.permit_line = ctx.line_num
    state.forbid_active = False
    return diag


def check_pairing(ctx: LineContext) -> list[Diagnostic]:
    """Track Forbid()/Permit() calls on one line.

    When both calls appear on the same line they are handled in textual
    order.
    """
    code = ctx.code
    events = []
    disable_pos = find_call(code, ctx.tables.disable_call)
    if disable_pos >= 0:
        events.append((disable_pos, _on_disable))
    enable_pos = find_call(code, ctx.tables.enable_call)
    if enable_pos >= 0:
        events.append((enable_pos, _on_enable))

    results: list[Diagnostic] = []
    for pos, handler in sorted(events, key=lambda e: e[0]):
        diag = handler(ctx, pos + 1)
        if diag is not None:
            results.append(diag)
    return results


def finalize_pairing(
    file: str,
    state: ParseState,
    disable_call: str = "Forbid",
    enable_call: str = "Permit",
) -> list[Diagnostic]:
    """End-of-file validation of the Forbid()/Permit() totals."""
    results: list[Diagnostic] = []
    if state.forbid_count == 0 and state.permit_count == 0:
        return results

    if state.forbid_count != state.permit_count:
        if state.permit_count == 0:
            results.append(
                Diagnostic(
                    file,
                    state.forbid_line,
                    1,
                    WARNING,
                    f"{disable_call}() used without matching {enable_call}()",
                )
            )
        else:
            results.append(
                Diagnostic(
                    file,
                    1,
                    1,
                    WARNING,
                    f"Mismatched {disable_call}()/{enable_call}() pairs: count mismatch",
                )
            )

    if state.forbid_active:
        results.append(
            Diagnostic(
                file,
                state.forbid_line,
                1,
                WARNING,
                f"File ends with active {disable_call}() without matching {enable_call}()",
            )
        )
    return results

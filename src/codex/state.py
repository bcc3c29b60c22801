"""state.py - Per-file parse state shared by the scanner and trackers."""

from __future__ import annotations

from dataclasses import dataclass, field

# Max nesting depth for { }; deeper blocks are not tracked.
MAX_DEPTH = 32


@dataclass
class ParseState:
    """Cross-line context for one source file.

    A fresh instance is created for every file and discarded once the
    end-of-file checks have run.
    """

    in_multiline_comment: bool = False

    # Declaration placement
    brace_depth: int = 0
    statement_seen: list[bool] = field(default_factory=lambda: [False] * MAX_DEPTH)

    # Forbid()/Permit() pairing
    forbid_active: bool = False
    forbid_line: int = 0
    permit_line: int = 0
    forbid_count: int = 0
    permit_count: int = 0

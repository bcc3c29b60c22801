"""modes.py - Validation modes and their dependency rules.

Users pick modes on the command line or in ``codex.toml``; some modes
imply or exclude others (SAS/C is C89-only, VBCC is C99, DICE needs the
NDK checks, ...).  :func:`resolve_modes` turns the requested set into the
effective one and explains every change it made.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

MODE_NAMES = ("amiga", "ndk", "c89", "c99", "sasc", "vbcc", "dice", "memsafe")

_DISPLAY_NAMES = {
    "amiga": "Amiga",
    "ndk": "NDK",
    "c89": "C89",
    "c99": "C99",
    "sasc": "SAS/C",
    "vbcc": "VBCC",
    "dice": "DICE",
    "memsafe": "MEMSAFE",
}

# Vendor checks in dispatch order.
VENDOR_MODES = ("sasc", "vbcc", "dice", "ndk")


@dataclass(frozen=True)
class Modes:
    """Effective set of validation modes for a run."""

    c89: bool = False
    c99: bool = False
    amiga: bool = False
    ndk: bool = False
    sasc: bool = False
    vbcc: bool = False
    dice: bool = False
    memsafe: bool = False
    compiler_compat: bool = False
    quiet: bool = False

    def active_names(self) -> list[str]:
        """Display names of the enabled validation modes, in canonical order."""
        return [_DISPLAY_NAMES[name] for name in MODE_NAMES if getattr(self, name)]

    def enabled_vendors(self) -> list[str]:
        """Vendor keyword checks to run, in dispatch order."""
        if not self.compiler_compat:
            return []
        return [name for name in VENDOR_MODES if getattr(self, name)]


def modes_from_names(names: list[str] | tuple[str, ...], quiet: bool = False) -> Modes:
    """Build a :class:`Modes` from mode names such as ``["c99", "vbcc"]``.

    Raises:
        ValueError: if a name is not one of :data:`MODE_NAMES`.
    """
    flags: dict[str, bool] = {}
    for raw in names:
        name = raw.strip().lower()
        if name not in MODE_NAMES:
            raise ValueError(f"Unknown mode {raw!r} (valid: {', '.join(MODE_NAMES)})")
        flags[name] = True
    return Modes(quiet=quiet, **flags)


def resolve_modes(requested: Modes) -> tuple[Modes, list[str]]:
    """Apply the mode dependency rules.

    Returns the effective modes and a list of human-readable notices
    describing overrides and implied modes.
    """
    m = requested
    notices: list[str] = []

    if m.sasc:
        if m.c99:
            notices.append("Warning: SAS/C mode overrides C99 mode (SAS/C is C89-only)")
        m = replace(m, c89=True, c99=False, compiler_compat=True)
    if m.vbcc:
        if m.c89:
            notices.append("Warning: VBCC mode overrides C89 mode (VBCC supports C99)")
        m = replace(m, c99=True, c89=False, compiler_compat=True)
    if m.amiga:
        if not m.ndk:
            notices.append("Info: Amiga mode enables NDK validation")
        m = replace(m, ndk=True, compiler_compat=True)
    if m.dice:
        if not m.c89:
            notices.append("Info: DICE mode enables C89 validation")
        if not m.ndk:
            notices.append("Info: DICE mode enables NDK validation")
        m = replace(m, c89=True, ndk=True, compiler_compat=True)
    if m.ndk:
        m = replace(m, compiler_compat=True)
    if m.memsafe:
        if not m.c89:
            notices.append("Info: MEMSAFE mode enables C89 validation")
        m = replace(m, c89=True)

    if not m.c89 and not m.c99:
        m = replace(m, c89=True)

    return m, notices

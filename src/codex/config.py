"""Project configuration loader for codex.

Reads an optional ``codex.toml`` so that a project can pin its
validation modes and limits instead of repeating command-line flags::

    [codex]
    modes = ["amiga", "c89"]
    line_length = 100
    max_diagnostics = 500
    quiet = false

The file is searched for from the current directory upward, the same
way ``git`` locates ``.git/``.  Command-line flags are merged on top of
whatever the file provides.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from codex.context import DEFAULT_LINE_LENGTH
from codex.diagnostics import MAX_DIAGNOSTICS
from codex.modes import MODE_NAMES

CONFIG_NAME = "codex.toml"


@dataclass
class LintConfig:
    """Settings for one analysis run."""

    root: Path | None = None
    modes: list[str] = field(default_factory=list)
    line_length: int = DEFAULT_LINE_LENGTH
    max_diagnostics: int = MAX_DIAGNOSTICS
    quiet: bool = False


def _find_root(start: Path | None = None) -> Path | None:
    """Walk up from *start* (or cwd) to the first directory holding codex.toml."""
    candidate = (start or Path.cwd()).resolve()
    while True:
        if (candidate / CONFIG_NAME).is_file():
            return candidate
        if candidate == candidate.parent:
            return None
        candidate = candidate.parent


def _positive_int(section: dict[str, Any], key: str, default: int) -> int:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"{CONFIG_NAME}: '{key}' must be a positive integer, got {value!r}")
    return value


def parse_config(raw: dict[str, Any], root: Path | None = None) -> LintConfig:
    """Validate the ``[codex]`` table of an already-parsed TOML document."""
    section = raw.get("codex", {})
    if not isinstance(section, dict):
        raise ValueError(f"{CONFIG_NAME}: [codex] must be a table")

    modes = section.get("modes", [])
    if not isinstance(modes, list) or not all(isinstance(m, str) for m in modes):
        raise ValueError(f"{CONFIG_NAME}: 'modes' must be a list of strings")
    unknown = [m for m in modes if m.strip().lower() not in MODE_NAMES]
    if unknown:
        raise ValueError(
            f"{CONFIG_NAME}: unknown mode(s) {', '.join(unknown)} "
            f"(valid: {', '.join(MODE_NAMES)})"
        )

    quiet = section.get("quiet", False)
    if not isinstance(quiet, bool):
        raise ValueError(f"{CONFIG_NAME}: 'quiet' must be true or false")

    return LintConfig(
        root=root,
        modes=[m.strip().lower() for m in modes],
        line_length=_positive_int(section, "line_length", DEFAULT_LINE_LENGTH),
        max_diagnostics=_positive_int(section, "max_diagnostics", MAX_DIAGNOSTICS),
        quiet=quiet,
    )


def load_config(root: Path | None = None, path: Path | None = None) -> LintConfig:
    """Load codex.toml.

    Args:
        root: Directory to start the upward search from.  Defaults to cwd.
        path: Explicit config file; skips the search.

    Returns the defaults when no file is found by searching.

    Raises:
        FileNotFoundError: if an explicit *path* does not exist.
        ValueError: if the file is not valid TOML or holds bad values.
    """
    if path is not None:
        if not path.is_file():
            raise FileNotFoundError(f"Config not found: {path}")
        toml_path = path
    else:
        found = _find_root(root)
        if found is None:
            return LintConfig()
        toml_path = found / CONFIG_NAME

    try:
        with open(toml_path, "rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"{toml_path}: {e}") from e

    return parse_config(raw, root=toml_path.parent)

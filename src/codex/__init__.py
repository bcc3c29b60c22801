"""codex - line-oriented static analyzer for C89/C99 and Amiga C sources.

Scans C files one line at a time, stripping comments with a small state
machine, and runs an ordered pipeline of rule checkers covering language
standard conformance, Amiga compiler keyword compatibility, platform
naming conventions, memory-unsafe library calls, declaration placement
and Forbid()/Permit() pairing.
"""

__version__ = "0.1.0"

"""Compiler configuration."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CompilerConfig:
    """Options for one compilation pass."""

    strict: bool = True  # unexpected node kinds raise instead of being skipped
    cascade: bool = True  # run cascade inheritance after building

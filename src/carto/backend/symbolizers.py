"""Symbolizer grouping: which rendering family each attribute belongs to.

Backends configure one symbolizer per family (line, polygon, text, ...)
from the attributes sharing its prefix.  Prefixes are matched longest
first, so ``line-pattern-file`` belongs to ``line-pattern`` and not to
``line``.
"""

from __future__ import annotations

from carto.errors import GenerationError
from carto.model.value import Value
from carto.stylesheet.model import Rule

__all__ = ["SYMBOLIZER_PREFIXES", "group_symbolizers", "symbolizer_for"]

SYMBOLIZER_PREFIXES: tuple[str, ...] = tuple(
    sorted(
        (
            "polygon-pattern-",
            "line-pattern-",
            "polygon-",
            "line-",
            "marker-",
            "point-",
            "raster-",
            "building-",
            "text-",
            "shield-",
        ),
        key=len,
        reverse=True,
    )
)


def symbolizer_for(key: str) -> str:
    """Return the symbolizer family for an attribute key, e.g. ``"line"``."""
    for prefix in SYMBOLIZER_PREFIXES:
        if key.startswith(prefix) and len(key) > len(prefix):
            return prefix[:-1]
    raise GenerationError(f"Unknown key: {key}", key=key)


def group_symbolizers(rule: Rule) -> dict[str, dict[str, Value]]:
    """Split a rule's attributes by symbolizer family, in first-seen order."""
    groups: dict[str, dict[str, Value]] = {}
    for key, value in rule.attrs.items():
        groups.setdefault(symbolizer_for(key), {})[key] = value
    return groups

"""Base protocol for consumers of a compiled stylesheet."""

from __future__ import annotations

from typing import Protocol

from carto.stylesheet.model import Rule, Stylesheet


class StylesheetVisitor(Protocol):
    """Walks a compiled stylesheet; rendering backends implement this."""

    def visit_stylesheet(self, stylesheet: Stylesheet) -> None: ...

    def visit_rule(self, rule: Rule) -> None: ...

"""Text dumper: renders a compiled stylesheet back into MSS-like source.

Output example:
    Map {
        srs: "+proj=merc";
    }

    .roads[zoom>10] {
        line-color: #ff0000;
        line-width: 2;
    }
"""

from __future__ import annotations

import io
from typing import TextIO

from carto.stylesheet.model import Rule, Stylesheet

__all__ = ["Dumper", "dump"]

_INDENT = "    "


class Dumper:
    """Write each rule as ``selector { key: value; }`` with keys sorted."""

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream

    def visit_stylesheet(self, stylesheet: Stylesheet) -> None:
        if stylesheet.map_style:
            self.stream.write("Map {\n")
            for key in sorted(stylesheet.map_style):
                value = stylesheet.map_style[key]
                self.stream.write(f"{_INDENT}{key}: {value.render()};\n")
            self.stream.write("}\n\n")
        for rule in stylesheet.rules:
            rule.accept(self)

    def visit_rule(self, rule: Rule) -> None:
        self.stream.write(f"{rule.selector_name or '*'} {{\n")
        for key in sorted(rule.attrs):
            self.stream.write(f"{_INDENT}{key}: {rule.attrs[key].render()};\n")
        self.stream.write("}\n\n")


def dump(stylesheet: Stylesheet) -> str:
    """Return the text dump of *stylesheet*."""
    buffer = io.StringIO()
    stylesheet.accept(Dumper(buffer))
    return buffer.getvalue()

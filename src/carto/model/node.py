"""Node annotations: semantic node kinds and source locations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class NodeKind(Enum):
    """Semantic kind attached to every node of the annotated tree."""

    # statements
    STYLESHEET = "stylesheet"
    VARIABLE = "variable"
    MAP_STYLE = "map-style"
    STYLE = "style"
    MIXIN = "mixin"
    COMMENT = "comment"
    ATTRIBUTE = "attribute"

    # filters
    FILTER = "filter"
    FILTER_EQ = "filter-eq"
    FILTER_LT = "filter-lt"
    FILTER_LE = "filter-le"
    FILTER_GT = "filter-gt"
    FILTER_GE = "filter-ge"
    FILTER_NEQ = "filter-neq"

    # expressions
    EXPRESSION = "expression"
    ADD = "add"
    SUB = "sub"
    MULT = "mult"
    DIV = "div"
    FUNCTION = "function"

    # literals
    VALUE = "value"
    NUMBER = "number"
    STRING = "string"
    KEYWORD = "keyword"
    COLOR = "color"


@dataclass(frozen=True)
class SourceLocation:
    """Position of a node in the source it was parsed from."""

    file: str = "<unknown>"
    line: int = 0
    column: int = 0

    @property
    def is_known(self) -> bool:
        return self.line > 0

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"


UNKNOWN_LOCATION = SourceLocation()

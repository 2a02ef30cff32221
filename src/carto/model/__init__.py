"""Carto model layer -- public type re-exports."""

from carto.model.node import UNKNOWN_LOCATION, NodeKind, SourceLocation
from carto.model.value import NIL, Color, Value, ValueType

__all__ = [
    # node
    "NodeKind",
    "SourceLocation",
    "UNKNOWN_LOCATION",
    # value
    "Color",
    "Value",
    "ValueType",
    "NIL",
]

from carto.backend.base import StylesheetVisitor
from carto.backend.dumper import Dumper, dump
from carto.backend.symbolizers import SYMBOLIZER_PREFIXES, group_symbolizers, symbolizer_for

__all__ = [
    "StylesheetVisitor",
    "Dumper",
    "dump",
    "SYMBOLIZER_PREFIXES",
    "group_symbolizers",
    "symbolizer_for",
]

"""Carto: semantic core of the MSS map stylesheet compiler."""
from __future__ import annotations

from carto.compiler import compile_stylesheet
from carto.config import CompilerConfig
from carto.environment import Environment
from carto.errors import CartoError
from carto.model import NIL, Color, NodeKind, SourceLocation, Value, ValueType
from carto.stylesheet import Rule, Stylesheet, parse_stylesheet

__version__ = "0.1.0"

__all__ = [
    "CartoError",
    "Color",
    "CompilerConfig",
    "Environment",
    "NIL",
    "NodeKind",
    "Rule",
    "SourceLocation",
    "Stylesheet",
    "Value",
    "ValueType",
    "compile_stylesheet",
    "parse_stylesheet",
]

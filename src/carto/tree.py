"""Annotated tree input: builders and a loader for the parser's JSON form.

The compiler consumes a tree of :class:`~carto.model.value.Value` nodes that
an external parser has already annotated with node kinds and locations.
The builders here produce that tree directly:

    stylesheet(
        variable("w", expression(add(3, 2))),
        style(".foo", [
            attribute("line-width", 2),
            style(".bar", [attribute("line-width", ref("w"))]),
        ]),
    )

``loads`` reads the same tree from JSON, one object per node:

    {"kind": "attribute", "location": {"line": 3, "column": 5},
     "children": [{"kind": "string", "value": "line-width"},
                  {"kind": "number", "value": 2}]}
"""

from __future__ import annotations

import json
from typing import Any, Iterable

from carto.errors import InvalidNodeKindError, TypeMismatchError
from carto.model.node import UNKNOWN_LOCATION, NodeKind, SourceLocation
from carto.model.value import Color, Value

__all__ = [
    "add",
    "attribute",
    "binary",
    "call",
    "color",
    "comment",
    "div",
    "expression",
    "filter_clause",
    "filters",
    "from_dict",
    "keyword",
    "literal",
    "loads",
    "map_style",
    "mixin",
    "mult",
    "number",
    "ref",
    "selector",
    "string",
    "style",
    "stylesheet",
    "sub",
    "variable",
]

_EMPTY = Value(())

_OPERATOR_KINDS = {
    "+": NodeKind.ADD,
    "-": NodeKind.SUB,
    "*": NodeKind.MULT,
    "/": NodeKind.DIV,
}

_FILTER_KINDS = {
    "=": NodeKind.FILTER_EQ,
    "<": NodeKind.FILTER_LT,
    "<=": NodeKind.FILTER_LE,
    ">": NodeKind.FILTER_GT,
    ">=": NodeKind.FILTER_GE,
    "!=": NodeKind.FILTER_NEQ,
}


def _at(location: SourceLocation | None) -> SourceLocation:
    return location if location is not None else UNKNOWN_LOCATION


# ---------------------------------------------------------------------------
# Literals
# ---------------------------------------------------------------------------


def literal(obj: Any, location: SourceLocation | None = None) -> Value:
    """Wrap plain Python data as a node; Values pass through unchanged."""
    if isinstance(obj, Value):
        return obj
    if obj is None or isinstance(obj, bool):
        return Value(obj, location=_at(location))
    if isinstance(obj, (int, float)):
        return number(obj, location)
    if isinstance(obj, str):
        return string(obj, location)
    if isinstance(obj, Color):
        return color(obj, location=location)
    if isinstance(obj, (list, tuple)):
        return Value(tuple(literal(item, location) for item in obj), location=_at(location))
    raise TypeError(f"Cannot build a node from {obj!r}")


def number(n: float, location: SourceLocation | None = None) -> Value:
    """Numeric literals are doubles."""
    return Value(float(n), kind=NodeKind.NUMBER, location=_at(location))


def string(s: str, location: SourceLocation | None = None) -> Value:
    return Value(s, kind=NodeKind.STRING, location=_at(location))


def keyword(s: str, location: SourceLocation | None = None) -> Value:
    return Value(s, kind=NodeKind.KEYWORD, location=_at(location))


def color(*args: Any, location: SourceLocation | None = None) -> Value:
    """``color("#f00")``, ``color(Color(...))`` or ``color(r, g, b[, a])``."""
    if len(args) == 1 and isinstance(args[0], Color):
        value = args[0]
    elif len(args) == 1 and isinstance(args[0], str):
        value = Color.from_hex(args[0])
    else:
        value = Color(*(int(a) for a in args))
    return Value(value, kind=NodeKind.COLOR, location=_at(location))


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


def ref(name: str, location: SourceLocation | None = None) -> Value:
    """A reference to variable ``@name``."""
    return Value((Value(name.lstrip("@")),), kind=NodeKind.VARIABLE, location=_at(location))


def expression(expr: Any, location: SourceLocation | None = None) -> Value:
    return Value((literal(expr),), kind=NodeKind.EXPRESSION, location=_at(location))


def binary(op: str | NodeKind, lhs: Any, rhs: Any, location: SourceLocation | None = None) -> Value:
    kind = op if isinstance(op, NodeKind) else _OPERATOR_KINDS[op]
    return Value((literal(lhs), literal(rhs)), kind=kind, location=_at(location))


def add(lhs: Any, rhs: Any, location: SourceLocation | None = None) -> Value:
    return binary(NodeKind.ADD, lhs, rhs, location)


def sub(lhs: Any, rhs: Any, location: SourceLocation | None = None) -> Value:
    return binary(NodeKind.SUB, lhs, rhs, location)


def mult(lhs: Any, rhs: Any, location: SourceLocation | None = None) -> Value:
    return binary(NodeKind.MULT, lhs, rhs, location)


def div(lhs: Any, rhs: Any, location: SourceLocation | None = None) -> Value:
    return binary(NodeKind.DIV, lhs, rhs, location)


def call(name: str, *args: Any, location: SourceLocation | None = None) -> Value:
    items = (Value(name),) + tuple(literal(arg) for arg in args)
    return Value(items, kind=NodeKind.FUNCTION, location=_at(location))


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------


def variable(name: str, value: Any, location: SourceLocation | None = None) -> Value:
    """A definition ``@name: value;``."""
    items = (Value(name.lstrip("@")), literal(value))
    return Value(items, kind=NodeKind.VARIABLE, location=_at(location))


def attribute(key: str, value: Any, location: SourceLocation | None = None) -> Value:
    return Value((Value(key), literal(value)), kind=NodeKind.ATTRIBUTE, location=_at(location))


def map_style(
    settings: dict[str, Any] | Iterable[tuple[str, Any]],
    location: SourceLocation | None = None,
) -> Value:
    pairs = settings.items() if isinstance(settings, dict) else settings
    items = tuple(attribute(key, value, location) for key, value in pairs)
    return Value(items, kind=NodeKind.MAP_STYLE, location=_at(location))


def filter_clause(
    key: str, op: str | NodeKind, value: Any, location: SourceLocation | None = None
) -> Value:
    """One ``[key op value]`` clause; *op* is an operator or a node kind."""
    kind = op if isinstance(op, NodeKind) else _FILTER_KINDS[op]
    return Value((Value(key), literal(value)), kind=kind, location=_at(location))


def filters(*clauses: Value, location: SourceLocation | None = None) -> Value:
    return Value(clauses, kind=NodeKind.FILTER, location=_at(location))


def selector(
    name: str | None = None,
    attachment: str | None = None,
    filter: Value | None = None,
    location: SourceLocation | None = None,
) -> Value:
    """One selector group: ``name``, ``::attachment`` and ``[filters]``."""
    items = (
        Value(name, location=_at(location)) if name else _EMPTY,
        Value(attachment, location=_at(location)) if attachment else _EMPTY,
        filter if filter is not None else _EMPTY,
    )
    return Value(items, location=_at(location))


def style(
    selectors: str | Value | Iterable[str | Value],
    body: Iterable[Value],
    location: SourceLocation | None = None,
) -> Value:
    """A style block; plain strings are shorthand for name-only selectors."""
    if isinstance(selectors, (str, Value)):
        selectors = [selectors]
    groups = tuple(
        selector(s, location=location) if isinstance(s, str) else s for s in selectors
    )
    items = (Value(groups), Value(tuple(body)))
    return Value(items, kind=NodeKind.STYLE, location=_at(location))


def comment(text: str, location: SourceLocation | None = None) -> Value:
    return Value(text, kind=NodeKind.COMMENT, location=_at(location))


def mixin(name: str, location: SourceLocation | None = None) -> Value:
    return Value(name, kind=NodeKind.MIXIN, location=_at(location))


def stylesheet(*statements: Value, location: SourceLocation | None = None) -> Value:
    return Value(statements, kind=NodeKind.STYLESHEET, location=_at(location))


# ---------------------------------------------------------------------------
# JSON loader
# ---------------------------------------------------------------------------


def _location(raw: Any, file: str | None) -> SourceLocation:
    if raw is None:
        return SourceLocation(file=file) if file else UNKNOWN_LOCATION
    if isinstance(raw, (list, tuple)):
        line, column = raw
        return SourceLocation(file=file or "<unknown>", line=line, column=column)
    return SourceLocation(
        file=raw.get("file", file or "<unknown>"),
        line=raw.get("line", 0),
        column=raw.get("column", 0),
    )


def from_dict(data: Any, file: str | None = None) -> Value:
    """Build a node from the parser's JSON-shaped output.

    Objects carry ``kind``, ``location`` and either ``children`` or
    ``value``; bare JSON scalars and arrays are accepted as unannotated
    values.
    """
    if isinstance(data, list):
        return Value(tuple(from_dict(item, file) for item in data))
    if not isinstance(data, dict):
        return literal(data)

    location = _location(data.get("location"), file)
    kind_name = data.get("kind", NodeKind.VALUE.value)
    try:
        kind = NodeKind(kind_name)
    except ValueError:
        raise InvalidNodeKindError(str(kind_name), context="tree", location=location) from None

    if "children" in data:
        payload: Any = tuple(from_dict(child, file) for child in data["children"])
    else:
        raw = data.get("value")
        if kind is NodeKind.COLOR and isinstance(raw, str):
            try:
                payload = Color.from_hex(raw)
            except ValueError:
                raise TypeMismatchError(
                    f"Invalid color literal: {raw!r}", location=location
                ) from None
        elif isinstance(raw, (list, dict)):
            payload = from_dict(raw, file).data if isinstance(raw, list) else (from_dict(raw, file),)
        elif kind is NodeKind.NUMBER and isinstance(raw, int) and not isinstance(raw, bool):
            payload = float(raw)
        else:
            payload = raw
    return Value(payload, kind=kind, location=location)


def loads(text: str, file: str | None = None) -> Value:
    """Parse the JSON form of an annotated tree."""
    return from_dict(json.loads(text), file)

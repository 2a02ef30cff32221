"""Value model: the tagged, annotated value tree the compiler operates on.

A :class:`Value` is both a runtime value (nil, bool, int, double, string,
color or list) and a node of the annotated syntax tree: it carries the
semantic :class:`~carto.model.node.NodeKind` and the
:class:`~carto.model.node.SourceLocation` it was parsed from.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from carto.errors import TypeMismatchError
from carto.model.node import UNKNOWN_LOCATION, NodeKind, SourceLocation


class ValueType(Enum):
    """Runtime tag of a Value's payload."""

    NIL = "nil"
    BOOL = "bool"
    INT = "int"
    DOUBLE = "double"
    STRING = "string"
    COLOR = "color"
    LIST = "list"


@dataclass(frozen=True)
class Color:
    """An RGBA color with integer channels in [0, 255]."""

    r: int
    g: int
    b: int
    a: int = 255

    def __post_init__(self) -> None:
        for channel in self.channels:
            if not isinstance(channel, int) or not 0 <= channel <= 255:
                raise ValueError(f"Color channel out of range: {channel!r}")

    @property
    def channels(self) -> tuple[int, int, int, int]:
        return (self.r, self.g, self.b, self.a)

    @classmethod
    def from_hex(cls, raw: str) -> Color:
        """Parse ``#rgb``, ``#rrggbb`` or ``#rrggbbaa``."""
        digits = raw.strip().lstrip("#")
        if len(digits) == 3:
            digits = "".join(c * 2 for c in digits)
        if len(digits) not in (6, 8):
            raise ValueError(f"Invalid hex color: {raw!r}")
        try:
            channels = [int(digits[i : i + 2], 16) for i in range(0, len(digits), 2)]
        except ValueError:
            raise ValueError(f"Invalid hex color: {raw!r}") from None
        return cls(*channels)

    def to_hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"

    def __str__(self) -> str:
        if self.a == 255:
            return self.to_hex()
        alpha = round(self.a / 255, 3)
        return f"rgba({self.r}, {self.g}, {self.b}, {alpha:g})"


@dataclass(frozen=True)
class Value:
    """An immutable annotated value.

    Equality compares the payload only: ``kind`` and ``location`` are
    annotations, so the same literal written in two places compares equal.
    """

    data: Any = None
    kind: NodeKind = field(default=NodeKind.VALUE, compare=False)
    location: SourceLocation = field(default=UNKNOWN_LOCATION, compare=False)

    def __post_init__(self) -> None:
        if isinstance(self.data, list):
            object.__setattr__(self, "data", tuple(self.data))
        if isinstance(self.data, tuple):
            for item in self.data:
                if not isinstance(item, Value):
                    raise TypeError(f"List values must hold Value items, got {item!r}")
        elif not isinstance(self.data, (type(None), bool, int, float, str, Color)):
            raise TypeError(f"Unsupported value payload: {self.data!r}")

    # --- type tests -----------------------------------------------------------

    @property
    def type(self) -> ValueType:
        data = self.data
        if data is None:
            return ValueType.NIL
        if isinstance(data, bool):
            return ValueType.BOOL
        if isinstance(data, int):
            return ValueType.INT
        if isinstance(data, float):
            return ValueType.DOUBLE
        if isinstance(data, str):
            return ValueType.STRING
        if isinstance(data, Color):
            return ValueType.COLOR
        return ValueType.LIST

    @property
    def is_nil(self) -> bool:
        return self.data is None

    @property
    def is_number(self) -> bool:
        return self.type in (ValueType.INT, ValueType.DOUBLE)

    # --- structure ------------------------------------------------------------

    @property
    def children(self) -> tuple[Value, ...]:
        """Return the list items, or an empty tuple for scalars."""
        if isinstance(self.data, tuple):
            return self.data
        return ()

    @property
    def size(self) -> int:
        return len(self.children)

    @property
    def front(self) -> Value:
        return self._item(0)

    @property
    def back(self) -> Value:
        return self._item(-1)

    def _item(self, index: int) -> Value:
        items = self.children
        if not items:
            raise TypeMismatchError(
                f"Expected a non-empty list, got {self.type.value}", location=self.location
            )
        return items[index]

    # --- coercions ------------------------------------------------------------

    def as_str(self) -> str:
        if isinstance(self.data, str):
            return self.data
        raise self._mismatch("string")

    def as_float(self) -> float:
        if self.is_number:
            return float(self.data)  # type: ignore[arg-type]
        raise self._mismatch("number")

    def as_int(self) -> int:
        if self.is_number:
            return int(self.data)  # type: ignore[arg-type]
        raise self._mismatch("number")

    def as_bool(self) -> bool:
        if isinstance(self.data, bool):
            return self.data
        if isinstance(self.data, str) and self.data.lower() in ("true", "false"):
            return self.data.lower() == "true"
        raise self._mismatch("bool")

    def as_color(self) -> Color:
        """Coerce to a Color.

        Besides Color payloads this accepts hex strings and 3/4-element
        number lists annotated as colors.
        """
        if isinstance(self.data, Color):
            return self.data
        if isinstance(self.data, str) and self.data.startswith("#"):
            try:
                return Color.from_hex(self.data)
            except ValueError:
                raise self._mismatch("color") from None
        if self.kind is NodeKind.COLOR and self.size in (3, 4):
            if all(item.is_number for item in self.children):
                channels = [int(round(item.as_float())) for item in self.children]
                try:
                    return Color(*channels)
                except ValueError:
                    raise self._mismatch("color") from None
        raise self._mismatch("color")

    def as_list(self) -> list[Value]:
        if isinstance(self.data, tuple):
            return list(self.data)
        return [self]

    def to_python(self) -> Any:
        """Strip annotations, returning plain Python data."""
        if isinstance(self.data, tuple):
            return [item.to_python() for item in self.data]
        return self.data

    def _mismatch(self, expected: str) -> TypeMismatchError:
        return TypeMismatchError(
            f"Expected {expected}, got {self.type.value}", location=self.location
        )

    # --- rendering ------------------------------------------------------------

    def render(self) -> str:
        """Render the value the way it would be written in a stylesheet."""
        data = self.data
        if data is None:
            return "null"
        if isinstance(data, bool):
            return "true" if data else "false"
        if isinstance(data, float):
            if data.is_integer():
                return str(int(data))
            return repr(data)
        if isinstance(data, str):
            if self.kind is NodeKind.KEYWORD:
                return data
            return '"' + data.replace("\\", "\\\\").replace('"', '\\"') + '"'
        if isinstance(data, tuple):
            return ", ".join(item.render() for item in data)
        return str(data)


NIL = Value()

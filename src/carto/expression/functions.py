"""Built-in function registry: color manipulation and math helpers.

Functions are registered with a parameter signature; arguments are coerced
before the implementation runs, so implementations work on plain ``Color``
and ``float`` values and may return either.  Amounts are percentage points:
``lighten(@c, 10)`` raises lightness by 10%.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable

from carto.errors import TypeMismatchError
from carto.expression.colors import clamp_channel, from_hsla, to_hsla
from carto.model.node import NodeKind, SourceLocation
from carto.model.value import Color, Value

__all__ = ["BUILTINS", "BuiltinFunction", "FunctionRegistry"]

# Parameter kinds understood by BuiltinFunction.
COLOR = "color"
NUMBER = "number"


@dataclass(frozen=True)
class BuiltinFunction:
    """A named function paired with its parameter signature.

    ``required`` is the minimum argument count (defaults to all params);
    with ``variadic`` the last parameter kind repeats.
    """

    name: str
    params: tuple[str, ...]
    impl: Callable[..., Any]
    required: int | None = None
    variadic: bool = False

    def __call__(self, args: list[Value], location: SourceLocation) -> Value:
        required = len(self.params) if self.required is None else self.required
        too_many = not self.variadic and len(args) > len(self.params)
        if len(args) < required or too_many:
            raise TypeMismatchError(
                f"{self.name}() takes {self._arity()} argument(s), got {len(args)}",
                location=location,
            )
        converted = []
        for index, arg in enumerate(args):
            kind = self.params[min(index, len(self.params) - 1)]
            converted.append(_coerce(self.name, kind, arg, location))
        return _wrap(self.impl(*converted), location)

    def _arity(self) -> str:
        required = len(self.params) if self.required is None else self.required
        if self.variadic:
            return f"at least {required}"
        if required != len(self.params):
            return f"{required} to {len(self.params)}"
        return str(required)


def _coerce(name: str, kind: str, arg: Value, location: SourceLocation) -> Any:
    if kind == COLOR:
        if isinstance(arg.data, Color) or arg.kind is NodeKind.COLOR:
            return arg.as_color()
    elif kind == NUMBER:
        if arg.is_number:
            return arg.as_float()
    raise TypeMismatchError(
        f"{name}() expected a {kind} argument, got {arg.type.value}",
        location=arg.location if arg.location.is_known else location,
    )


def _wrap(result: Any, location: SourceLocation) -> Value:
    if isinstance(result, Color):
        return Value(result, kind=NodeKind.COLOR, location=location)
    return Value(float(result), kind=NodeKind.NUMBER, location=location)


class FunctionRegistry:
    """Registry of functions callable from expressions.

    Latest-wins on name collision.
    """

    def __init__(self) -> None:
        self._functions: dict[str, BuiltinFunction] = {}

    def register(self, function: BuiltinFunction) -> None:
        self._functions[function.name] = function

    def builtin(
        self, name: str, *params: str, required: int | None = None, variadic: bool = False
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator form of :meth:`register`."""

        def decorate(impl: Callable[..., Any]) -> Callable[..., Any]:
            self.register(BuiltinFunction(name, params, impl, required, variadic))
            return impl

        return decorate

    def get(self, name: str) -> BuiltinFunction | None:
        return self._functions.get(name)

    def names(self) -> list[str]:
        return list(self._functions)

    def __contains__(self, name: str) -> bool:
        return name in self._functions

    def copy(self) -> FunctionRegistry:
        registry = FunctionRegistry()
        registry._functions = dict(self._functions)
        return registry


BUILTINS = FunctionRegistry()


# ---------------------------------------------------------------------------
# Color constructors
# ---------------------------------------------------------------------------


@BUILTINS.builtin("rgb", NUMBER, NUMBER, NUMBER)
def _rgb(r: float, g: float, b: float) -> Color:
    return Color(clamp_channel(r), clamp_channel(g), clamp_channel(b))


@BUILTINS.builtin("rgba", NUMBER, NUMBER, NUMBER, NUMBER)
def _rgba(r: float, g: float, b: float, a: float) -> Color:
    return Color(clamp_channel(r), clamp_channel(g), clamp_channel(b), clamp_channel(a * 255))


@BUILTINS.builtin("hsl", NUMBER, NUMBER, NUMBER)
def _hsl(h: float, s: float, l: float) -> Color:
    return from_hsla(h, s / 100, l / 100)


@BUILTINS.builtin("hsla", NUMBER, NUMBER, NUMBER, NUMBER)
def _hsla(h: float, s: float, l: float, a: float) -> Color:
    return from_hsla(h, s / 100, l / 100, a)


# ---------------------------------------------------------------------------
# Color operations
# ---------------------------------------------------------------------------


@BUILTINS.builtin("lighten", COLOR, NUMBER)
def _lighten(color: Color, amount: float) -> Color:
    h, s, l, a = to_hsla(color)
    return from_hsla(h, s, l + amount / 100, a)


@BUILTINS.builtin("darken", COLOR, NUMBER)
def _darken(color: Color, amount: float) -> Color:
    h, s, l, a = to_hsla(color)
    return from_hsla(h, s, l - amount / 100, a)


@BUILTINS.builtin("saturate", COLOR, NUMBER)
def _saturate(color: Color, amount: float) -> Color:
    h, s, l, a = to_hsla(color)
    return from_hsla(h, s + amount / 100, l, a)


@BUILTINS.builtin("desaturate", COLOR, NUMBER)
def _desaturate(color: Color, amount: float) -> Color:
    h, s, l, a = to_hsla(color)
    return from_hsla(h, s - amount / 100, l, a)


@BUILTINS.builtin("greyscale", COLOR)
def _greyscale(color: Color) -> Color:
    h, _, l, a = to_hsla(color)
    return from_hsla(h, 0.0, l, a)


@BUILTINS.builtin("fadein", COLOR, NUMBER)
def _fadein(color: Color, amount: float) -> Color:
    return Color(color.r, color.g, color.b, clamp_channel(color.a + amount / 100 * 255))


@BUILTINS.builtin("fadeout", COLOR, NUMBER)
def _fadeout(color: Color, amount: float) -> Color:
    return Color(color.r, color.g, color.b, clamp_channel(color.a - amount / 100 * 255))


@BUILTINS.builtin("spin", COLOR, NUMBER)
def _spin(color: Color, degrees: float) -> Color:
    h, s, l, a = to_hsla(color)
    return from_hsla(h + degrees, s, l, a)


@BUILTINS.builtin("mix", COLOR, COLOR, NUMBER, required=2)
def _mix(first: Color, second: Color, weight: float = 50.0) -> Color:
    # Weighted by percentage of the first color, alpha difference included.
    p = min(max(weight, 0.0), 100.0) / 100
    w = p * 2 - 1
    alpha = (first.a - second.a) / 255
    if w * alpha == -1:
        w1 = (w + 1) / 2
    else:
        w1 = ((w + alpha) / (1 + w * alpha) + 1) / 2
    w2 = 1 - w1
    return Color(
        clamp_channel(first.r * w1 + second.r * w2),
        clamp_channel(first.g * w1 + second.g * w2),
        clamp_channel(first.b * w1 + second.b * w2),
        clamp_channel(first.a * p + second.a * (1 - p)),
    )


# ---------------------------------------------------------------------------
# Color accessors
# ---------------------------------------------------------------------------


@BUILTINS.builtin("hue", COLOR)
def _hue(color: Color) -> float:
    return round(to_hsla(color)[0])


@BUILTINS.builtin("saturation", COLOR)
def _saturation(color: Color) -> float:
    return round(to_hsla(color)[1] * 100)


@BUILTINS.builtin("lightness", COLOR)
def _lightness(color: Color) -> float:
    return round(to_hsla(color)[2] * 100)


@BUILTINS.builtin("alpha", COLOR)
def _alpha(color: Color) -> float:
    return color.a / 255


@BUILTINS.builtin("red", COLOR)
def _red(color: Color) -> float:
    return color.r


@BUILTINS.builtin("green", COLOR)
def _green(color: Color) -> float:
    return color.g


@BUILTINS.builtin("blue", COLOR)
def _blue(color: Color) -> float:
    return color.b


# ---------------------------------------------------------------------------
# Math helpers
# ---------------------------------------------------------------------------


@BUILTINS.builtin("round", NUMBER)
def _round(x: float) -> float:
    if not math.isfinite(x):
        return x
    return math.floor(x + 0.5)


@BUILTINS.builtin("ceil", NUMBER)
def _ceil(x: float) -> float:
    if not math.isfinite(x):
        return x
    return math.ceil(x)


@BUILTINS.builtin("floor", NUMBER)
def _floor(x: float) -> float:
    if not math.isfinite(x):
        return x
    return math.floor(x)


@BUILTINS.builtin("abs", NUMBER)
def _abs(x: float) -> float:
    return abs(x)


@BUILTINS.builtin("sqrt", NUMBER)
def _sqrt(x: float) -> float:
    if x < 0:
        return math.nan
    return math.sqrt(x)


@BUILTINS.builtin("min", NUMBER, variadic=True)
def _min(*values: float) -> float:
    return min(values)


@BUILTINS.builtin("max", NUMBER, variadic=True)
def _max(*values: float) -> float:
    return max(values)

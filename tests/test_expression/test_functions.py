"""Tests for the built-in function registry."""

import math

import pytest

from carto.errors import TypeMismatchError
from carto.expression import BUILTINS, BuiltinFunction, FunctionRegistry, evaluate
from carto.model import Color, NodeKind, Value
from carto.tree import call, color, div


def _call(name: str, *args, functions=None) -> Value:
    return evaluate(call(name, *args), functions=functions)


def _color(name: str, *args) -> Color:
    result = _call(name, *args)
    assert result.kind is NodeKind.COLOR
    return result.data


# ---------------------------------------------------------------------------
# Constructors
# ---------------------------------------------------------------------------


class TestConstructors:
    def test_rgb(self):
        assert _color("rgb", 255, 0, 0) == Color(255, 0, 0)

    def test_rgb_clamps(self):
        assert _color("rgb", 300, -5, 12.4) == Color(255, 0, 12)

    def test_rgba_alpha_is_fraction(self):
        assert _color("rgba", 0, 0, 0, 0.5) == Color(0, 0, 0, 128)

    def test_hsl(self):
        assert _color("hsl", 0, 100, 50) == Color(255, 0, 0)

    def test_hsla(self):
        assert _color("hsla", 0, 0, 100, 0) == Color(255, 255, 255, 0)


# ---------------------------------------------------------------------------
# Color operations
# ---------------------------------------------------------------------------


class TestColorOperations:
    def test_lighten(self):
        assert _color("lighten", color("#000000"), 50) == Color(128, 128, 128)

    def test_darken(self):
        assert _color("darken", color("#ffffff"), 100) == Color(0, 0, 0)

    def test_greyscale(self):
        assert _color("greyscale", color("#ff0000")) == Color(128, 128, 128)

    def test_spin(self):
        assert _color("spin", color("#ff0000"), 120) == Color(0, 255, 0)

    def test_fadeout(self):
        assert _color("fadeout", color("#ff0000"), 50) == Color(255, 0, 0, 128)

    def test_fadein_saturates(self):
        assert _color("fadein", color(1, 2, 3, 200), 100) == Color(1, 2, 3, 255)

    def test_mix_default_weight(self):
        assert _color("mix", color("#ff0000"), color("#0000ff")) == Color(128, 0, 128)

    def test_mix_full_weight(self):
        assert _color("mix", color("#ff0000"), color("#0000ff"), 100) == Color(255, 0, 0)

    def test_keeps_alpha(self):
        result = _color("lighten", color(0, 0, 0, 100), 10)
        assert result.a == 100


class TestAccessors:
    def test_channels(self):
        c = color("#102030")
        assert _call("red", c) == Value(16.0)
        assert _call("green", c) == Value(32.0)
        assert _call("blue", c) == Value(48.0)

    def test_alpha(self):
        assert _call("alpha", color(0, 0, 0, 0)) == Value(0.0)
        assert _call("alpha", color(0, 0, 0)) == Value(1.0)

    def test_hue(self):
        assert _call("hue", color("#00ff00")) == Value(120.0)

    def test_lightness(self):
        assert _call("lightness", color("#ffffff")) == Value(100.0)

    def test_result_is_number(self):
        assert _call("red", color("#fff")).kind is NodeKind.NUMBER


# ---------------------------------------------------------------------------
# Math helpers
# ---------------------------------------------------------------------------


class TestMath:
    def test_round_half_up(self):
        assert _call("round", 2.5) == Value(3.0)
        assert _call("round", -2.5) == Value(-2.0)

    def test_ceil_floor_abs(self):
        assert _call("ceil", 1.2) == Value(2.0)
        assert _call("floor", 1.8) == Value(1.0)
        assert _call("abs", -3) == Value(3.0)

    def test_rounding_passes_non_finite_through(self):
        for name in ("round", "ceil", "floor"):
            assert _call(name, div(1, 0)).data == math.inf
            assert _call(name, div(-1, 0)).data == -math.inf
            assert math.isnan(_call(name, call("sqrt", -1)).data)

    def test_sqrt(self):
        assert _call("sqrt", 16) == Value(4.0)
        assert math.isnan(_call("sqrt", -1).data)

    def test_min_max_variadic(self):
        assert _call("min", 3, 1, 2) == Value(1.0)
        assert _call("max", 3, 1, 2, 9) == Value(9.0)


# ---------------------------------------------------------------------------
# Signatures
# ---------------------------------------------------------------------------


class TestSignatures:
    def test_too_few_arguments(self):
        with pytest.raises(TypeMismatchError, match="rgb"):
            _call("rgb", 1, 2)

    def test_too_many_arguments(self):
        with pytest.raises(TypeMismatchError):
            _call("mix", color("#fff"), color("#000"), 50, 1)

    def test_variadic_needs_one(self):
        with pytest.raises(TypeMismatchError):
            _call("min")

    def test_wrong_argument_kind(self):
        with pytest.raises(TypeMismatchError, match="expected a color"):
            _call("lighten", 5, 10)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class TestRegistry:
    def test_builtins_listed(self):
        names = BUILTINS.names()
        for name in ("rgb", "rgba", "lighten", "darken", "mix", "round"):
            assert name in names

    def test_custom_registry(self):
        registry = BUILTINS.copy()

        @registry.builtin("double", "number")
        def _double(x):
            return x * 2

        assert _call("double", 4, functions=registry) == Value(8.0)
        assert "double" in registry
        assert "double" not in BUILTINS

    def test_register_latest_wins(self):
        registry = FunctionRegistry()
        registry.register(BuiltinFunction("f", ("number",), lambda x: 1))
        registry.register(BuiltinFunction("f", ("number",), lambda x: 2))
        assert _call("f", 0, functions=registry) == Value(2.0)

    def test_get_missing(self):
        assert FunctionRegistry().get("nope") is None

"""Color channel helpers shared by the evaluator and the built-in functions."""

from __future__ import annotations

import colorsys
import math
from typing import Iterable

from carto.model.node import UNKNOWN_LOCATION, NodeKind, SourceLocation
from carto.model.value import Color, Value, ValueType

__all__ = [
    "clamp_channel",
    "fix_color_range",
    "from_hsla",
    "raw_color",
    "to_hsla",
]


def clamp_channel(channel: float) -> int:
    """Round a channel half-up and clamp it into [0, 255]; NaN becomes 0."""
    if math.isnan(channel):
        return 0
    channel = min(max(channel, 0.0), 255.0)
    return int(math.floor(channel + 0.5))


def raw_color(channels: Iterable[float], location: SourceLocation = UNKNOWN_LOCATION) -> Value:
    """Wrap unnormalised channel values as a color-annotated list."""
    return Value(
        tuple(Value(float(c), kind=NodeKind.NUMBER, location=location) for c in channels),
        kind=NodeKind.COLOR,
        location=location,
    )


def fix_color_range(node: Value) -> Value:
    """Normalise a computed color into integer channels within [0, 255].

    Arithmetic may leave channels out of range; *node* is either a color
    value or a color-annotated list of raw channel numbers.
    """
    if node.type is ValueType.COLOR:
        return Value(node.data, kind=NodeKind.COLOR, location=node.location)
    channels = [item.as_float() for item in node.children]
    if len(channels) == 3:
        channels.append(255.0)
    return Value(
        Color(*(clamp_channel(c) for c in channels)),
        kind=NodeKind.COLOR,
        location=node.location,
    )


# ---------------------------------------------------------------------------
# HSL conversions
# ---------------------------------------------------------------------------


def to_hsla(color: Color) -> tuple[float, float, float, float]:
    """Return (hue 0-360, saturation 0-1, lightness 0-1, alpha 0-1)."""
    h, l, s = colorsys.rgb_to_hls(color.r / 255, color.g / 255, color.b / 255)
    return h * 360.0, s, l, color.a / 255


def from_hsla(h: float, s: float, l: float, a: float = 1.0) -> Color:
    """Build a Color from hue in degrees and s/l/a fractions, clamping each."""
    h = (h % 360.0) / 360.0
    s = min(max(s, 0.0), 1.0)
    l = min(max(l, 0.0), 1.0)
    r, g, b = colorsys.hls_to_rgb(h, l, s)
    return Color(
        clamp_channel(r * 255),
        clamp_channel(g * 255),
        clamp_channel(b * 255),
        clamp_channel(a * 255),
    )

"""Base protocol for stylesheet transforms."""

from __future__ import annotations

from typing import Protocol

from carto.stylesheet.model import Stylesheet


class Transform(Protocol):
    """A stylesheet-to-stylesheet post-pass run after the build."""

    def apply(self, stylesheet: Stylesheet) -> Stylesheet: ...

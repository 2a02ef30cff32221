"""Selector model: name, filter and attachment selectors."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from carto.errors import InvalidSelectorNameError
from carto.model.node import SourceLocation
from carto.model.value import Value

__all__ = [
    "AttachmentSelector",
    "ClassSelector",
    "FilterSelector",
    "IdSelector",
    "NameSelector",
    "Predicate",
    "name_selector",
    "selector_name",
]


@dataclass(frozen=True)
class ClassSelector:
    """``.name`` -- matches layers carrying the class."""

    name: str

    @property
    def selector_name(self) -> str:
        return "." + self.name


@dataclass(frozen=True)
class IdSelector:
    """``#name`` -- matches the layer with that id."""

    name: str

    @property
    def selector_name(self) -> str:
        return "#" + self.name


# Dataclass equality is class-aware, so ClassSelector("x") != IdSelector("x").
NameSelector = Union[ClassSelector, IdSelector]


class Predicate(Enum):
    """Comparison applied by a filter selector, valued by its operator."""

    UNKNOWN = "?"
    EQ = "="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    NEQ = "!="

    @property
    def order(self) -> int:
        return _PREDICATE_ORDER[self]


_PREDICATE_ORDER = {predicate: index for index, predicate in enumerate(Predicate)}


@dataclass(frozen=True)
class FilterSelector:
    """``[key op value]`` -- equal only when key, predicate and value match."""

    key: str
    predicate: Predicate
    value: Value

    @property
    def sort_key(self) -> tuple[str, int]:
        return (self.key, self.predicate.order)

    @property
    def selector_name(self) -> str:
        return f"[{self.key}{self.predicate.value}{self.value.render()}]"


@dataclass(frozen=True)
class AttachmentSelector:
    """``::name`` -- a rendering sub-layer of a rule."""

    name: str

    @property
    def selector_name(self) -> str:
        return "::" + self.name


def name_selector(raw: str, location: SourceLocation | None = None) -> NameSelector:
    """Parse ``#id`` or ``.class`` into a name selector."""
    if raw.startswith("#"):
        return IdSelector(raw[1:])
    if raw.startswith("."):
        return ClassSelector(raw[1:])
    raise InvalidSelectorNameError(raw, location=location)


def selector_name(
    selector: ClassSelector | IdSelector | FilterSelector | AttachmentSelector,
) -> str:
    """Return the source form of any selector."""
    return selector.selector_name

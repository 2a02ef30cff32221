"""Stylesheet model: Rule and Stylesheet dataclasses."""

from __future__ import annotations

import bisect
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from carto.model.value import Value
from carto.stylesheet.selectors import AttachmentSelector, FilterSelector, NameSelector

if TYPE_CHECKING:
    from carto.backend.base import StylesheetVisitor

__all__ = ["Rule", "Stylesheet"]


@dataclass(frozen=True)
class Rule:
    """A selector chain paired with its resolved attributes.

    Rules are built incrementally with the ``with_*`` methods, each of which
    returns a new rule; nested blocks derive from their parent's rule.

    Specificity, following http://www.w3.org/TR/css3-selectors/#specificity,
    packs the selector shape into one integer:

        (len(names) << 16) | (min(len(filters), 255) << 8) | (0xff if attachment)
    """

    names: tuple[NameSelector, ...] = ()
    filters: tuple[FilterSelector, ...] = ()
    attachment: AttachmentSelector | None = None
    attrs: dict[str, Value] = field(default_factory=dict, hash=False)

    @property
    def specificity(self) -> int:
        return (
            (len(self.names) << 16)
            | (min(len(self.filters), 0xFF) << 8)
            | (0xFF if self.attachment is not None else 0x00)
        )

    # --- building -------------------------------------------------------------

    def derive(self) -> Rule:
        """Return a copy to extend in a nested block; attributes carry over."""
        return replace(self, attrs=dict(self.attrs))

    def with_name(self, selector: NameSelector) -> Rule:
        return replace(self, names=self.names + (selector,))

    def with_filter(self, selector: FilterSelector) -> Rule:
        """Add a filter, keeping filters ordered by (key, predicate)."""
        filters = list(self.filters)
        bisect.insort_right(filters, selector, key=lambda f: f.sort_key)
        return replace(self, filters=tuple(filters))

    def with_attachment(self, selector: AttachmentSelector) -> Rule:
        return replace(self, attachment=selector)

    def with_attr(self, key: str, value: Value) -> Rule:
        attrs = dict(self.attrs)
        attrs[key] = value
        return replace(self, attrs=attrs)

    def with_attrs(self, attrs: dict[str, Value]) -> Rule:
        return replace(self, attrs=dict(attrs))

    # --- naming ---------------------------------------------------------------

    @property
    def selector_name(self) -> str:
        """Full selector: names, then filters, then attachment."""
        parts = [s.selector_name for s in self.names]
        parts.extend(f.selector_name for f in self.filters)
        if self.attachment is not None:
            parts.append(self.attachment.selector_name)
        return "".join(parts)

    @property
    def style_name(self) -> str:
        """Names and attachment only: the key rules are grouped into styles by."""
        parts = [s.selector_name for s in self.names]
        if self.attachment is not None:
            parts.append(self.attachment.selector_name)
        return "".join(parts)

    # --- cascade relation -----------------------------------------------------

    def is_prefix_of(self, other: Rule) -> bool:
        """True when this rule is a more general ancestor of *other*.

        This rule's name chain must be a strict prefix of *other*'s, and this
        rule must either have no attachment or share *other*'s attachment.
        """
        count = len(self.names)
        if count >= len(other.names):
            return False
        if other.names[:count] != self.names:
            return False
        return self.attachment is None or self.attachment == other.attachment

    def accept(self, visitor: StylesheetVisitor) -> None:
        visitor.visit_rule(self)


@dataclass
class Stylesheet:
    """Map-level settings plus rules ordered by ascending specificity.

    Rules of equal specificity keep their insertion (document) order.
    """

    map_style: dict[str, Value] = field(default_factory=dict)
    rules: list[Rule] = field(default_factory=list)

    def insert(self, rule: Rule) -> None:
        bisect.insort_right(self.rules, rule, key=lambda r: r.specificity)

    def styles(self) -> dict[str, list[Rule]]:
        """Group rules by style name, in order of first appearance."""
        grouped: dict[str, list[Rule]] = {}
        for rule in self.rules:
            grouped.setdefault(rule.style_name, []).append(rule)
        return grouped

    def accept(self, visitor: StylesheetVisitor) -> None:
        visitor.visit_stylesheet(self)

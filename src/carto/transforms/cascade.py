"""Cascade transform: specialised rules inherit attributes from general ones."""

from __future__ import annotations

import logging

from carto.model.value import Value
from carto.stylesheet.model import Rule, Stylesheet

logger = logging.getLogger(__name__)


def filters_compatible(general: Rule, specific: Rule) -> bool:
    """True when every filter of *general* also constrains *specific*.

    Only then does *specific* match a subset of the features *general*
    matches, so *general*'s attributes apply to it.
    """
    return all(f in specific.filters for f in general.filters)


def inherits_from(rule: Rule, earlier: Rule) -> bool:
    return earlier.is_prefix_of(rule) and filters_compatible(earlier, rule)


class CascadeTransform:
    """Fill attribute gaps of each rule from the rules it specialises.

    Rules are visited from latest to earliest.  For each rule ``R`` the rules
    before it are scanned nearest-first; every related rule ``L`` (see
    :func:`inherits_from`) contributes the attributes ``R`` does not set.
    Attributes ``R`` sets explicitly are never overwritten, and the nearest
    related rule wins when several provide the same attribute.

    Rule order, and therefore specificity order, is unchanged.
    """

    def apply(self, stylesheet: Stylesheet) -> Stylesheet:
        rules = list(stylesheet.rules)

        for index in range(len(rules) - 1, -1, -1):
            rule = rules[index]
            inherited: dict[str, Value] = {}
            for earlier in reversed(rules[:index]):
                if not inherits_from(rule, earlier):
                    continue
                for key, value in earlier.attrs.items():
                    if key not in rule.attrs and key not in inherited:
                        inherited[key] = value
            if inherited:
                logger.debug(
                    "Rule %s inherits %s", rule.selector_name, ", ".join(sorted(inherited))
                )
                merged = dict(rule.attrs)
                merged.update(inherited)
                rules[index] = rule.with_attrs(merged)

        return Stylesheet(map_style=dict(stylesheet.map_style), rules=rules)

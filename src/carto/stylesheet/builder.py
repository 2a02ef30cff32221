"""Stylesheet builder: walks the annotated tree and builds rules.

The root's statements are handled in document order after the root's
variables have been defined, so a style may use a variable declared further
down the file.  Style blocks do the same with their own variables.  Variable
right-hand sides are stored unevaluated and resolved on use, in the frame
that defined them.
"""

from __future__ import annotations

import logging

from carto.config import CompilerConfig
from carto.environment import Environment
from carto.errors import CartoError, InvalidNodeKindError, UnknownPredicateError
from carto.expression import BUILTINS, Evaluator, FunctionRegistry
from carto.model.node import NodeKind
from carto.model.value import Value, ValueType
from carto.stylesheet.model import Rule, Stylesheet
from carto.stylesheet.selectors import (
    AttachmentSelector,
    FilterSelector,
    Predicate,
    name_selector,
)

__all__ = ["StylesheetBuilder", "parse_stylesheet"]

logger = logging.getLogger(__name__)

_PREDICATES: dict[NodeKind, Predicate] = {
    NodeKind.FILTER_EQ: Predicate.EQ,
    NodeKind.FILTER_LT: Predicate.LT,
    NodeKind.FILTER_LE: Predicate.LE,
    NodeKind.FILTER_GT: Predicate.GT,
    NodeKind.FILTER_GE: Predicate.GE,
    NodeKind.FILTER_NEQ: Predicate.NEQ,
}

_IGNORED = frozenset({NodeKind.MIXIN, NodeKind.COMMENT})

_EVALUATED = frozenset(
    {
        NodeKind.VARIABLE,
        NodeKind.EXPRESSION,
        NodeKind.FUNCTION,
        NodeKind.COLOR,
        NodeKind.ADD,
        NodeKind.SUB,
        NodeKind.MULT,
        NodeKind.DIV,
    }
)


def _present(node: Value) -> bool:
    """Selector-group slots use an empty list (or nil) for 'absent'."""
    if node.is_nil:
        return False
    return not (node.type is ValueType.LIST and node.size == 0)


class StylesheetBuilder:
    """Build a :class:`Stylesheet` from an annotated tree.

    Errors are fatal: the first one raised aborts the whole build.  With
    ``config.strict`` off, statements of unexpected kinds are logged and
    skipped instead of raising InvalidNodeKindError.
    """

    def __init__(
        self,
        config: CompilerConfig | None = None,
        functions: FunctionRegistry | None = None,
    ) -> None:
        self.config = config or CompilerConfig()
        self.functions = functions if functions is not None else BUILTINS

    # ---- top level ----

    def parse_stylesheet(self, tree: Value, env: Environment | None = None) -> Stylesheet:
        if tree.kind is not NodeKind.STYLESHEET:
            raise InvalidNodeKindError(tree.kind.value, context="root", location=tree.location)
        env = env if env is not None else Environment()
        stylesheet = Stylesheet()

        statements = tree.children
        for node in statements:
            if node.kind is NodeKind.VARIABLE:
                self.parse_variable(node, env)

        for node in statements:
            kind = node.kind
            if kind is NodeKind.VARIABLE:
                continue
            if kind is NodeKind.MAP_STYLE:
                self.parse_map_style(stylesheet, node, env)
            elif kind is NodeKind.STYLE:
                self.parse_style(stylesheet, node, env)
            elif kind in _IGNORED:
                continue
            else:
                self._invalid(node, "stylesheet")

        logger.debug(
            "Built stylesheet: %d rule(s), %d map setting(s)",
            len(stylesheet.rules),
            len(stylesheet.map_style),
        )
        return stylesheet

    # ---- styles ----

    def parse_style(
        self,
        stylesheet: Stylesheet,
        node: Value,
        parent_env: Environment,
        parent_rule: Rule | None = None,
    ) -> None:
        """Build one rule per selector group of a style block.

        Each group gets its own child environment and a rule derived from
        *parent_rule*, so nested blocks extend their ancestor's selector chain
        and sibling blocks never see each other's variables.
        """
        if node.size != 2:
            raise CartoError(
                f"Malformed style node: expected 2 parts, got {node.size}",
                location=node.location,
            )
        groups, body = node.front, node.back
        parent_rule = parent_rule if parent_rule is not None else Rule()

        for group in groups.children:
            env = parent_env.child()
            rule = self._parse_selector_group(stylesheet, group, env, parent_rule)

            for item in body.children:
                if item.kind is NodeKind.VARIABLE:
                    self.parse_variable(item, env)

            for item in body.children:
                kind = item.kind
                if kind is NodeKind.VARIABLE:
                    continue
                if kind is NodeKind.STYLE:
                    self.parse_style(stylesheet, item, env, rule)
                elif kind is NodeKind.ATTRIBUTE:
                    rule = self.parse_attribute(stylesheet, item, env, rule)
                elif kind in _IGNORED:
                    continue
                else:
                    self._invalid(item, "style")

            stylesheet.insert(rule)
            logger.debug(
                "Inserted rule %s (specificity %#08x, %d attribute(s))",
                rule.selector_name or "*",
                rule.specificity,
                len(rule.attrs),
            )

    def _parse_selector_group(
        self, stylesheet: Stylesheet, group: Value, env: Environment, parent_rule: Rule
    ) -> Rule:
        if group.size != 3:
            raise CartoError(
                f"Malformed selector: expected 3 parts, got {group.size}",
                location=group.location,
            )
        uname, uattach, ufilter = group.children
        rule = parent_rule.derive()

        if _present(uname):
            rule = rule.with_name(name_selector(uname.as_str(), uname.location))

        if _present(uattach):
            rule = rule.with_attachment(AttachmentSelector(uattach.as_str()))

        if _present(ufilter):
            if ufilter.kind is not NodeKind.FILTER:
                raise InvalidNodeKindError(
                    ufilter.kind.value, context="filter", location=ufilter.location
                )
            rule = self.parse_filter(stylesheet, ufilter, env, rule)

        return rule

    def parse_filter(
        self, stylesheet: Stylesheet, node: Value, env: Environment, rule: Rule
    ) -> Rule:
        """Add one filter selector per clause of a filter node."""
        for clause in node.children:
            predicate = _PREDICATES.get(clause.kind)
            if predicate is None:
                raise UnknownPredicateError(clause.kind.value, location=node.location)
            key_node, value_node = clause.front, clause.back
            if key_node.type is ValueType.LIST:
                key_node = key_node.front
            value = self.parse_value(value_node, env)
            rule = rule.with_filter(FilterSelector(key_node.as_str(), predicate, value))
        return rule

    # ---- values ----

    def parse_value(self, node: Value, env: Environment) -> Value:
        """Resolve a value node to a terminal value.

        Variables and expressions are evaluated, a one-element list yields its
        element, and other lists (dash arrays, font stacks) are resolved
        element-wise.
        """
        if node.kind in _EVALUATED:
            return Evaluator(env, self.functions).eval(node)
        if node.type is ValueType.LIST:
            if node.size == 1:
                return self.parse_value(node.front, env)
            return Value(
                tuple(self.parse_value(item, env) for item in node.children),
                kind=node.kind,
                location=node.location,
            )
        return node

    def parse_attribute(
        self, stylesheet: Stylesheet, node: Value, env: Environment, rule: Rule
    ) -> Rule:
        """Return *rule* with the attribute set; later writes win."""
        key = node.front.as_str()
        value = self.parse_value(node.back, env)
        return rule.with_attr(key, value)

    def parse_variable(self, node: Value, env: Environment) -> None:
        """Bind a variable in *env*; the right-hand side is resolved on use."""
        name = node.front.as_str()
        value = node.back
        if value.kind is NodeKind.VALUE and value.size == 1:
            value = value.front
        env.define(name, value)
        logger.debug("Defined @%s at depth %d", name.lstrip("@"), env.depth)

    def parse_map_style(self, stylesheet: Stylesheet, node: Value, env: Environment) -> None:
        for pair in node.children:
            key = pair.front.as_str()
            stylesheet.map_style[key] = self.parse_value(pair.back, env)

    # ---- errors ----

    def _invalid(self, node: Value, context: str) -> None:
        if self.config.strict:
            raise InvalidNodeKindError(node.kind.value, context=context, location=node.location)
        logger.warning(
            "Skipping %s node of kind '%s' at %s", context, node.kind.value, node.location
        )


def parse_stylesheet(
    tree: Value,
    env: Environment | None = None,
    config: CompilerConfig | None = None,
) -> Stylesheet:
    """Build a stylesheet from *tree* without running the cascade."""
    return StylesheetBuilder(config).parse_stylesheet(tree, env)

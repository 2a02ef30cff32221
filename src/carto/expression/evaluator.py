"""Expression evaluator: typed arithmetic and color algebra over Values.

Dispatch is on the node's annotated kind:

    expression          -> unwrap and evaluate the single child
    variable            -> resolve through the environment (eval_var)
    add|sub|mult|div    -> binary operator, overloaded on operand kinds
    function            -> built-in function registry
    color               -> normalised Color value
    list                -> element-wise
    anything else       -> the literal itself

Operator overloads:

    number op number    -> number (IEEE semantics, int op int stays int
                           except for division)
    color  op color     -> per-channel, then fix_color_range
    color  op number    -> number broadcast to every channel, then
    number op color        fix_color_range
"""

from __future__ import annotations

import math
import operator
from typing import Callable

from carto.environment import Environment
from carto.errors import TypeMismatchError, UndefinedVariableError, UnknownFunctionError
from carto.expression.colors import fix_color_range, raw_color
from carto.expression.functions import BUILTINS, FunctionRegistry
from carto.model.node import NodeKind
from carto.model.value import Value, ValueType

__all__ = ["Evaluator", "evaluate"]


def _divide(lhs: float, rhs: float) -> float:
    try:
        return lhs / rhs
    except ZeroDivisionError:
        if lhs == 0 or math.isnan(lhs):
            return math.nan
        return math.copysign(math.inf, lhs) * math.copysign(1.0, rhs)


_OPERATORS: dict[NodeKind, tuple[str, Callable[[float, float], float]]] = {
    NodeKind.ADD: ("+", operator.add),
    NodeKind.SUB: ("-", operator.sub),
    NodeKind.MULT: ("*", operator.mul),
    NodeKind.DIV: ("/", _divide),
}


class Evaluator:
    """Evaluate one expression subtree against the environment active at it.

    ``resolving`` is the chain of (name, defining frame) bindings currently
    being resolved; evaluators created for variable indirection share it so
    that cycles are detected across frames.
    """

    def __init__(
        self,
        env: Environment,
        functions: FunctionRegistry | None = None,
        resolving: list[tuple[str, Environment]] | None = None,
    ) -> None:
        self.env = env
        self.functions = functions if functions is not None else BUILTINS
        self._resolving: list[tuple[str, Environment]] = (
            resolving if resolving is not None else []
        )

    # --- type tests -----------------------------------------------------------

    def is_color(self, node: Value) -> bool:
        """True for Color payloads and for nodes annotated as colors."""
        return node.type is ValueType.COLOR or node.kind is NodeKind.COLOR

    def is_double(self, node: Value) -> bool:
        return node.type is ValueType.DOUBLE

    def is_number(self, node: Value) -> bool:
        return node.is_number and node.kind is not NodeKind.COLOR

    # --- dispatch -------------------------------------------------------------

    def eval(self, node: Value) -> Value:
        kind = node.kind
        if kind is NodeKind.EXPRESSION:
            if node.size != 1:
                raise TypeMismatchError(
                    f"Expression must wrap exactly one node, got {node.size}",
                    location=node.location,
                )
            return self.eval(node.front)
        if kind is NodeKind.VARIABLE:
            return self.eval_var(node)
        if kind in _OPERATORS:
            return self.eval_node(node)
        if kind is NodeKind.FUNCTION:
            return self.eval_function(node)
        if kind is NodeKind.COLOR:
            return Value(node.as_color(), kind=NodeKind.COLOR, location=node.location)
        if node.type is ValueType.LIST:
            return Value(
                tuple(self.eval(item) for item in node.children),
                kind=node.kind,
                location=node.location,
            )
        return node

    def eval_node(self, node: Value) -> Value:
        """Evaluate a binary operator node."""
        if node.size != 2:
            raise TypeMismatchError(
                f"Operator '{_OPERATORS[node.kind][0]}' needs two operands, got {node.size}",
                location=node.location,
            )
        lhs = self.eval(node.front)
        rhs = self.eval(node.back)
        handlers = {
            NodeKind.ADD: self.eval_add,
            NodeKind.SUB: self.eval_sub,
            NodeKind.MULT: self.eval_mult,
            NodeKind.DIV: self.eval_div,
        }
        result = handlers[node.kind](lhs, rhs)
        return Value(result.data, kind=result.kind, location=node.location)

    # --- variables ------------------------------------------------------------

    def eval_var(self, node: Value) -> Value:
        """Resolve a variable reference, following variable-to-variable chains.

        Stored right-hand sides are evaluated in the frame that defined them.
        While a binding is being resolved its own name refers to the next
        binding up the chain, so ``@w: @w * 2`` in a block reads the outer
        ``@w``.  A missing binding or a cycle raises UndefinedVariableError.
        """
        name = node.front.as_str()
        if name.startswith("@"):
            name = name[1:]
        frame = self.env.find(name)
        while frame is not None and (name, frame) in self._resolving:
            frame = frame.parent.find(name) if frame.parent is not None else None
        if frame is None:
            raise UndefinedVariableError(name, location=node.location)
        value = frame.lookup(name)
        if value.is_nil:
            raise UndefinedVariableError(name, location=node.location)
        self._resolving.append((name, frame))
        try:
            if value.kind is NodeKind.VARIABLE:
                return Evaluator(frame, self.functions, self._resolving).eval_var(value)
            return Evaluator(frame, self.functions, self._resolving).eval(value)
        finally:
            self._resolving.pop()

    # --- functions ------------------------------------------------------------

    def eval_function(self, node: Value) -> Value:
        name = node.front.as_str()
        function = self.functions.get(name)
        if function is None:
            raise UnknownFunctionError(name, location=node.location)
        args = [self.eval(arg) for arg in node.children[1:]]
        return function(args, node.location)

    # --- operators ------------------------------------------------------------

    def eval_add(self, lhs: Value, rhs: Value) -> Value:
        return self._arithmetic(NodeKind.ADD, lhs, rhs)

    def eval_sub(self, lhs: Value, rhs: Value) -> Value:
        return self._arithmetic(NodeKind.SUB, lhs, rhs)

    def eval_mult(self, lhs: Value, rhs: Value) -> Value:
        return self._arithmetic(NodeKind.MULT, lhs, rhs)

    def eval_div(self, lhs: Value, rhs: Value) -> Value:
        return self._arithmetic(NodeKind.DIV, lhs, rhs)

    def fix_color_range(self, node: Value) -> Value:
        return fix_color_range(node)

    def _arithmetic(self, kind: NodeKind, lhs: Value, rhs: Value) -> Value:
        symbol, op = _OPERATORS[kind]
        location = lhs.location if lhs.location.is_known else rhs.location

        if self.is_number(lhs) and self.is_number(rhs):
            result = op(lhs.data, rhs.data)
            return Value(result, kind=NodeKind.NUMBER, location=location)

        if self.is_color(lhs) and self.is_color(rhs):
            left, right = lhs.as_color(), rhs.as_color()
            channels = [op(a, b) for a, b in zip(left.channels, right.channels)]
            return self.fix_color_range(raw_color(channels, location))

        if self.is_color(lhs) and self.is_number(rhs):
            scalar = rhs.as_float()
            channels = [op(c, scalar) for c in lhs.as_color().channels]
            return self.fix_color_range(raw_color(channels, location))

        if self.is_number(lhs) and self.is_color(rhs):
            scalar = lhs.as_float()
            channels = [op(scalar, c) for c in rhs.as_color().channels]
            return self.fix_color_range(raw_color(channels, location))

        raise TypeMismatchError.for_operator(symbol, lhs, rhs, location=location)


def evaluate(
    node: Value, env: Environment | None = None, functions: FunctionRegistry | None = None
) -> Value:
    """Evaluate *node* in *env* (an empty environment by default)."""
    return Evaluator(env if env is not None else Environment(), functions).eval(node)

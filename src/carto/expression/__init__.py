from carto.expression.colors import fix_color_range
from carto.expression.evaluator import Evaluator, evaluate
from carto.expression.functions import BUILTINS, BuiltinFunction, FunctionRegistry

__all__ = [
    "Evaluator",
    "evaluate",
    "fix_color_range",
    "BUILTINS",
    "BuiltinFunction",
    "FunctionRegistry",
]

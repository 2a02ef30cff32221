"""Compilation pipeline: annotated tree in, resolved stylesheet out."""

from __future__ import annotations

import logging

from carto.config import CompilerConfig
from carto.environment import Environment
from carto.expression.functions import FunctionRegistry
from carto.model.value import Value
from carto.stylesheet.builder import StylesheetBuilder
from carto.stylesheet.model import Stylesheet
from carto.transforms import Transform, apply_transforms, default_transforms

logger = logging.getLogger(__name__)


def compile_stylesheet(
    tree: Value,
    config: CompilerConfig | None = None,
    env: Environment | None = None,
    transforms: list[Transform] | None = None,
    functions: FunctionRegistry | None = None,
) -> Stylesheet:
    """Build *tree* into a stylesheet and run the transform pipeline.

    The built-in transforms enabled by *config* run first, then any
    custom *transforms* in the order given.
    """
    config = config or CompilerConfig()
    stylesheet = StylesheetBuilder(config, functions).parse_stylesheet(tree, env)
    stylesheet = apply_transforms(stylesheet, default_transforms(config), transforms)
    logger.info(
        "Compiled %s: %d rule(s), %d style(s)",
        tree.location.file,
        len(stylesheet.rules),
        len(stylesheet.styles()),
    )
    return stylesheet

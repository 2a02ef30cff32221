from __future__ import annotations

from carto.config import CompilerConfig
from carto.stylesheet.model import Stylesheet
from carto.transforms.base import Transform
from carto.transforms.cascade import CascadeTransform


def default_transforms(config: CompilerConfig) -> list[Transform]:
    """Return the built-in transforms enabled by *config*."""
    transforms: list[Transform] = []
    if config.cascade:
        transforms.append(CascadeTransform())
    return transforms


def apply_transforms(
    stylesheet: Stylesheet,
    transforms: list[Transform],
    custom_transforms: list[Transform] | None = None,
) -> Stylesheet:
    """Apply *transforms* (and any custom ones) to *stylesheet* in order."""
    pipeline = list(transforms)
    if custom_transforms:
        pipeline.extend(custom_transforms)
    for t in pipeline:
        stylesheet = t.apply(stylesheet)
    return stylesheet


__all__ = ["CascadeTransform", "Transform", "apply_transforms", "default_transforms"]

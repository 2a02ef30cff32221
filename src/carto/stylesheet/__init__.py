from carto.stylesheet.builder import StylesheetBuilder, parse_stylesheet
from carto.stylesheet.model import Rule, Stylesheet
from carto.stylesheet.selectors import (
    AttachmentSelector,
    ClassSelector,
    FilterSelector,
    IdSelector,
    NameSelector,
    Predicate,
    name_selector,
    selector_name,
)

__all__ = [
    "parse_stylesheet",
    "StylesheetBuilder",
    "Stylesheet",
    "Rule",
    "AttachmentSelector",
    "ClassSelector",
    "FilterSelector",
    "IdSelector",
    "NameSelector",
    "Predicate",
    "name_selector",
    "selector_name",
]

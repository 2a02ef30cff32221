"""Tests for the selector, rule and stylesheet model."""

import pytest

from carto.errors import InvalidSelectorNameError
from carto.model import SourceLocation, Value
from carto.stylesheet import (
    AttachmentSelector,
    ClassSelector,
    FilterSelector,
    IdSelector,
    Predicate,
    Rule,
    Stylesheet,
    name_selector,
    selector_name,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _rule(*names: str, filters: int = 0, attachment: str | None = None, **attrs) -> Rule:
    rule = Rule()
    for name in names:
        rule = rule.with_name(name_selector(name))
    for i in range(filters):
        rule = rule.with_filter(FilterSelector(f"k{i:03d}", Predicate.EQ, Value(i)))
    if attachment:
        rule = rule.with_attachment(AttachmentSelector(attachment))
    for key, value in attrs.items():
        rule = rule.with_attr(key.replace("_", "-"), Value(value))
    return rule


# ---------------------------------------------------------------------------
# Name selectors
# ---------------------------------------------------------------------------


class TestNameSelector:
    def test_class(self):
        assert name_selector(".roads") == ClassSelector("roads")

    def test_id(self):
        assert name_selector("#roads") == IdSelector("roads")

    def test_kind_sensitive_equality(self):
        assert ClassSelector("x") != IdSelector("x")
        assert ClassSelector("x") == ClassSelector("x")

    def test_invalid_name(self):
        loc = SourceLocation("a.mss", 1, 1)
        with pytest.raises(InvalidSelectorNameError) as exc_info:
            name_selector("roads", loc)
        assert exc_info.value.name == "roads"
        assert exc_info.value.location == loc

    def test_selector_names(self):
        assert selector_name(ClassSelector("a")) == ".a"
        assert selector_name(IdSelector("a")) == "#a"
        assert selector_name(AttachmentSelector("casing")) == "::casing"


class TestFilterSelector:
    def test_equality_uses_key_predicate_value(self):
        a = FilterSelector("zoom", Predicate.GT, Value(10.0))
        assert a == FilterSelector("zoom", Predicate.GT, Value(10))
        assert a != FilterSelector("zoom", Predicate.GE, Value(10.0))
        assert a != FilterSelector("zoom", Predicate.GT, Value(11.0))
        assert a != FilterSelector("level", Predicate.GT, Value(10.0))

    def test_selector_name(self):
        f = FilterSelector("type", Predicate.NEQ, Value("motorway"))
        assert f.selector_name == '[type!="motorway"]'

    def test_predicate_symbols(self):
        assert [p.value for p in Predicate] == ["?", "=", "<", "<=", ">", ">=", "!="]


# ---------------------------------------------------------------------------
# Rule
# ---------------------------------------------------------------------------


class TestSpecificity:
    def test_empty(self):
        assert Rule().specificity == 0

    def test_names_filters_attachment(self):
        rule = _rule(".a", "#b", filters=3, attachment="casing")
        assert rule.specificity == (2 << 16) | (3 << 8) | 0xFF

    def test_filter_count_is_clamped(self):
        rule = _rule(filters=300)
        assert rule.specificity == 255 << 8

    def test_attributes_do_not_matter(self):
        assert _rule(".a", line_width=1).specificity == _rule(".a").specificity

    def test_formula_for_many_shapes(self):
        for names in ((), (".a",), (".a", ".b", "#c")):
            for filters in (0, 1, 4):
                for attachment in (None, "glow"):
                    rule = _rule(*names, filters=filters, attachment=attachment)
                    expected = (
                        (len(rule.names) << 16)
                        | (min(len(rule.filters), 255) << 8)
                        | (0xFF if rule.attachment else 0)
                    )
                    assert rule.specificity == expected


class TestRuleBuilding:
    def test_with_methods_do_not_mutate(self):
        base = _rule(".a")
        derived = base.with_name(name_selector(".b")).with_attr("line-width", Value(1))
        assert base.names == (ClassSelector("a"),)
        assert base.attrs == {}
        assert derived.names == (ClassSelector("a"), ClassSelector("b"))

    def test_derive_copies_selectors_and_attrs(self):
        base = _rule(".a", filters=1, attachment="x", line_width=2)
        child = base.derive()
        assert child.names == base.names
        assert child.filters == base.filters
        assert child.attachment == base.attachment
        assert child.attrs == {"line-width": Value(2)}
        extended = child.with_attr("line-width", Value(5))
        assert base.attrs == {"line-width": Value(2)}
        assert extended.attrs == {"line-width": Value(5)}

    def test_rule_is_hashable(self):
        rule = _rule(".a", filters=1, line_width=2)
        assert hash(rule) == hash(_rule(".a", filters=1, line_width=3))
        assert rule in {rule}

    def test_filters_sorted_by_key_then_predicate(self):
        rule = (
            Rule()
            .with_filter(FilterSelector("zoom", Predicate.LT, Value(15)))
            .with_filter(FilterSelector("type", Predicate.EQ, Value("a")))
            .with_filter(FilterSelector("zoom", Predicate.EQ, Value(3)))
        )
        assert [(f.key, f.predicate) for f in rule.filters] == [
            ("type", Predicate.EQ),
            ("zoom", Predicate.EQ),
            ("zoom", Predicate.LT),
        ]

    def test_equal_filter_keys_keep_insertion_order(self):
        first = FilterSelector("zoom", Predicate.GT, Value(1))
        second = FilterSelector("zoom", Predicate.GT, Value(2))
        rule = Rule().with_filter(first).with_filter(second)
        assert rule.filters == (first, second)

    def test_last_write_wins(self):
        rule = _rule(".a").with_attr("color", Value("red")).with_attr("color", Value("blue"))
        assert rule.attrs == {"color": Value("blue")}


class TestRuleNaming:
    def test_selector_name(self):
        rule = _rule(".foo", "#bar", filters=1, attachment="glow")
        assert rule.selector_name == ".foo#bar[k000=0]::glow"

    def test_style_name_omits_filters(self):
        rule = _rule(".foo", filters=2, attachment="glow")
        assert rule.style_name == ".foo::glow"


class TestIsPrefixOf:
    def test_strict_prefix(self):
        assert _rule(".a").is_prefix_of(_rule(".a", ".b"))

    def test_equal_chain_is_not_prefix(self):
        assert not _rule(".a").is_prefix_of(_rule(".a"))

    def test_different_chain(self):
        assert not _rule(".a").is_prefix_of(_rule(".b", ".c"))

    def test_kind_sensitive(self):
        assert not _rule(".a").is_prefix_of(_rule("#a", ".b"))

    def test_attachment_must_match_when_present(self):
        general = _rule(".a", attachment="glow")
        assert general.is_prefix_of(_rule(".a", ".b", attachment="glow"))
        assert not general.is_prefix_of(_rule(".a", ".b"))
        assert not general.is_prefix_of(_rule(".a", ".b", attachment="casing"))

    def test_no_attachment_relates_to_any(self):
        assert _rule(".a").is_prefix_of(_rule(".a", ".b", attachment="glow"))


# ---------------------------------------------------------------------------
# Stylesheet
# ---------------------------------------------------------------------------


class TestStylesheetOrdering:
    def test_sorted_by_specificity(self):
        ss = Stylesheet()
        ss.insert(_rule(".a", ".b"))
        ss.insert(_rule(".a", attachment="x"))
        ss.insert(_rule(".a"))
        ss.insert(Rule())
        specificities = [r.specificity for r in ss.rules]
        assert specificities == sorted(specificities)

    def test_equal_specificity_is_stable(self):
        r1 = _rule(".a", line_width=1)
        r2 = _rule(".a", line_width=2)
        ss = Stylesheet()
        ss.insert(r1)
        ss.insert(r2)
        assert ss.rules == [r1, r2]

    def test_stable_among_mixed_inserts(self):
        r1 = _rule(".a", line_width=1)
        r2 = _rule(".b", line_width=2)
        ss = Stylesheet()
        ss.insert(r1)
        ss.insert(_rule(".x", ".y"))
        ss.insert(r2)
        ss.insert(Rule())
        assert ss.rules.index(r1) < ss.rules.index(r2)

    def test_styles_group_by_style_name(self):
        ss = Stylesheet()
        ss.insert(_rule(".roads", line_width=1))
        ss.insert(_rule(".roads", filters=1, line_width=2))
        ss.insert(_rule(".water", polygon_fill="#00f"))
        styles = ss.styles()
        assert list(styles) == [".roads", ".water"]
        assert len(styles[".roads"]) == 2

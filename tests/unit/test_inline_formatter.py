"""
Unit Tests for the Inline Formatter

Covers context propagation, the fixed-attribute runs (code, break, image),
link decoration and the fallbacks for unknown node shapes.
"""

import dataclasses

import pytest

from core.markdown.mdast import (
    Delete,
    Emphasis,
    Image,
    InlineCode,
    Break,
    Link,
    Literal,
    Parent,
    Strong,
    Subscript,
    Superscript,
    Text,
    ThematicBreak,
)
from core.rendering.document_model import FormattingContext, StyledRun
from core.rendering.inline_formatter import flatten_for_link, flatten_inline


def flags(run: StyledRun):
    return {
        name for name in ("bold", "italic", "strike", "superscript", "subscript")
        if getattr(run, name)
    }


class TestFormattingContext:
    """FormattingContext immutability."""

    def test_with_flag_returns_copy(self):
        ctx = FormattingContext()
        bold = ctx.with_flag("bold")
        assert bold.bold is True
        assert ctx.bold is False

    def test_flags_accumulate(self):
        ctx = FormattingContext().with_flag("italic").with_flag("strike")
        assert ctx == FormattingContext(italic=True, strike=True)

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            FormattingContext().bold = True


class TestTextAndEmphasis:
    """Text runs and emphasis-like containers."""

    def test_text_uses_context_verbatim(self):
        ctx = FormattingContext(bold=True, subscript=True)
        runs = flatten_inline(Text("x"), ctx)
        assert runs == [StyledRun(text="x", bold=True, subscript=True)]

    def test_default_context_is_plain(self):
        runs = flatten_inline(Text("plain"))
        assert flags(runs[0]) == set()

    def test_nested_bold_italic(self):
        """**a *b* c** yields a (bold), b (bold+italic), c (bold)."""
        node = Strong([Text("a "), Emphasis([Text("b")]), Text(" c")])
        runs = flatten_inline(node)
        assert [r.text for r in runs] == ["a ", "b", " c"]
        assert flags(runs[0]) == {"bold"}
        assert flags(runs[1]) == {"bold", "italic"}
        assert flags(runs[2]) == {"bold"}

    def test_three_levels_accumulate(self):
        node = Delete([Emphasis([Strong([Text("all")])])])
        runs = flatten_inline(node)
        assert flags(runs[0]) == {"bold", "italic", "strike"}

    @pytest.mark.parametrize("node_cls,flag", [
        (Emphasis, "italic"),
        (Strong, "bold"),
        (Delete, "strike"),
        (Superscript, "superscript"),
        (Subscript, "subscript"),
    ])
    def test_each_container_owns_one_flag(self, node_cls, flag):
        runs = flatten_inline(node_cls([Text("x")]))
        assert flags(runs[0]) == {flag}

    def test_runs_are_not_merged(self):
        node = Strong([Text("a"), Text("b")])
        runs = flatten_inline(node)
        assert [r.text for r in runs] == ["a", "b"]

    def test_empty_container_produces_no_runs(self):
        assert flatten_inline(Emphasis([])) == []


class TestFixedAttributeRuns:
    """Inline code, breaks and images."""

    def test_inline_code_keeps_bold_italic_only(self):
        ctx = FormattingContext(bold=True, italic=True, strike=True, superscript=True)
        run = flatten_inline(InlineCode("x = 1"), ctx)[0]
        assert run.text == "x = 1"
        assert run.font == "Consolas"
        assert flags(run) == {"bold", "italic"}

    def test_break(self):
        runs = flatten_inline(Break())
        assert len(runs) == 1
        assert runs[0].is_break is True
        assert runs[0].text == ""

    def test_image_uses_alt(self):
        run = flatten_inline(Image(url="chart.png", alt="Sales chart"))[0]
        assert run.text == "[Image: Sales chart]"
        assert run.italic is True
        assert run.color == "888888"

    def test_image_falls_back_to_url(self):
        run = flatten_inline(Image(url="chart.png"))[0]
        assert run.text == "[Image: chart.png]"


class TestFallbacks:
    """Unknown shapes never raise."""

    def test_unknown_container_recurses_with_context(self):
        node = Parent([Text("inner")], name="custom")
        runs = flatten_inline(node, FormattingContext(italic=True))
        assert runs == [StyledRun(text="inner", italic=True)]

    def test_unknown_leaf_is_plain_text(self):
        runs = flatten_inline(Literal("<kbd>"), FormattingContext(bold=True))
        assert runs == [StyledRun(text="<kbd>")]

    def test_empty_leaf_produces_nothing(self):
        assert flatten_inline(Literal("")) == []
        assert flatten_inline(ThematicBreak()) == []

    def test_link_inside_recursion_is_flattened(self):
        node = Emphasis([Link([Text("site")], url="https://example.com")])
        runs = flatten_inline(node)
        assert runs == [StyledRun(text="site", italic=True)]


class TestLinkRuns:
    """flatten_for_link decoration."""

    def test_decorates_every_run(self):
        link = Link([Text("see "), Strong([Text("docs")])], url="https://example.com")
        runs = flatten_for_link(link)
        assert [r.text for r in runs] == ["see ", "docs"]
        for run in runs:
            assert run.color == "0563C1"
            assert run.underline is True
            assert run.char_style == "Hyperlink"
        assert runs[1].bold is True

    def test_keeps_inherited_context(self):
        link = Link([Text("x")], url="u")
        run = flatten_for_link(link, FormattingContext(bold=True))[0]
        assert run.bold is True

    def test_break_inside_link_stays_bare(self):
        link = Link([Text("a"), Break(), Text("b")], url="u")
        runs = flatten_for_link(link)
        assert runs[1] == StyledRun(is_break=True)

"""
Unit Tests for the Document Model

Tests the word-processor data structures produced by the block composer.
"""

import dataclasses

import pytest

from core.rendering.document_model import (
    Border,
    DocumentRoot,
    FormattingContext,
    Hyperlink,
    NumberingReference,
    ParagraphElement,
    StyledRun,
    TableCellElement,
    TableElement,
    TableRowElement,
)
from core.rendering.numbering import NUMBERING_DEFINITIONS


class TestStyledRun:
    """Test StyledRun data structure."""

    def test_from_context(self):
        ctx = FormattingContext(bold=True, strike=True)
        run = StyledRun.from_context("x", ctx)
        assert run.text == "x"
        assert run.bold is True
        assert run.strike is True
        assert run.italic is False
        assert run.font is None

    def test_break_plain_text(self):
        assert StyledRun(is_break=True).plain_text == "\n"

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            StyledRun(text="a").text = "b"


class TestParagraphElement:
    """Test ParagraphElement helpers."""

    def test_defaults(self):
        para = ParagraphElement()
        assert para.children == []
        assert para.heading_level is None
        assert para.numbering is None
        assert para.tab_stops == []

    def test_runs_include_hyperlink_contents(self):
        para = ParagraphElement(children=[
            StyledRun(text="a "),
            Hyperlink(url="https://e.com", runs=[StyledRun(text="b")]),
            StyledRun(text=" c"),
        ])
        assert [r.text for r in para.runs] == ["a ", "b", " c"]
        assert para.text == "a b c"

    def test_equality(self):
        first = ParagraphElement(children=[StyledRun(text="x")], border_left=Border(color="BBBBBB"))
        second = ParagraphElement(children=[StyledRun(text="x")], border_left=Border(color="BBBBBB"))
        assert first == second


class TestTableElement:
    """Test TableElement."""

    def test_column_count_uses_widest_row(self):
        table = TableElement(rows=[
            TableRowElement(cells=[TableCellElement()], header=True),
            TableRowElement(cells=[TableCellElement(), TableCellElement()]),
        ])
        assert table.column_count == 2
        assert table.width_percent == 100

    def test_empty_table(self):
        assert TableElement().column_count == 0


class TestDocumentRoot:
    """Test DocumentRoot statistics."""

    def test_statistics(self):
        root = DocumentRoot(
            numbering=NUMBERING_DEFINITIONS,
            blocks=[
                ParagraphElement(children=[StyledRun(text="T")], heading_level=1),
                ParagraphElement(
                    children=[Hyperlink(url="u", runs=[StyledRun(text="l")])],
                    numbering=NumberingReference("bullet-list", 0),
                ),
                TableElement(),
            ],
        )
        stats = root.get_statistics()
        assert stats == {
            'paragraphs': 2,
            'headings': 1,
            'list_items': 1,
            'tables': 1,
            'hyperlinks': 1,
        }
        assert len(root) == 3
        assert "headings=1" in repr(root)

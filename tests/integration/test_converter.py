"""
Integration tests for the conversion entry point (core/converter.py)
"""

import logging

import pytest
from docx.oxml.ns import qn

import core.converter as converter
from core.converter import (
    build_markdown_document,
    convert_markdown,
    derive_download_name,
    validate_markdown,
)
from core.errors import ConversionError, ConverterError, InvalidInputError


class TestInputValidation:
    """Rejected before any work starts."""

    @pytest.mark.parametrize("bad", [None, 123, b"# bytes", ""])
    def test_invalid_markdown(self, bad):
        with pytest.raises(InvalidInputError):
            convert_markdown(bad)

    def test_error_hierarchy(self):
        assert issubclass(InvalidInputError, ConverterError)
        assert issubclass(ConversionError, ConverterError)

    def test_validate_returns_input(self):
        assert validate_markdown("# ok") == "# ok"

    def test_whitespace_only_converts_to_empty_document(self):
        root = build_markdown_document("   \n\n  ")
        assert root.blocks == []
        assert convert_markdown("   \n\t")[:2] == b"PK"

    def test_parser_not_called_for_invalid_input(self, monkeypatch):
        def fail(_):
            raise AssertionError("parser should not run")

        monkeypatch.setattr(converter, "parse_markdown", fail)
        with pytest.raises(InvalidInputError):
            convert_markdown("")


class TestDownstreamFailures:
    """Parser and packer failures become ConversionError."""

    def test_parser_failure(self, monkeypatch):
        def boom(_):
            raise RuntimeError("parser exploded")

        monkeypatch.setattr(converter, "parse_markdown", boom)
        with pytest.raises(ConversionError) as exc_info:
            convert_markdown("# Title")
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_packer_failure(self, monkeypatch, caplog):
        def boom(_):
            raise MemoryError("out of memory")

        monkeypatch.setattr(converter, "pack_docx", boom)
        with caplog.at_level(logging.ERROR):
            with pytest.raises(ConversionError) as exc_info:
                convert_markdown("# Title")

        assert str(exc_info.value) == "Failed to convert markdown to docx"
        assert isinstance(exc_info.value.__cause__, MemoryError)
        assert "DOCX packing failed" in caplog.text


class TestConversion:
    """Full markdown → DOCX bytes."""

    def test_returns_docx(self, open_docx):
        doc = open_docx(convert_markdown("# Title\n\nSome **bold** text."))
        texts = [p.text for p in doc.paragraphs if p.text]
        assert texts == ["Title", "Some bold text."]

        body = [p for p in doc.paragraphs if p.text == "Some bold text."][0]
        assert [r.text for r in body.runs] == ["Some ", "bold", " text."]
        assert body.runs[1].bold is True

    def test_sample_document(self, open_docx, sample_markdown):
        doc = open_docx(convert_markdown(sample_markdown))
        assert doc.core_properties.title == "Project Notes"
        assert len(doc.tables) == 1

        numbered = [p for p in doc.paragraphs
                    if p._p.pPr is not None and p._p.pPr.find(qn('w:numPr')) is not None]
        assert len(numbered) == 5

    def test_font_size(self, open_docx):
        from docx.shared import Pt

        doc = open_docx(convert_markdown("text", font_size=14))
        assert doc.styles['Normal'].font.size == Pt(14)

    def test_default_font_size_from_settings(self, monkeypatch):
        monkeypatch.setattr(converter.settings, "default_font_size", 11.0)
        assert build_markdown_document("text").font_size == 11.0

    def test_list_overflow_setting(self, monkeypatch):
        markdown = "".join(f"{'  ' * i}- level {i}\n" for i in range(10))
        monkeypatch.setattr(converter.settings, "list_level_overflow", "cycle")
        root = build_markdown_document(markdown)
        assert [b.text for b in root.blocks] == [f"level {i}" for i in range(10)]
        assert root.blocks[-1].numbering.level == 0

    def test_logs_summary(self, caplog):
        with caplog.at_level(logging.INFO):
            convert_markdown("# Title\n\n- a\n- b")
        assert "Converted 3 blocks" in caplog.text


class TestDownloadName:
    """derive_download_name"""

    @pytest.mark.parametrize("filename,expected", [
        (None, "converted.docx"),
        ("", "converted.docx"),
        ("notes.md", "notes.docx"),
        ("Notes.MARKDOWN", "Notes.docx"),
        ("dir/sub/readme.md", "readme.docx"),
        ("report", "report.docx"),
        ("report.docx", "report.docx"),
        ("data.txt", "data.txt.docx"),
    ])
    def test_names(self, filename, expected):
        assert derive_download_name(filename) == expected

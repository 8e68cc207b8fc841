"""
Integration tests for API endpoints (api/main.py)
"""
import pytest

import api.main as api_main
from core.errors import ConversionError

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class TestAPIBasics:
    """Test basic API functionality."""

    def test_health_check(self, client):
        """Test that API is responsive."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestConvertEndpoint:
    """Test POST /api/convert."""

    def test_convert_returns_docx(self, client, open_docx):
        response = client.post("/api/convert", json={"markdown": "# Title\n\nSome **bold** text."})
        assert response.status_code == 200
        assert response.headers["content-type"].startswith(DOCX_MEDIA_TYPE)
        assert response.headers["content-disposition"] == 'attachment; filename="converted.docx"'

        doc = open_docx(response.content)
        assert [p.text for p in doc.paragraphs if p.text] == ["Title", "Some bold text."]

    def test_filename_derives_download_name(self, client):
        response = client.post("/api/convert", json={"markdown": "x", "filename": "notes.md"})
        assert response.status_code == 200
        assert 'filename="notes.docx"' in response.headers["content-disposition"]

    def test_non_ascii_filename(self, client):
        response = client.post("/api/convert", json={"markdown": "x", "filename": "笔记.md"})
        assert response.status_code == 200
        disposition = response.headers["content-disposition"]
        assert 'filename="converted.docx"' in disposition
        assert "filename*=UTF-8''%E7%AC%94%E8%AE%B0.docx" in disposition

    def test_quote_in_filename(self, client):
        response = client.post("/api/convert", json={"markdown": "x", "filename": 'my "notes".md'})
        assert response.status_code == 200
        disposition = response.headers["content-disposition"]
        assert 'filename="my notes.docx"' in disposition
        assert "filename*=UTF-8''my%20%22notes%22.docx" in disposition

    def test_whitespace_only_markdown(self, client, open_docx):
        response = client.post("/api/convert", json={"markdown": "   \n"})
        assert response.status_code == 200
        assert [p.text for p in open_docx(response.content).paragraphs if p.text] == []

    @pytest.mark.parametrize("payload", [
        {},
        {"markdown": ""},
        {"markdown": 42},
        {"markdown": None},
    ])
    def test_invalid_markdown(self, client, payload):
        response = client.post("/api/convert", json=payload)
        assert response.status_code == 400
        assert response.json() == {"error": "Markdown content is required"}

    def test_font_size_out_of_range(self, client):
        response = client.post("/api/convert", json={"markdown": "x", "font_size": 30})
        assert response.status_code == 422

    def test_font_size_applied(self, client, open_docx):
        from docx.shared import Pt

        response = client.post("/api/convert", json={"markdown": "x", "font_size": 16})
        assert response.status_code == 200
        assert open_docx(response.content).styles['Normal'].font.size == Pt(16)

    def test_conversion_failure(self, client, monkeypatch):
        def boom(markdown, font_size=None):
            raise ConversionError("internal detail")

        monkeypatch.setattr(api_main, "convert_markdown", boom)
        response = client.post("/api/convert", json={"markdown": "# Title"})
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to convert markdown to docx"}
        assert "internal detail" not in response.text

    def test_payload_too_large(self, client, monkeypatch):
        monkeypatch.setattr(api_main.settings, "max_markdown_size_kb", 0)
        response = client.post("/api/convert", json={"markdown": "too big"})
        assert response.status_code == 413


class TestConvertFileEndpoint:
    """Test POST /api/convert/file."""

    def test_upload_markdown(self, client, open_docx):
        files = {"file": ("notes.md", "# Notes\n\n- a\n- b".encode("utf-8"), "text/markdown")}
        response = client.post("/api/convert/file", files=files)
        assert response.status_code == 200
        assert 'filename="notes.docx"' in response.headers["content-disposition"]
        assert open_docx(response.content).core_properties.title == "Notes"

    def test_upload_with_font_size(self, client, open_docx):
        from docx.shared import Pt

        files = {"file": ("a.markdown", b"text", "text/markdown")}
        response = client.post("/api/convert/file", files=files, data={"font_size": "9"})
        assert response.status_code == 200
        assert open_docx(response.content).styles['Normal'].font.size == Pt(9)

    def test_upload_non_ascii_filename(self, client):
        files = {"file": ("tài liệu.md", b"# Hi", "text/markdown")}
        response = client.post("/api/convert/file", files=files)
        assert response.status_code == 200
        disposition = response.headers["content-disposition"]
        assert 'filename="ti liu.docx"' in disposition
        assert "filename*=UTF-8''t%C3%A0i%20li%E1%BB%87u.docx" in disposition

    def test_rejects_other_extensions(self, client):
        files = {"file": ("notes.txt", b"# Notes", "text/plain")}
        response = client.post("/api/convert/file", files=files)
        assert response.status_code == 400
        assert "error" in response.json()

    def test_rejects_non_utf8(self, client):
        files = {"file": ("notes.md", b"\xff\xfe\x00bad", "text/markdown")}
        response = client.post("/api/convert/file", files=files)
        assert response.status_code == 400
        assert response.json() == {"error": "File must be UTF-8 encoded"}

    def test_empty_upload(self, client):
        files = {"file": ("empty.md", b"", "text/markdown")}
        response = client.post("/api/convert/file", files=files)
        assert response.status_code == 400
        assert response.json() == {"error": "Markdown content is required"}

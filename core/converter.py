"""
Markdown to DOCX conversion entry point.

The only place that validates input and turns parser/packer failures into
ConversionError. Everything below it (parser, composer, packer) is left to
raise freely.

Usage:
    from core.converter import convert_markdown

    data = convert_markdown("# Title\\n\\nSome **bold** text.")
    Path("out.docx").write_bytes(data)
"""

import time
from pathlib import Path
from typing import Optional

from config.constants import DEFAULT_DOWNLOAD_NAME, MARKDOWN_EXTENSIONS
from config.logging_config import get_logger
from config.settings import settings
from core.errors import ConversionError, InvalidInputError
from core.markdown.parser import parse_markdown
from core.rendering.block_composer import build_document
from core.rendering.docx_adapter import pack_docx
from core.rendering.document_model import DocumentRoot

logger = get_logger(__name__)


def validate_markdown(markdown) -> str:
    """Reject missing, non-string or empty markdown before any work starts."""
    if markdown is None or not isinstance(markdown, str):
        raise InvalidInputError("Markdown content is required")
    if markdown == "":
        raise InvalidInputError("Markdown content is required")
    return markdown


def build_markdown_document(markdown: str, font_size: Optional[float] = None) -> DocumentRoot:
    """
    Parse and compose markdown into the document model without packing it.

    Raises:
        InvalidInputError: markdown is missing or empty
        ConversionError: the parser failed
    """
    validate_markdown(markdown)
    if font_size is None:
        font_size = settings.default_font_size

    try:
        ast = parse_markdown(markdown)
        return build_document(
            ast.children,
            font_size=font_size,
            list_level_overflow=settings.list_level_overflow,
        )
    except Exception as e:
        logger.exception("Markdown parsing failed")
        raise ConversionError("Failed to parse markdown") from e


def convert_markdown(markdown: str, font_size: Optional[float] = None) -> bytes:
    """
    Convert markdown text to DOCX bytes.

    Args:
        markdown: Raw markdown text
        font_size: Optional base body font size in points

    Returns:
        DOCX file contents

    Raises:
        InvalidInputError: markdown is missing or empty
        ConversionError: parsing or packing failed
    """
    start_time = time.time()
    logger.info(f"Converting markdown ({len(markdown) if isinstance(markdown, str) else 0} chars)")

    root = build_markdown_document(markdown, font_size=font_size)

    try:
        data = pack_docx(root)
    except Exception as e:
        logger.exception("DOCX packing failed")
        raise ConversionError("Failed to convert markdown to docx") from e

    elapsed = time.time() - start_time
    stats = root.get_statistics()
    logger.info(
        f"Converted {len(root)} blocks "
        f"({stats['headings']} headings, {stats['list_items']} list items, "
        f"{stats['tables']} tables) → {len(data)} bytes in {elapsed:.2f}s"
    )
    return data


def derive_download_name(filename: Optional[str]) -> str:
    """
    Download name for a converted file.

    ``notes.md`` and ``notes.markdown`` become ``notes.docx``; a missing name
    falls back to ``converted.docx``.
    """
    if not filename:
        return DEFAULT_DOWNLOAD_NAME

    path = Path(Path(filename).name)
    if path.suffix.lower() in MARKDOWN_EXTENSIONS:
        return f"{path.stem}.docx"
    if not path.stem:
        return DEFAULT_DOWNLOAD_NAME
    return f"{path.name}.docx" if path.suffix.lower() != ".docx" else path.name

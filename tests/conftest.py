"""
Pytest configuration and shared fixtures for Markdown to DOCX tests.
"""
import sys
import pytest
import tempfile
import shutil
from pathlib import Path
from typing import Generator

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from core.markdown.parser import parse_markdown
from core.rendering.block_composer import compose_blocks


# ============================================================================
# Fixtures: Filesystem
# ============================================================================

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


# ============================================================================
# Fixtures: Pipeline helpers
# ============================================================================

@pytest.fixture
def compose_markdown():
    """Parse markdown and compose its top-level blocks."""
    def _compose(markdown: str, **kwargs):
        return compose_blocks(parse_markdown(markdown).children, **kwargs)
    return _compose


@pytest.fixture
def sample_markdown() -> str:
    """A document touching every block kind."""
    return (
        "# Project Notes\n"
        "\n"
        "Intro with **bold**, *italic*, ~~gone~~ and `code`.\n"
        "\n"
        "> Quoted text\n"
        "\n"
        "- one\n"
        "  - nested\n"
        "- [x] done\n"
        "\n"
        "1. first\n"
        "2. second\n"
        "\n"
        "```python\n"
        "print('hi')\n"
        "\n"
        "```\n"
        "\n"
        "| Name | Value |\n"
        "| --- | --- |\n"
        "| a | 1 |\n"
        "\n"
        "See [the docs](https://example.com/docs).\n"
        "\n"
        "---\n"
        "\n"
        "![diagram](https://example.com/d.png)\n"
    )

"""
Rendering Module

Turns the Markdown AST into the word-processor document model and packs it
into DOCX (python-docx).
"""

from .block_composer import BlockComposer, build_document, compose_blocks
from .docx_adapter import pack_docx, render_docx, save_docx
from .inline_formatter import flatten_for_link, flatten_inline
from .numbering import BULLET_LIST, NUMBERING_DEFINITIONS, ORDERED_LIST

__all__ = [
    'BlockComposer',
    'build_document',
    'compose_blocks',
    'flatten_inline',
    'flatten_for_link',
    'render_docx',
    'pack_docx',
    'save_docx',
    'BULLET_LIST',
    'ORDERED_LIST',
    'NUMBERING_DEFINITIONS',
]

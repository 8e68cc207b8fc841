"""
Markdown Module

Parses markdown text (markdown-it-py) into a typed mdast-style syntax tree.
"""

from .parser import MarkdownParser, parse_markdown

__all__ = [
    'MarkdownParser',
    'parse_markdown',
]

"""
Markdown Parser - markdown-it-py syntax tree to Markdown AST

Parses raw markdown with markdown-it-py (CommonMark plus the GFM table and
strikethrough rules) and walks the resulting SyntaxTreeNode into the typed
nodes of ``core.markdown.mdast``.

Flow:
    markdown text → MarkdownIt.parse → SyntaxTreeNode → MarkdownParser → Root

Mapping notes:
    - thead/tbody wrappers are dropped; rows hang directly off the Table
    - ``[ ]`` / ``[x]`` at the start of a list item become ListItem.checked
    - soft breaks become a single space, hard breaks become Break
    - raw HTML and any other unknown leaf become Literal
    - any other unknown container becomes a generic Parent
"""

import logging
import re
from typing import List, Optional

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode

from core.markdown.mdast import (
    Node,
    Root,
    Parent,
    Literal,
    Heading,
    Paragraph,
    Blockquote,
    List as ListNode,
    ListItem,
    Table,
    TableRow,
    TableCell,
    Code,
    ThematicBreak,
    Emphasis,
    Strong,
    Delete,
    Link,
    Text,
    InlineCode,
    Break,
    Image,
)

logger = logging.getLogger(__name__)

TASK_MARKER = re.compile(r"^\[([ xX])\](?:[ \t]+|$)")
ALIGN_STYLE = re.compile(r"text-align:\s*(left|center|right)")
MAX_NESTING = 200


class MarkdownParser:
    """
    Builds a Markdown AST from markdown text.

    Usage:
        parser = MarkdownParser()
        root = parser.parse("# Title\\n\\nSome **bold** text.")
    """

    def __init__(self):
        self._md = self._create_parser()

    def _create_parser(self) -> MarkdownIt:
        # The commonmark preset stops nesting at 20 tokens (about 10 list levels)
        md = MarkdownIt("commonmark", {"maxNesting": MAX_NESTING})
        md.enable("table")
        md.enable("strikethrough")
        return md

    def parse(self, markdown: str) -> Root:
        """
        Parse markdown into a Root node.

        Args:
            markdown: Raw markdown text

        Returns:
            Root whose children are the top-level block nodes
        """
        tokens = self._md.parse(markdown)
        tree = SyntaxTreeNode(tokens)
        root = Root(children=self._convert_children(tree))
        logger.debug(f"Parsed markdown: {len(markdown)} chars, {len(root.children)} top-level blocks")
        return root

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _convert_children(self, node: SyntaxTreeNode) -> List[Node]:
        children: List[Node] = []
        for child in node.children:
            children.extend(self._convert_node(child))
        return children

    def _convert_node(self, node: SyntaxTreeNode) -> List[Node]:
        """
        Convert one syntax tree node.

        Returns a list because wrapper nodes (inline, thead, tbody) splice
        their children into the parent.
        """
        handlers = {
            "heading": self._convert_heading,
            "paragraph": self._convert_paragraph,
            "blockquote": self._convert_blockquote,
            "bullet_list": self._convert_list,
            "ordered_list": self._convert_list,
            "list_item": self._convert_list_item,
            "fence": self._convert_code,
            "code_block": self._convert_code,
            "hr": self._convert_hr,
            "table": self._convert_table,
            "tr": self._convert_table_row,
            "th": self._convert_table_cell,
            "td": self._convert_table_cell,
            "em": self._convert_emphasis,
            "strong": self._convert_strong,
            "s": self._convert_delete,
            "link": self._convert_link,
            "image": self._convert_image,
            "text": self._convert_text,
            "text_special": self._convert_text,
            "code_inline": self._convert_inline_code,
            "softbreak": self._convert_softbreak,
            "hardbreak": self._convert_hardbreak,
        }

        # markdown-it leaves empty text tokens next to emphasis delimiters
        if node.type in ("text", "text_special") and not node.content:
            return []

        handler = handlers.get(node.type)
        if handler:
            return [handler(node)]

        # Transparent wrappers
        if node.type in ("inline", "thead", "tbody"):
            return self._convert_children(node)

        if node.children:
            logger.debug(f"Unknown container '{node.type}', keeping as generic parent")
            return [Parent(children=self._convert_children(node), name=node.type)]

        return [Literal(value=node.content or "", name=node.type)]

    # ------------------------------------------------------------------
    # Block nodes
    # ------------------------------------------------------------------

    def _convert_heading(self, node: SyntaxTreeNode) -> Heading:
        depth = int(node.tag[1:]) if node.tag[1:].isdigit() else 1
        return Heading(children=self._convert_children(node), depth=depth)

    def _convert_paragraph(self, node: SyntaxTreeNode) -> Paragraph:
        return Paragraph(children=self._convert_children(node))

    def _convert_blockquote(self, node: SyntaxTreeNode) -> Blockquote:
        return Blockquote(children=self._convert_children(node))

    def _convert_list(self, node: SyntaxTreeNode) -> ListNode:
        ordered = node.type == "ordered_list"
        start = None
        if ordered:
            start = int(node.attrs.get("start", 1))
        return ListNode(children=self._convert_children(node), ordered=ordered, start=start)

    def _convert_list_item(self, node: SyntaxTreeNode) -> ListItem:
        children = self._convert_children(node)
        checked = self._extract_task_marker(children)
        return ListItem(children=children, checked=checked)

    def _extract_task_marker(self, children: List[Node]) -> Optional[bool]:
        """Strip a leading ``[ ]`` / ``[x]`` from the item's first paragraph."""
        if not children or not isinstance(children[0], Paragraph):
            return None
        paragraph = children[0]
        if not paragraph.children or not isinstance(paragraph.children[0], Text):
            return None

        first = paragraph.children[0]
        match = TASK_MARKER.match(first.value)
        if not match:
            return None

        first.value = first.value[match.end():]
        if not first.value:
            paragraph.children.pop(0)
        return match.group(1) in ("x", "X")

    def _convert_code(self, node: SyntaxTreeNode) -> Code:
        value = node.content or ""
        if value.endswith("\n"):
            value = value[:-1]
        info = (node.info or "").strip()
        lang = info.split()[0] if info else None
        return Code(value=value, lang=lang)

    def _convert_hr(self, node: SyntaxTreeNode) -> ThematicBreak:
        return ThematicBreak()

    def _convert_table(self, node: SyntaxTreeNode) -> Table:
        rows = self._convert_children(node)
        align: List[Optional[str]] = []
        for child in node.children:
            if child.type != "thead":
                continue
            for tr in child.children:
                align = [self._cell_alignment(th) for th in tr.children]
        return Table(children=rows, align=align)

    def _convert_table_row(self, node: SyntaxTreeNode) -> TableRow:
        return TableRow(children=self._convert_children(node))

    def _convert_table_cell(self, node: SyntaxTreeNode) -> TableCell:
        return TableCell(children=self._convert_children(node))

    @staticmethod
    def _cell_alignment(node: SyntaxTreeNode) -> Optional[str]:
        match = ALIGN_STYLE.search(str(node.attrs.get("style", "")))
        return match.group(1) if match else None

    # ------------------------------------------------------------------
    # Inline nodes
    # ------------------------------------------------------------------

    def _convert_emphasis(self, node: SyntaxTreeNode) -> Emphasis:
        return Emphasis(children=self._convert_children(node))

    def _convert_strong(self, node: SyntaxTreeNode) -> Strong:
        return Strong(children=self._convert_children(node))

    def _convert_delete(self, node: SyntaxTreeNode) -> Delete:
        return Delete(children=self._convert_children(node))

    def _convert_link(self, node: SyntaxTreeNode) -> Link:
        return Link(
            children=self._convert_children(node),
            url=str(node.attrs.get("href", "")),
            title=node.attrs.get("title"),
        )

    def _convert_image(self, node: SyntaxTreeNode) -> Image:
        # Alt text is in node.content (or children), not attrs['alt']
        return Image(url=str(node.attrs.get("src", "")), alt=node.content or None)

    def _convert_text(self, node: SyntaxTreeNode) -> Text:
        return Text(value=node.content or "")

    def _convert_inline_code(self, node: SyntaxTreeNode) -> InlineCode:
        return InlineCode(value=node.content or "")

    def _convert_softbreak(self, node: SyntaxTreeNode) -> Text:
        return Text(value=" ")

    def _convert_hardbreak(self, node: SyntaxTreeNode) -> Break:
        return Break()


def parse_markdown(markdown: str) -> Root:
    """Parse markdown text into a Markdown AST root."""
    return MarkdownParser().parse(markdown)

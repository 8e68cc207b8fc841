"""
Block Composer - Markdown block nodes to paragraphs and tables

Walks an ordered sequence of block nodes once and emits the document model's
block elements:

    Heading        → ParagraphElement(heading_level)
    Paragraph      → ParagraphElement (links wrapped in Hyperlink)
    Blockquote     → children composed, paragraphs indented + left border
    List/ListItem  → numbered ParagraphElements, nested lists at level + 1
    Code           → one shaded monospace paragraph per line + spacer
    Table          → TableElement (row 0 bold + shaded) + spacer
    ThematicBreak  → empty paragraph with bottom border and right tab
    other parents  → children spliced in place

Inline content is delegated to core.rendering.inline_formatter.
"""

import logging
import re
from dataclasses import replace
from typing import List, Optional

from config.constants import (
    BLOCK_SPACER_SPACING_AFTER,
    BLOCKQUOTE_BORDER_COLOR,
    BLOCKQUOTE_BORDER_SIZE,
    BLOCKQUOTE_BORDER_SPACE,
    BLOCKQUOTE_INDENT,
    CHECKED_PREFIX,
    CODE_FONT_SIZE_HALF_POINTS,
    CODE_LINE_SPACING_AFTER,
    HEADING_SPACING_AFTER,
    HEADING_SPACING_BEFORE,
    LIST_ITEM_SPACING_AFTER,
    MONOSPACE_FONT,
    PARAGRAPH_SPACING_AFTER,
    RULE_BORDER_COLOR,
    RULE_BORDER_SIZE,
    RULE_BORDER_SPACE,
    RULE_SPACING,
    SHADING_FILL,
    TAB_STOP_POSITION_MAX,
    TABLE_WIDTH_PERCENT,
    UNCHECKED_PREFIX,
)
from core.markdown.mdast import Node, NodeType, plain_text
from core.rendering.document_model import (
    DEFAULT_CONTEXT,
    HEADER_CONTEXT,
    BlockElement,
    Border,
    DocumentRoot,
    FormattingContext,
    Hyperlink,
    InlineMember,
    NumberingReference,
    ParagraphElement,
    StyledRun,
    TableCellElement,
    TableElement,
    TableRowElement,
    TabStop,
)
from core.rendering.inline_formatter import flatten_for_link, flatten_inline
from core.rendering.numbering import NUMBERING_DEFINITIONS, list_reference, resolve_level

logger = logging.getLogger(__name__)

LINE_BOUNDARY = re.compile(r"\r\n|\r|\n")

BLOCKQUOTE_BORDER = Border(
    style="single",
    size=BLOCKQUOTE_BORDER_SIZE,
    color=BLOCKQUOTE_BORDER_COLOR,
    space=BLOCKQUOTE_BORDER_SPACE,
)
RULE_BORDER = Border(
    style="single",
    size=RULE_BORDER_SIZE,
    color=RULE_BORDER_COLOR,
    space=RULE_BORDER_SPACE,
)


def build_inline_members(children: List[Node], ctx: FormattingContext = DEFAULT_CONTEXT) -> List[InlineMember]:
    """
    Build the inline content of one paragraph or table cell.

    Direct Link children become Hyperlink wrappers; everything else is
    flattened to runs.
    """
    members: List[InlineMember] = []
    for child in children:
        if child.type == NodeType.LINK:
            members.append(Hyperlink(url=child.url, runs=flatten_for_link(child, ctx)))
        else:
            members.extend(flatten_inline(child, ctx))
    return members


def checkbox_prefix(checked: Optional[bool]) -> Optional[str]:
    """Task-list glyph for a list item's tri-state ``checked`` flag."""
    if checked is True:
        return CHECKED_PREFIX
    if checked is False:
        return UNCHECKED_PREFIX
    return None


class BlockComposer:
    """
    Composes block elements from Markdown AST block nodes.

    Stateless apart from the list level overflow policy, so one instance may
    be shared between conversions.

    Usage:
        composer = BlockComposer()
        blocks = composer.compose(root.children)
    """

    def __init__(self, list_level_overflow: str = "clamp"):
        """
        Initialize composer.

        Args:
            list_level_overflow: "clamp" or "cycle" for lists nested
                deeper than the 9 defined numbering levels
        """
        self.list_level_overflow = list_level_overflow

    def compose(self, nodes: List[Node], list_level: int = 0) -> List[BlockElement]:
        """
        Compose an ordered sequence of block nodes.

        Args:
            nodes: Block nodes in reading order
            list_level: Current list nesting level

        Returns:
            Block elements in reading order
        """
        blocks: List[BlockElement] = []
        for node in nodes:
            blocks.extend(self._compose_node(node, list_level))
        return blocks

    def _compose_node(self, node: Node, list_level: int) -> List[BlockElement]:
        node_type = node.type

        if node_type == NodeType.HEADING:
            return [self._compose_heading(node)]
        elif node_type == NodeType.PARAGRAPH:
            return [self._compose_paragraph(node)]
        elif node_type == NodeType.BLOCKQUOTE:
            return self._compose_blockquote(node)
        elif node_type == NodeType.LIST:
            return self._compose_list(node, list_level)
        elif node_type == NodeType.CODE:
            return self._compose_code(node)
        elif node_type == NodeType.TABLE:
            return self._compose_table(node)
        elif node_type == NodeType.THEMATIC_BREAK:
            return [self._compose_thematic_break()]

        children = getattr(node, "children", None)
        if children is not None:
            return self.compose(children, list_level)

        logger.debug(f"Skipping block-level leaf '{node_type.value}'")
        return []

    # ------------------------------------------------------------------
    # Paragraph-like blocks
    # ------------------------------------------------------------------

    def _compose_heading(self, node: Node) -> ParagraphElement:
        return ParagraphElement(
            children=build_inline_members(node.children),
            heading_level=node.depth,
            spacing_before=HEADING_SPACING_BEFORE,
            spacing_after=HEADING_SPACING_AFTER,
        )

    def _compose_paragraph(self, node: Node) -> ParagraphElement:
        return ParagraphElement(
            children=build_inline_members(node.children),
            spacing_after=PARAGRAPH_SPACING_AFTER,
        )

    def _compose_blockquote(self, node: Node) -> List[BlockElement]:
        # Quoted content starts a fresh sequence; tables keep no border
        inner = self.compose(node.children)
        quoted: List[BlockElement] = []
        for block in inner:
            if isinstance(block, ParagraphElement):
                block = replace(block, indent_left=BLOCKQUOTE_INDENT, border_left=BLOCKQUOTE_BORDER)
            quoted.append(block)
        return quoted

    def _compose_thematic_break(self) -> ParagraphElement:
        return ParagraphElement(
            children=[StyledRun(text="\t")],
            border_bottom=RULE_BORDER,
            tab_stops=[TabStop(position=TAB_STOP_POSITION_MAX, alignment="right")],
            spacing_before=RULE_SPACING,
            spacing_after=RULE_SPACING,
        )

    @staticmethod
    def _spacer() -> ParagraphElement:
        return ParagraphElement(spacing_after=BLOCK_SPACER_SPACING_AFTER)

    # ------------------------------------------------------------------
    # Lists
    # ------------------------------------------------------------------

    def _compose_list(self, node: Node, list_level: int) -> List[BlockElement]:
        reference = list_reference(node.ordered)
        blocks: List[BlockElement] = []

        for item in node.children:
            if item.type != NodeType.LIST_ITEM:
                blocks.extend(self._compose_node(item, list_level))
                continue
            blocks.extend(self._compose_list_item(item, reference, list_level))

        return blocks

    def _compose_list_item(self, item: Node, reference: str, list_level: int) -> List[BlockElement]:
        prefix = checkbox_prefix(item.checked)
        blocks: List[BlockElement] = []

        for index, child in enumerate(item.children):
            if child.type == NodeType.LIST:
                blocks.extend(self._compose_list(child, list_level + 1))
            elif child.type == NodeType.PARAGRAPH:
                members = build_inline_members(child.children)
                if prefix and index == 0:
                    members.insert(0, StyledRun(text=prefix))
                blocks.append(ParagraphElement(
                    children=members,
                    numbering=NumberingReference(
                        reference=reference,
                        level=resolve_level(list_level, self.list_level_overflow),
                    ),
                    spacing_after=LIST_ITEM_SPACING_AFTER,
                ))
            else:
                blocks.extend(self._compose_node(child, list_level))

        return blocks

    # ------------------------------------------------------------------
    # Code and tables
    # ------------------------------------------------------------------

    def _compose_code(self, node: Node) -> List[BlockElement]:
        blocks: List[BlockElement] = []
        for line in LINE_BOUNDARY.split(node.value):
            blocks.append(ParagraphElement(
                children=[StyledRun(
                    text=line or " ",
                    font=MONOSPACE_FONT,
                    size=CODE_FONT_SIZE_HALF_POINTS,
                )],
                shading=SHADING_FILL,
                spacing_after=CODE_LINE_SPACING_AFTER,
            ))
        blocks.append(self._spacer())
        return blocks

    def _compose_table(self, node: Node) -> List[BlockElement]:
        rows: List[TableRowElement] = []

        for index, row in enumerate(node.children):
            header = index == 0
            ctx = HEADER_CONTEXT if header else DEFAULT_CONTEXT
            cells = []
            for cell in getattr(row, "children", None) or []:
                content = getattr(cell, "children", None) or []
                cells.append(TableCellElement(
                    paragraphs=[ParagraphElement(children=build_inline_members(content, ctx))],
                    shading=SHADING_FILL if header else None,
                ))
            rows.append(TableRowElement(cells=cells, header=header))

        return [TableElement(rows=rows, width_percent=TABLE_WIDTH_PERCENT), self._spacer()]


def compose_blocks(nodes: List[Node], list_level: int = 0,
                   list_level_overflow: str = "clamp") -> List[BlockElement]:
    """Compose block nodes into block elements."""
    return BlockComposer(list_level_overflow).compose(nodes, list_level)


def find_title(nodes: List[Node]) -> Optional[str]:
    """Plain text of the first level-1 heading, if any."""
    for node in nodes:
        if node.type == NodeType.HEADING and node.depth == 1:
            title = plain_text(node).strip()
            return title or None
    return None


def build_document(nodes: List[Node], font_size: Optional[float] = None,
                   list_level_overflow: str = "clamp") -> DocumentRoot:
    """
    Compose block nodes and attach them to a document root.

    Args:
        nodes: Top-level block nodes (usually Root.children)
        font_size: Optional base body font size in points
        list_level_overflow: Policy for lists deeper than 9 levels

    Returns:
        DocumentRoot with the shared numbering definitions
    """
    blocks = compose_blocks(nodes, list_level_overflow=list_level_overflow)
    root = DocumentRoot(
        numbering=NUMBERING_DEFINITIONS,
        blocks=blocks,
        title=find_title(nodes),
        font_size=font_size,
    )
    logger.debug(f"Built {root!r}")
    return root

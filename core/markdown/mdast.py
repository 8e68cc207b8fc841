"""
Markdown AST (mdast-style syntax tree)

Typed, read-only input to the rendering engine. Every node carries a
``type`` tag from :class:`NodeType`; container nodes own an ordered
``children`` list (document reading order), leaf nodes carry a ``value``.

Architecture:
    Markdown text
         ↓
    parser.parse_markdown (markdown-it-py)
         ↓
    Markdown AST (this layer)
         ↓
    block_composer / inline_formatter
         ↓
    DocumentRoot → docx_adapter (python-docx)

Two generic variants keep the union open for forward compatibility:
``Parent`` (any other container) and ``Literal`` (any other leaf).
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Optional


class NodeType(Enum):
    """Tags for every node variant the engine understands."""
    # Block containers
    ROOT = "root"
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    BLOCKQUOTE = "blockquote"
    LIST = "list"
    LIST_ITEM = "listItem"
    TABLE = "table"
    TABLE_ROW = "tableRow"
    TABLE_CELL = "tableCell"

    # Block leaves
    CODE = "code"
    THEMATIC_BREAK = "thematicBreak"

    # Inline containers
    EMPHASIS = "emphasis"
    STRONG = "strong"
    DELETE = "delete"
    SUPERSCRIPT = "superscript"
    SUBSCRIPT = "subscript"
    LINK = "link"

    # Inline leaves
    TEXT = "text"
    INLINE_CODE = "inlineCode"
    BREAK = "break"
    IMAGE = "image"

    # Fallbacks
    PARENT = "parent"
    LITERAL = "literal"


# ============================================================================
# Base classes
# ============================================================================

@dataclass
class Node:
    """Base class for all AST nodes."""
    # type is set by subclasses in __post_init__, not passed as parameter
    type: NodeType = field(init=False, default=NodeType.LITERAL)


@dataclass
class Parent(Node):
    """
    Container node.

    Also used directly for container shapes the engine has no dedicated
    handling for; ``name`` keeps the source tag for logging.
    """
    children: list[Node] = field(default_factory=list)
    name: str = field(default="", kw_only=True)

    def __post_init__(self):
        self.type = NodeType.PARENT


@dataclass
class Literal(Node):
    """Leaf node with a raw string payload (raw HTML and other unknown leaves)."""
    value: str = ""
    name: str = field(default="", kw_only=True)

    def __post_init__(self):
        self.type = NodeType.LITERAL


# ============================================================================
# Block nodes
# ============================================================================

@dataclass
class Root(Parent):
    """Document root."""

    def __post_init__(self):
        self.type = NodeType.ROOT


@dataclass
class Heading(Parent):
    """ATX / setext heading, depth 1-6."""
    depth: int = field(default=1, kw_only=True)

    def __post_init__(self):
        self.type = NodeType.HEADING


@dataclass
class Paragraph(Parent):
    def __post_init__(self):
        self.type = NodeType.PARAGRAPH


@dataclass
class Blockquote(Parent):
    def __post_init__(self):
        self.type = NodeType.BLOCKQUOTE


@dataclass
class List(Parent):
    """Ordered or bullet list; children are ListItem nodes."""
    ordered: bool = field(default=False, kw_only=True)
    start: Optional[int] = field(default=None, kw_only=True)

    def __post_init__(self):
        self.type = NodeType.LIST


@dataclass
class ListItem(Parent):
    """
    List item.

    ``checked`` is tri-state: True / False for task list items,
    None for plain items.
    """
    checked: Optional[bool] = field(default=None, kw_only=True)

    def __post_init__(self):
        self.type = NodeType.LIST_ITEM


@dataclass
class Table(Parent):
    """GFM table. ``align`` holds per-column hints (left/center/right/None)."""
    align: list[Optional[str]] = field(default_factory=list, kw_only=True)

    def __post_init__(self):
        self.type = NodeType.TABLE


@dataclass
class TableRow(Parent):
    def __post_init__(self):
        self.type = NodeType.TABLE_ROW


@dataclass
class TableCell(Parent):
    def __post_init__(self):
        self.type = NodeType.TABLE_CELL


@dataclass
class Code(Node):
    """Fenced or indented code block."""
    value: str = ""
    lang: Optional[str] = None

    def __post_init__(self):
        self.type = NodeType.CODE


@dataclass
class ThematicBreak(Node):
    def __post_init__(self):
        self.type = NodeType.THEMATIC_BREAK


# ============================================================================
# Inline nodes
# ============================================================================

@dataclass
class Emphasis(Parent):
    def __post_init__(self):
        self.type = NodeType.EMPHASIS


@dataclass
class Strong(Parent):
    def __post_init__(self):
        self.type = NodeType.STRONG


@dataclass
class Delete(Parent):
    """Strikethrough (``~~text~~``)."""

    def __post_init__(self):
        self.type = NodeType.DELETE


@dataclass
class Superscript(Parent):
    def __post_init__(self):
        self.type = NodeType.SUPERSCRIPT


@dataclass
class Subscript(Parent):
    def __post_init__(self):
        self.type = NodeType.SUBSCRIPT


@dataclass
class Link(Parent):
    url: str = field(default="", kw_only=True)
    title: Optional[str] = field(default=None, kw_only=True)

    def __post_init__(self):
        self.type = NodeType.LINK


@dataclass
class Text(Node):
    value: str = ""

    def __post_init__(self):
        self.type = NodeType.TEXT


@dataclass
class InlineCode(Node):
    value: str = ""

    def __post_init__(self):
        self.type = NodeType.INLINE_CODE


@dataclass
class Break(Node):
    """Hard line break."""
    value: str = ""

    def __post_init__(self):
        self.type = NodeType.BREAK


@dataclass
class Image(Node):
    url: str = ""
    alt: Optional[str] = None
    value: str = ""

    def __post_init__(self):
        self.type = NodeType.IMAGE


# ============================================================================
# Helper Functions
# ============================================================================

def iter_text(node: Node):
    """Yield every literal string under ``node`` in reading order."""
    value = getattr(node, "value", None)
    if value:
        yield value
    for child in getattr(node, "children", None) or []:
        yield from iter_text(child)


def plain_text(node: Node) -> str:
    """Concatenated literal text of a subtree (used for document titles)."""
    return "".join(iter_text(node))


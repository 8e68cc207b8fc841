"""
Document Model - Word-processor object model produced by the engine

A packer-agnostic representation of the output document. It sits between:
- Markdown AST (core.markdown.mdast) - WHAT the author wrote
- python-docx (core.rendering.docx_adapter) - HOW it is serialized

Structure:
    DocumentRoot
        numbering: shared NumberingDefinition constants
        blocks: ParagraphElement | TableElement
            ParagraphElement.children: StyledRun | Hyperlink
            TableElement.rows → TableRowElement.cells → TableCellElement.paragraphs

All measurements are WordprocessingML units: twips for spacing, indents and
tab stops, eighths of a point for border sizes, half-points for font sizes.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple, Union


# ============================================================================
# Inline formatting
# ============================================================================

@dataclass(frozen=True)
class FormattingContext:
    """
    Inherited inline flags, passed by value down the inline recursion.

    Flags are only ever switched on (bold inside italic keeps both).
    """
    bold: bool = False
    italic: bool = False
    strike: bool = False
    superscript: bool = False
    subscript: bool = False

    def with_flag(self, flag: str) -> "FormattingContext":
        """Return a copy with one more flag switched on."""
        return replace(self, **{flag: True})


DEFAULT_CONTEXT = FormattingContext()
HEADER_CONTEXT = FormattingContext(bold=True)


@dataclass(frozen=True)
class StyledRun:
    """A contiguous span of text with one resolved set of formatting."""
    text: str = ""
    bold: bool = False
    italic: bool = False
    strike: bool = False
    superscript: bool = False
    subscript: bool = False
    font: Optional[str] = None  # Monospace font for code
    color: Optional[str] = None  # Hex color (without #)
    size: Optional[int] = None  # Half-points
    underline: bool = False
    char_style: Optional[str] = None  # e.g. "Hyperlink"
    is_break: bool = False  # Line break marker, carries no text

    @classmethod
    def from_context(cls, text: str, ctx: FormattingContext) -> "StyledRun":
        return cls(
            text=text,
            bold=ctx.bold,
            italic=ctx.italic,
            strike=ctx.strike,
            superscript=ctx.superscript,
            subscript=ctx.subscript,
        )

    @property
    def plain_text(self) -> str:
        return "\n" if self.is_break else self.text


@dataclass
class Hyperlink:
    """External hyperlink wrapping an ordered group of runs."""
    url: str
    runs: List[StyledRun] = field(default_factory=list)

    @property
    def plain_text(self) -> str:
        return "".join(run.plain_text for run in self.runs)


InlineMember = Union[StyledRun, Hyperlink]


# ============================================================================
# Paragraph decorations
# ============================================================================

@dataclass(frozen=True)
class Border:
    """Single paragraph border edge."""
    style: str = "single"
    size: int = 6  # Eighths of a point
    color: str = "auto"
    space: int = 0  # Points between border and text


@dataclass(frozen=True)
class TabStop:
    position: int  # Twips
    alignment: str = "left"  # left, center, right


@dataclass(frozen=True)
class NumberingReference:
    """Paragraph membership in a list: which scheme, which level."""
    reference: str
    level: int = 0


# ============================================================================
# Block elements
# ============================================================================

@dataclass
class ParagraphElement:
    """A paragraph: ordered inline members plus optional layout attributes."""
    children: List[InlineMember] = field(default_factory=list)
    heading_level: Optional[int] = None
    numbering: Optional[NumberingReference] = None
    indent_left: Optional[int] = None
    border_left: Optional[Border] = None
    border_bottom: Optional[Border] = None
    shading: Optional[str] = None  # Fill color
    spacing_before: Optional[int] = None
    spacing_after: Optional[int] = None
    tab_stops: List[TabStop] = field(default_factory=list)

    @property
    def runs(self) -> List[StyledRun]:
        """All runs in reading order, hyperlink contents included."""
        flat: List[StyledRun] = []
        for member in self.children:
            if isinstance(member, Hyperlink):
                flat.extend(member.runs)
            else:
                flat.append(member)
        return flat

    @property
    def text(self) -> str:
        return "".join(member.plain_text for member in self.children)


@dataclass
class TableCellElement:
    paragraphs: List[ParagraphElement] = field(default_factory=list)
    shading: Optional[str] = None


@dataclass
class TableRowElement:
    cells: List[TableCellElement] = field(default_factory=list)
    header: bool = False


@dataclass
class TableElement:
    rows: List[TableRowElement] = field(default_factory=list)
    width_percent: int = 100

    @property
    def column_count(self) -> int:
        return max((len(row.cells) for row in self.rows), default=0)


BlockElement = Union[ParagraphElement, TableElement]


# ============================================================================
# Numbering
# ============================================================================

@dataclass(frozen=True)
class NumberingLevel:
    """One level of a numbering scheme (maps to w:lvl)."""
    level: int
    format: str  # bullet, decimal, lowerLetter, lowerRoman
    text: str  # Glyph or level text such as "%1."
    alignment: str = "left"
    indent_left: int = 0  # Twips
    hanging: int = 0  # Twips
    start: int = 1


@dataclass(frozen=True)
class NumberingDefinition:
    """Named multi-level numbering scheme (maps to w:abstractNum + w:num)."""
    reference: str
    levels: Tuple[NumberingLevel, ...]


# ============================================================================
# Document-level Classes
# ============================================================================

@dataclass
class DocumentRoot:
    """
    Top-level output of a conversion call, handed to the packer.

    Usage:
        root = build_document(parse_markdown(text).children)
        data = pack_docx(root)
    """
    numbering: Tuple[NumberingDefinition, ...]
    blocks: List[BlockElement] = field(default_factory=list)
    title: Optional[str] = None
    font_size: Optional[float] = None  # Base body font size in points

    def paragraphs(self) -> List[ParagraphElement]:
        """Top-level paragraphs (table contents excluded)."""
        return [b for b in self.blocks if isinstance(b, ParagraphElement)]

    def tables(self) -> List[TableElement]:
        return [b for b in self.blocks if isinstance(b, TableElement)]

    def get_statistics(self) -> Dict[str, int]:
        """
        Get statistics about blocks in the document.

        Returns:
            Dict with counts of each block kind
        """
        paragraphs = self.paragraphs()
        return {
            'paragraphs': len(paragraphs),
            'headings': len([p for p in paragraphs if p.heading_level]),
            'list_items': len([p for p in paragraphs if p.numbering]),
            'tables': len(self.tables()),
            'hyperlinks': len([m for p in paragraphs for m in p.children if isinstance(m, Hyperlink)]),
        }

    def __len__(self) -> int:
        """Number of top-level blocks."""
        return len(self.blocks)

    def __repr__(self) -> str:
        stats = self.get_statistics()
        return (f"DocumentRoot(blocks={len(self.blocks)}, "
                f"headings={stats['headings']}, "
                f"list_items={stats['list_items']}, "
                f"tables={stats['tables']})")


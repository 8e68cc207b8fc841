"""
DOCX Adapter - Packs the document model into a DOCX file

Bridge between the packer-agnostic document model and python-docx.

Architecture:
    DocumentRoot → render_docx() → docx.Document → pack_docx() → bytes

What gets written:
    - numbering definitions → w:abstractNum + w:num in word/numbering.xml
    - NumberingReference    → w:numPr (ilvl + numId)
    - run flags             → bold, italic, strike, vertAlign, font, color,
                              size, underline, character style
    - Hyperlink             → w:hyperlink with an external relationship
    - paragraph decorations → pBdr, shd, tabs, spacing, ind
    - TableElement          → 'Table Grid' table at a percentage width with
                              shaded header cells

Usage:
    from core.rendering.docx_adapter import pack_docx

    data = pack_docx(build_document(parse_markdown(text).children))
"""

import logging
from io import BytesIO
from pathlib import Path
from typing import Dict, Union

from docx import Document
from docx.enum.style import WD_STYLE_TYPE
from docx.enum.text import WD_TAB_ALIGNMENT
from docx.opc.constants import RELATIONSHIP_TYPE as RT
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt, RGBColor, Twips

from config.constants import HALF_POINTS_PER_POINT, HYPERLINK_COLOR, HYPERLINK_STYLE
from core.rendering.document_model import (
    Border,
    DocumentRoot,
    Hyperlink,
    NumberingDefinition,
    ParagraphElement,
    StyledRun,
    TableElement,
)

logger = logging.getLogger(__name__)

# w:pPr children that must follow w:numPr / w:pBdr / w:shd (schema order)
_PPR_TAIL = (
    'w:tabs', 'w:suppressAutoHyphens', 'w:kinsoku', 'w:wordWrap',
    'w:overflowPunct', 'w:topLinePunct', 'w:autoSpaceDE', 'w:autoSpaceDN',
    'w:bidi', 'w:adjustRightInd', 'w:snapToGrid', 'w:spacing', 'w:ind',
    'w:contextualSpacing', 'w:mirrorIndents', 'w:suppressOverlap', 'w:jc',
    'w:textDirection', 'w:textAlignment', 'w:textboxTightWrap',
    'w:outlineLvl', 'w:divId', 'w:cnfStyle', 'w:rPr', 'w:sectPr',
    'w:pPrChange',
)
_AFTER_SHD = _PPR_TAIL
_AFTER_PBDR = ('w:shd',) + _AFTER_SHD
_AFTER_NUMPR = ('w:suppressLineNumbers', 'w:pBdr') + _AFTER_PBDR

TAB_ALIGNMENTS = {
    'left': WD_TAB_ALIGNMENT.LEFT,
    'center': WD_TAB_ALIGNMENT.CENTER,
    'right': WD_TAB_ALIGNMENT.RIGHT,
}

NumberingIds = Dict[str, str]


# ============================================================================
# Main Rendering Functions
# ============================================================================

def render_docx(root: DocumentRoot) -> Document:
    """
    Render a DocumentRoot into a python-docx Document.

    Args:
        root: Composed document model

    Returns:
        In-memory python-docx Document
    """
    logger.debug(f"Rendering {root!r}")
    doc = Document()

    _setup_document_properties(doc, root)
    _setup_styles(doc, root)
    numbering_ids = register_numbering(doc, root.numbering)

    for block in root.blocks:
        _render_block(doc, block, numbering_ids)

    return doc


def pack_docx(root: DocumentRoot) -> bytes:
    """Render the document model and serialize it to DOCX bytes."""
    doc = render_docx(root)
    buffer = BytesIO()
    doc.save(buffer)
    data = buffer.getvalue()
    logger.debug(f"Packed DOCX: {len(data)} bytes")
    return data


def save_docx(root: DocumentRoot, output_path: Union[str, Path]) -> Path:
    """Render the document model and write it to ``output_path``."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    render_docx(root).save(str(output_path))
    logger.info(f"✅ DOCX saved: {output_path}")
    return output_path


# ============================================================================
# Document Setup
# ============================================================================

def _setup_document_properties(doc: Document, root: DocumentRoot) -> None:
    if root.title:
        doc.core_properties.title = root.title


def _setup_styles(doc: Document, root: DocumentRoot) -> None:
    """Base font size and the character style used by link runs."""
    if root.font_size:
        doc.styles['Normal'].font.size = Pt(root.font_size)

    if HYPERLINK_STYLE not in doc.styles:
        style = doc.styles.add_style(HYPERLINK_STYLE, WD_STYLE_TYPE.CHARACTER)
        style.font.color.rgb = RGBColor.from_string(HYPERLINK_COLOR)
        style.font.underline = True


def register_numbering(doc: Document, definitions) -> NumberingIds:
    """
    Add each numbering definition to word/numbering.xml.

    Every definition becomes one w:abstractNum with one w:lvl per level and
    one w:num instance pointing at it.

    Returns:
        Mapping of definition reference → w:numId value
    """
    numbering = doc.part.numbering_part.element
    abstract_ids = [int(el.get(qn('w:abstractNumId')))
                    for el in numbering.findall(qn('w:abstractNum'))]
    num_ids = [int(el.get(qn('w:numId'))) for el in numbering.findall(qn('w:num'))]

    next_abstract_id = max(abstract_ids, default=-1) + 1
    next_num_id = max(num_ids, default=0) + 1

    ids: NumberingIds = {}
    for definition in definitions:
        abstract_num = _build_abstract_num(definition, str(next_abstract_id))
        # abstractNum elements must precede all w:num elements
        first_num = numbering.find(qn('w:num'))
        if first_num is not None:
            first_num.addprevious(abstract_num)
        else:
            numbering.append(abstract_num)

        num = OxmlElement('w:num')
        num.set(qn('w:numId'), str(next_num_id))
        abstract_ref = OxmlElement('w:abstractNumId')
        abstract_ref.set(qn('w:val'), str(next_abstract_id))
        num.append(abstract_ref)

        existing_nums = numbering.findall(qn('w:num'))
        if existing_nums:
            existing_nums[-1].addnext(num)
        else:
            numbering.append(num)

        ids[definition.reference] = str(next_num_id)
        next_abstract_id += 1
        next_num_id += 1

    logger.debug(f"Registered numbering definitions: {ids}")
    return ids


def _build_abstract_num(definition: NumberingDefinition, abstract_id: str):
    abstract_num = OxmlElement('w:abstractNum')
    abstract_num.set(qn('w:abstractNumId'), abstract_id)

    multi_level = OxmlElement('w:multiLevelType')
    multi_level.set(qn('w:val'), 'multilevel')
    abstract_num.append(multi_level)

    for level in definition.levels:
        lvl = OxmlElement('w:lvl')
        lvl.set(qn('w:ilvl'), str(level.level))

        for tag, value in (('w:start', str(level.start)),
                           ('w:numFmt', level.format),
                           ('w:lvlText', level.text),
                           ('w:lvlJc', level.alignment)):
            child = OxmlElement(tag)
            child.set(qn('w:val'), value)
            lvl.append(child)

        ppr = OxmlElement('w:pPr')
        ind = OxmlElement('w:ind')
        ind.set(qn('w:left'), str(level.indent_left))
        ind.set(qn('w:hanging'), str(level.hanging))
        ppr.append(ind)
        lvl.append(ppr)

        abstract_num.append(lvl)

    return abstract_num


# ============================================================================
# Block Rendering
# ============================================================================

def _render_block(doc: Document, block, numbering_ids: NumberingIds) -> None:
    """Dispatch one block element to its renderer."""
    if isinstance(block, ParagraphElement):
        if block.heading_level:
            paragraph = doc.add_paragraph(style=f'Heading {block.heading_level}')
        else:
            paragraph = doc.add_paragraph()
        _render_paragraph(paragraph, block, numbering_ids)
    elif isinstance(block, TableElement):
        _render_table(doc, block, numbering_ids)
    else:
        logger.warning(f"Unknown block type: {type(block)}")


def _render_paragraph(paragraph, para: ParagraphElement, numbering_ids: NumberingIds) -> None:
    """Write layout attributes and inline members into a python-docx paragraph."""
    _apply_paragraph_format(paragraph, para, numbering_ids)

    for member in para.children:
        if isinstance(member, Hyperlink):
            _render_hyperlink(paragraph, member)
        else:
            _render_run(paragraph, member)


def _apply_paragraph_format(paragraph, para: ParagraphElement, numbering_ids: NumberingIds) -> None:
    fmt = paragraph.paragraph_format

    if para.spacing_before is not None:
        fmt.space_before = Twips(para.spacing_before)
    if para.spacing_after is not None:
        fmt.space_after = Twips(para.spacing_after)
    if para.indent_left is not None:
        fmt.left_indent = Twips(para.indent_left)

    for tab in para.tab_stops:
        fmt.tab_stops.add_tab_stop(Twips(tab.position), TAB_ALIGNMENTS.get(tab.alignment, WD_TAB_ALIGNMENT.LEFT))

    if para.numbering is not None:
        num_id = numbering_ids.get(para.numbering.reference)
        if num_id is None:
            logger.warning(f"No numbering registered for '{para.numbering.reference}'")
        else:
            _set_numbering(paragraph, num_id, para.numbering.level)

    if para.border_left is not None or para.border_bottom is not None:
        _set_borders(paragraph, para.border_left, para.border_bottom)

    if para.shading:
        _set_paragraph_shading(paragraph, para.shading)


def _set_numbering(paragraph, num_id: str, level: int) -> None:
    pPr = paragraph._p.get_or_add_pPr()
    numPr = OxmlElement('w:numPr')
    ilvl = OxmlElement('w:ilvl')
    ilvl.set(qn('w:val'), str(level))
    numPr.append(ilvl)
    num = OxmlElement('w:numId')
    num.set(qn('w:val'), num_id)
    numPr.append(num)
    pPr.insert_element_before(numPr, *_AFTER_NUMPR)


def _border_element(tag: str, border: Border):
    edge = OxmlElement(tag)
    edge.set(qn('w:val'), border.style)
    edge.set(qn('w:sz'), str(border.size))  # eighths of a point
    edge.set(qn('w:space'), str(border.space))
    edge.set(qn('w:color'), border.color)
    return edge


def _set_borders(paragraph, left: Border = None, bottom: Border = None) -> None:
    """Add left and/or bottom paragraph borders using XML manipulation."""
    pPr = paragraph._p.get_or_add_pPr()
    pBdr = OxmlElement('w:pBdr')
    # Edge order inside pBdr: top, left, bottom, right
    if left is not None:
        pBdr.append(_border_element('w:left', left))
    if bottom is not None:
        pBdr.append(_border_element('w:bottom', bottom))
    pPr.insert_element_before(pBdr, *_AFTER_PBDR)


def _shading_element(fill: str):
    shading = OxmlElement('w:shd')
    shading.set(qn('w:val'), 'clear')
    shading.set(qn('w:color'), 'auto')
    shading.set(qn('w:fill'), fill)
    return shading


def _set_paragraph_shading(paragraph, fill: str) -> None:
    pPr = paragraph._p.get_or_add_pPr()
    pPr.insert_element_before(_shading_element(fill), *_AFTER_SHD)


# ============================================================================
# Inline Rendering
# ============================================================================

def _render_run(paragraph, styled: StyledRun):
    if styled.is_break:
        run = paragraph.add_run()
        run.add_break()
        return run

    run = paragraph.add_run(styled.text)
    _apply_run_format(run, styled)
    return run


def _apply_run_format(run, styled: StyledRun) -> None:
    """Apply run-level flags; unset flags are left to the style."""
    if styled.char_style:
        run.style = styled.char_style
    if styled.bold:
        run.bold = True
    if styled.italic:
        run.italic = True

    font = run.font
    if styled.strike:
        font.strike = True
    if styled.superscript:
        font.superscript = True
    elif styled.subscript:
        font.subscript = True
    if styled.underline:
        font.underline = True
    if styled.font:
        font.name = styled.font
    if styled.size:
        font.size = Pt(styled.size / HALF_POINTS_PER_POINT)
    if styled.color:
        font.color.rgb = RGBColor.from_string(styled.color)


def _render_hyperlink(paragraph, link: Hyperlink) -> None:
    """
    Add a w:hyperlink wrapper holding the link's runs.

    Runs are created through python-docx first, then moved into the wrapper.
    """
    if not link.url:
        for styled in link.runs:
            _render_run(paragraph, styled)
        return

    r_id = paragraph.part.relate_to(link.url, RT.HYPERLINK, is_external=True)
    hyperlink = OxmlElement('w:hyperlink')
    hyperlink.set(qn('r:id'), r_id)
    paragraph._p.append(hyperlink)

    for styled in link.runs:
        run = _render_run(paragraph, styled)
        hyperlink.append(run._r)


# ============================================================================
# Tables
# ============================================================================

def _render_table(doc: Document, table_model: TableElement, numbering_ids: NumberingIds) -> None:
    columns = table_model.column_count
    if not table_model.rows or columns == 0:
        logger.warning("Skipping empty table")
        return

    table = doc.add_table(rows=len(table_model.rows), cols=columns)
    table.style = 'Table Grid'
    _set_table_width(table, table_model.width_percent)

    for row_idx, row in enumerate(table_model.rows):
        for col_idx, cell in enumerate(row.cells):
            doc_cell = table.cell(row_idx, col_idx)

            for para_idx, para in enumerate(cell.paragraphs):
                paragraph = doc_cell.paragraphs[0] if para_idx == 0 else doc_cell.add_paragraph()
                _render_paragraph(paragraph, para, numbering_ids)

            # Background color (using XML for cell shading)
            if cell.shading:
                doc_cell._tc.get_or_add_tcPr().append(_shading_element(cell.shading))


def _set_table_width(table, width_percent: int) -> None:
    """Set w:tblW as a percentage (pct units are fiftieths of a percent)."""
    tblPr = table._tbl.tblPr
    tblW = tblPr.find(qn('w:tblW'))
    if tblW is None:
        tblW = OxmlElement('w:tblW')
        tblPr.append(tblW)
    tblW.set(qn('w:type'), 'pct')
    tblW.set(qn('w:w'), str(width_percent * 50))

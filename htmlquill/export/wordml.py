"""
WordprocessingML serialization.

Renders the converted blocks, the numbering store and the notes of a
:class:`htmlquill.document.WordDocument` into ``lxml`` elements that a host
can write into the parts of a package (``word/document.xml``,
``word/numbering.xml``, ``word/footnotes.xml``, ``word/endnotes.xml``).
Package assembly itself (content types, relationship parts, media files)
belongs to the host.
"""

import logging
from typing import Dict, Iterable, List, Optional

from lxml import etree

from ..models import (
    Border,
    Drawing,
    Hyperlink,
    Models,
    Note,
    Paragraph,
    Run,
    SectionProperties,
    SimpleField,
    Table,
    TableCell,
    TableRow,
)
from ..utils.enums import VerticalPosition

logger = logging.getLogger(__name__)

W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
R_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
WP_NS = "http://schemas.openxmlformats.org/drawingml/2006/wordprocessingDrawing"
A_NS = "http://schemas.openxmlformats.org/drawingml/2006/main"
PIC_NS = "http://schemas.openxmlformats.org/drawingml/2006/picture"

NSMAP = {'w': W_NS, 'r': R_NS, 'wp': WP_NS, 'a': A_NS, 'pic': PIC_NS}

_PREFIXES = {'w': W_NS, 'r': R_NS, 'wp': WP_NS, 'a': A_NS, 'pic': PIC_NS}


def qn(name: str) -> str:
    """Clark notation of a prefixed name: ``w:p`` -> ``{ns}p``."""
    prefix, local = name.split(":")
    return f"{{{_PREFIXES[prefix]}}}{local}"


def _sub(parent, name: str, **attributes) -> etree._Element:
    element = etree.SubElement(parent, qn(name))
    for key, value in attributes.items():
        if value is not None:
            element.set(qn(key.replace("_", ":", 1)), str(value))
    return element


def _on_off(parent, name: str, value: bool) -> None:
    if value:
        _sub(parent, name)


class WordprocessingMLExporter:
    """
    Serializes models of one document.

    Args:
        document: The document whose numbering and notes are rendered
    """

    def __init__(self, document):
        self.document = document

    # ------------------------------------------------------------------
    # Parts
    def document_element(self, blocks: Optional[Iterable[Models]] = None) -> etree._Element:
        """``w:document`` holding the given blocks, or the whole body."""
        root = etree.Element(qn("w:document"), nsmap=NSMAP)
        body = _sub(root, "w:body")
        source = self.document.body.children if blocks is None else blocks
        for element in source:
            self._append_block(body, element)
        return root

    def numbering_element(self) -> etree._Element:
        """``w:numbering``: abstract definitions first, then instances."""
        store = self.document.numbering
        root = etree.Element(qn("w:numbering"), nsmap=NSMAP)
        for abstract in store.abstracts:
            node = _sub(root, "w:abstractNum", w_abstractNumId=abstract.abstract_id)
            _sub(node, "w:multiLevelType", w_val=abstract.multi_level_type)
            _sub(node, "w:name", w_val=abstract.name)
            for level in abstract.levels:
                lvl = _sub(node, "w:lvl", w_ilvl=level.level)
                _sub(lvl, "w:start", w_val=level.start)
                _sub(lvl, "w:numFmt", w_val=level.number_format.value)
                _sub(lvl, "w:lvlText", w_val=level.text)
                _sub(lvl, "w:lvlJc", w_val="left")
                if level.left_indent is not None or level.hanging_indent is not None:
                    ppr = _sub(lvl, "w:pPr")
                    _sub(ppr, "w:ind", w_left=level.left_indent, w_hanging=level.hanging_indent)
                if level.font:
                    rpr = _sub(lvl, "w:rPr")
                    _sub(rpr, "w:rFonts", w_ascii=level.font, w_hAnsi=level.font, w_hint="default")
        for instance in store.instances:
            num = _sub(root, "w:num", w_numId=instance.num_id)
            _sub(num, "w:abstractNumId", w_val=instance.abstract_id)
            for level, start in sorted(instance.level_overrides.items()):
                override = _sub(num, "w:lvlOverride", w_ilvl=level)
                _sub(override, "w:startOverride", w_val=start)
        logger.debug(f"Numbering rendered: {len(store.abstracts)} definitions, {len(store.instances)} instances")
        return root

    def footnotes_element(self) -> etree._Element:
        return self._notes_element("w:footnotes", "w:footnote", self.document.footnotes)

    def endnotes_element(self) -> etree._Element:
        return self._notes_element("w:endnotes", "w:endnote", self.document.endnotes)

    def _notes_element(self, root_name: str, note_name: str, notes: List[Note]) -> etree._Element:
        root = etree.Element(qn(root_name), nsmap=NSMAP)
        for note in notes:
            node = _sub(root, note_name, w_id=note.note_id, w_type=note.note_type)
            for element in note.children:
                self._append_block(node, element)
        return root

    @staticmethod
    def to_bytes(element: etree._Element, pretty_print: bool = False) -> bytes:
        return etree.tostring(element, xml_declaration=True, encoding="UTF-8",
                              standalone=True, pretty_print=pretty_print)

    # ------------------------------------------------------------------
    # Blocks
    def _append_block(self, parent, element: Models) -> None:
        if isinstance(element, Paragraph):
            self.paragraph(parent, element)
        elif isinstance(element, Table):
            self.table(parent, element)
        elif isinstance(element, SectionProperties):
            self.section(parent, element)
        else:
            logger.debug(f"Skipping unsupported block {type(element).__name__}")

    def paragraph(self, parent, paragraph: Paragraph) -> etree._Element:
        node = _sub(parent, "w:p")
        self._paragraph_properties(node, paragraph)
        for child in paragraph.children:
            self._append_inline(node, child)
        return node

    def _paragraph_properties(self, node, paragraph: Paragraph) -> None:
        ppr = etree.Element(qn("w:pPr"))
        if paragraph.style_id:
            _sub(ppr, "w:pStyle", w_val=paragraph.style_id)
        _on_off(ppr, "w:keepNext", paragraph.keep_next)
        if paragraph.numbering:
            numpr = _sub(ppr, "w:numPr")
            _sub(numpr, "w:ilvl", w_val=paragraph.numbering['level'])
            _sub(numpr, "w:numId", w_val=paragraph.numbering['id'])
        if paragraph.borders:
            self._borders(ppr, "w:pBdr", paragraph.borders, ('top', 'left', 'bottom', 'right'))
        if paragraph.spacing_before is not None or paragraph.spacing_after is not None:
            _sub(ppr, "w:spacing", w_before=paragraph.spacing_before, w_after=paragraph.spacing_after)
        if any(value is not None for value in (paragraph.left_indent, paragraph.right_indent,
                                               paragraph.first_line_indent, paragraph.hanging_indent)):
            _sub(ppr, "w:ind", w_left=paragraph.left_indent, w_right=paragraph.right_indent,
                 w_firstLine=paragraph.first_line_indent, w_hanging=paragraph.hanging_indent)
        if paragraph.alignment is not None:
            _sub(ppr, "w:jc", w_val=paragraph.alignment.value)
        if len(ppr):
            node.append(ppr)

    def _append_inline(self, parent, element: Models) -> None:
        if isinstance(element, Run):
            self.run(parent, element)
        elif isinstance(element, Hyperlink):
            link = _sub(parent, "w:hyperlink", r_id=element.relationship_id, w_anchor=element.anchor,
                        w_tooltip=element.tooltip, w_history="1" if element.history else None)
            for child in element.children:
                self._append_inline(link, child)
        elif isinstance(element, SimpleField):
            field = _sub(parent, "w:fldSimple", w_instr=element.instruction)
            for child in element.children:
                self._append_inline(field, child)

    def run(self, parent, run: Run) -> etree._Element:
        node = _sub(parent, "w:r")
        self._run_properties(node, run)
        if run.last_rendered_page_break:
            _sub(node, "w:lastRenderedPageBreak")
        if run.separator == "separator":
            _sub(node, "w:separator")
        elif run.separator == "continuationSeparator":
            _sub(node, "w:continuationSeparator")
        if run.field_char:
            _sub(node, "w:fldChar", w_fldCharType=run.field_char)
        if run.instr_text:
            instr = _sub(node, "w:instrText")
            instr.text = run.instr_text
            instr.set("{http://www.w3.org/XML/1998/namespace}space", "preserve")
        if run.footnote_ref_mark:
            _sub(node, "w:footnoteRef")
        if run.endnote_ref_mark:
            _sub(node, "w:endnoteRef")
        for note_id in run.footnote_refs:
            _sub(node, "w:footnoteReference", w_id=note_id)
        for note_id in run.endnote_refs:
            _sub(node, "w:endnoteReference", w_id=note_id)
        if run.text:
            text = _sub(node, "w:t")
            text.text = run.text
            if run.text != run.text.strip():
                text.set("{http://www.w3.org/XML/1998/namespace}space", "preserve")
        if run.has_break:
            if run.break_type is None or run.break_type.value == "line":
                _sub(node, "w:br")
            else:
                _sub(node, "w:br", w_type=run.break_type.value)
        drawing = run.drawing
        if drawing is not None:
            self.drawing(node, drawing)
        return node

    def _run_properties(self, node, run: Run) -> None:
        rpr = etree.Element(qn("w:rPr"))
        if run.style_id:
            _sub(rpr, "w:rStyle", w_val=run.style_id)
        if run.font_name:
            _sub(rpr, "w:rFonts", w_ascii=run.font_name, w_hAnsi=run.font_name, w_cs=run.font_name)
        _on_off(rpr, "w:b", run.bold)
        _on_off(rpr, "w:i", run.italic)
        _on_off(rpr, "w:smallCaps", run.small_caps)
        _on_off(rpr, "w:strike", run.strike_through)
        if run.color:
            _sub(rpr, "w:color", w_val=run.color)
        if run.font_size:
            _sub(rpr, "w:sz", w_val=run.font_size)
            _sub(rpr, "w:szCs", w_val=run.font_size)
        if run.underline:
            _sub(rpr, "w:u", w_val=run.underline)
        if run.border is not None:
            self._border(rpr, "w:bdr", run.border)
        if run.shading:
            _sub(rpr, "w:shd", w_val="clear", w_color="auto", w_fill=run.shading)
        if run.vertical_position is not None and run.vertical_position != VerticalPosition.BASELINE:
            _sub(rpr, "w:vertAlign", w_val=run.vertical_position.value)
        if len(rpr):
            node.append(rpr)

    def drawing(self, parent, drawing: Drawing) -> etree._Element:
        """Inline picture (``wp:inline``) referencing the image part."""
        node = _sub(parent, "w:drawing")
        inline = _sub(node, "wp:inline")
        for side in ("distT", "distB", "distL", "distR"):
            inline.set(side, "0")
        _sub(inline, "wp:extent").attrib.update({'cx': str(drawing.width), 'cy': str(drawing.height)})
        doc_pr = _sub(inline, "wp:docPr")
        doc_pr.attrib.update({'id': str(drawing.drawing_id), 'name': drawing.title})
        if drawing.description:
            doc_pr.set("descr", drawing.description)
        if drawing.hyperlink_rel_id or drawing.hyperlink_anchor:
            click = _sub(doc_pr, "a:hlinkClick", r_id=drawing.hyperlink_rel_id or "")
            if drawing.tooltip:
                click.set("tooltip", drawing.tooltip)

        graphic = _sub(inline, "a:graphic")
        data = _sub(graphic, "a:graphicData")
        data.set("uri", PIC_NS)
        pic = _sub(data, "pic:pic")
        nv = _sub(pic, "pic:nvPicPr")
        c_nv = _sub(nv, "pic:cNvPr")
        c_nv.attrib.update({'id': str(drawing.picture_id), 'name': drawing.name or drawing.title})
        _sub(nv, "pic:cNvPicPr")
        fill = _sub(pic, "pic:blipFill")
        _sub(fill, "a:blip", r_embed=drawing.rel_id)
        _sub(_sub(fill, "a:stretch"), "a:fillRect")
        sp = _sub(pic, "pic:spPr")
        xfrm = _sub(sp, "a:xfrm")
        _sub(xfrm, "a:off").attrib.update({'x': "0", 'y': "0"})
        _sub(xfrm, "a:ext").attrib.update({'cx': str(drawing.width), 'cy': str(drawing.height)})
        _sub(sp, "a:prstGeom").set("prst", "rect")
        if drawing.border is not None:
            # line width in EMUs, border size in eighths of a point
            line = _sub(sp, "a:ln")
            line.set("w", str(drawing.border.size * 12700 // 8))
            color = drawing.border.color if drawing.border.color != "auto" else "000000"
            _sub(_sub(line, "a:solidFill"), "a:srgbClr").set("val", color)
        return node

    # ------------------------------------------------------------------
    # Tables
    def table(self, parent, table: Table) -> etree._Element:
        node = _sub(parent, "w:tbl")
        props = table.properties
        tpr = _sub(node, "w:tblPr")
        if props.style_id:
            _sub(tpr, "w:tblStyle", w_val=props.style_id)
        _sub(tpr, "w:tblW", w_w=props.width, w_type=props.width_type.value)
        if props.alignment is not None:
            _sub(tpr, "w:jc", w_val=props.alignment.value)
        if props.cell_spacing is not None:
            _sub(tpr, "w:tblCellSpacing", w_w=props.cell_spacing, w_type="dxa")
        if props.borders:
            self._borders(tpr, "w:tblBorders", props.borders,
                          ('top', 'left', 'bottom', 'right', 'insideH', 'insideV'))
        if props.cell_margins:
            margins = _sub(tpr, "w:tblCellMar")
            for side in ('top', 'left', 'bottom', 'right'):
                if side in props.cell_margins:
                    _sub(margins, f"w:{side}", w_w=props.cell_margins[side], w_type="dxa")
        _sub(tpr, "w:tblLook", w_firstRow=int(props.look['first_row']),
             w_firstColumn=int(props.look['first_column']),
             w_noVBand=int(props.look['no_vertical_band']))

        grid = _sub(node, "w:tblGrid")
        for width in table.grid:
            _sub(grid, "w:gridCol", w_w=width)
        for row in table.rows:
            self.row(node, row)
        return node

    def row(self, parent, row: TableRow) -> etree._Element:
        node = _sub(parent, "w:tr")
        if row.height is not None:
            _sub(_sub(node, "w:trPr"), "w:trHeight", w_val=row.height, w_hRule=row.height_rule.value)
        for cell in row.cells:
            self.cell(node, cell)
        return node

    def cell(self, parent, cell: TableCell) -> etree._Element:
        node = _sub(parent, "w:tc")
        tcpr = _sub(node, "w:tcPr")
        if cell.width is not None:
            _sub(tcpr, "w:tcW", w_w=cell.width, w_type=cell.width_type.value)
        if cell.grid_span > 1:
            _sub(tcpr, "w:gridSpan", w_val=cell.grid_span)
        if cell.vertical_merge == 'restart':
            _sub(tcpr, "w:vMerge", w_val="restart")
        elif cell.vertical_merge == 'continue':
            _sub(tcpr, "w:vMerge")
        if cell.borders:
            self._borders(tcpr, "w:tcBorders", cell.borders, ('top', 'left', 'bottom', 'right'))
        if cell.shading:
            _sub(tcpr, "w:shd", w_val="clear", w_color="auto", w_fill=cell.shading)
        if cell.margins:
            margins = _sub(tcpr, "w:tcMar")
            for side in ('top', 'left', 'bottom', 'right'):
                if side in cell.margins:
                    width, width_type = cell.margins[side]
                    _sub(margins, f"w:{side}", w_w=width, w_type=width_type.value)
        if cell.text_direction is not None:
            _sub(tcpr, "w:textDirection", w_val=cell.text_direction.value)
        if cell.vertical_align is not None:
            _sub(tcpr, "w:vAlign", w_val=cell.vertical_align.value)

        for child in cell.children:
            self._append_block(node, child)
        if not isinstance(cell.last_child(), Paragraph):
            # a cell must end with a paragraph
            _sub(node, "w:p")
        return node

    # ------------------------------------------------------------------
    def section(self, parent, section: SectionProperties) -> etree._Element:
        node = _sub(parent, "w:sectPr")
        page_size = _sub(node, "w:pgSz", w_w=section.page_width, w_h=section.page_height)
        if section.orientation.value == "landscape":
            page_size.set(qn("w:orient"), "landscape")
        _sub(node, "w:pgMar", w_top=section.margin_top, w_right=section.margin_right,
             w_bottom=section.margin_bottom, w_left=section.margin_left, w_header=section.header,
             w_footer=section.footer, w_gutter=section.gutter)
        _sub(node, "w:cols", w_space=section.column_space)
        _sub(node, "w:docGrid", w_linePitch=section.line_pitch)
        return node

    def _borders(self, parent, name: str, borders: Dict[str, Border], order) -> None:
        node = _sub(parent, name)
        for side in order:
            if side in borders:
                self._border(node, f"w:{side}", borders[side])

    @staticmethod
    def _border(parent, name: str, border: Border) -> None:
        _sub(parent, name, w_val=border.style.value, w_sz=border.size,
             w_space=border.space, w_color=border.color)

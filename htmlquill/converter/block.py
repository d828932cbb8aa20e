"""
Handlers of block level and generic container tags.

Each handler takes the conversion context and the tag token. Start handlers
that convert their content themselves consume the closing token, so the
matching closing handler only runs for the simple case.
"""

import logging
import re
from typing import Any, Dict

from ..models import Border, Paragraph, Run, SectionProperties, SimpleField, Table, TableCell, TableRow
from ..models.table import TableProperties
from ..parser import Token
from ..utils.css import to_page_orientation, to_paragraph_align
from ..utils.enums import BorderStyle, BreakType, StyleFamily, WidthType
from ..utils.units import parse_font_size
from .context import FIGURE_FIELD, ConversionContext
from .tags import phrasing_fragments

logger = logging.getLogger(__name__)

HEADING_NUMBER_RE = re.compile(r"^(\d+\.)+\s")

PRE_TABLE_WIDTH = 5000  # fiftieths of a percent
PRE_TABLE_GRID = 5610
DEFINITION_INDENT = 708
HR_SPACING = 240


# ----------------------------------------------------------------------
# Paragraphs
def start_paragraph(ctx: ConversionContext, token: Token, convert_content: bool = False) -> None:
    """``<p>``: close the running paragraph and open a new one."""
    ctx.complete_current_paragraph(True)

    align = to_paragraph_align(token.style["text-align"] or token.attributes["align"])
    if align is not None:
        ctx.current_paragraph.alignment = align

    run_fragments: Dict[str, Any] = {}
    new_paragraph = ctx.process_container_attributes(token, run_fragments)
    ctx.runs.begin_tag(token.tag, run_fragments)

    if new_paragraph or convert_content:
        ctx.elements.extend(ctx.sub_convert(token.tag, flush=False))
        end_paragraph(ctx, token)


def end_paragraph(ctx: ConversionContext, token: Token) -> None:
    ctx.complete_current_paragraph(True)
    ctx.end_tags(token.tag)


def start_div(ctx: ConversionContext, token: Token) -> None:
    """
    ``<div>`` and sectioning tags.

    Browsers render a div as a line break; it becomes a paragraph when it
    carries an alignment or a border, or when the converter is configured
    to treat every div as a paragraph.
    """
    style = token.style
    as_paragraph = (ctx.config.consider_div_as_paragraph
                    or style["text-align"] is not None
                    or token.attributes["align"] is not None
                    or not style.get_border("border").is_empty)
    if as_paragraph:
        start_paragraph(ctx, token, convert_content=True)
        return

    if ctx.style_from_classes(token.attributes.get_classes()) is not None:
        # content before the div keeps its own paragraph
        ctx.complete_current_paragraph(True)

    run_fragments: Dict[str, Any] = {}
    new_paragraph = ctx.process_container_attributes(token, run_fragments)
    ctx.runs.begin_tag(token.tag, run_fragments)

    if new_paragraph:
        ctx.elements.extend(ctx.sub_convert(token.tag, flush=False))
        ctx.complete_current_paragraph(True)
        ctx.end_tags(token.tag)


def end_div(ctx: ConversionContext, token: Token) -> None:
    start_break(ctx, token)
    ctx.end_tags(token.tag)


def start_span(ctx: ConversionContext, token: Token) -> None:
    run_fragments: Dict[str, Any] = {}
    new_paragraph = ctx.process_container_attributes(token, run_fragments)
    ctx.runs.merge_tag(token.tag, run_fragments)

    if new_paragraph:
        ctx.process_chunks(token.tag)
        ctx.complete_current_paragraph(True)
        ctx.end_tags(token.tag)


def start_phrasing(ctx: ConversionContext, token: Token) -> None:
    """``<b>``, ``<i>``, ``<u>``, ``<sub>``... merged with their own attributes."""
    run_fragments = phrasing_fragments(token.tag)
    ctx.process_container_attributes(token, run_fragments)
    ctx.runs.merge_tag(token.tag, run_fragments)


def start_font(ctx: ConversionContext, token: Token) -> None:
    run_fragments: Dict[str, Any] = {}
    ctx.process_container_attributes(token, run_fragments)

    size = parse_font_size(token.attributes["size"])
    if size.is_fixed:
        run_fragments['font_size'] = size.value_in_half_points

    face = token.attributes["face"]
    if face:
        family = face.split(",")[0].strip().strip("'\"")
        if family:
            run_fragments['font_name'] = family

    ctx.runs.merge_tag(token.tag, run_fragments)


def start_body(ctx: ConversionContext, token: Token) -> None:
    """``<body>``/``<html>``: document wide formatting and page orientation."""
    run_fragments: Dict[str, Any] = {}
    ctx.paragraphs.process_common_attributes(token, run_fragments)
    ctx.runs.begin_tag(token.tag, run_fragments)

    orientation = token.style["page-orientation"]
    if token.tag == "body" and orientation is not None:
        section = ctx.document.section
        if section is None:
            section = ctx.document.set_section(SectionProperties())
        section.set_orientation(to_page_orientation(orientation))
        logger.debug(f"Page orientation set to {section.orientation.value}")


def end_tags(ctx: ConversionContext, token: Token) -> None:
    ctx.end_tags(token.tag)


def start_break(ctx: ConversionContext, token: Token) -> None:
    ctx.elements.append(Run(has_break=True, break_type=BreakType.LINE))


def start_horizontal_line(ctx: ConversionContext, token: Token) -> None:
    """``<hr>``: an empty paragraph with a top border."""
    ctx.complete_current_paragraph(True)
    paragraph = ctx.current_paragraph

    siblings = ctx.siblings_of(paragraph)
    index = next((i for i, block in enumerate(siblings) if block is paragraph), len(siblings))
    previous = siblings[index - 1] if index > 0 else None
    # Word merges touching borders
    if isinstance(previous, Table) or (
            isinstance(previous, Paragraph) and previous.borders.get('bottom') is not None
            and previous.borders['bottom'].size > 0):
        paragraph.spacing_before = HR_SPACING

    ctx.elements.append(Run())

    top = token.style.get_border("border").top
    if top.is_valid:
        paragraph.borders['top'] = Border(top.style, top.size_in_eighths, top.color_hex())
    else:
        paragraph.borders['top'] = Border(BorderStyle.SINGLE, 4)
    ctx.complete_current_paragraph(True)


# ----------------------------------------------------------------------
# Headings and quotations
def _strip_leading_text(element, length: int) -> None:
    """Remove the first ``length`` characters from the runs of an element."""
    runs = [element] if isinstance(element, Run) else element.iter_descendants(Run)
    for run in runs:
        if length <= 0:
            return
        cut = min(length, len(run.text))
        run.text = run.text[cut:]
        length -= cut


def start_heading(ctx: ConversionContext, token: Token) -> None:
    """
    ``<h1>`` to ``<h6>``.

    A heading whose text starts with ``1.`` or ``1.2.`` drops that prefix
    and is numbered automatically, one level per number.
    """
    level = int(token.tag[1])
    if ctx.elements:
        ctx.complete_current_paragraph()

    run_fragments: Dict[str, Any] = {}
    ctx.paragraphs.process_common_attributes(token, run_fragments)
    ctx.runs.begin_tag(token.tag, run_fragments)

    content = ctx.sub_convert(token.tag, flush=False)
    paragraph = Paragraph(ctx.style(ctx.default_styles.heading(level)))

    first = content[0] if content else None
    match = HEADING_NUMBER_RE.match(first.get_text()) if first is not None else None
    if match:
        _strip_leading_text(first, match.end())
        ctx.numbering.apply_heading_numbering(paragraph, match.group(0).count("."))

    for element in content:
        paragraph.add_child(element)
    ctx.paragraphs.apply(paragraph)
    ctx.end_tags(token.tag)

    ctx.add_block(paragraph)
    ctx.start_paragraph()


def start_blockquote(ctx: ConversionContext, token: Token) -> None:
    ctx.complete_current_paragraph(True)
    ctx.paragraphs.begin_tag(token.tag, {
        'style_id': ctx.style(ctx.default_styles.intense_quote_style),
    })

    ctx.elements.extend(ctx.sub_convert(token.tag, flush=False))
    cite = token.attributes["cite"]
    if cite:
        ctx.elements.append(ctx.add_note_reference(cite))

    ctx.complete_current_paragraph(True)
    ctx.paragraphs.end_tag(token.tag)


def start_pre(ctx: ConversionContext, token: Token) -> None:
    """
    ``<pre>``: preformatted text, optionally framed in a one-cell table.

    Line feeds of the content become line breaks.
    """
    ctx.complete_current_paragraph()
    paragraph = ctx.current_paragraph = ctx.new_paragraph()

    as_table = ctx.config.render_pre_as_table
    if as_table:
        table = Table(TableProperties(
            style_id=ctx.style(ctx.default_styles.pre_table_style, StyleFamily.TABLE),
            width=PRE_TABLE_WIDTH,
            width_type=WidthType.PCT,
        ))
        table.grid = [PRE_TABLE_GRID]
        cell = TableCell()
        cell.borders = {side: Border(BorderStyle.SINGLE, 4) for side in ('top', 'left', 'bottom', 'right')}
        cell.add_paragraph(paragraph)
        row = TableRow()
        row.add_cell(cell)
        table.add_row(row)
        ctx.add_block(table)
        ctx.grid.new_context(table)
    else:
        ctx.add_block(paragraph)

    run_fragments: Dict[str, Any] = {}
    ctx.process_container_attributes(token, run_fragments)
    ctx.runs.begin_tag(token.tag, run_fragments)

    ctx.preformatted += 1
    try:
        ctx.elements.extend(ctx.sub_convert(token.tag, flush=False))
    finally:
        ctx.preformatted -= 1

    ctx.complete_current_paragraph()
    ctx.end_tags(token.tag)
    if as_table:
        ctx.grid.close_context()
    ctx.start_paragraph()


# ----------------------------------------------------------------------
# Definition lists and figures
def start_definition_term(ctx: ConversionContext, token: Token) -> None:
    start_paragraph(ctx, token)
    ctx.current_paragraph.spacing_after = 0


def start_definition_item(ctx: ConversionContext, token: Token) -> None:
    """``<dd>``: an indented paragraph following its term."""
    ctx.complete_current_paragraph()
    paragraph = ctx.start_paragraph()
    paragraph.first_line_indent = DEFINITION_INDENT
    paragraph.spacing_after = 0

    run_fragments: Dict[str, Any] = {}
    ctx.process_container_attributes(token, run_fragments)
    ctx.runs.begin_tag(token.tag, run_fragments)

    ctx.process_chunks(token.tag)
    ctx.complete_current_paragraph(True)
    ctx.end_tags(token.tag)


def start_figcaption(ctx: ConversionContext, token: Token) -> None:
    """``<figcaption>``: ``Figure N`` caption numbered with a SEQ field."""
    ctx.complete_current_paragraph(True)
    paragraph = ctx.current_paragraph
    paragraph.style_id = ctx.style(ctx.default_styles.caption_style)
    paragraph.keep_next = True

    ctx.elements.append(Run("Figure "))
    field = SimpleField(FIGURE_FIELD)
    field.add_child(Run(str(ctx.next_figure_number())))
    ctx.elements.append(field)

    start = len(ctx.elements)
    ctx.process_chunks(token.tag)
    if len(ctx.elements) > start and isinstance(ctx.elements[start], Run):
        ctx.elements[start].text = " " + ctx.elements[start].text

    ctx.complete_current_paragraph(True)


def start_xml_island(ctx: ConversionContext, token: Token) -> None:
    logger.debug("Skipping xml data island")
    ctx.enumerator.skip_until_matching_end()

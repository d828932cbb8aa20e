"""
Handlers of table tags.

Tables nest: a ``<table>`` opened inside a cell is appended to that cell and
pushes a new grid context. Tags used outside of a table are ignored.
"""

import logging
from typing import Any, Dict, Optional

from ..models import Border, Hyperlink, Paragraph, Run, Table, TableCell, TableRow, no_border
from ..models.table import TableProperties
from ..parser import Token
from ..styles import border_fragment
from ..utils.css import to_paragraph_align
from ..utils.enums import (
    AlignmentType,
    BorderStyle,
    CellVerticalAlignment,
    HeightRule,
    StyleFamily,
    TextDirection,
    WidthType,
)
from ..utils.units import Unit, UnitMetric
from ..config import CaptionPosition
from .context import TABLE_FIELD, ConversionContext

logger = logging.getLogger(__name__)

OUTER_SIDES = ('top', 'left', 'bottom', 'right')
INNER_SIDES = ('insideH', 'insideV')

WRITING_MODES = {
    "tb-lr": TextDirection.BT_LR,
    "tb-rl": TextDirection.TB_RL,
}


def _length(token: Token, name: str) -> Unit:
    """CSS length, falling back to the attribute of the same name."""
    unit = token.style.get_unit(name)
    if not unit.is_valid or unit.is_auto:
        unit = token.attributes.get_unit(name)
    return unit


def _border_size(pixels: int) -> int:
    """Border width in eighths of a point."""
    return max(int(round(Unit(UnitMetric.PIXEL, pixels).value_in_points * 8)), 2)


def _apply_margins(properties: TableProperties, token: Token) -> None:
    margin = token.style.get_margin("margin")
    if margin.is_empty:
        return
    if margin.left.is_auto and margin.right.is_auto:
        properties.alignment = AlignmentType.CENTER
    elif margin.left.is_auto:
        properties.alignment = AlignmentType.RIGHT
    elif margin.right.is_auto:
        properties.alignment = AlignmentType.LEFT
    else:
        for side in OUTER_SIDES:
            unit = getattr(margin, side)
            if unit.is_fixed:
                properties.cell_margins[side] = unit.value_in_dxa


def table_properties(ctx: ConversionContext, token: Token) -> TableProperties:
    """Style, borders, width, justification and spacing of a ``<table>``."""
    default_style = ctx.style(ctx.default_styles.table_style, StyleFamily.TABLE)
    style_id = ctx.style_from_classes(token.attributes.get_classes(), StyleFamily.TABLE) or default_style
    properties = TableProperties(style_id=style_id)

    border = token.attributes.get_int("border")
    if border is not None and border > 0:
        if style_id != default_style and not ctx.catalog.has_table_borders(style_id):
            properties.borders = {side: no_border() for side in OUTER_SIDES}
            for side in INNER_SIDES:
                properties.borders[side] = Border(BorderStyle.SINGLE, _border_size(border) if border > 1 else 2)
    elif border == 0:
        properties.borders = {side: no_border() for side in OUTER_SIDES + INNER_SIDES}
    else:
        css = token.style.get_border("border")
        if not css.is_empty:
            properties.borders = border_fragment(css.sides())

    width = _length(token, "width")
    if width.metric == UnitMetric.PERCENT:
        properties.width, properties.width_type = int(width.value * 50), WidthType.PCT
    elif width.is_fixed:
        properties.width, properties.width_type = width.value_in_dxa, WidthType.DXA

    align = to_paragraph_align(token.attributes["align"])
    if align is not None:
        properties.alignment = align
    if align is None or align == AlignmentType.LEFT:
        _apply_margins(properties, token)

    spacing = token.attributes.get_unit("cellspacing")
    if spacing.is_fixed:
        properties.cell_spacing = spacing.value_in_dxa

    padding = token.attributes.get_unit("cellpadding")
    if padding.is_fixed:
        properties.cell_margins = {side: padding.value_in_dxa for side in OUTER_SIDES}
    return properties


# ----------------------------------------------------------------------
def start_table(ctx: ConversionContext, token: Token) -> None:
    table = Table(table_properties(ctx, token))

    run_fragments: Dict[str, Any] = {}
    ctx.tables.process_common_attributes(token, run_fragments)
    ctx.runs.begin_tag(token.tag, run_fragments)

    if ctx.grid.has_context:
        if ctx.elements:
            paragraph = ctx.new_paragraph()
            ctx.flush_elements(paragraph)
            ctx.add_block(paragraph)
        ctx.add_block(table)
    else:
        ctx.complete_current_paragraph()
        ctx.blocks.append(table)

    ctx.grid.new_context(table)
    logger.debug(f"Table opened with style {table.properties.style_id}")


def end_table(ctx: ConversionContext, token: Token) -> None:
    if not ctx.grid.has_context:
        return
    ctx.tables.end_tag(token.tag)
    ctx.runs.end_tag(token.tag)
    close_table(ctx)


def close_table(ctx: ConversionContext) -> Table:
    """Close the innermost table: finish a row left open and declare the grid."""
    if ctx.grid.row_open:
        ctx.grid.close_row()

    table = ctx.grid.current_table
    ctx.grid.reconcile_grid(table)
    ctx.grid.close_context()
    logger.debug(f"Table closed: {len(table.rows)} rows, {len(table.grid)} columns")

    if not ctx.grid.has_context:
        ctx.start_paragraph()
    return table


def close_open_tables(ctx: ConversionContext) -> None:
    """Close the tables whose end tag is missing from the markup."""
    while ctx.grid.has_context:
        logger.debug("Closing a table left open at the end of the markup")
        close_table(ctx)


def start_table_part(ctx: ConversionContext, token: Token) -> None:
    """``<thead>``, ``<tbody>``, ``<tfoot>``: formatting shared by their cells."""
    run_fragments: Dict[str, Any] = {}
    ctx.tables.process_common_attributes(token, run_fragments)
    ctx.runs.begin_tag(token.tag, run_fragments)


def end_table_part(ctx: ConversionContext, token: Token) -> None:
    ctx.tables.end_tag(token.tag)
    ctx.runs.end_tag(token.tag)


def start_row(ctx: ConversionContext, token: Token) -> None:
    if not ctx.grid.has_context:
        return
    if ctx.grid.row_open:
        # previous row without its end tag
        end_row(ctx, token)

    row = TableRow()
    run_fragments: Dict[str, Any] = {}
    ctx.tables.process_common_attributes(token, run_fragments)

    height = _length(token, "height")
    if height.is_fixed:
        row.height = height.value_in_dxa
        row.height_rule = HeightRule.AT_LEAST

    ctx.runs.begin_tag(token.tag, run_fragments)
    ctx.grid.begin_row(row)


def end_row(ctx: ConversionContext, token: Token) -> None:
    if not ctx.grid.has_context:
        return
    ctx.grid.close_row()
    ctx.tables.end_tag(token.tag)
    ctx.runs.end_tag(token.tag)


def start_cell(ctx: ConversionContext, token: Token) -> None:
    """``<td>``/``<th>``: a cell with its spans, width, padding and borders."""
    if not ctx.grid.has_context:
        return

    cell = TableCell()
    cell.vertical_align = CellVerticalAlignment.CENTER

    width = _length(token, "width")
    if width.metric == UnitMetric.PERCENT:
        cell.set_width(int(width.value * 50), WidthType.PCT)
    elif width.is_fixed:
        cell.set_width(width.value_in_dxa, WidthType.DXA)

    colspan = token.attributes.get_int("colspan") or 1
    rowspan = token.attributes.get_int("rowspan") or 1
    if colspan > 1:
        cell.grid_span = colspan

    paragraph_defaults: Optional[Dict[str, Any]] = None
    direction = WRITING_MODES.get((token.style["writing-mode"] or "").strip().lower())
    if direction is not None:
        cell.text_direction = direction
        paragraph_defaults = {'alignment': AlignmentType.CENTER}

    padding = token.style.get_margin("padding")
    for side in OUTER_SIDES:
        unit = getattr(padding, side)
        if not unit.is_valid or unit.value <= 0:
            continue
        if unit.metric == UnitMetric.PERCENT:
            cell.margins[side] = (int(unit.value * 50), WidthType.PCT)
        elif unit.is_fixed:
            cell.margins[side] = (unit.value_in_dxa, WidthType.DXA)

    border = token.style.get_border("border")
    if not border.is_empty:
        cell.borders = border_fragment(border.sides())

    height = _length(token, "height")
    row = ctx.grid.current_row()
    if height.is_fixed and row is not None:
        row.height = max(row.height or 0, height.value_in_dxa)
        row.height_rule = HeightRule.AT_LEAST

    run_fragments: Dict[str, Any] = {}
    ctx.tables.process_common_attributes(token, run_fragments, paragraph_defaults)
    ctx.runs.begin_tag(token.tag, run_fragments)

    ctx.grid.begin_cell(cell, rowspan, colspan)
    ctx.current_paragraph = ctx.new_paragraph()
    cell.add_paragraph(ctx.current_paragraph)


def end_cell(ctx: ConversionContext, token: Token) -> None:
    if not ctx.grid.has_context:
        # stray closing cell: keep the words apart
        ctx.emit_text(" ")
        return

    cell = ctx.grid.current_cell()
    if cell is not None:
        for paragraph in cell.paragraphs:
            if not any(isinstance(child, (Run, Hyperlink)) for child in paragraph.children):
                cell.remove_child(paragraph)

        if ctx.elements or not isinstance(cell.last_child(), Paragraph):
            paragraph = ctx.new_paragraph()
            ctx.paragraphs.apply(paragraph)
            ctx.flush_elements(paragraph)
            cell.add_paragraph(paragraph)

        ctx.tables.apply(cell)

    ctx.elements = []
    ctx.tables.end_tag(token.tag)
    ctx.runs.end_tag(token.tag)
    ctx.grid.close_cell()


def start_caption(ctx: ConversionContext, token: Token) -> None:
    """
    ``<caption>``: a numbered legend placed above or below its table.

    The legend is a SEQ TABLE field followed by the caption content.
    """
    if not ctx.grid.has_context:
        return
    table = ctx.grid.current_table
    content = ctx.sub_convert(token.tag, flush=False)

    legend = Paragraph(ctx.style(ctx.default_styles.caption_style))
    begin = Run()
    begin.field_char = 'begin'
    instruction = Run()
    instruction.instr_text = TABLE_FIELD
    end = Run()
    end.field_char = 'end'
    for run in (begin, instruction, end):
        legend.add_run(run)

    if content and isinstance(content[0], Run):
        content[0].text = " " + content[0].text
    for element in content:
        legend.add_child(element)

    align = to_paragraph_align(token.style["text-align"] or token.attributes["align"])
    legend.alignment = align or table.properties.alignment

    siblings = ctx.siblings_of(table)
    index = next(i for i, block in enumerate(siblings) if block is table)
    if ctx.config.table_caption_position == CaptionPosition.BELOW:
        index += 1
    if table.parent is not None:
        table.parent.insert_child(index, legend)
    else:
        ctx.blocks.insert(index, legend)
    logger.debug(f"Table caption inserted {ctx.config.table_caption_position.value} the table")

"""
Tests for table conversion and the table grid resolver.
"""

import pytest

from htmlquill.config import CaptionPosition
from htmlquill.exceptions import TableGridError
from htmlquill.models import Paragraph, StyleDefinition, Table, TableCell, TableRow
from htmlquill.tables import TableGridResolver
from htmlquill.utils.enums import (
    AlignmentType,
    BorderStyle,
    HeightRule,
    StyleFamily,
    TextDirection,
    WidthType,
)


def tables_of(blocks):
    return [block for block in blocks if isinstance(block, Table)]


class TestTableConversion:
    """Test <table>, <tr> and <td> conversion."""

    def test_simple_table(self, converter, document):
        blocks = converter.parse("<table><tr><td>A</td><td>B</td></tr><tr><td>C</td><td>D</td></tr></table>")

        assert len(blocks) == 1
        table = blocks[0]
        assert isinstance(table, Table)
        assert table.properties.style_id == "TableGrid"
        assert table.grid == [0, 0]
        assert [[cell.get_text() for cell in row.cells] for row in table.rows] == [["A", "B"], ["C", "D"]]
        assert document.find_style("TableGrid") is not None

    def test_every_cell_ends_with_paragraph(self, converter):
        table = converter.parse("<table><tr><td></td><td><p>x</p></td></tr></table>")[0]

        for cell in table.rows[0].cells:
            assert isinstance(cell.last_child(), Paragraph)
        assert table.rows[0].cells[1].get_text() == "x"

    def test_table_between_paragraphs(self, converter):
        blocks = converter.parse("<p>before</p><table><tr><td>x</td></tr></table><p>after</p>")

        assert [type(block) for block in blocks] == [Paragraph, Table, Paragraph]
        assert blocks[0].get_text() == "before"
        assert blocks[2].get_text() == "after"

    def test_adjacent_tables_keep_separator(self, converter):
        blocks = converter.parse("<table><tr><td>1</td></tr></table><table><tr><td>2</td></tr></table>")

        assert [type(block) for block in blocks] == [Table, Paragraph, Table]

    def test_colspan(self, converter):
        table = converter.parse('<table><tr><td colspan="2">A</td></tr><tr><td>B</td><td>C</td></tr></table>')[0]

        assert table.rows[0].cells[0].grid_span == 2
        assert table.grid == [0, 0]

    def test_rowspan_placeholder(self, converter):
        """A row spanning cell leaves a continue placeholder in the row below."""
        html = '<table><tr><td rowspan="2">A</td><td>B</td></tr><tr><td>C</td></tr></table>'
        table = converter.parse(html)[0]

        first, second = table.rows
        assert first.cells[0].vertical_merge == 'restart'
        assert len(second.cells) == 2
        assert second.cells[0].vertical_merge == 'continue'
        assert second.cells[0].width_type == WidthType.AUTO
        assert second.cells[1].get_text() == "C"

    def test_rowspan_into_empty_row(self, converter):
        table = converter.parse("<table><tr><td rowspan='2'>X</td></tr><tr></tr></table>")[0]

        assert len(table.rows) == 2
        assert len(table.rows[1].cells) == 1
        assert table.rows[1].cells[0].is_placeholder

    def test_rowspan_in_second_column(self, converter):
        html = ('<table><tr><td>A</td><td rowspan="2">B</td><td>C</td></tr>'
                '<tr><td>D</td><td>E</td></tr></table>')
        table = converter.parse(html)[0]

        cells = table.rows[1].cells
        assert [cell.is_placeholder for cell in cells] == [False, True, False]
        assert cells[0].get_text() == "D"
        assert cells[2].get_text() == "E"

    def test_rowspan_with_colspan(self, converter):
        html = ('<table><tr><td rowspan="2" colspan="2">A</td><td>B</td></tr>'
                '<tr><td>C</td></tr></table>')
        table = converter.parse(html)[0]

        placeholder = table.rows[1].cells[0]
        assert placeholder.is_placeholder
        assert placeholder.grid_span == 2
        assert table.grid == [0, 0, 0]

    def test_rows_without_cells_removed(self, converter):
        table = converter.parse("<table><tr><td>A</td></tr><tr></tr></table>")[0]

        assert len(table.rows) == 1

    def test_unclosed_last_row_removed(self, converter):
        table = converter.parse("<table><tr><td>a</td></tr><tr></table>")[0]

        assert [len(row.cells) for row in table.rows] == [1]

    def test_unclosed_last_row_back_filled(self, converter):
        table = converter.parse("<table><tr><td rowspan='2'>X</td></tr><tr></table>")[0]

        assert len(table.rows) == 2
        assert table.rows[1].cells[0].is_placeholder

    def test_row_without_end_tag(self, converter):
        table = converter.parse("<table><tr><td>a</td><tr><td>b</td></tr></table>")[0]

        assert [[cell.get_text() for cell in row.cells] for row in table.rows] == [["a"], ["b"]]

    def test_table_without_end_tag(self, converter):
        """A table still open at the end of the markup gets its grid."""
        tables = tables_of(converter.parse("<table><tr><td>a</td><td>b</td></tr>"))

        assert len(tables) == 1
        assert tables[0].grid == [0, 0]

    def test_table_and_row_without_end_tags(self, converter):
        tables = tables_of(converter.parse("<table><tr><td rowspan='2'>a</td></tr><tr>"))

        rows = tables[0].rows
        assert len(rows) == 2
        assert all(row.cells for row in rows)
        assert rows[1].cells[0].is_placeholder
        assert tables[0].grid == [0]

    def test_self_closing_cell(self, converter):
        table = converter.parse("<table><tr><td/><td>B</td></tr></table>")[0]

        cells = table.rows[0].cells
        assert len(cells) == 2
        assert cells[0].get_text() == ""
        assert cells[1].get_text() == "B"

    def test_stray_cell_closing(self, converter):
        blocks = converter.parse("A</td>B")

        assert blocks[0].get_text() == "A B"

    def test_stray_row_and_cell_ignored(self, converter):
        blocks = converter.parse("<tr><td>x</td></tr>")

        assert tables_of(blocks) == []
        assert "x" in blocks[0].get_text()

    def test_nested_table(self, converter):
        html = "<table><tr><td>Outer<table><tr><td>Inner</td></tr></table></td></tr></table>"
        blocks = converter.parse(html)

        assert len(tables_of(blocks)) == 1
        cell = blocks[0].rows[0].cells[0]
        assert cell.children[0].get_text() == "Outer"
        inner = cell.children[1]
        assert isinstance(inner, Table)
        assert inner.rows[0].cells[0].get_text() == "Inner"
        assert isinstance(cell.children[-1], Paragraph)

    def test_list_inside_cell(self, converter):
        table = converter.parse("<table><tr><td><ul><li>a</li><li>b</li></ul></td></tr></table>")[0]

        paragraphs = table.rows[0].cells[0].paragraphs
        items = [p for p in paragraphs if p.numbering]
        assert [p.get_text() for p in items] == ["a", "b"]

    def test_header_cells(self, converter):
        table = converter.parse("<table><thead><tr><th>H</th></tr></thead><tbody><tr><td>v</td></tr></tbody></table>")[0]

        assert [row.get_text() for row in table.rows] == ["H", "v"]


class TestTableProperties:
    """Test attributes and CSS on tables, rows and cells."""

    def test_percent_width(self, converter):
        table = converter.parse('<table style="width:50%"><tr><td>x</td></tr></table>')[0]

        assert table.properties.width == 2500
        assert table.properties.width_type == WidthType.PCT

    def test_fixed_width_attribute(self, converter):
        table = converter.parse('<table width="96"><tr><td>x</td></tr></table>')[0]

        assert table.properties.width == 1440
        assert table.properties.width_type == WidthType.DXA

    def test_border_zero_removes_borders(self, converter):
        table = converter.parse('<table border="0"><tr><td>x</td></tr></table>')[0]

        borders = table.properties.borders
        assert set(borders) == {'top', 'left', 'bottom', 'right', 'insideH', 'insideV'}
        assert all(border.style == BorderStyle.NONE for border in borders.values())

    def test_border_on_style_without_borders(self, make_converter, document):
        document.add_style(StyleDefinition("PlainTable", "Plain Table", StyleFamily.TABLE))
        converter = make_converter()

        table = converter.parse('<table class="PlainTable" border="1"><tr><td>x</td></tr></table>')[0]

        assert table.properties.style_id == "PlainTable"
        borders = table.properties.borders
        assert borders['top'].style == BorderStyle.NONE
        assert borders['insideH'].style == BorderStyle.SINGLE
        assert borders['insideH'].size == 2

    def test_css_border(self, converter):
        table = converter.parse('<table style="border:1px solid red"><tr><td>x</td></tr></table>')[0]

        top = table.properties.borders['top']
        assert top.style == BorderStyle.SINGLE
        assert top.size == 6
        assert top.color == "FF0000"

    def test_alignment_and_spacing(self, converter):
        table = converter.parse('<table align="center" cellspacing="2" cellpadding="4">'
                                '<tr><td>x</td></tr></table>')[0]

        properties = table.properties
        assert properties.alignment == AlignmentType.CENTER
        assert properties.cell_spacing == 30
        assert properties.cell_margins == {'top': 60, 'left': 60, 'bottom': 60, 'right': 60}

    def test_auto_margins_center(self, converter):
        table = converter.parse('<table style="margin-left:auto;margin-right:auto"><tr><td>x</td></tr></table>')[0]

        assert table.properties.alignment == AlignmentType.CENTER

    def test_row_height(self, converter):
        table = converter.parse('<table><tr style="height:20px"><td>x</td></tr></table>')[0]

        row = table.rows[0]
        assert row.height == 300
        assert row.height_rule == HeightRule.AT_LEAST

    def test_cell_properties(self, converter):
        html = ('<table><tr><td style="width:30%;padding:4px;background-color:#ccc;'
                'border:1px dotted black">x</td></tr></table>')
        cell = converter.parse(html)[0].rows[0].cells[0]

        assert cell.width == 1500
        assert cell.width_type == WidthType.PCT
        assert cell.margins['left'] == (60, WidthType.DXA)
        assert cell.shading == "CCCCCC"
        assert cell.borders['bottom'].style == BorderStyle.DOTTED

    def test_cell_alignment_on_first_paragraph(self, converter):
        cell = converter.parse('<table><tr><td align="right">x</td></tr></table>')[0].rows[0].cells[0]

        assert cell.paragraphs[0].alignment == AlignmentType.RIGHT

    def test_vertical_writing_mode(self, converter):
        cell = converter.parse('<table><tr><td style="writing-mode:tb-rl">x</td></tr></table>')[0].rows[0].cells[0]

        assert cell.text_direction == TextDirection.TB_RL
        assert cell.paragraphs[0].alignment == AlignmentType.CENTER

    def test_run_formatting_from_row(self, converter):
        cell = converter.parse('<table><tr style="color:red"><td>x</td></tr></table>')[0].rows[0].cells[0]

        assert cell.paragraphs[0].runs[0].color == "FF0000"


class TestCaptions:
    """Test table captions."""

    def test_caption_above(self, converter):
        blocks = converter.parse("<table><caption>Sales</caption><tr><td>x</td></tr></table>")

        legend, table = blocks
        assert isinstance(table, Table)
        assert legend.style_id == "Caption"
        runs = legend.runs
        assert runs[0].field_char == 'begin'
        assert runs[1].instr_text == " SEQ TABLE \\* ARABIC "
        assert runs[2].field_char == 'end'
        assert legend.get_text() == " Sales"

    def test_caption_below(self, make_converter):
        converter = make_converter(table_caption_position=CaptionPosition.BELOW)
        blocks = converter.parse("<table><caption>Sales</caption><tr><td>x</td></tr></table>")

        assert isinstance(blocks[0], Table)
        assert blocks[1].get_text() == " Sales"

    def test_caption_alignment_follows_table(self, converter):
        blocks = converter.parse('<table align="center"><caption>c</caption><tr><td>x</td></tr></table>')

        assert blocks[0].alignment == AlignmentType.CENTER

    def test_caption_of_nested_table(self, converter):
        html = ("<table><tr><td><table><caption>inner</caption><tr><td>x</td></tr></table>"
                "</td></tr></table>")
        outer = converter.parse(html)[0]

        cell = outer.rows[0].cells[0]
        legend = cell.paragraphs[0]
        assert legend.get_text() == " inner"
        assert isinstance(cell.children[1], Table)


class TestTableGridResolver:
    """Test cursor and span bookkeeping."""

    @pytest.fixture
    def grid(self):
        resolver = TableGridResolver()
        resolver.new_context(Table())
        return resolver

    def test_close_without_context(self):
        with pytest.raises(TableGridError):
            TableGridResolver().close_context()

    def test_cursor_moves_with_rows_and_cells(self, grid):
        grid.begin_row(TableRow())
        grid.begin_cell(TableCell())
        grid.close_cell()

        assert (grid.cursor.row, grid.cursor.column) == (0, 1)
        grid.close_row()
        grid.begin_row(TableRow())
        assert (grid.cursor.row, grid.cursor.column) == (1, 0)

    def test_span_runs_out(self, grid):
        grid.begin_row(TableRow())
        grid.begin_cell(TableCell(), rowspan=2)
        grid.close_cell()
        grid.close_row()
        for _ in range(2):
            grid.begin_row(TableRow())
            grid.begin_cell(TableCell())
            grid.close_cell()
            grid.close_row()

        rows = grid.current_table.rows
        assert len(rows[1].cells) == 2
        assert len(rows[2].cells) == 1
        assert grid.pending_spans == []

    def test_close_row_twice_fills_once(self, grid):
        grid.begin_row(TableRow())
        grid.begin_cell(TableCell(), rowspan=3)
        grid.close_cell()
        grid.close_row()
        grid.begin_row(TableRow())
        grid.close_row()

        assert grid.row_open is False
        assert grid.close_row() is False
        assert len(grid.current_table.rows[1].cells) == 1
        assert grid.pending_spans[0].remaining == 1

    def test_cell_without_row_opens_one(self, grid):
        grid.begin_cell(TableCell())

        assert len(grid.current_table.rows) == 1

    def test_nested_contexts(self, grid):
        inner = Table()
        grid.new_context(inner)

        assert grid.depth == 2
        assert grid.current_table is inner
        grid.close_context()
        assert grid.current_table is not inner

    def test_reconcile_uses_widest_row(self, grid):
        table = grid.current_table
        first = table.add_row(TableRow())
        first.add_cell(TableCell())
        second = table.add_row(TableRow())
        wide = TableCell()
        wide.grid_span = 3
        second.add_cell(wide)

        assert grid.reconcile_grid() == [0, 0, 0]

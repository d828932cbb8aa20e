"""
Table grid resolution.

HTML lets a cell span rows while the target format wants one cell per grid
position in every row, the spanned positions carrying a "continue" vertical
merge marker. The resolver keeps, per open table, the insertion cursor and
the row spans still running, and back-fills placeholder cells when a row
closes.
"""

from dataclasses import dataclass, field
from typing import List, Optional
import logging

from ..exceptions import TableGridError
from ..models.paragraph import Paragraph
from ..models.table import Table, TableCell, TableRow
from ..utils.enums import WidthType

logger = logging.getLogger(__name__)


@dataclass
class CellPosition:
    """Cursor in a table: row index and column index."""

    row: int = -1
    column: int = 0

    def offset(self, rows: int, columns: int) -> 'CellPosition':
        return CellPosition(self.row + rows, self.column + columns)


@dataclass
class RowSpan:
    """
    A cell spanning rows below its origin.

    ``origin.column`` is a grid column. ``remaining`` counts the rows still to
    receive a placeholder; ``colspan`` is the span reproduced on each of them
    (0 when the origin cell spans a single column).
    """

    origin: CellPosition
    remaining: int
    colspan: int = 0


@dataclass
class TableContext:
    table: Table
    cursor: CellPosition = field(default_factory=CellPosition)
    spans: List[RowSpan] = field(default_factory=list)
    row_open: bool = False


class TableGridResolver:
    """Stack of open tables with their cursors and pending row spans."""

    def __init__(self):
        self._contexts: List[TableContext] = []

    # ------------------------------------------------------------------
    def new_context(self, table: Table) -> TableContext:
        context = TableContext(table)
        self._contexts.append(context)
        logger.debug(f"Table context opened (depth {len(self._contexts)})")
        return context

    def close_context(self) -> TableContext:
        """
        Close the innermost table.

        Raises:
            TableGridError: If no table is open
        """
        if not self._contexts:
            raise TableGridError("No table context to close")
        context = self._contexts.pop()
        if context.spans:
            logger.debug(f"Discarding {len(context.spans)} row spans running past the last row")
        return context

    @property
    def has_context(self) -> bool:
        return bool(self._contexts)

    @property
    def depth(self) -> int:
        return len(self._contexts)

    @property
    def current(self) -> Optional[TableContext]:
        return self._contexts[-1] if self._contexts else None

    @property
    def current_table(self) -> Optional[Table]:
        return self._contexts[-1].table if self._contexts else None

    @property
    def cursor(self) -> CellPosition:
        return self._require().cursor

    @cursor.setter
    def cursor(self, value: CellPosition) -> None:
        self._require().cursor = value

    @property
    def pending_spans(self) -> List[RowSpan]:
        return self._require().spans

    def _require(self) -> TableContext:
        if not self._contexts:
            raise TableGridError("No table context is open")
        return self._contexts[-1]

    # ------------------------------------------------------------------
    def current_row(self) -> Optional[TableRow]:
        table = self.current_table
        return table.last_child(TableRow) if table is not None else None

    def current_cell(self) -> Optional[TableCell]:
        row = self.current_row()
        return row.last_child(TableCell) if row is not None else None

    def begin_row(self, row: TableRow) -> TableRow:
        """Append a row to the current table and move the cursor to its start."""
        context = self._require()
        context.table.add_row(row)
        context.cursor = CellPosition(context.cursor.row + 1, 0)
        context.row_open = True
        return row

    @property
    def row_open(self) -> bool:
        """True between the start of a row and its ``close_row``."""
        return self._require().row_open

    def begin_cell(self, cell: TableCell, rowspan: int = 1, colspan: int = 1) -> TableCell:
        """
        Append a cell to the current row, registering its row span.

        The origin column of a span is the grid column of the cell, shifted
        by the spans of previous rows that will be back-filled on its left.
        """
        context = self._require()
        row = self.current_row()
        if row is None:
            row = self.begin_row(TableRow())

        if rowspan > 1:
            column = sum(c.grid_span for c in row.cells)
            shift = 0
            for span in sorted(context.spans, key=lambda s: s.origin.column):
                if span.origin.row < context.cursor.row and span.origin.column <= column + shift:
                    shift += max(span.colspan, 1)
            origin = CellPosition(context.cursor.row, column + shift)
            cell.vertical_merge = 'restart'
            context.spans.append(RowSpan(origin, rowspan - 1, colspan if colspan > 1 else 0))
            logger.debug(f"Row span registered at {origin} for {rowspan - 1} rows")

        row.add_cell(cell)
        return cell

    def close_cell(self) -> None:
        context = self._require()
        context.cursor = CellPosition(context.cursor.row, context.cursor.column + 1)

    def close_row(self) -> bool:
        """
        Back-fill the spanned positions of the current row.

        Returns:
            False when the row ended up without any cell and was removed,
            or when no row is open
        """
        context = self._require()
        row = self.current_row()
        if row is None or not context.row_open:
            return False
        context.row_open = False

        for span in sorted(context.spans, key=lambda s: s.origin.column):
            if span.origin.row == context.cursor.row:
                continue
            self._insert_placeholder(row, span)
            span.remaining -= 1
        context.spans = [span for span in context.spans if span.remaining > 0]

        if not row.cells:
            # rows without cells are rejected by word processors
            context.table.remove_child(row)
            return False
        return True

    def _insert_placeholder(self, row: TableRow, span: RowSpan) -> None:
        placeholder = TableCell()
        placeholder.set_width(0, WidthType.AUTO)
        placeholder.vertical_merge = 'continue'
        if span.colspan > 0:
            placeholder.grid_span = span.colspan
        placeholder.add_paragraph(Paragraph())

        column = 0
        for cell in row.cells:
            if column >= span.origin.column:
                row.insert_child(row.children.index(cell), placeholder)
                return
            column += cell.grid_span
        row.add_cell(placeholder)

    def reconcile_grid(self, table: Optional[Table] = None) -> List[int]:
        """Declare one grid column per spanned column of the widest row."""
        table = table or self.current_table
        if table is None:
            raise TableGridError("No table to reconcile")
        table.grid = [0] * table.column_count
        return table.grid

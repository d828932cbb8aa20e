"""
Table models.

A table owns rows, a row owns cells and a cell owns nested blocks. Widths
are stored together with their measurement type (``dxa`` twips, ``pct``
fiftieths of a percent, ``auto``).
"""

from typing import Any, Dict, List, Optional, Tuple
import logging

from .base import Models
from .body import Body
from .border import Border
from .paragraph import Paragraph
from ..utils.enums import (
    AlignmentType,
    CellVerticalAlignment,
    HeightRule,
    TextDirection,
    WidthType,
)

logger = logging.getLogger(__name__)

CELL_FORMATTING_KEYS = ('style_id', 'shading', 'vertical_align')


class TableProperties:
    """
    Table-level properties (style, width, borders, layout).

    Args:
        style_id: Table style identifier
        width: Preferred width, interpreted with ``width_type``
        width_type: Measurement type of ``width``
        alignment: Table justification on the page
        borders: Mapping side -> Border (top, left, bottom, right, insideH, insideV)
        cell_spacing: Space between cells in twips
        cell_margins: Default cell margins in twips, keyed by side
    """

    def __init__(self, style_id: Optional[str] = None, width: int = 0,
                 width_type: WidthType = WidthType.AUTO,
                 alignment: Optional[AlignmentType] = None,
                 borders: Optional[Dict[str, Border]] = None,
                 cell_spacing: Optional[int] = None,
                 cell_margins: Optional[Dict[str, int]] = None):
        self.style_id = style_id
        self.width = width
        self.width_type = width_type
        self.alignment = alignment
        self.borders = borders or {}
        self.cell_spacing = cell_spacing
        self.cell_margins = cell_margins or {}
        self.look: Dict[str, Any] = {'first_row': True, 'first_column': True, 'no_vertical_band': True}

    def to_dict(self) -> Dict[str, Any]:
        return {
            'style_id': self.style_id,
            'width': self.width,
            'width_type': self.width_type.value,
            'alignment': self.alignment.value if self.alignment else None,
            'borders': {side: border.to_dict() for side, border in self.borders.items()},
            'cell_spacing': self.cell_spacing,
            'cell_margins': dict(self.cell_margins),
        }


class Table(Models):
    """Represents a table with rows and a column grid."""

    def __init__(self, properties: Optional[TableProperties] = None):
        super().__init__()
        self.properties: TableProperties = properties or TableProperties()
        self.grid: List[int] = []  # column widths, twips

    @property
    def rows(self) -> List['TableRow']:
        return list(self.iter_children(TableRow))

    def add_row(self, row: 'TableRow') -> 'TableRow':
        self.add_child(row)
        return row

    @property
    def column_count(self) -> int:
        """Maximum of the summed column spans over the rows."""
        counts = [sum(cell.grid_span for cell in row.cells) for row in self.rows]
        return max(counts) if counts else 0

    def get_text(self) -> str:
        return "\n".join(row.get_text() for row in self.rows)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': 'Table',
            'properties': self.properties.to_dict(),
            'grid': list(self.grid),
            'rows': [row.to_dict() for row in self.rows],
        }


class TableRow(Models):
    """Represents a row of cells."""

    def __init__(self):
        super().__init__()
        self.height: Optional[int] = None
        self.height_rule: HeightRule = HeightRule.AUTO

    @property
    def cells(self) -> List['TableCell']:
        return list(self.iter_children(TableCell))

    def add_cell(self, cell: 'TableCell') -> 'TableCell':
        self.add_child(cell)
        return cell

    def get_text(self) -> str:
        return "\t".join(cell.get_text() for cell in self.cells)

    def to_dict(self) -> Dict[str, Any]:
        result = {'type': 'TableRow', 'cells': [cell.to_dict() for cell in self.cells]}
        if self.height is not None:
            result['height'] = self.height
            result['height_rule'] = self.height_rule.value
        return result


class TableCell(Body):
    """
    Represents a table cell. Can contain paragraphs and nested tables.

    ``vertical_merge`` is ``restart`` on the cell opening a row span and
    ``continue`` on the placeholders synthesized in the rows it covers.
    """

    def __init__(self):
        super().__init__()
        self.width: Optional[int] = None
        self.width_type: WidthType = WidthType.AUTO
        self.grid_span: int = 1
        self.vertical_merge: Optional[str] = None
        self.vertical_align: Optional[CellVerticalAlignment] = None
        self.text_direction: Optional[TextDirection] = None
        self.shading: Optional[str] = None
        self.style_id: Optional[str] = None
        self.borders: Dict[str, Border] = {}
        self.margins: Dict[str, Tuple[int, WidthType]] = {}

    @property
    def is_placeholder(self) -> bool:
        return self.vertical_merge == 'continue'

    @property
    def paragraphs(self) -> List[Paragraph]:
        return list(self.iter_children(Paragraph))

    def set_width(self, width: int, width_type: WidthType) -> None:
        self.width = width
        self.width_type = width_type

    def apply_formatting(self, formatting: Dict[str, Any]) -> None:
        for key, value in formatting.items():
            if key in CELL_FORMATTING_KEYS:
                setattr(self, key, value)
            else:
                logger.debug(f"Ignoring unknown cell formatting key: {key}")

    def get_formatting(self) -> Dict[str, Any]:
        return {key: getattr(self, key) for key in CELL_FORMATTING_KEYS if getattr(self, key) is not None}

    def get_text(self) -> str:
        return "\n".join(child.get_text() for child in self.children)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': 'TableCell',
            'width': self.width,
            'width_type': self.width_type.value,
            'grid_span': self.grid_span,
            'vertical_merge': self.vertical_merge,
            'formatting': self.get_formatting(),
            'children': [child.to_dict() for child in self.children],
        }

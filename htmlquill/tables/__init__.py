"""Table grid resolution."""

from .grid import CellPosition, RowSpan, TableContext, TableGridResolver

__all__ = ["CellPosition", "RowSpan", "TableContext", "TableGridResolver"]

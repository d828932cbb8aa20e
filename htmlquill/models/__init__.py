"""Output document models."""

from .base import Models
from .body import Body
from .border import Border, no_border
from .field import SimpleField
from .footnote import Note
from .hyperlink import Hyperlink
from .image import Drawing
from .numbering import AbstractNumbering, NumberingInstance, NumberingLevel, MAX_LEVELS
from .paragraph import Paragraph
from .run import Run
from .section import SectionProperties
from .style import StyleDefinition
from .table import Table, TableCell, TableProperties, TableRow

__all__ = [
    "Models",
    "Body",
    "Border",
    "no_border",
    "SimpleField",
    "Note",
    "Hyperlink",
    "Drawing",
    "AbstractNumbering",
    "NumberingInstance",
    "NumberingLevel",
    "MAX_LEVELS",
    "Paragraph",
    "Run",
    "SectionProperties",
    "StyleDefinition",
    "Table",
    "TableCell",
    "TableProperties",
    "TableRow",
]

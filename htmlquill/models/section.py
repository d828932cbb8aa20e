"""Section (page layout) properties."""

from typing import Any, Dict

from .base import Models
from ..utils.enums import PageOrientation

# A4, twips
A4_LONG_EDGE = 16838
A4_SHORT_EDGE = 11906


class SectionProperties(Models):
    """Trailing page layout element of the body."""

    def __init__(self):
        super().__init__()
        self.page_width: int = A4_SHORT_EDGE
        self.page_height: int = A4_LONG_EDGE
        self.orientation: PageOrientation = PageOrientation.PORTRAIT
        self.margin_top: int = 1417
        self.margin_right: int = 1417
        self.margin_bottom: int = 1417
        self.margin_left: int = 1417
        self.header: int = 708
        self.footer: int = 708
        self.gutter: int = 0
        self.column_space: int = 708
        self.line_pitch: int = 360

    def set_orientation(self, orientation: PageOrientation) -> None:
        """Swap the page size edges for the requested orientation."""
        self.orientation = orientation
        if orientation == PageOrientation.LANDSCAPE:
            self.page_width, self.page_height = A4_LONG_EDGE, A4_SHORT_EDGE
        else:
            self.page_width, self.page_height = A4_SHORT_EDGE, A4_LONG_EDGE

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': 'SectionProperties',
            'orientation': self.orientation.value,
            'page_width': self.page_width,
            'page_height': self.page_height,
        }

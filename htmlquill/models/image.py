"""Inline drawing (picture) model."""

from typing import Any, Dict, Optional

from .base import Models
from .border import Border


class Drawing(Models):
    """
    Inline picture placed in a run.

    Sizes are stored in EMUs; ``rel_id`` points at the image part registered
    in the document.
    """

    def __init__(self, rel_id: str, width: int, height: int, drawing_id: int = 1,
                 picture_id: int = 1, name: str = "", description: str = ""):
        super().__init__()
        self.rel_id = rel_id
        self.width = width
        self.height = height
        self.drawing_id = drawing_id
        self.picture_id = picture_id
        self.name = name
        self.description = description
        self.hyperlink_rel_id: Optional[str] = None
        self.hyperlink_anchor: Optional[str] = None
        self.tooltip: Optional[str] = None
        self.border: Optional[Border] = None

    @property
    def title(self) -> str:
        return f"Picture {self.picture_id}"

    def get_text(self) -> str:
        return ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': 'Drawing',
            'rel_id': self.rel_id,
            'width': self.width,
            'height': self.height,
            'drawing_id': self.drawing_id,
            'picture_id': self.picture_id,
            'name': self.name,
            'description': self.description,
            'hyperlink_rel_id': self.hyperlink_rel_id,
            'hyperlink_anchor': self.hyperlink_anchor,
        }

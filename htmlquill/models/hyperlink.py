"""Hyperlink model."""

from typing import Any, Dict, Optional

from .base import Models


class Hyperlink(Models):
    """
    Hyperlink wrapping runs of a paragraph.

    External targets reference a relationship (``relationship_id``); internal
    targets use ``anchor`` (a bookmark name).
    """

    def __init__(self, relationship_id: Optional[str] = None, anchor: Optional[str] = None,
                 tooltip: Optional[str] = None, target: Optional[str] = None):
        super().__init__()
        self.relationship_id = relationship_id
        self.anchor = anchor
        self.tooltip = tooltip
        self.target = target
        self.history = True

    @property
    def runs(self):
        from .run import Run
        return list(self.iter_children(Run))

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result.update({
            'relationship_id': self.relationship_id,
            'anchor': self.anchor,
            'tooltip': self.tooltip,
            'target': self.target,
        })
        return result

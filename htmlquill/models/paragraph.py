"""Paragraph model."""

from typing import Any, Dict, List, Optional
import logging

from .base import Models
from .border import Border
from .run import Run
from ..utils.enums import AlignmentType

logger = logging.getLogger(__name__)

PARAGRAPH_FORMATTING_KEYS = (
    'style_id', 'alignment', 'keep_next', 'left_indent', 'right_indent',
    'first_line_indent', 'hanging_indent', 'spacing_before', 'spacing_after',
)


class Paragraph(Models):
    """Represents a paragraph with inline content, numbering, and formatting data."""

    def __init__(self, style_id: Optional[str] = None):
        """Initialize paragraph."""
        super().__init__()
        self.style_id: Optional[str] = style_id
        self.numbering: Optional[Dict[str, int]] = None
        # Paragraph formatting properties (twips)
        self.alignment: Optional[AlignmentType] = None
        self.keep_next: bool = False
        self.spacing_before: Optional[int] = None
        self.spacing_after: Optional[int] = None
        self.left_indent: Optional[int] = None
        self.right_indent: Optional[int] = None
        self.first_line_indent: Optional[int] = None
        self.hanging_indent: Optional[int] = None
        self.borders: Dict[str, Border] = {}

    @property
    def runs(self) -> List[Run]:
        """Runs directly owned by the paragraph."""
        return list(self.iter_children(Run))

    def add_run(self, run: Run) -> Run:
        """Add run to paragraph."""
        self.add_child(run)
        return run

    def add_inline(self, element: Models) -> Models:
        """Add a run, hyperlink or field."""
        return self.add_child(element)

    def set_list(self, num_id: int, level: int = 0) -> None:
        """Attach list numbering (instance id and zero-based level)."""
        self.numbering = {'id': num_id, 'level': level}

    def apply_formatting(self, formatting: Dict[str, Any]) -> None:
        for key, value in formatting.items():
            if key in PARAGRAPH_FORMATTING_KEYS:
                setattr(self, key, value)
            elif key == 'borders':
                self.borders.update(value)
            else:
                logger.debug(f"Ignoring unknown paragraph formatting key: {key}")

    def get_formatting(self) -> Dict[str, Any]:
        formatting = {}
        for key in PARAGRAPH_FORMATTING_KEYS:
            value = getattr(self, key)
            if value is not None and value is not False:
                formatting[key] = value
        if self.borders:
            formatting['borders'] = dict(self.borders)
        return formatting

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result['formatting'] = self.get_formatting()
        if self.numbering:
            result['numbering'] = dict(self.numbering)
        return result

    def __repr__(self) -> str:
        return f"Paragraph(style={self.style_id}, children={len(self.children)})"

"""Run model: the smallest styled unit of inline content."""

from typing import Any, Dict, List, Optional
import logging

from .base import Models
from .border import Border
from ..utils.enums import BreakType, VerticalPosition

logger = logging.getLogger(__name__)

# Formatting keys understood by apply_formatting/get_formatting
RUN_FORMATTING_KEYS = (
    'style_id', 'bold', 'italic', 'underline', 'strike_through', 'small_caps',
    'font_name', 'font_size', 'color', 'shading', 'vertical_position', 'border',
)


class Run(Models):
    """Represents a run of text with consistent formatting."""

    def __init__(
        self,
        text: str = "",
        style_id: Optional[str] = None,
        has_break: bool = False,
        break_type: Optional[BreakType] = None,
    ):
        """Initialize run with text, character style and optional break."""
        super().__init__()
        self.text: str = text

        # Special content
        self.has_break: bool = has_break
        self.break_type: Optional[BreakType] = break_type if has_break else None
        self.last_rendered_page_break: bool = False
        self.footnote_refs: List[int] = []
        self.endnote_refs: List[int] = []
        self.footnote_ref_mark: bool = False
        self.endnote_ref_mark: bool = False
        self.separator: Optional[str] = None  # 'separator' / 'continuationSeparator'
        self.field_char: Optional[str] = None  # 'begin' / 'separate' / 'end'
        self.instr_text: Optional[str] = None

        # Formatting attributes
        self.style_id: Optional[str] = style_id
        self.bold: bool = False
        self.italic: bool = False
        self.underline: Optional[str] = None
        self.strike_through: bool = False
        self.small_caps: bool = False
        self.font_name: Optional[str] = None
        self.font_size: Optional[int] = None  # half-points
        self.color: Optional[str] = None
        self.shading: Optional[str] = None
        self.vertical_position: Optional[VerticalPosition] = None
        self.border: Optional[Border] = None

    @property
    def drawing(self):
        """The drawing carried by this run, if any."""
        from .image import Drawing
        return self.first_child(Drawing)

    @property
    def has_drawing(self) -> bool:
        return self.drawing is not None

    def add_drawing(self, drawing) -> None:
        self.add_child(drawing)

    def apply_formatting(self, formatting: Dict[str, Any]) -> None:
        """
        Apply formatting values to the run.

        Args:
            formatting: Mapping of formatting keys (see RUN_FORMATTING_KEYS) to values
        """
        for key, value in formatting.items():
            if key in RUN_FORMATTING_KEYS:
                setattr(self, key, value)
            else:
                logger.debug(f"Ignoring unknown run formatting key: {key}")

    def get_formatting(self) -> Dict[str, Any]:
        """Return only the formatting values that are set."""
        formatting = {}
        for key in RUN_FORMATTING_KEYS:
            value = getattr(self, key)
            if value is not None and value is not False:
                formatting[key] = value
        return formatting

    @property
    def is_empty(self) -> bool:
        return (not self.text and not self.has_break and not self.children
                and not self.footnote_refs and not self.endnote_refs
                and not self.footnote_ref_mark and not self.endnote_ref_mark
                and self.field_char is None and self.instr_text is None
                and self.separator is None and not self.last_rendered_page_break)

    def get_text(self) -> str:
        if self.has_break and self.break_type == BreakType.LINE:
            return self.text + "\n"
        return self.text

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'type': 'Run',
            'text': self.text,
            'formatting': self.get_formatting(),
        }
        if self.has_break:
            result['break'] = self.break_type.value if self.break_type else None
        if self.footnote_refs:
            result['footnote_refs'] = list(self.footnote_refs)
        if self.endnote_refs:
            result['endnote_refs'] = list(self.endnote_refs)
        if self.field_char:
            result['field_char'] = self.field_char
        if self.instr_text:
            result['instr_text'] = self.instr_text
        if self.children:
            result['children'] = [child.to_dict() for child in self.children]
        return result

    def __repr__(self) -> str:
        return f"Run(text={self.text[:20]!r}, style={self.style_id})"

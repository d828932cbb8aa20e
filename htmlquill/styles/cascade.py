"""
Cascading style stacks.

Each open tag pushes a frame holding the formatting it contributes. When an
element is emitted, the top frame of every open tag is merged onto it, from
the outermost to the innermost tag so the nearest ancestor wins for single
valued properties. Independent properties (bold and italic) simply coexist;
dictionary valued properties (borders) are merged side by side.

Three cascades exist: runs (character formatting), paragraphs (alignment,
indentation, paragraph style) and table cells (shading, vertical alignment,
plus a nested paragraph cascade for the cell content).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional
import logging

from ..models.border import Border
from ..utils.enums import FontStyle, FontVariant, FontWeight, StyleFamily, TextDecoration
from ..utils.css import parse_text_decoration, to_paragraph_align, to_vertical_align

logger = logging.getLogger(__name__)


@dataclass
class StyleFrame:
    """Formatting contributed by one open tag."""

    tag: str
    fragments: Dict[str, Any] = field(default_factory=dict)
    sequence: int = 0
    depth: int = 1
    # fragments as they were before each merge
    saved: List[Dict[str, Any]] = field(default_factory=list)


class StyleCascade:
    """Stacks of style frames, one stack per tag name."""

    def __init__(self):
        self._stacks: Dict[str, List[StyleFrame]] = {}
        self._sequence = 0

    def _next_sequence(self) -> int:
        self._sequence += 1
        return self._sequence

    def begin_tag(self, tag: str, fragments: Optional[Mapping[str, Any]] = None) -> StyleFrame:
        """Push a frame for ``tag``; an empty frame keeps begin/end balanced."""
        frame = StyleFrame(tag, dict(fragments or {}), self._next_sequence())
        self._stacks.setdefault(tag, []).append(frame)
        return frame

    def merge_tag(self, tag: str, fragments: Optional[Mapping[str, Any]] = None) -> StyleFrame:
        """Coalesce ``fragments`` into the open frame of ``tag``, or begin one."""
        stack = self._stacks.get(tag)
        if not stack:
            return self.begin_tag(tag, fragments)
        frame = stack[-1]
        frame.saved.append(dict(frame.fragments))
        frame.fragments.update(fragments or {})
        frame.depth += 1
        return frame

    def end_tag(self, tag: str) -> None:
        """Pop the innermost frame of ``tag``. Unbalanced closings are ignored."""
        stack = self._stacks.get(tag)
        if not stack:
            return
        frame = stack[-1]
        if frame.depth > 1:
            frame.depth -= 1
            frame.fragments = frame.saved.pop()
            return
        stack.pop()
        if not stack:
            del self._stacks[tag]

    def resolve(self) -> Dict[str, Any]:
        """Merged formatting of all open tags, innermost winning."""
        frames = sorted((stack[-1] for stack in self._stacks.values()), key=lambda f: f.sequence)
        merged: Dict[str, Any] = {}
        for frame in frames:
            for key, value in frame.fragments.items():
                if isinstance(value, dict) and isinstance(merged.get(key), dict):
                    merged[key] = {**merged[key], **value}
                else:
                    merged[key] = value
        return merged

    def apply(self, element) -> None:
        """Apply the open frames onto an element exposing ``apply_formatting``."""
        formatting = self.resolve()
        if formatting:
            element.apply_formatting(formatting)

    def __len__(self) -> int:
        return sum(len(stack) for stack in self._stacks.values())


class RunCascade(StyleCascade):
    """Character formatting cascade."""

    def __init__(self, catalog):
        super().__init__()
        self.catalog = catalog
        self.default_style: Optional[str] = None

    def apply(self, run) -> None:
        if self.default_style is not None and run.style_id is None:
            run.style_id = self.default_style
        super().apply(run)

    def process_common_attributes(self, token, fragments: Dict[str, Any]) -> None:
        """
        Convert color, background, decoration, class and font attributes.

        Args:
            token: Tag token positioned on the element
            fragments: Run formatting collected for the element, updated in place
        """
        if not token.attributes and not token.style:
            return

        color = token.style.get_color("color")
        if color.is_empty:
            color = token.attributes.get_color("color")
        if not color.is_empty:
            fragments['color'] = color.to_hex()

        background = token.style.get_color("background-color")
        if not background.is_empty:
            fragments['shading'] = background.to_hex()

        decorations = parse_text_decoration(token.style["text-decoration"])
        if decorations & TextDecoration.UNDERLINE:
            fragments['underline'] = 'single'
        if decorations & TextDecoration.LINE_THROUGH:
            fragments['strike_through'] = True

        for class_name in token.attributes.get_classes() or ():
            style_id = self.catalog.get_style(class_name, StyleFamily.CHARACTER, ignore_case=True)
            if style_id is not None:
                # only one character style per run
                fragments['style_id'] = style_id
                break

        font = token.style.get_font("font")
        if not font.is_empty:
            if font.style == FontStyle.ITALIC:
                fragments['italic'] = True
            if font.weight in (FontWeight.BOLD, FontWeight.BOLDER):
                fragments['bold'] = True
            if font.variant == FontVariant.SMALL_CAPS:
                fragments['small_caps'] = True
            if font.family is not None:
                fragments['font_name'] = font.family
            if font.size.is_fixed:
                fragments['font_size'] = font.size.value_in_half_points


class ParagraphCascade(StyleCascade):
    """Paragraph formatting cascade."""

    def __init__(self, catalog, run_cascade: Optional[RunCascade] = None):
        super().__init__()
        self.catalog = catalog
        self.run_cascade = run_cascade
        self.default_style: Optional[str] = None

    def apply(self, paragraph) -> None:
        if paragraph is None:
            return
        if self.default_style is not None and paragraph.style_id is None:
            paragraph.style_id = self.default_style
        super().apply(paragraph)

    def process_common_attributes(self, token, run_fragments: Dict[str, Any]) -> bool:
        """
        Convert alignment, class and margins, then begin the paragraph frame.

        Args:
            token: Tag token positioned on the element
            run_fragments: Run formatting collected for the element, updated in place

        Returns:
            True when a paragraph style was applied and the caller should start
            a new paragraph
        """
        fragments: Dict[str, Any] = {}
        new_paragraph = False

        align = to_paragraph_align(token.style["text-align"] or token.attributes["align"])
        if align is not None:
            fragments['alignment'] = align

        for class_name in token.attributes.get_classes() or ():
            style_id = self.catalog.get_style(class_name, StyleFamily.PARAGRAPH, ignore_case=True)
            if style_id is not None:
                fragments['style_id'] = style_id
                new_paragraph = True
                break

        margin = token.style.get_margin("margin")
        if not margin.is_empty:
            if margin.top.is_fixed:
                fragments['spacing_before'] = margin.top.value_in_dxa
            if margin.bottom.is_fixed:
                fragments['spacing_after'] = margin.bottom.value_in_dxa
            if margin.left.is_fixed:
                fragments['left_indent'] = margin.left.value_in_dxa
            if margin.right.is_fixed:
                fragments['right_indent'] = margin.right.value_in_dxa

        text_indent = token.style.get_unit("text-indent")
        if text_indent.is_fixed and token.tag in ("p", "div"):
            fragments['first_line_indent'] = text_indent.value_in_dxa

        border = token.style.get_border("border")
        if not border.is_empty:
            fragments['borders'] = border_fragment(border.sides())

        self.begin_tag(token.tag, fragments)

        if self.run_cascade is not None:
            self.run_cascade.process_common_attributes(token, run_fragments)
        return new_paragraph


class TableCascade(StyleCascade):
    """
    Table cell formatting cascade.

    Alignment declared on a table part goes to the nested paragraph cascade
    and lands on the first paragraph of each cell.
    """

    def __init__(self, catalog, run_cascade: Optional[RunCascade] = None):
        super().__init__()
        self.catalog = catalog
        self.run_cascade = run_cascade
        self.paragraphs = ParagraphCascade(catalog)

    def apply(self, cell) -> None:
        super().apply(cell)
        first = next(iter(cell.paragraphs), None)
        self.paragraphs.apply(first)

    def begin_tag_for_paragraph(self, tag: str, fragments: Optional[Mapping[str, Any]] = None) -> None:
        self.paragraphs.begin_tag(tag, fragments)

    def end_tag(self, tag: str) -> None:
        self.paragraphs.end_tag(tag)
        super().end_tag(tag)

    def process_common_attributes(self, token, run_fragments: Dict[str, Any],
                                  paragraph_defaults: Optional[Mapping[str, Any]] = None) -> None:
        """
        Convert shading and alignments of a table part, then begin its frames.

        Args:
            token: Tag token positioned on ``table``, ``tr``, ``td``...
            run_fragments: Run formatting collected for the element, updated in place
            paragraph_defaults: Cell paragraph formatting that an explicit
                ``text-align`` of the element overrides
        """
        fragments: Dict[str, Any] = {}

        color = token.style.get_color("background-color")
        if color.is_empty:
            color = token.attributes.get_color("bgcolor")
        if not color.is_empty:
            fragments['shading'] = color.to_hex()

        valign = to_vertical_align(token.style["vertical-align"] or token.attributes["valign"])
        if valign is not None:
            fragments['vertical_align'] = valign

        paragraph_fragments: Dict[str, Any] = dict(paragraph_defaults or {})
        align = to_paragraph_align(token.style["text-align"] or token.attributes["align"])
        if align is not None:
            paragraph_fragments.update(keep_next=True, alignment=align)

        self.begin_tag(token.tag, fragments)
        self.begin_tag_for_paragraph(token.tag, paragraph_fragments)

        if self.run_cascade is not None:
            self.run_cascade.process_common_attributes(token, run_fragments)


def border_fragment(sides: Mapping[str, Any]) -> Dict[str, Border]:
    """Turn valid CSS side borders into model borders keyed by side."""
    return {
        name: Border(side.style, side.size_in_eighths, side.color_hex())
        for name, side in sides.items()
        if side.is_valid
    }

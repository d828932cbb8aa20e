"""
Conversion context.

All mutable state of one conversion call lives here: the three style
cascades, the numbering allocator, the table grid, the image pipeline, the
pending inline buffer and the current paragraph. Handlers receive the
context and never keep state of their own.
"""

from typing import Any, Callable, Dict, List, Optional, Tuple
import logging

from ..config import AcronymPosition, ConverterConfig
from ..models import Models, Paragraph, Run, Table, TableCell, TableRow
from ..numbering import NumberingAllocator
from ..parser import HtmlEnumerator, Token
from ..styles import ParagraphCascade, RunCascade, StyleCatalog, TableCascade
from ..tables import TableGridResolver
from ..media import ImagePipeline
from ..utils.enums import BreakType, StyleFamily

logger = logging.getLogger(__name__)

FIGURE_FIELD = " SEQ Figure \\* ARABIC "
TABLE_FIELD = " SEQ TABLE \\* ARABIC "

Dispatch = Callable[['ConversionContext', Token], None]


def is_started(paragraph: Paragraph, default_style: Optional[str] = None) -> bool:
    """True when the paragraph holds content or any property besides the default style."""
    formatting = paragraph.get_formatting()
    if formatting.get('style_id') == default_style:
        formatting.pop('style_id', None)
    return bool(paragraph.children or formatting or paragraph.numbering)


class ConversionContext:
    """
    State of one conversion call.

    Args:
        document: Output sink
        config: Converter options
        catalog: Style catalog of the document
        images: Image pipeline for this call
        enumerator: Token cursor over the markup
        dispatch: Tag handler dispatch function
    """

    def __init__(self, document, config: ConverterConfig, catalog: StyleCatalog,
                 images: ImagePipeline, enumerator: HtmlEnumerator, dispatch: Dispatch):
        self.document = document
        self.config = config
        self.default_styles = config.default_styles
        self.catalog = catalog
        self.images = images
        self.enumerator = enumerator
        self.dispatch = dispatch

        self.runs = RunCascade(catalog)
        self.paragraphs = ParagraphCascade(catalog, self.runs)
        self.tables = TableCascade(catalog, self.runs)
        self.paragraphs.default_style = self.default_styles.paragraph_style
        self.numbering = NumberingAllocator(document.numbering)
        self.grid = TableGridResolver()

        self.blocks: List[Models] = []
        self.elements: List[Models] = []
        # open <pre> elements; their line feeds become breaks
        self.preformatted = 0
        self.current_paragraph: Paragraph = self.new_paragraph()

        self.figure_count = document.count_fields(FIGURE_FIELD)
        self._drawing_id, self._picture_id = self._max_drawing_ids()

    # ------------------------------------------------------------------
    # Styles
    def style(self, name: Optional[str], family: StyleFamily = StyleFamily.PARAGRAPH) -> Optional[str]:
        """Style id of a semantic role, keeping the configured name when the catalog misses it."""
        if not name:
            return None
        return self.catalog.get_style(name, family) or name

    def style_from_classes(self, classes: Optional[List[str]],
                           family: StyleFamily = StyleFamily.PARAGRAPH) -> Optional[str]:
        for class_name in classes or ():
            style_id = self.catalog.get_style(class_name, family, ignore_case=True)
            if style_id is not None:
                return style_id
        return None

    # ------------------------------------------------------------------
    # Paragraph cursor
    def new_paragraph(self) -> Paragraph:
        return Paragraph(self.paragraphs.default_style)

    def add_block(self, element: Models) -> Models:
        """Append a block to the innermost open table cell, or to the output."""
        if self.grid.has_context:
            row = self.grid.current_row()
            if row is None:
                row = self.grid.begin_row(TableRow())
            cell = row.last_child(TableCell)
            if cell is None:
                cell = row.add_cell(TableCell())
            cell.add_child(element)
        else:
            self.blocks.append(element)
        return element

    def flush_elements(self, target: Models) -> None:
        elements, self.elements = self.elements, []
        for element in elements:
            target.add_child(element)

    def complete_current_paragraph(self, create_new: bool = False) -> None:
        """
        Apply the paragraph cascade and move the pending inline content into
        the current paragraph.

        Args:
            create_new: Start a fresh paragraph afterwards, unless the current
                one is still blank
        """
        self.paragraphs.apply(self.current_paragraph)
        self.flush_elements(self.current_paragraph)
        if create_new and is_started(self.current_paragraph, self.paragraphs.default_style):
            self.current_paragraph = self.new_paragraph()
            self.add_block(self.current_paragraph)

    def start_paragraph(self) -> Paragraph:
        """Replace the current paragraph with a new one appended to the output."""
        self.current_paragraph = self.new_paragraph()
        self.add_block(self.current_paragraph)
        return self.current_paragraph

    # ------------------------------------------------------------------
    # Token processing
    def emit_text(self, text: str) -> None:
        """Wrap text into runs carrying the open run formatting."""
        lines = text.split("\n") if self.preformatted else [text]
        for index, line in enumerate(lines):
            if index:
                self.elements.append(Run(has_break=True, break_type=BreakType.LINE))
            if line:
                run = Run(line)
                self.runs.apply(run)
                self.elements.append(run)

    def process_chunks(self, end_tag: Optional[str] = None) -> None:
        """Process tokens until the closing ``end_tag`` (or the end of the stream)."""
        en = self.enumerator
        while en.move_until_match(end_tag):
            token = en.current
            if token.is_tag:
                self.dispatch(self, token)
            else:
                self.emit_text(token.text)

    def sub_convert(self, end_tag: str, flush: bool = True) -> List[Models]:
        """
        Convert the content up to ``</end_tag>`` into a fresh inline buffer.

        Args:
            end_tag: Closing tag ending the content
            flush: Complete the current paragraph first when inline content is pending

        Returns:
            The inline elements produced by the content. Blocks met inside
            (paragraphs, tables) are emitted as usual.
        """
        if flush and self.elements:
            self.complete_current_paragraph()
        outer, self.elements = self.elements, []
        self.process_chunks(end_tag)
        content, self.elements = self.elements, outer
        return content

    def end_tags(self, tag: str) -> None:
        self.runs.end_tag(tag)
        self.paragraphs.end_tag(tag)

    # ------------------------------------------------------------------
    # Attributes shared by containers
    def process_container_attributes(self, token: Token, run_fragments: Dict[str, Any]) -> bool:
        """
        Handle page breaks, horizontal padding and the paragraph common attributes.

        Returns:
            True when the tag requires a paragraph of its own
        """
        if not self.grid.has_context or token.tag == "pre":
            if (token.style["page-break-after"] or "").strip().lower() == "always":
                self.blocks.append(self._page_break_paragraph())
            if (token.style["page-break-before"] or "").strip().lower() == "always":
                self.elements.append(Run(has_break=True, break_type=BreakType.PAGE))
                marker = Run()
                marker.last_rendered_page_break = True
                self.elements.append(marker)

        padding = token.style.get_margin("padding")
        if not padding.is_empty and (padding.left.is_fixed or padding.right.is_fixed):
            if padding.left.value > 0:
                self.current_paragraph.left_indent = padding.left.value_in_dxa
            if padding.right.value > 0:
                self.current_paragraph.right_indent = padding.right.value_in_dxa

        return self.paragraphs.process_common_attributes(token, run_fragments)

    @staticmethod
    def _page_break_paragraph() -> Paragraph:
        paragraph = Paragraph()
        paragraph.add_run(Run(has_break=True, break_type=BreakType.PAGE))
        return paragraph

    # ------------------------------------------------------------------
    # Notes, figures and drawings
    def add_note_reference(self, description: str) -> Run:
        """Write ``description`` as a footnote or endnote and return the reference run."""
        styles = self.default_styles
        if self.config.acronym_position == AcronymPosition.PAGE_END:
            reference_style = self.style(styles.footnote_reference_style, StyleFamily.CHARACTER)
            note_id = self.document.add_footnote(
                description,
                text_style=self.style(styles.footnote_text_style),
                reference_style=reference_style,
                hyperlink_style=self.style(styles.hyperlink_style, StyleFamily.CHARACTER),
            )
            run = Run(style_id=reference_style)
            run.footnote_refs.append(note_id)
        else:
            reference_style = self.style(styles.endnote_reference_style, StyleFamily.CHARACTER)
            note_id = self.document.add_endnote(
                description,
                text_style=self.style(styles.endnote_text_style),
                reference_style=reference_style,
            )
            run = Run(style_id=reference_style)
            run.endnote_refs.append(note_id)
        return run

    def next_figure_number(self) -> int:
        self.figure_count += 1
        return self.figure_count

    def _max_drawing_ids(self) -> Tuple[int, int]:
        drawing_id = picture_id = 0
        for drawing in self.document.iter_drawings():
            drawing_id = max(drawing_id, drawing.drawing_id)
            picture_id = max(picture_id, drawing.picture_id)
        return drawing_id, picture_id

    def next_drawing_ids(self) -> Tuple[int, int]:
        """Unique ids of the next drawing and of its picture."""
        self._drawing_id += 1
        self._picture_id += 1
        return self._drawing_id, self._picture_id

    # ------------------------------------------------------------------
    def siblings_of(self, block: Models) -> List[Models]:
        """Blocks sharing the container of ``block`` (the output list at top level)."""
        if block.parent is not None:
            return block.parent.children
        return self.blocks

    @property
    def current_table(self) -> Optional[Table]:
        return self.grid.current_table

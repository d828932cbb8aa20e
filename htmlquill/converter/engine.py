"""
HTML to word processing conversion engine.

``HtmlConverter`` turns a markup fragment into paragraphs and tables of a
:class:`htmlquill.document.WordDocument`, registering the numbering, image
parts, hyperlinks and notes it needs along the way.

Example:
    >>> document = WordDocument()
    >>> converter = HtmlConverter(document)
    >>> converter.parse_html("<p>Hello <b>world</b></p>")
"""

import logging
from types import MappingProxyType
from typing import Callable, List, Mapping, Optional

from ..config import ConverterConfig
from ..document import WordDocument
from ..media import Fetcher, HttpFetcher, ImagePipeline
from ..models import Models, Paragraph, Table
from ..parser import HtmlEnumerator, Token
from ..styles import StyleCatalog
from . import block, inline, lists, tables
from .context import ConversionContext
from .tags import TagKind, tag_kind

logger = logging.getLogger(__name__)

Handler = Callable[[ConversionContext, Token], None]

START_HANDLERS: Mapping[TagKind, Handler] = MappingProxyType({
    TagKind.LINK: inline.start_link,
    TagKind.ACRONYM: inline.start_acronym,
    TagKind.BLOCKQUOTE: block.start_blockquote,
    TagKind.BODY: block.start_body,
    TagKind.BREAK: block.start_break,
    TagKind.CAPTION: tables.start_caption,
    TagKind.CITE: inline.start_cite,
    TagKind.DEFINITION_TERM: block.start_definition_term,
    TagKind.DEFINITION_ITEM: block.start_definition_item,
    TagKind.DIV: block.start_div,
    TagKind.FIGCAPTION: block.start_figcaption,
    TagKind.FONT: block.start_font,
    TagKind.HEADING: block.start_heading,
    TagKind.HORIZONTAL_LINE: block.start_horizontal_line,
    TagKind.IMAGE: inline.start_image,
    TagKind.LIST: lists.start_list,
    TagKind.LIST_ITEM: lists.start_list_item,
    TagKind.PARAGRAPH: block.start_paragraph,
    TagKind.PHRASING: block.start_phrasing,
    TagKind.PRE: block.start_pre,
    TagKind.QUOTE: inline.start_quote,
    TagKind.SPAN: block.start_span,
    TagKind.TABLE: tables.start_table,
    TagKind.TABLE_PART: tables.start_table_part,
    TagKind.TABLE_ROW: tables.start_row,
    TagKind.TABLE_CELL: tables.start_cell,
    TagKind.XML_ISLAND: block.start_xml_island,
})

END_HANDLERS: Mapping[TagKind, Handler] = MappingProxyType({
    TagKind.BODY: block.end_tags,
    TagKind.CITE: block.end_tags,
    TagKind.DEFINITION_TERM: block.end_paragraph,
    TagKind.DIV: block.end_div,
    TagKind.FONT: block.end_tags,
    TagKind.LIST: lists.end_list,
    TagKind.PARAGRAPH: block.end_paragraph,
    TagKind.PHRASING: block.end_tags,
    TagKind.QUOTE: inline.end_quote,
    TagKind.SPAN: block.end_tags,
    TagKind.TABLE: tables.end_table,
    TagKind.TABLE_PART: tables.end_table_part,
    TagKind.TABLE_ROW: tables.end_row,
    TagKind.TABLE_CELL: tables.end_cell,
})


def _ignore(ctx: ConversionContext, token: Token) -> None:
    pass


def dispatch(ctx: ConversionContext, token: Token) -> None:
    """Run the handler of a tag token; unknown tags and closings without a handler do nothing."""
    handlers = START_HANDLERS if token.is_start else END_HANDLERS
    handlers.get(tag_kind(token.tag), _ignore)(ctx, token)


def remove_empty_paragraphs(blocks: List[Models]) -> List[Models]:
    """Drop paragraphs without content, except one separating two tables."""
    kept = []
    for index, element in enumerate(blocks):
        if isinstance(element, Paragraph) and not element.children:
            between_tables = (0 < index < len(blocks) - 1
                              and isinstance(blocks[index - 1], Table)
                              and isinstance(blocks[index + 1], Table))
            if not between_tables:
                continue
        kept.append(element)
    return kept


class HtmlConverter:
    """
    Converts HTML fragments into the blocks of a document.

    Args:
        document: Output sink receiving styles, numbering, parts and notes
        fetcher: Fetch capability for images; defaults to an HttpFetcher
            honouring ``config.base_image_url``
        config: Converter options
    """

    def __init__(self, document: WordDocument, fetcher: Optional[Fetcher] = None,
                 config: Optional[ConverterConfig] = None):
        self.document = document
        self.config = config or ConverterConfig()
        self._owns_fetcher = fetcher is None
        self.fetcher = fetcher or HttpFetcher(self.config.base_image_url, self.config.image_fetch_timeout)
        self.catalog = StyleCatalog(document)
        logger.debug("HtmlConverter initialized")

    def refresh_styles(self) -> None:
        """Reload the style catalog after the document styles changed."""
        self.catalog.refresh()

    def parse(self, html: Optional[str]) -> List[Models]:
        """
        Convert a markup fragment.

        Args:
            html: Markup to convert

        Returns:
            The paragraphs and tables produced, in document order. Numbering,
            image parts, hyperlinks and notes are registered in the document.

        Raises:
            ParsingError: If the markup is not text
        """
        if html is None or (isinstance(html, str) and not html.strip()):
            return []

        enumerator = HtmlEnumerator(html)
        images = ImagePipeline(self.document, self.fetcher, self.config.image_fetch_timeout)
        ctx = ConversionContext(self.document, self.config, self.catalog, images, enumerator, dispatch)
        ctx.blocks.append(ctx.current_paragraph)
        try:
            ctx.process_chunks(None)
            # content left after the last block
            ctx.flush_elements(ctx.current_paragraph)
            tables.close_open_tables(ctx)
        finally:
            images.shutdown()

        blocks = remove_empty_paragraphs(ctx.blocks)
        logger.debug(f"Converted {len(html)} characters into {len(blocks)} blocks")
        return blocks

    def parse_html(self, html: Optional[str]) -> List[Models]:
        """Convert a fragment and append the result to the document body."""
        blocks = self.parse(html)
        for element in blocks:
            self.document.append_block(element)
        return blocks

    def close(self) -> None:
        """Release the default fetcher."""
        if self._owns_fetcher:
            self.fetcher.close()

    def __enter__(self) -> 'HtmlConverter':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

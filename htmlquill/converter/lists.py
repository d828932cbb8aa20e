"""Handlers of ordered and unordered lists."""

import logging
from typing import Any, Dict

from ..models.numbering import MAX_LEVELS
from ..parser import Token
from .context import ConversionContext

logger = logging.getLogger(__name__)

NESTED_ITEM_INDENT = 780


def start_list(ctx: ConversionContext, token: Token) -> None:
    ctx.numbering.begin_list(token)


def end_list(ctx: ConversionContext, token: Token) -> None:
    if ctx.numbering.level_depth <= 0:
        logger.debug(f"Ignoring </{token.tag}> without an open list")
        return
    ctx.numbering.end_list()
    if ctx.numbering.level_depth == 0:
        ctx.start_paragraph()


def start_list_item(ctx: ConversionContext, token: Token) -> None:
    """
    ``<li>``: a numbered paragraph.

    The item style comes from the item classes, then the list classes, then
    the default list paragraph style. Content of nested lists is emitted
    after the item paragraph; text following a nested list joins the item.
    """
    ctx.complete_current_paragraph()
    paragraph = ctx.current_paragraph = ctx.new_paragraph()

    numbering = ctx.numbering
    num_id = numbering.process_item(token)
    level = numbering.level_depth

    paragraph.style_id = (ctx.style_from_classes(token.attributes.get_classes())
                          or ctx.style_from_classes(numbering.current_list_classes)
                          or ctx.style(ctx.default_styles.list_paragraph_style))
    if level >= 2:
        paragraph.left_indent = level * NESTED_ITEM_INDENT
    if level > 0:
        paragraph.set_list(num_id, min(level, MAX_LEVELS) - 1)
    else:
        logger.debug("List item outside of a list rendered without numbering")

    ctx.add_block(paragraph)
    ctx.paragraphs.apply(paragraph)

    run_fragments: Dict[str, Any] = {}
    ctx.runs.process_common_attributes(token, run_fragments)
    ctx.runs.begin_tag(token.tag, run_fragments)
    ctx.process_chunks(token.tag)
    ctx.runs.end_tag(token.tag)

    ctx.flush_elements(paragraph)

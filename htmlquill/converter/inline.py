"""Handlers of inline tags: links, images, abbreviations and quotations."""

import logging
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urlparse

from ..models import Border, Drawing, Hyperlink, Run
from ..media import DataUri, keep_aspect_ratio
from ..parser import Token
from ..utils.enums import BorderStyle, StyleFamily
from ..utils.units import EMUS_PER_PIXEL, Unit, UnitMetric
from .context import ConversionContext

logger = logging.getLogger(__name__)

TOP_ANCHOR = "_top"
REJECTED_SCHEMES = frozenset({"javascript", "vbscript"})


# ----------------------------------------------------------------------
# Images
def _preferred_size(token: Token) -> Tuple[int, int]:
    """Pixel size declared by CSS or by the attributes, 0 when absent."""
    size = []
    for name in ("width", "height"):
        unit = token.style.get_unit(name)
        if not unit.is_fixed:
            unit = token.attributes.get_unit(name)
        size.append(unit.value_in_px if unit.is_fixed else 0)
    return size[0], size[1]


def _image_border(token: Token) -> Optional[Border]:
    border = token.style.get_border("border")
    for side in border.sides().values():
        return Border(side.style, side.size_in_eighths, side.color_hex())

    width = token.attributes.get_int("border")
    if width is not None and width > 0:
        size = int(round(Unit(UnitMetric.PIXEL, width).value_in_points * 8))
        return Border(BorderStyle.SINGLE, max(size, 2))
    return None


def build_drawing(ctx: ConversionContext, token: Token) -> Optional[Drawing]:
    """
    Resolve the image of an ``<img>`` token into a drawing.

    Returns:
        The drawing, or None when the source is missing or cannot be resolved
    """
    source = (token.attributes["src"] or "").strip()
    if not source:
        return None

    asset = ctx.images.resolve(source)
    if asset is None:
        return None

    width, height = _preferred_size(token)
    if width <= 0 and height <= 0:
        width, height = asset.size
    elif width <= 0 or height <= 0:
        width, height = keep_aspect_ratio(asset.size, (width, height))

    drawing_id, picture_id = ctx.next_drawing_ids()
    drawing = Drawing(
        asset.rel_id,
        max(width, 0) * EMUS_PER_PIXEL,
        max(height, 0) * EMUS_PER_PIXEL,
        drawing_id,
        picture_id,
        name="" if DataUri.is_well_formed(source) else source,
        description=token.attributes["title"] or token.attributes["alt"] or "",
    )
    drawing.border = _image_border(token)
    return drawing


def start_image(ctx: ConversionContext, token: Token) -> None:
    drawing = build_drawing(ctx, token)
    if drawing is None:
        logger.debug(f"No image rendered for {token.attributes['src']!r}")
        return
    run = Run()
    run.add_drawing(drawing)
    ctx.elements.append(run)


# ----------------------------------------------------------------------
# Links
def _link_target(ctx: ConversionContext, href: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """
    Classify a link target.

    Returns:
        (uri, anchor): at most one is set; both None means the link renders
        as plain content
    """
    href = (href or "").strip()
    if not href:
        return None, None
    if href.lower().startswith("www."):
        href = "http://" + href

    if href.startswith("#"):
        anchor = href[1:]
        if anchor == TOP_ANCHOR or (anchor and not ctx.config.exclude_link_anchor):
            return None, anchor
        return None, None

    parsed = urlparse(href)
    if not parsed.scheme or parsed.scheme.lower() in REJECTED_SCHEMES:
        return None, None
    if not (parsed.netloc or parsed.path):
        return None, None
    return href, None


def start_link(ctx: ConversionContext, token: Token) -> None:
    """
    ``<a>``: wrap the converted content in a hyperlink.

    Images in the link open the target on click; a link holding images
    ends the running paragraph.
    """
    uri, anchor = _link_target(ctx, token.attributes["href"])
    if uri is None and anchor is None:
        logger.debug(f"Link rendered as text: {token.attributes['href']!r}")
        ctx.process_chunks(token.tag)
        return

    run_fragments: Dict[str, Any] = {}
    ctx.runs.process_common_attributes(token, run_fragments)
    ctx.runs.begin_tag(token.tag, run_fragments)
    content = ctx.sub_convert(token.tag, flush=False)
    ctx.runs.end_tag(token.tag)

    if not content:
        return

    link = Hyperlink(anchor=anchor, tooltip=token.attributes["title"], target=uri)
    if uri is not None:
        link.relationship_id = ctx.document.add_hyperlink_relationship(uri)

    hyperlink_style = ctx.style(ctx.default_styles.hyperlink_style, StyleFamily.CHARACTER)
    has_images = False
    styled = False
    for element in content:
        if isinstance(element, Run) and element.has_drawing:
            has_images = True
            drawing = element.drawing
            drawing.hyperlink_rel_id = link.relationship_id
            drawing.hyperlink_anchor = link.anchor
            drawing.tooltip = drawing.description or None
        elif isinstance(element, Run) and not styled:
            if element.style_id is None:
                element.style_id = hyperlink_style
            styled = True
        link.add_child(element)

    ctx.elements.append(link)
    if has_images:
        ctx.complete_current_paragraph(True)


# ----------------------------------------------------------------------
# Abbreviations and quotations
def start_acronym(ctx: ConversionContext, token: Token) -> None:
    """``<abbr>``/``<acronym>``: the title becomes a footnote or an endnote."""
    title = (token.attributes["title"] or "").strip()
    if not title:
        return

    content = ctx.sub_convert(token.tag, flush=False)
    ctx.elements.extend(content)
    if content and isinstance(content[0], Run):
        ctx.elements.append(ctx.add_note_reference(title))


def start_cite(ctx: ConversionContext, token: Token) -> None:
    run_fragments: Dict[str, Any] = {
        'style_id': ctx.style(ctx.default_styles.quote_style, StyleFamily.CHARACTER),
    }
    ctx.process_container_attributes(token, run_fragments)
    ctx.runs.merge_tag(token.tag, run_fragments)


def start_quote(ctx: ConversionContext, token: Token) -> None:
    """``<q>``: quotation marks around the content, in the quote character style."""
    start_cite(ctx, token)
    ctx.emit_text(ctx.config.quote_prefix)


def end_quote(ctx: ConversionContext, token: Token) -> None:
    ctx.emit_text(ctx.config.quote_suffix)
    ctx.end_tags(token.tag)

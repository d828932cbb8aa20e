"""
Supported tags.

Every tag name maps to one TagKind; names not listed map to
``TagKind.UNKNOWN`` whose handler does nothing, so the content of unknown
tags still flows into the surrounding paragraph.
"""

from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping

from ..utils.enums import VerticalPosition


class TagKind(Enum):
    UNKNOWN = "unknown"
    LINK = "link"
    ACRONYM = "acronym"
    BLOCKQUOTE = "blockquote"
    BODY = "body"
    BREAK = "break"
    CAPTION = "caption"
    CITE = "cite"
    DEFINITION_TERM = "definition_term"
    DEFINITION_ITEM = "definition_item"
    DIV = "div"
    FIGCAPTION = "figcaption"
    FONT = "font"
    HEADING = "heading"
    HORIZONTAL_LINE = "horizontal_line"
    IMAGE = "image"
    LIST = "list"
    LIST_ITEM = "list_item"
    PARAGRAPH = "paragraph"
    PHRASING = "phrasing"
    PRE = "pre"
    QUOTE = "quote"
    SPAN = "span"
    TABLE = "table"
    TABLE_PART = "table_part"
    TABLE_ROW = "table_row"
    TABLE_CELL = "table_cell"
    XML_ISLAND = "xml_island"


TAG_KINDS: Mapping[str, TagKind] = MappingProxyType({
    "a": TagKind.LINK,
    "abbr": TagKind.ACRONYM,
    "acronym": TagKind.ACRONYM,
    "article": TagKind.DIV,
    "aside": TagKind.DIV,
    "b": TagKind.PHRASING,
    "blockquote": TagKind.BLOCKQUOTE,
    "body": TagKind.BODY,
    "br": TagKind.BREAK,
    "caption": TagKind.CAPTION,
    "cite": TagKind.CITE,
    "dd": TagKind.DEFINITION_ITEM,
    "del": TagKind.PHRASING,
    "div": TagKind.DIV,
    "dt": TagKind.DEFINITION_TERM,
    "em": TagKind.PHRASING,
    "figcaption": TagKind.FIGCAPTION,
    "font": TagKind.FONT,
    "h1": TagKind.HEADING,
    "h2": TagKind.HEADING,
    "h3": TagKind.HEADING,
    "h4": TagKind.HEADING,
    "h5": TagKind.HEADING,
    "h6": TagKind.HEADING,
    "hr": TagKind.HORIZONTAL_LINE,
    "html": TagKind.BODY,
    "i": TagKind.PHRASING,
    "img": TagKind.IMAGE,
    "ins": TagKind.PHRASING,
    "li": TagKind.LIST_ITEM,
    "ol": TagKind.LIST,
    "p": TagKind.PARAGRAPH,
    "pre": TagKind.PRE,
    "q": TagKind.QUOTE,
    "s": TagKind.PHRASING,
    "section": TagKind.DIV,
    "span": TagKind.SPAN,
    "strike": TagKind.PHRASING,
    "strong": TagKind.PHRASING,
    "sub": TagKind.PHRASING,
    "sup": TagKind.PHRASING,
    "table": TagKind.TABLE,
    "tbody": TagKind.TABLE_PART,
    "td": TagKind.TABLE_CELL,
    "tfoot": TagKind.TABLE_PART,
    "th": TagKind.TABLE_CELL,
    "thead": TagKind.TABLE_PART,
    "tr": TagKind.TABLE_ROW,
    "u": TagKind.PHRASING,
    "ul": TagKind.LIST,
    "xml": TagKind.XML_ISLAND,
})

# Run formatting contributed by the simple phrasing tags
PHRASING_FRAGMENTS: Mapping[str, Mapping[str, Any]] = MappingProxyType({
    "b": {'bold': True},
    "strong": {'bold': True},
    "i": {'italic': True},
    "em": {'italic': True},
    "u": {'underline': 'single'},
    "ins": {'underline': 'single'},
    "s": {'strike_through': True},
    "strike": {'strike_through': True},
    "del": {'strike_through': True},
    "sub": {'vertical_position': VerticalPosition.SUBSCRIPT},
    "sup": {'vertical_position': VerticalPosition.SUPERSCRIPT},
})


def tag_kind(tag: str) -> TagKind:
    """Kind of a tag name, case-insensitively."""
    return TAG_KINDS.get((tag or "").lower(), TagKind.UNKNOWN)


def phrasing_fragments(tag: str) -> Dict[str, Any]:
    return dict(PHRASING_FRAGMENTS.get(tag, {}))

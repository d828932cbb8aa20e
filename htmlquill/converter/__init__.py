"""HTML to document conversion engine."""

from .context import ConversionContext
from .engine import END_HANDLERS, START_HANDLERS, HtmlConverter, dispatch, remove_empty_paragraphs
from .tags import PHRASING_FRAGMENTS, TAG_KINDS, TagKind, tag_kind

__all__ = [
    "ConversionContext",
    "END_HANDLERS",
    "START_HANDLERS",
    "HtmlConverter",
    "dispatch",
    "remove_empty_paragraphs",
    "PHRASING_FRAGMENTS",
    "TAG_KINDS",
    "TagKind",
    "tag_kind",
]

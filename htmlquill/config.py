"""
Converter configuration.

Both classes are plain dataclasses so hosts can build them directly or from
a mapping loaded from their own settings (see :meth:`ConverterConfig.from_dict`).
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from .exceptions import ConfigurationError


class AcronymPosition(str, Enum):
    """Where the definition of an ``<abbr>``/``<acronym>`` is written."""

    PAGE_END = "page_end"
    DOCUMENT_END = "document_end"


class CaptionPosition(str, Enum):
    """Placement of a table caption relative to its table."""

    ABOVE = "above"
    BELOW = "below"


@dataclass
class DefaultStyles:
    """
    Style names used for the semantic roles of converted content.

    Attributes:
        caption_style: Paragraph style of table and figure captions.
        endnote_text_style: Paragraph style of endnote bodies.
        endnote_reference_style: Character style of endnote references.
        footnote_text_style: Paragraph style of footnote bodies.
        footnote_reference_style: Character style of footnote references.
        heading_style: Prefix of heading styles, the level is appended.
        hyperlink_style: Character style of link text.
        list_paragraph_style: Paragraph style of list items.
        paragraph_style: Style applied to every new paragraph (None for the document default).
        pre_table_style: Table style of ``<pre>`` blocks rendered as a table.
        quote_style: Character style (via its linked style) of quotations.
        intense_quote_style: Paragraph style of ``<blockquote>``.
        table_style: Default style of converted tables.
    """

    caption_style: str = "Caption"
    endnote_text_style: str = "EndnoteText"
    endnote_reference_style: str = "EndnoteReference"
    footnote_text_style: str = "FootnoteText"
    footnote_reference_style: str = "FootnoteReference"
    heading_style: str = "Heading"
    hyperlink_style: str = "Hyperlink"
    list_paragraph_style: str = "ListParagraph"
    paragraph_style: Optional[str] = None
    pre_table_style: str = "TableGrid"
    quote_style: str = "Quote"
    intense_quote_style: str = "IntenseQuote"
    table_style: str = "TableGrid"

    def heading(self, level: int) -> str:
        return f"{self.heading_style}{level}"


@dataclass(frozen=True)
class ConverterConfig:
    """
    Options of :class:`htmlquill.converter.HtmlConverter`.

    Attributes:
        acronym_position: Footnote (page end) or endnote (document end) for abbreviations.
        consider_div_as_paragraph: Treat every ``<div>`` as a paragraph instead of a line break.
        exclude_link_anchor: Render ``<a href="#x">`` as plain text.
        table_caption_position: Caption above or below the table.
        render_pre_as_table: Wrap ``<pre>`` in a bordered one-cell table.
        default_styles: Style names per semantic role.
        image_fetch_timeout: Seconds to wait for one image before dropping it.
        base_image_url: Base used by the default fetcher for relative image sources.
        quote_prefix: Text inserted before ``<q>`` content.
        quote_suffix: Text inserted after ``<q>`` content.
    """

    acronym_position: AcronymPosition = AcronymPosition.PAGE_END
    consider_div_as_paragraph: bool = False
    exclude_link_anchor: bool = False
    table_caption_position: CaptionPosition = CaptionPosition.ABOVE
    render_pre_as_table: bool = True
    default_styles: DefaultStyles = field(default_factory=DefaultStyles)
    image_fetch_timeout: float = 30.0
    base_image_url: Optional[str] = None
    quote_prefix: str = "“"
    quote_suffix: str = "”"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ConverterConfig":
        """
        Build a config from plain data.

        Args:
            data: Mapping of field names to values; enums accept their name or value,
                ``default_styles`` accepts a nested mapping.

        Returns:
            A new ConverterConfig

        Raises:
            ConfigurationError: On unknown keys or invalid values
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError("Unknown configuration keys", ", ".join(unknown))

        values: Dict[str, Any] = dict(data)
        if "acronym_position" in values:
            values["acronym_position"] = _to_enum(AcronymPosition, values["acronym_position"])
        if "table_caption_position" in values:
            values["table_caption_position"] = _to_enum(CaptionPosition, values["table_caption_position"])
        styles = values.get("default_styles")
        if isinstance(styles, Mapping):
            style_fields = {f.name for f in fields(DefaultStyles)}
            bad = sorted(set(styles) - style_fields)
            if bad:
                raise ConfigurationError("Unknown default style roles", ", ".join(bad))
            values["default_styles"] = DefaultStyles(**styles)
        if "image_fetch_timeout" in values:
            try:
                timeout = float(values["image_fetch_timeout"])
            except (TypeError, ValueError) as e:
                raise ConfigurationError("Invalid image_fetch_timeout", str(e)) from e
            if timeout <= 0:
                raise ConfigurationError("Invalid image_fetch_timeout", "must be positive")
            values["image_fetch_timeout"] = timeout
        return cls(**values)


def _to_enum(enum_type, value):
    if isinstance(value, enum_type):
        return value
    text = str(value)
    for member in enum_type:
        if text.lower() in (member.value, member.name.lower()):
            return member
    raise ConfigurationError(f"Invalid {enum_type.__name__}", text)

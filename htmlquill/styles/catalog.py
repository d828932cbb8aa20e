"""
Style catalog.

Resolves a style name or CSS class name to the identifier of a style of the
document. Word processing styles are case-sensitive while CSS class names are
not, so lookups may ignore case; several styles can share a name across
families (``Quote`` paragraph and ``Quote`` table style), the requested
family disambiguates.
"""

from typing import Dict, List, Optional
import logging

from ..models.style import StyleDefinition
from ..utils.enums import StyleFamily

logger = logging.getLogger(__name__)


def _predefined() -> Dict[str, StyleDefinition]:
    styles = [
        StyleDefinition("Caption", "caption", StyleFamily.PARAGRAPH),
        StyleDefinition("EndnoteText", "endnote text", StyleFamily.PARAGRAPH, linked_style="EndnoteTextChar"),
        StyleDefinition("EndnoteTextChar", "Endnote Text Char", StyleFamily.CHARACTER, linked_style="EndnoteText"),
        StyleDefinition("EndnoteReference", "endnote reference", StyleFamily.CHARACTER),
        StyleDefinition("FootnoteText", "footnote text", StyleFamily.PARAGRAPH, linked_style="FootnoteTextChar"),
        StyleDefinition("FootnoteTextChar", "Footnote Text Char", StyleFamily.CHARACTER, linked_style="FootnoteText"),
        StyleDefinition("FootnoteReference", "footnote reference", StyleFamily.CHARACTER),
        StyleDefinition("Hyperlink", "Hyperlink", StyleFamily.CHARACTER),
        StyleDefinition("ListParagraph", "List Paragraph", StyleFamily.PARAGRAPH),
        StyleDefinition("Quote", "Quote", StyleFamily.PARAGRAPH, linked_style="QuoteChar"),
        StyleDefinition("QuoteChar", "Quote Char", StyleFamily.CHARACTER, linked_style="Quote"),
        StyleDefinition("IntenseQuote", "Intense Quote", StyleFamily.PARAGRAPH, linked_style="IntenseQuoteChar"),
        StyleDefinition("IntenseQuoteChar", "Intense Quote Char", StyleFamily.CHARACTER, linked_style="IntenseQuote"),
        StyleDefinition("TableGrid", "Table Grid", StyleFamily.TABLE, has_table_borders=True),
    ]
    for level in range(1, 7):
        styles.append(StyleDefinition(f"Heading{level}", f"heading {level}", StyleFamily.PARAGRAPH,
                                      linked_style=f"Heading{level}Char"))
        styles.append(StyleDefinition(f"Heading{level}Char", f"Heading {level} Char", StyleFamily.CHARACTER,
                                      linked_style=f"Heading{level}"))
    return {style.style_id: style for style in styles}


PREDEFINED_STYLES: Dict[str, StyleDefinition] = _predefined()


class StyleCatalog:
    """
    Read-only index over the styles of a document.

    The index is built once; call :meth:`refresh` after the document styles
    were changed outside of the converter. Predefined styles used by the
    converter (captions, notes, quotes...) are added to the document the
    first time they are requested.
    """

    def __init__(self, document):
        self.document = document
        self._by_key: Dict[str, List[StyleDefinition]] = {}
        self.refresh()

    def refresh(self) -> None:
        """Rebuild the index from the document styles."""
        self._by_key = {}
        for style in self.document.iter_styles():
            self._index(style)
        logger.debug(f"Style catalog loaded with {len(self.document.styles)} styles")

    def _index(self, style: StyleDefinition) -> None:
        for key in {style.style_id.lower(), style.name.lower()}:
            self._by_key.setdefault(key, []).append(style)

    def _candidates(self, name: str, ignore_case: bool) -> List[StyleDefinition]:
        found = self._by_key.get(name.lower(), [])
        if ignore_case:
            return found
        return [s for s in found if s.style_id == name or s.name == name]

    def _ensure(self, style_id: str) -> Optional[StyleDefinition]:
        """Return the style, adding the predefined definition when missing."""
        style = self.document.find_style(style_id)
        if style is not None:
            return style
        predefined = PREDEFINED_STYLES.get(style_id)
        if predefined is None:
            return None
        style = StyleDefinition(**vars(predefined))
        self.document.add_style(style)
        self._index(style)
        logger.debug(f"Predefined style added: {style_id}")
        return style

    def get_style(self, name: Optional[str], family: StyleFamily = StyleFamily.PARAGRAPH,
                  ignore_case: bool = False) -> Optional[str]:
        """
        Resolve a style name to a style id of the requested family.

        Args:
            name: Style id, style name or CSS class name
            family: Requested style family
            ignore_case: Match case-insensitively (CSS class names)

        Returns:
            The style id, or None when nothing matches. A character request
            for a paragraph style returns its linked character style.
        """
        if not name:
            return None

        candidates = self._candidates(name, ignore_case)
        if not candidates:
            predefined = PREDEFINED_STYLES.get(name)
            if predefined is None and ignore_case:
                predefined = next((s for s in PREDEFINED_STYLES.values()
                                   if s.style_id.lower() == name.lower()), None)
            if predefined is None:
                logger.debug(f"Style not found: {name} ({family.value})")
                return None
            candidates = [self._ensure(predefined.style_id)]

        for style in candidates:
            if style.family == family:
                return style.style_id

        if family == StyleFamily.CHARACTER:
            for style in candidates:
                if style.linked_style:
                    linked = self._ensure(style.linked_style)
                    if linked is not None and linked.family == StyleFamily.CHARACTER:
                        return linked.style_id

        logger.debug(f"Style {name} exists but not as {family.value} style")
        return None

    def has_table_borders(self, style_id: Optional[str]) -> bool:
        style = self.document.find_style(style_id) if style_id else None
        return bool(style and style.has_table_borders)

"""Style definition stored in the document styles part."""

from dataclasses import dataclass
from typing import Optional

from ..utils.enums import StyleFamily


@dataclass
class StyleDefinition:
    """
    A named style of the document.

    ``linked_style`` names the style of the other family sharing the same
    formatting (``Quote`` paragraph style <-> ``QuoteChar`` character style).
    """

    style_id: str
    name: str
    family: StyleFamily
    based_on: Optional[str] = None
    linked_style: Optional[str] = None
    has_table_borders: bool = False
    custom: bool = False

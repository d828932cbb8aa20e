"""Style resolution: catalog of document styles and cascading style stacks."""

from .catalog import PREDEFINED_STYLES, StyleCatalog
from .cascade import (
    ParagraphCascade,
    RunCascade,
    StyleCascade,
    StyleFrame,
    TableCascade,
    border_fragment,
)

__all__ = [
    "PREDEFINED_STYLES",
    "StyleCatalog",
    "ParagraphCascade",
    "RunCascade",
    "StyleCascade",
    "StyleFrame",
    "TableCascade",
    "border_fragment",
]

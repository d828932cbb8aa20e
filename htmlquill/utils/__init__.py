"""Value parsing helpers and logging setup."""

from .logger import get_logger, configure_logging
from .units import Unit, UnitMetric, Margin
from .colors import HtmlColor
from .css import HtmlAttributes, StyleDeclarations

__all__ = [
    "get_logger",
    "configure_logging",
    "Unit",
    "UnitMetric",
    "Margin",
    "HtmlColor",
    "HtmlAttributes",
    "StyleDeclarations",
]

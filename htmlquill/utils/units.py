"""
CSS length handling.

A :class:`Unit` keeps the value as written in the markup together with its
metric and converts it on demand to the measures used by word processing
documents: twentieths of a point (dxa), English Metric Units (EMU), points,
half-points and pixels at 96 dpi.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)

EMUS_PER_INCH = 914400
EMUS_PER_POINT = 12700
EMUS_PER_PIXEL = 9525
EMUS_PER_DXA = 635
DEFAULT_FONT_SIZE_PT = 12.0


class UnitMetric(str, Enum):
    PIXEL = "px"
    POINT = "pt"
    PICA = "pc"
    INCH = "in"
    CENTIMETER = "cm"
    MILLIMETER = "mm"
    EM = "em"
    EX = "ex"
    PERCENT = "%"
    AUTO = "auto"
    UNITLESS = ""
    UNKNOWN = "?"


_EMUS_PER_METRIC = {
    UnitMetric.PIXEL: EMUS_PER_PIXEL,
    UnitMetric.POINT: EMUS_PER_POINT,
    UnitMetric.PICA: EMUS_PER_POINT * 12,
    UnitMetric.INCH: EMUS_PER_INCH,
    UnitMetric.CENTIMETER: 360000,
    UnitMetric.MILLIMETER: 36000,
    UnitMetric.EM: int(EMUS_PER_POINT * DEFAULT_FONT_SIZE_PT),
    UnitMetric.EX: int(EMUS_PER_POINT * DEFAULT_FONT_SIZE_PT / 2),
    # a bare number is read as pixels, as browsers do for HTML attributes
    UnitMetric.UNITLESS: EMUS_PER_PIXEL,
}

_UNIT_RE = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+))\s*(px|pt|pc|in|cm|mm|em|ex|%)?\s*$", re.IGNORECASE)

# CSS absolute-size keywords, in points
FONT_SIZE_KEYWORDS = {
    "xx-small": 7.0,
    "x-small": 7.5,
    "small": 10.0,
    "medium": 12.0,
    "large": 13.5,
    "x-large": 18.0,
    "xx-large": 24.0,
}

# legacy <font size="1..7">, in points
LEGACY_FONT_SIZES = {1: 8.0, 2: 10.0, 3: 12.0, 4: 14.0, 5: 18.0, 6: 24.0, 7: 36.0}


@dataclass(frozen=True)
class Unit:
    """A CSS length value."""

    metric: UnitMetric = UnitMetric.UNKNOWN
    value: float = 0.0

    @classmethod
    def parse(cls, text: Optional[str]) -> "Unit":
        """Parse ``12px``, ``50%``, ``auto``... Invalid input yields an invalid unit."""
        if text is None:
            return EMPTY_UNIT
        text = text.strip().lower()
        if not text:
            return EMPTY_UNIT
        if text == "auto":
            return cls(UnitMetric.AUTO, 0.0)
        match = _UNIT_RE.match(text)
        if not match:
            return EMPTY_UNIT
        suffix = (match.group(2) or "").lower()
        return cls(UnitMetric(suffix), float(match.group(1)))

    @property
    def is_valid(self) -> bool:
        return self.metric != UnitMetric.UNKNOWN

    @property
    def is_fixed(self) -> bool:
        """True for absolute or font-relative lengths (not %, not auto)."""
        return self.is_valid and self.metric not in (UnitMetric.PERCENT, UnitMetric.AUTO)

    @property
    def is_auto(self) -> bool:
        return self.metric == UnitMetric.AUTO

    @property
    def value_in_emus(self) -> int:
        factor = _EMUS_PER_METRIC.get(self.metric)
        if factor is None:
            return 0
        return int(round(self.value * factor))

    @property
    def value_in_dxa(self) -> int:
        return int(round(self.value_in_emus / EMUS_PER_DXA))

    @property
    def value_in_points(self) -> float:
        return self.value_in_emus / EMUS_PER_POINT

    @property
    def value_in_half_points(self) -> int:
        return int(round(self.value_in_points * 2))

    @property
    def value_in_px(self) -> int:
        return int(round(self.value_in_emus / EMUS_PER_PIXEL))

    def __str__(self) -> str:
        if not self.is_valid:
            return "<invalid>"
        if self.is_auto:
            return "auto"
        return f"{self.value:g}{self.metric.value}"


EMPTY_UNIT = Unit()


def pixels(value: float) -> Unit:
    return Unit(UnitMetric.PIXEL, float(value))


@dataclass(frozen=True)
class Margin:
    """Four sides of a ``margin``/``padding`` declaration."""

    top: Unit = EMPTY_UNIT
    right: Unit = EMPTY_UNIT
    bottom: Unit = EMPTY_UNIT
    left: Unit = EMPTY_UNIT

    @classmethod
    def parse(cls, text: Optional[str]) -> "Margin":
        """Parse the 1 to 4 value shorthand."""
        if not text:
            return EMPTY_MARGIN
        parts = [Unit.parse(p) for p in text.split()]
        if not parts or len(parts) > 4 or not all(p.is_valid for p in parts):
            logger.debug(f"Ignoring malformed margin shorthand: {text!r}")
            return EMPTY_MARGIN
        if len(parts) == 1:
            return cls(parts[0], parts[0], parts[0], parts[0])
        if len(parts) == 2:
            return cls(parts[0], parts[1], parts[0], parts[1])
        if len(parts) == 3:
            return cls(parts[0], parts[1], parts[2], parts[1])
        return cls(parts[0], parts[1], parts[2], parts[3])

    def with_side(self, side: str, unit: Unit) -> "Margin":
        return replace(self, **{side: unit})

    @property
    def is_empty(self) -> bool:
        return not any(u.is_valid for u in (self.top, self.right, self.bottom, self.left))


EMPTY_MARGIN = Margin()


def parse_font_size(text: Optional[str]) -> Unit:
    """Font size from CSS (``12pt``, ``large``) or from a legacy ``<font size>`` (``1``..``7``, ``+1``)."""
    if not text:
        return EMPTY_UNIT
    text = text.strip().lower()
    if text in FONT_SIZE_KEYWORDS:
        return Unit(UnitMetric.POINT, FONT_SIZE_KEYWORDS[text])
    if re.fullmatch(r"[+-]?\d", text):
        size = int(text)
        if text[0] in "+-":
            size = 3 + size
        size = min(max(size, 1), 7)
        return Unit(UnitMetric.POINT, LEGACY_FONT_SIZES[size])
    unit = Unit.parse(text)
    if unit.metric == UnitMetric.UNITLESS:
        return EMPTY_UNIT
    return unit

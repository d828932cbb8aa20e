"""
Typed access to HTML attributes and inline CSS declarations.

Only the subset of CSS the converter honours is understood here: lengths,
margins, colors, borders, the ``font`` shorthand with its longhands and
``text-decoration``. Anything else stays available as a raw string.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .colors import EMPTY_COLOR, HtmlColor
from .enums import (
    AlignmentType,
    BorderStyle,
    CellVerticalAlignment,
    FontStyle,
    FontVariant,
    FontWeight,
    PageOrientation,
    TextDecoration,
)
from .units import EMPTY_UNIT, Margin, Unit, UnitMetric, parse_font_size

logger = logging.getLogger(__name__)

_BORDER_STYLES = {
    "none": BorderStyle.NONE,
    "hidden": BorderStyle.NONE,
    "solid": BorderStyle.SINGLE,
    "dotted": BorderStyle.DOTTED,
    "dashed": BorderStyle.DASHED,
    "double": BorderStyle.DOUBLE,
    "inset": BorderStyle.INSET,
    "outset": BorderStyle.OUTSET,
    "groove": BorderStyle.GROOVE,
    "ridge": BorderStyle.RIDGE,
}

_BORDER_WIDTHS = {
    "thin": Unit(UnitMetric.PIXEL, 1),
    "medium": Unit(UnitMetric.PIXEL, 3),
    "thick": Unit(UnitMetric.PIXEL, 5),
}

_SIDES = ("top", "right", "bottom", "left")


@dataclass(frozen=True)
class SideBorder:
    """One side of a CSS border."""

    style: Optional[BorderStyle] = None
    width: Unit = EMPTY_UNIT
    color: HtmlColor = EMPTY_COLOR

    @classmethod
    def parse(cls, text: Optional[str]) -> "SideBorder":
        """Parse ``1px solid red`` in any order."""
        if not text:
            return cls()
        style = None
        width = EMPTY_UNIT
        color = EMPTY_COLOR
        for part in _split_values(text):
            lowered = part.lower()
            if lowered in _BORDER_STYLES:
                style = _BORDER_STYLES[lowered]
            elif lowered in _BORDER_WIDTHS:
                width = _BORDER_WIDTHS[lowered]
            else:
                unit = Unit.parse(lowered)
                if unit.is_fixed:
                    width = unit
                    continue
                parsed = HtmlColor.parse(lowered)
                if not parsed.is_empty:
                    color = parsed
        return cls(style, width, color)

    @property
    def is_valid(self) -> bool:
        return self.style is not None

    @property
    def width_or_default(self) -> Unit:
        return self.width if self.width.is_valid else Unit(UnitMetric.PIXEL, 1)

    @property
    def size_in_eighths(self) -> int:
        """Border width in eighths of a point, as stored in ``w:sz``."""
        return max(int(round(self.width_or_default.value_in_points * 8)), 2)

    def color_hex(self) -> str:
        return "auto" if self.color.is_empty else self.color.to_hex()


@dataclass(frozen=True)
class HtmlBorder:
    """The four sides of a CSS border."""

    top: SideBorder = field(default_factory=SideBorder)
    right: SideBorder = field(default_factory=SideBorder)
    bottom: SideBorder = field(default_factory=SideBorder)
    left: SideBorder = field(default_factory=SideBorder)

    @property
    def is_empty(self) -> bool:
        return not any(side.is_valid for side in (self.top, self.right, self.bottom, self.left))

    def sides(self) -> Dict[str, SideBorder]:
        return {name: getattr(self, name) for name in _SIDES if getattr(self, name).is_valid}


@dataclass(frozen=True)
class HtmlFont:
    """Result of the ``font`` shorthand merged with the ``font-*`` longhands."""

    style: Optional[FontStyle] = None
    variant: Optional[FontVariant] = None
    weight: Optional[FontWeight] = None
    size: Unit = EMPTY_UNIT
    family: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return (self.style is None and self.variant is None and self.weight is None
                and not self.size.is_valid and self.family is None)


class HtmlAttributes(dict):
    """Attribute map of a tag with typed getters. Missing keys read as ``None``."""

    def __missing__(self, key):
        return None

    def get_unit(self, name: str) -> Unit:
        return Unit.parse(self.get(name))

    def get_int(self, name: str) -> Optional[int]:
        value = self.get(name)
        if value is None:
            return None
        match = re.match(r"^\s*([+-]?\d+)", value)
        return int(match.group(1)) if match else None

    def get_color(self, name: str) -> HtmlColor:
        return HtmlColor.parse(self.get(name))

    def get_classes(self) -> Optional[List[str]]:
        value = self.get("class")
        if not value:
            return None
        classes = value.split()
        return classes or None


class StyleDeclarations(HtmlAttributes):
    """Inline ``style`` declarations, keyed by lowercased property name."""

    @classmethod
    def parse(cls, text: Optional[str]) -> "StyleDeclarations":
        declarations = cls()
        if not text:
            return declarations
        for chunk in _split_declarations(text):
            name, sep, value = chunk.partition(":")
            if not sep:
                continue
            name = name.strip().lower()
            value = value.strip()
            if value.lower().endswith("!important"):
                value = value[: -len("!important")].strip()
            if name and value:
                declarations[name] = value
        return declarations

    def get_margin(self, name: str) -> Margin:
        """Shorthand (``margin``/``padding``) overridden by the per-side longhands."""
        margin = Margin.parse(self.get(name))
        for side in _SIDES:
            longhand = self.get(f"{name}-{side}")
            if longhand is not None:
                unit = Unit.parse(longhand)
                if unit.is_valid:
                    margin = margin.with_side(side, unit)
        return margin

    def get_side_border(self, name: str) -> SideBorder:
        return SideBorder.parse(self.get(name))

    def get_border(self, name: str = "border") -> HtmlBorder:
        """Border shorthand with ``border-<side>``, ``-width``, ``-style`` and ``-color`` overrides."""
        base = SideBorder.parse(self.get(name))
        sides = {side: base for side in _SIDES}

        for side in _SIDES:
            value = self.get(f"{name}-{side}")
            if value is not None:
                sides[side] = SideBorder.parse(value)

        for aspect in ("width", "style", "color"):
            value = self.get(f"{name}-{aspect}")
            if value is None:
                continue
            for side, part in zip(_SIDES, _expand_box(_split_values(value))):
                current = sides[side]
                if aspect == "width":
                    unit = _BORDER_WIDTHS.get(part.lower()) or Unit.parse(part)
                    sides[side] = SideBorder(current.style, unit, current.color)
                elif aspect == "style":
                    sides[side] = SideBorder(_BORDER_STYLES.get(part.lower()), current.width, current.color)
                else:
                    sides[side] = SideBorder(current.style, current.width, HtmlColor.parse(part))

        return HtmlBorder(**sides)

    def get_font(self, name: str = "font") -> HtmlFont:
        font = _parse_font_shorthand(self.get(name))
        style = font.style
        variant = font.variant
        weight = font.weight
        size = font.size
        family = font.family

        value = self.get(f"{name}-style")
        if value:
            style = _FONT_STYLES.get(value.strip().lower(), style)
        value = self.get(f"{name}-variant")
        if value:
            variant = _FONT_VARIANTS.get(value.strip().lower(), variant)
        value = self.get(f"{name}-weight")
        if value:
            weight = _parse_font_weight(value.strip().lower()) or weight
        value = self.get(f"{name}-size")
        if value:
            parsed = parse_font_size(value)
            if parsed.is_valid:
                size = parsed
        value = self.get(f"{name}-family")
        if value:
            family = _first_family(value)

        return HtmlFont(style, variant, weight, size, family)


_FONT_STYLES = {
    "normal": FontStyle.NORMAL,
    "italic": FontStyle.ITALIC,
    "oblique": FontStyle.OBLIQUE,
}

_FONT_VARIANTS = {
    "normal": FontVariant.NORMAL,
    "small-caps": FontVariant.SMALL_CAPS,
}


def _parse_font_weight(text: str) -> Optional[FontWeight]:
    if text in ("bold", "bolder", "lighter", "normal"):
        return FontWeight(text)
    if text.isdigit():
        return FontWeight.BOLD if int(text) >= 600 else FontWeight.NORMAL
    return None


def _first_family(text: str) -> Optional[str]:
    for family in text.split(","):
        family = family.strip().strip("'\"").strip()
        if family:
            return family
    return None


def _parse_font_shorthand(text: Optional[str]) -> HtmlFont:
    if not text:
        return HtmlFont()
    style = variant = weight = None
    size = EMPTY_UNIT
    parts = text.split()
    for index, part in enumerate(parts):
        lowered = part.lower()
        if lowered in ("italic", "oblique"):
            style = _FONT_STYLES[lowered]
        elif lowered == "small-caps":
            variant = FontVariant.SMALL_CAPS
        elif _parse_font_weight(lowered) is not None and lowered != "normal":
            weight = _parse_font_weight(lowered)
        elif lowered == "normal":
            continue
        else:
            # font-size[/line-height] then the family list
            parsed = parse_font_size(lowered.split("/")[0])
            if parsed.is_valid:
                size = parsed
                family = _first_family(" ".join(parts[index + 1:]))
                return HtmlFont(style, variant, weight, size, family)
            return HtmlFont(style, variant, weight, size, _first_family(" ".join(parts[index:])))
    return HtmlFont(style, variant, weight, size, None)


def parse_text_decoration(text: Optional[str]) -> TextDecoration:
    decoration = TextDecoration.NONE
    if not text:
        return decoration
    for word in text.lower().split():
        if word == "underline":
            decoration |= TextDecoration.UNDERLINE
        elif word == "line-through":
            decoration |= TextDecoration.LINE_THROUGH
        elif word == "overline":
            decoration |= TextDecoration.OVERLINE
        elif word == "blink":
            decoration |= TextDecoration.BLINK
    return decoration


def to_paragraph_align(text: Optional[str]) -> Optional[AlignmentType]:
    if not text:
        return None
    return {
        "left": AlignmentType.LEFT,
        "right": AlignmentType.RIGHT,
        "center": AlignmentType.CENTER,
        "justify": AlignmentType.JUSTIFY,
    }.get(text.strip().lower())


def to_vertical_align(text: Optional[str]) -> Optional[CellVerticalAlignment]:
    if not text:
        return None
    return {
        "top": CellVerticalAlignment.TOP,
        "middle": CellVerticalAlignment.CENTER,
        "center": CellVerticalAlignment.CENTER,
        "bottom": CellVerticalAlignment.BOTTOM,
    }.get(text.strip().lower())


def to_page_orientation(text: Optional[str]) -> PageOrientation:
    if text and text.strip().lower() == "landscape":
        return PageOrientation.LANDSCAPE
    return PageOrientation.PORTRAIT


def _split_declarations(text: str) -> Iterable[str]:
    """Split on ``;`` outside parentheses and quotes (``url(data:...;base64,...)``)."""
    depth = 0
    quote = None
    current = []
    for char in text:
        if quote:
            if char == quote:
                quote = None
        elif char in "'\"":
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")":
            depth = max(depth - 1, 0)
        elif char == ";" and depth == 0:
            yield "".join(current)
            current = []
            continue
        current.append(char)
    if current:
        yield "".join(current)


def _split_values(text: str) -> List[str]:
    """Split a value list on whitespace, keeping ``rgb(1, 2, 3)`` together."""
    values = []
    depth = 0
    current = []
    for char in text.strip():
        if char == "(":
            depth += 1
        elif char == ")":
            depth = max(depth - 1, 0)
        if char.isspace() and depth == 0:
            if current:
                values.append("".join(current))
                current = []
            continue
        current.append(char)
    if current:
        values.append("".join(current))
    return values


def _expand_box(values: List[str]) -> List[str]:
    if not values:
        return []
    if len(values) == 1:
        return values * 4
    if len(values) == 2:
        return [values[0], values[1], values[0], values[1]]
    if len(values) == 3:
        return [values[0], values[1], values[2], values[1]]
    return values[:4]

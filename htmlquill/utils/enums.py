"""Common enumerations shared by the converter and the output models."""

from __future__ import annotations

from enum import Enum, IntFlag


class StyleFamily(str, Enum):
    """Style families defined by word processing documents."""

    PARAGRAPH = "paragraph"
    CHARACTER = "character"
    TABLE = "table"
    NUMBERING = "numbering"


class AlignmentType(str, Enum):
    """Paragraph justification values."""

    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"
    JUSTIFY = "justify"


class BreakType(str, Enum):
    """Break kinds carried by runs."""

    LINE = "line"
    PAGE = "page"
    COLUMN = "column"


class VerticalPosition(str, Enum):
    """Vertical text position of a run."""

    BASELINE = "baseline"
    SUPERSCRIPT = "superscript"
    SUBSCRIPT = "subscript"


class CellVerticalAlignment(str, Enum):
    """Vertical alignment of the content of a table cell."""

    TOP = "top"
    CENTER = "center"
    BOTTOM = "bottom"


class BorderStyle(str, Enum):
    """Border line styles (values follow WordprocessingML names)."""

    NONE = "none"
    SINGLE = "single"
    DOTTED = "dotted"
    DASHED = "dashed"
    DOUBLE = "double"
    INSET = "inset"
    OUTSET = "outset"
    GROOVE = "threeDEngrave"
    RIDGE = "threeDEmboss"


class NumberFormat(str, Enum):
    """List level numbering formats."""

    DECIMAL = "decimal"
    BULLET = "bullet"
    UPPER_LETTER = "upperLetter"
    LOWER_LETTER = "lowerLetter"
    UPPER_ROMAN = "upperRoman"
    LOWER_ROMAN = "lowerRoman"


class TextDirection(str, Enum):
    """Text flow inside a table cell."""

    LR_TB = "lrTb"
    BT_LR = "btLr"
    TB_RL = "tbRl"


class PageOrientation(str, Enum):
    """Section page orientation."""

    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


class WidthType(str, Enum):
    """Measurement type of table and cell widths."""

    AUTO = "auto"
    DXA = "dxa"
    PCT = "pct"
    NIL = "nil"


class HeightRule(str, Enum):
    """Row height rule."""

    AUTO = "auto"
    AT_LEAST = "atLeast"
    EXACT = "exact"


class ImageFormat(str, Enum):
    """Image part formats and their content types."""

    BMP = "image/bmp"
    EMF = "image/x-emf"
    GIF = "image/gif"
    ICON = "image/x-icon"
    JPEG = "image/jpeg"
    PCX = "image/pcx"
    PNG = "image/png"
    TIFF = "image/tiff"
    WMF = "image/x-wmf"

    @property
    def extension(self) -> str:
        return {
            ImageFormat.BMP: "bmp",
            ImageFormat.EMF: "emf",
            ImageFormat.GIF: "gif",
            ImageFormat.ICON: "ico",
            ImageFormat.JPEG: "jpeg",
            ImageFormat.PCX: "pcx",
            ImageFormat.PNG: "png",
            ImageFormat.TIFF: "tiff",
            ImageFormat.WMF: "wmf",
        }[self]


class TextDecoration(IntFlag):
    """CSS ``text-decoration`` flags."""

    NONE = 0
    UNDERLINE = 1
    OVERLINE = 2
    LINE_THROUGH = 4
    BLINK = 8


class FontStyle(str, Enum):
    NORMAL = "normal"
    ITALIC = "italic"
    OBLIQUE = "oblique"


class FontWeight(str, Enum):
    NORMAL = "normal"
    BOLD = "bold"
    BOLDER = "bolder"
    LIGHTER = "lighter"


class FontVariant(str, Enum):
    NORMAL = "normal"
    SMALL_CAPS = "small-caps"

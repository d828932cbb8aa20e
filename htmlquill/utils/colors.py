"""Color parsing for CSS values and legacy HTML attributes."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

NAMED_COLORS = {
    'aqua': (0, 255, 255),
    'black': (0, 0, 0),
    'blue': (0, 0, 255),
    'brown': (165, 42, 42),
    'coral': (255, 127, 80),
    'crimson': (220, 20, 60),
    'cyan': (0, 255, 255),
    'darkblue': (0, 0, 139),
    'darkgray': (169, 169, 169),
    'darkgreen': (0, 100, 0),
    'darkgrey': (169, 169, 169),
    'darkred': (139, 0, 0),
    'fuchsia': (255, 0, 255),
    'gold': (255, 215, 0),
    'gray': (128, 128, 128),
    'green': (0, 128, 0),
    'grey': (128, 128, 128),
    'indigo': (75, 0, 130),
    'ivory': (255, 255, 240),
    'khaki': (240, 230, 140),
    'lavender': (230, 230, 250),
    'lightblue': (173, 216, 230),
    'lightgray': (211, 211, 211),
    'lightgreen': (144, 238, 144),
    'lightgrey': (211, 211, 211),
    'lightyellow': (255, 255, 224),
    'lime': (0, 255, 0),
    'magenta': (255, 0, 255),
    'maroon': (128, 0, 0),
    'navy': (0, 0, 128),
    'olive': (128, 128, 0),
    'orange': (255, 165, 0),
    'orchid': (218, 112, 214),
    'pink': (255, 192, 203),
    'purple': (128, 0, 128),
    'red': (255, 0, 0),
    'salmon': (250, 128, 114),
    'silver': (192, 192, 192),
    'skyblue': (135, 206, 235),
    'tan': (210, 180, 140),
    'teal': (0, 128, 128),
    'tomato': (255, 99, 71),
    'turquoise': (64, 224, 208),
    'violet': (238, 130, 238),
    'wheat': (245, 222, 179),
    'white': (255, 255, 255),
    'whitesmoke': (245, 245, 245),
    'yellow': (255, 255, 0),
}

_RGB_RE = re.compile(r"^rgba?\(\s*([^)]*)\)$")


@dataclass(frozen=True)
class HtmlColor:
    """An opaque RGB color."""

    red: int = 0
    green: int = 0
    blue: int = 0
    empty: bool = False

    @classmethod
    def parse(cls, text: Optional[str]) -> "HtmlColor":
        """Parse ``red``, ``#f00``, ``#ff0000``, ``rgb(255,0,0)`` or ``rgba(...)``."""
        if not text:
            return EMPTY_COLOR
        text = text.strip().lower()
        if text in NAMED_COLORS:
            return cls(*NAMED_COLORS[text])

        hex_part = text[1:] if text.startswith('#') else text
        if re.fullmatch(r"[0-9a-f]{3}", hex_part):
            hex_part = ''.join(c * 2 for c in hex_part)
        if re.fullmatch(r"[0-9a-f]{6}", hex_part):
            return cls(int(hex_part[0:2], 16), int(hex_part[2:4], 16), int(hex_part[4:6], 16))

        match = _RGB_RE.match(text)
        if match:
            channels = [c.strip() for c in match.group(1).split(',')]
            if len(channels) in (3, 4):
                values = []
                for channel in channels[:3]:
                    if channel.endswith('%'):
                        number = _to_float(channel[:-1])
                        number = None if number is None else number * 255 / 100
                    else:
                        number = _to_float(channel)
                    if number is None:
                        return EMPTY_COLOR
                    values.append(int(round(min(max(number, 0), 255))))
                return cls(*values)
        return EMPTY_COLOR

    @property
    def is_empty(self) -> bool:
        return self.empty

    def to_hex(self) -> str:
        """``RRGGBB`` as stored by word processing documents."""
        return f"{self.red:02X}{self.green:02X}{self.blue:02X}"


EMPTY_COLOR = HtmlColor(empty=True)


def _to_float(text: str) -> Optional[float]:
    try:
        return float(text)
    except ValueError:
        return None

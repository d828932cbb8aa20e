"""Border description shared by paragraphs, runs, tables and cells."""

from dataclasses import dataclass
from typing import Any, Dict

from ..utils.enums import BorderStyle


@dataclass
class Border:
    """A single border line. ``size`` is in eighths of a point."""

    style: BorderStyle = BorderStyle.SINGLE
    size: int = 4
    color: str = "auto"
    space: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {'style': self.style.value, 'size': self.size, 'color': self.color, 'space': self.space}


def no_border() -> Border:
    return Border(BorderStyle.NONE, 0)

"""
Numbering models.

An abstract numbering holds up to nine level definitions; an instance binds a
list occurrence to one abstract numbering, optionally restarting levels.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional
import logging

from ..utils.enums import NumberFormat

logger = logging.getLogger(__name__)

MAX_LEVELS = 9


@dataclass
class NumberingLevel:
    """One level of an abstract numbering (indents in twips)."""

    level: int
    number_format: NumberFormat = NumberFormat.DECIMAL
    text: str = "%1."
    start: int = 1
    left_indent: Optional[int] = None
    hanging_indent: Optional[int] = None
    font: Optional[str] = None
    tab_stop: Optional[int] = None

    def copy(self, **changes) -> 'NumberingLevel':
        return replace(self, **changes)


@dataclass
class AbstractNumbering:
    """
    Reusable list template.

    ``name`` is the marker used to recognize definitions created by a
    previous conversion against the same document.
    """

    abstract_id: int
    name: str
    levels: List[NumberingLevel] = field(default_factory=list)
    multi_level_type: str = "singleLevel"

    @property
    def is_multilevel(self) -> bool:
        return self.multi_level_type != "singleLevel"

    def get_level(self, level: int) -> Optional[NumberingLevel]:
        for item in self.levels:
            if item.level == level:
                return item
        return None

    def clone(self, abstract_id: int, name: Optional[str] = None) -> 'AbstractNumbering':
        return AbstractNumbering(
            abstract_id=abstract_id,
            name=name or self.name,
            levels=[level.copy() for level in self.levels],
            multi_level_type=self.multi_level_type,
        )


@dataclass
class NumberingInstance:
    """A concrete list bound to one abstract numbering; ``level_overrides`` maps level -> start."""

    num_id: int
    abstract_id: int
    level_overrides: Dict[int, int] = field(default_factory=dict)

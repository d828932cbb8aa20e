"""
List numbering allocator.

Owns the abstract numbering definitions seeded by the converter and the
numbering instances created while lists are converted. Definitions created
by a previous conversion against the same document are recognized by their
names and reused, so consecutive conversions continue existing lists.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional
import logging

from ..exceptions import NumberingError
from ..models.numbering import AbstractNumbering, NumberingInstance, NumberingLevel, MAX_LEVELS
from ..utils.enums import NumberFormat
from ..utils.units import UnitMetric

logger = logging.getLogger(__name__)

HEADING_NUMBERING_NAME = "decimal-heading-multi"

DEFAULT_LEFT_INDENT = 420
DEFAULT_HANGING_INDENT = 360
NESTED_LEVEL_INDENT = 720

# name -> (format, level text); seeded in this order as one contiguous block
_SEEDS = (
    ("decimal", NumberFormat.DECIMAL, "%1."),
    ("disc", NumberFormat.BULLET, "•"),
    ("square", NumberFormat.BULLET, "▪"),
    ("circle", NumberFormat.BULLET, "o"),
    ("upper-alpha", NumberFormat.UPPER_LETTER, "%1."),
    ("lower-alpha", NumberFormat.LOWER_LETTER, "%1."),
    ("upper-roman", NumberFormat.UPPER_ROMAN, "%1."),
    ("lower-roman", NumberFormat.LOWER_ROMAN, "%1."),
    (HEADING_NUMBERING_NAME, NumberFormat.DECIMAL, "%1."),
)


@dataclass
class ListContext:
    """One open list: the instance its items use and the definition behind it."""

    instance_id: int
    abstract_id: int


class NumberingAllocator:
    """
    Allocates numbering definitions and instances for one conversion session.

    Args:
        store: The document NumberingStore receiving definitions and instances
    """

    def __init__(self, store):
        self.store = store
        self.known_abstract_ids: Dict[str, int] = {}
        self.level_depth = 0
        self.max_level_depth = 0
        self.first_item = False
        self._contexts: List[ListContext] = []
        self._list_classes: List[Optional[List[str]]] = []
        self._heading_instance_id: Optional[int] = None

        self._seed_definitions()
        self.next_instance_id = store.max_instance_id
        # instance 0 means "no list"
        self._contexts.append(ListContext(self.next_instance_id, -1))

    # ------------------------------------------------------------------
    def _seed_definitions(self) -> None:
        existing = {a.name: a.abstract_id for a in self.store.abstracts if a.name}
        if all(name in existing for name, _, _ in _SEEDS):
            self.known_abstract_ids = {name: existing[name] for name, _, _ in _SEEDS}
            logger.debug("Reusing list definitions found in the document")
            return

        first_id = self.store.max_abstract_id + 1 if self.store.abstracts else 0
        seeds = []
        for offset, (name, number_format, text) in enumerate(_SEEDS):
            level = NumberingLevel(0, number_format, text, start=1)
            if name != HEADING_NUMBERING_NAME:
                level.left_indent = DEFAULT_LEFT_INDENT
                level.hanging_indent = DEFAULT_HANGING_INDENT
            seeds.append(AbstractNumbering(first_id + offset, name, [level]))
        self.store.insert_abstracts(seeds)
        self.known_abstract_ids = {a.name: a.abstract_id for a in seeds}
        logger.debug(f"Seeded {len(seeds)} list definitions from id {first_id}")

    # ------------------------------------------------------------------
    @property
    def instance_id(self) -> int:
        """Instance used by the items of the innermost open list (0 outside lists)."""
        return self._contexts[-1].instance_id

    @property
    def current_abstract_id(self) -> int:
        return self._contexts[-1].abstract_id

    @property
    def current_list_classes(self) -> Optional[List[str]]:
        return self._list_classes[-1] if self._list_classes else None

    def get_abstract_id(self, list_type: Optional[str], ordered: bool) -> int:
        """Definition id for a ``list-style-type``, falling back to decimal or disc."""
        if list_type:
            abstract_id = self.known_abstract_ids.get(list_type.strip().lower())
            if abstract_id is not None:
                return abstract_id
        return self.known_abstract_ids["decimal" if ordered else "disc"]

    def _new_instance(self, abstract_id: int, restart: bool = True) -> int:
        self.next_instance_id += 1
        overrides = {0: 1} if restart else {}
        self.store.add_instance(NumberingInstance(self.next_instance_id, abstract_id, overrides))
        return self.next_instance_id

    # ------------------------------------------------------------------
    def begin_list(self, token) -> int:
        """Open an ``<ol>``/``<ul>`` using its ``list-style-type``."""
        ordered = token.tag == "ol"
        instance_id = self.create_list(token.style["list-style-type"], ordered)
        self._list_classes.append(token.attributes.get_classes())
        return instance_id

    def create_list(self, list_type: Optional[str], ordered: bool) -> int:
        """
        Open a nesting level and return the instance its items use.

        A nested ordered list of the same type as its parent reuses the
        parent instance on a deeper level of a multilevel definition.
        Unordered lists get at most one new instance per nesting depth.
        """
        abstract_id = self.get_abstract_id(list_type, ordered)
        parent_abstract_id = self.current_abstract_id

        self.first_item = True
        self.level_depth += 1
        self.max_level_depth = max(self.max_level_depth, self.level_depth)

        instance_id = self.instance_id
        if self.level_depth > 1 and abstract_id == parent_abstract_id and ordered:
            self.ensure_multilevel(abstract_id)
        elif ordered or self.level_depth >= self.max_level_depth:
            instance_id = self._new_instance(abstract_id)

        self._contexts.append(ListContext(instance_id, abstract_id))
        logger.debug(f"List opened at depth {self.level_depth}: instance {instance_id}, definition {abstract_id}")
        return instance_id

    def end_list(self, pop_instances: bool = True) -> None:
        if self.level_depth <= 0:
            return
        self.level_depth -= 1
        if self.level_depth > 0 and pop_instances and len(self._contexts) > 1:
            self._contexts.pop()
        self.first_item = True
        if self._list_classes:
            self._list_classes.pop()

    def set_level_depth(self, depth: int) -> None:
        self.level_depth = depth

    def process_item(self, token) -> int:
        """
        Instance id for a list item.

        On the first item of a list, a fixed pixel ``margin-left`` clones the
        current definition with that indentation and binds a new instance to
        the clone; the remaining items of the list follow it.
        """
        if not self.first_item:
            return self.instance_id
        self.first_item = False

        margin = token.style.get_margin("margin")
        if margin.left.value > 0 and margin.left.metric == UnitMetric.PIXEL:
            source = self.store.get_abstract(self.current_abstract_id)
            if source is not None:
                clone = source.clone(self.store.max_abstract_id + 1, name=f"{source.name}-indent")
                for level in clone.levels:
                    level.left_indent = margin.left.value_in_dxa
                    level.hanging_indent = DEFAULT_HANGING_INDENT
                self.store.add_abstract(clone)
                instance_id = self._new_instance(clone.abstract_id)
                self._contexts[-1] = ListContext(instance_id, clone.abstract_id)
                logger.debug(f"List definition {source.abstract_id} cloned as {clone.abstract_id} for a custom indent")

        return self.instance_id

    def ensure_multilevel(self, abstract_id: int, cascading: bool = False) -> None:
        """
        Promote a single level definition to nine levels.

        Cascading levels repeat the ancestors' numbers (``%1.%2.%3.``) without
        indentation; otherwise each level numbers itself and indents further.
        """
        abstract = self.store.get_abstract(abstract_id)
        if abstract is None:
            raise NumberingError("Unknown list definition", str(abstract_id))
        if abstract.is_multilevel:
            return

        first = abstract.levels[0]
        abstract.multi_level_type = "multilevel"
        for index in range(2, MAX_LEVELS + 1):
            level = NumberingLevel(index - 1, first.number_format, start=1)
            if cascading:
                level.text = "".join(f"%{i}." for i in range(1, index + 1))
            else:
                level.text = f"%{index}."
                level.left_indent = NESTED_LEVEL_INDENT * index
                level.hanging_indent = DEFAULT_HANGING_INDENT
            abstract.levels.append(level)
        logger.debug(f"List definition {abstract_id} promoted to multilevel")

    # ------------------------------------------------------------------
    def get_heading_numbering_id(self) -> int:
        """Instance shared by all auto-numbered headings of the document."""
        if self._heading_instance_id is None:
            abstract_id = self.get_abstract_id(HEADING_NUMBERING_NAME, True)
            existing = self.store.instances_of(abstract_id)
            if existing:
                self._heading_instance_id = existing[0].num_id
            else:
                self._heading_instance_id = self.create_list(HEADING_NUMBERING_NAME, True)
                self.ensure_multilevel(abstract_id, cascading=True)
        return self._heading_instance_id

    def apply_heading_numbering(self, paragraph, indent_level: int) -> None:
        """Number a heading paragraph; ``indent_level`` starts at 1."""
        paragraph.set_list(self.get_heading_numbering_id(), max(indent_level - 1, 0))
        # upcoming lists start over
        self.end_list(False)
        self.set_level_depth(0)

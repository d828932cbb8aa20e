"""
In-memory word processing document used as the conversion output sink.

The converter never manipulates package internals: it appends blocks to the
body and registers styles, numbering, image parts, hyperlink relationships
and notes through the methods below. Hosts serialize the result with
:mod:`htmlquill.export` or copy it into a package they manage.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional
import logging
import re

from .exceptions import NumberingError, StyleError
from .models import (
    AbstractNumbering,
    Body,
    Drawing,
    Hyperlink,
    Models,
    Note,
    NumberingInstance,
    Paragraph,
    Run,
    SectionProperties,
    SimpleField,
    StyleDefinition,
)
from .utils.enums import StyleFamily

logger = logging.getLogger(__name__)

_NOTE_LINK_RE = re.compile(r"^((https?|ftps?|mailto|file)://|[\\]{2})(?:[\w][\w.-]?)")


@dataclass
class ImagePart:
    """Binary image registered in the document."""

    rel_id: str
    data: bytes
    content_type: str


class NumberingStore:
    """
    Ordered abstract numbering definitions and numbering instances.

    Abstract definitions added in one call to :meth:`insert_abstracts` are
    kept as one contiguous block placed after the last existing definition.
    """

    def __init__(self):
        self.abstracts: List[AbstractNumbering] = []
        self.instances: List[NumberingInstance] = []

    def insert_abstracts(self, abstracts: Iterable[AbstractNumbering]) -> None:
        """
        Insert definitions contiguously after the last existing one.

        Raises:
            NumberingError: If an abstract id is already used
        """
        abstracts = list(abstracts)
        used = {a.abstract_id for a in self.abstracts}
        for abstract in abstracts:
            if abstract.abstract_id in used:
                raise NumberingError("Duplicate abstract numbering id", str(abstract.abstract_id))
            used.add(abstract.abstract_id)
        self.abstracts.extend(abstracts)
        logger.debug(f"Inserted {len(abstracts)} abstract numbering definitions")

    def add_abstract(self, abstract: AbstractNumbering) -> AbstractNumbering:
        self.insert_abstracts([abstract])
        return abstract

    def add_instance(self, instance: NumberingInstance) -> NumberingInstance:
        """
        Register a numbering instance.

        Raises:
            NumberingError: If the id is not positive, already used, or the
                abstract definition does not exist
        """
        if instance.num_id <= 0:
            raise NumberingError("Numbering instance ids must be positive", str(instance.num_id))
        if self.get_instance(instance.num_id) is not None:
            raise NumberingError("Duplicate numbering instance id", str(instance.num_id))
        if self.get_abstract(instance.abstract_id) is None:
            raise NumberingError(
                "Numbering instance bound to an unknown definition",
                f"num {instance.num_id} -> abstract {instance.abstract_id}",
            )
        self.instances.append(instance)
        return instance

    def get_abstract(self, abstract_id: int) -> Optional[AbstractNumbering]:
        for abstract in self.abstracts:
            if abstract.abstract_id == abstract_id:
                return abstract
        return None

    def find_abstract_by_name(self, name: str) -> Optional[AbstractNumbering]:
        for abstract in self.abstracts:
            if abstract.name == name:
                return abstract
        return None

    def get_instance(self, num_id: int) -> Optional[NumberingInstance]:
        for instance in self.instances:
            if instance.num_id == num_id:
                return instance
        return None

    def instances_of(self, abstract_id: int) -> List[NumberingInstance]:
        return [i for i in self.instances if i.abstract_id == abstract_id]

    @property
    def max_abstract_id(self) -> int:
        return max((a.abstract_id for a in self.abstracts), default=0)

    @property
    def max_instance_id(self) -> int:
        return max((i.num_id for i in self.instances), default=0)


class WordDocument:
    """
    Mutable document object model receiving the converted content.

    Attributes:
        body: Block container; a trailing SectionProperties is always kept last
        styles: Style definitions keyed by style id
        numbering: Abstract definitions and instances
        media: Image parts keyed by relationship id
        relationships: Hyperlink targets keyed by relationship id
        footnotes: Footnote entries (created with separators on first use)
        endnotes: Endnote entries (created with separators on first use)
    """

    def __init__(self):
        self.body = Body()
        self.styles: Dict[str, StyleDefinition] = {}
        self.numbering = NumberingStore()
        self.media: Dict[str, ImagePart] = {}
        self.relationships: Dict[str, str] = {}
        self.footnotes: List[Note] = []
        self.endnotes: List[Note] = []
        self._next_rel = 1

    # ------------------------------------------------------------------
    # Body
    @property
    def section(self) -> Optional[SectionProperties]:
        last = self.body.last_child()
        return last if isinstance(last, SectionProperties) else None

    def set_section(self, section: SectionProperties) -> SectionProperties:
        """Replace or create the trailing section properties."""
        current = self.section
        if current is not None:
            self.body.remove_child(current)
        self.body.add_child(section)
        return section

    def append_block(self, block: Models) -> Models:
        """Append a paragraph or table, keeping the section properties last."""
        section = self.section
        if section is not None:
            self.body.insert_child(len(self.body.children) - 1, block)
        else:
            self.body.add_model(block)
        return block

    @property
    def blocks(self) -> List[Models]:
        return [child for child in self.body.children if not isinstance(child, SectionProperties)]

    # ------------------------------------------------------------------
    # Styles
    def add_style(self, style: StyleDefinition) -> StyleDefinition:
        if not style.style_id:
            raise StyleError("Style id cannot be empty", style.name)
        self.styles[style.style_id] = style
        logger.debug(f"Style registered: {style.style_id} ({style.family.value})")
        return style

    def find_style(self, style_id: str) -> Optional[StyleDefinition]:
        return self.styles.get(style_id)

    def iter_styles(self, family: Optional[StyleFamily] = None) -> Iterator[StyleDefinition]:
        for style in self.styles.values():
            if family is None or style.family == family:
                yield style

    # ------------------------------------------------------------------
    # Parts and relationships
    def _new_rel_id(self) -> str:
        rel_id = f"rId{self._next_rel}"
        self._next_rel += 1
        return rel_id

    def add_image_part(self, data: bytes, content_type: str) -> str:
        rel_id = self._new_rel_id()
        self.media[rel_id] = ImagePart(rel_id, data, content_type)
        logger.debug(f"Image part {rel_id} registered ({content_type}, {len(data)} bytes)")
        return rel_id

    def add_hyperlink_relationship(self, uri: str) -> str:
        rel_id = self._new_rel_id()
        self.relationships[rel_id] = uri
        return rel_id

    # ------------------------------------------------------------------
    # Notes
    def _ensure_separators(self, notes: List[Note], kind: str) -> None:
        if notes:
            return
        for note_id, note_type in ((-1, "separator"), (0, "continuationSeparator")):
            note = Note(note_id, kind, note_type)
            paragraph = Paragraph()
            paragraph.spacing_after = 0
            run = Run()
            run.separator = note_type
            paragraph.add_run(run)
            note.add_child(paragraph)
            notes.append(note)

    def _next_note_id(self, notes: List[Note]) -> int:
        return max((note.note_id for note in notes), default=0) + 1

    def add_footnote(self, description: str, text_style: Optional[str] = None,
                     reference_style: Optional[str] = None,
                     hyperlink_style: Optional[str] = None) -> int:
        """
        Append a footnote and return its id.

        A description that looks like a web address or a network share is
        rendered as a hyperlink.
        """
        self._ensure_separators(self.footnotes, "footnote")
        note = Note(self._next_note_id(self.footnotes), "footnote")
        paragraph = Paragraph(text_style)
        mark = Run(style_id=reference_style)
        mark.footnote_ref_mark = True
        paragraph.add_run(mark)
        paragraph.add_run(Run(" "))

        if _NOTE_LINK_RE.match(description):
            link = Hyperlink(self.add_hyperlink_relationship(description), target=description)
            link.add_child(Run(description, style_id=hyperlink_style))
            paragraph.add_inline(link)
        else:
            paragraph.add_run(Run(description))

        note.add_child(paragraph)
        self.footnotes.append(note)
        logger.debug(f"Footnote {note.note_id} added")
        return note.note_id

    def add_endnote(self, description: str, text_style: Optional[str] = None,
                    reference_style: Optional[str] = None) -> int:
        """Append an endnote and return its id."""
        self._ensure_separators(self.endnotes, "endnote")
        note = Note(self._next_note_id(self.endnotes), "endnote")
        paragraph = Paragraph(text_style)
        mark = Run(style_id=reference_style)
        mark.endnote_ref_mark = True
        paragraph.add_run(mark)
        paragraph.add_run(Run(" " + description))
        note.add_child(paragraph)
        self.endnotes.append(note)
        logger.debug(f"Endnote {note.note_id} added")
        return note.note_id

    # ------------------------------------------------------------------
    # Queries
    def iter_drawings(self) -> Iterator[Drawing]:
        yield from self.body.iter_descendants(Drawing)
        for note in self.footnotes + self.endnotes:
            yield from note.iter_descendants(Drawing)

    def count_fields(self, instruction: str) -> int:
        """Number of simple fields in the body with exactly this instruction."""
        return sum(1 for field in self.body.iter_descendants(SimpleField)
                   if field.instruction == instruction)

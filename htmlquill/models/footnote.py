"""Footnote and endnote entries."""

from typing import Any, Dict, List, Optional

from .base import Models


class Note(Models):
    """
    A footnote or endnote body.

    Args:
        note_id: Id referenced by ``footnote_refs``/``endnote_refs`` of runs
        kind: ``footnote`` or ``endnote``
        note_type: ``separator``/``continuationSeparator`` for the reserved entries
    """

    def __init__(self, note_id: int, kind: str = "footnote", note_type: Optional[str] = None):
        super().__init__()
        self.note_id = note_id
        self.kind = kind
        self.note_type = note_type

    @property
    def paragraphs(self) -> List[Models]:
        from .paragraph import Paragraph
        return list(self.iter_children(Paragraph))

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result.update({'note_id': self.note_id, 'kind': self.kind, 'note_type': self.note_type})
        return result

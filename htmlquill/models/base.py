"""
Base model class for the converted document tree.

Every node knows its parent and owns its children; the tree is strictly
hierarchical, back-references are for navigation only.
"""

from abc import ABC
from typing import Any, Dict, Iterator, List, Optional, Type
import uuid
import logging

logger = logging.getLogger(__name__)


class Models(ABC):
    """Abstract base class for output models with tree helpers."""

    def __init__(self):
        """Initialize base model."""
        self.parent: Optional['Models'] = None
        self.children: List['Models'] = []
        self.id: str = str(uuid.uuid4())

    def add_child(self, model: 'Models') -> 'Models':
        """Append child model, detaching it from a previous parent."""
        if model.parent is not None and model.parent is not self:
            model.parent.remove_child(model)
        if model not in self.children:
            self.children.append(model)
            model.parent = self
        return model

    def insert_child(self, index: int, model: 'Models') -> 'Models':
        """Insert child model at position ``index``."""
        if model.parent is not None:
            model.parent.remove_child(model)
        self.children.insert(index, model)
        model.parent = self
        return model

    def remove_child(self, model: 'Models') -> bool:
        """Remove child model; returns False when it is not a child."""
        for index, child in enumerate(self.children):
            if child is model:
                del self.children[index]
                model.parent = None
                return True
        return False

    def iter_children(self, type_filter: Optional[Type['Models']] = None) -> Iterator['Models']:
        """Iterate over children, optionally filtered by type."""
        for child in self.children:
            if type_filter is None or isinstance(child, type_filter):
                yield child

    def iter_descendants(self, type_filter: Optional[Type['Models']] = None) -> Iterator['Models']:
        """Depth-first walk over the subtree (excluding self)."""
        for child in self.children:
            if type_filter is None or isinstance(child, type_filter):
                yield child
            yield from child.iter_descendants(type_filter)

    def first_child(self, type_filter: Optional[Type['Models']] = None) -> Optional['Models']:
        return next(self.iter_children(type_filter), None)

    def last_child(self, type_filter: Optional[Type['Models']] = None) -> Optional['Models']:
        for child in reversed(self.children):
            if type_filter is None or isinstance(child, type_filter):
                return child
        return None

    def get_text(self) -> str:
        """Concatenated text of the subtree."""
        return "".join(child.get_text() for child in self.children)

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary."""
        return {
            'type': self.__class__.__name__,
            'children': [child.to_dict() for child in self.children],
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self.id[:8]}..., children={len(self.children)})"

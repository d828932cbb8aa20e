"""Block containers: document body and table cells share this behaviour."""

from __future__ import annotations

from typing import Tuple, Type

from .base import Models


class Body(Models):
    """Container of block elements (paragraphs and tables)."""

    def _allowed_types(self) -> Tuple[Type[Models], ...]:
        from .paragraph import Paragraph
        from .table import Table
        from .section import SectionProperties

        return (Paragraph, Table, SectionProperties)

    def add_model(self, model: Models) -> Models:
        if not isinstance(model, self._allowed_types()):
            allowed = ", ".join(t.__name__ for t in self._allowed_types())
            raise TypeError(f"Unsupported model type {type(model).__name__}; allowed: {allowed}")
        return self.add_child(model)

    def add_paragraph(self, paragraph: Models) -> Models:
        return self.add_model(paragraph)

    def add_table(self, table: Models) -> Models:
        return self.add_model(table)

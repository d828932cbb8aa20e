"""Markup tokens handed to the converter."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..utils.css import HtmlAttributes, StyleDeclarations


class TokenKind(str, Enum):
    START = "start"
    END = "end"
    TEXT = "text"


@dataclass(frozen=True)
class Token:
    """
    One markup event: an opening tag, a closing tag or decoded text.

    Attributes:
        kind: Token kind
        tag: Lowercased tag name (None for text)
        attributes: Tag attributes, missing ones read as None
        style: Parsed ``style`` attribute
        raw: Text content, or the tag as written in the markup
        self_closing: True for ``<td/>``-like tags
    """

    kind: TokenKind
    tag: Optional[str] = None
    attributes: HtmlAttributes = field(default_factory=HtmlAttributes)
    style: StyleDeclarations = field(default_factory=StyleDeclarations)
    raw: str = ""
    self_closing: bool = False

    @property
    def is_tag(self) -> bool:
        return self.kind != TokenKind.TEXT

    @property
    def is_start(self) -> bool:
        return self.kind == TokenKind.START

    @property
    def is_end(self) -> bool:
        return self.kind == TokenKind.END

    @property
    def text(self) -> str:
        return self.raw if self.kind == TokenKind.TEXT else ""

    def __str__(self) -> str:
        if self.kind == TokenKind.TEXT:
            return self.raw
        if self.kind == TokenKind.END:
            return f"</{self.tag}>"
        return f"<{self.tag}{'/' if self.self_closing else ''}>"

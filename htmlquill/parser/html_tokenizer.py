"""
HTML tokenizer.

Splits markup into a flat list of tokens using the standard library
``html.parser``. The converter pulls tokens one at a time and may skip an
opaque subtree or consume tokens until a given closing tag.

Normalisation performed here:
- tag and attribute names are lowercased, entities are decoded
- a self-closing non-void tag (``<td/>``) is followed by its closing token
- ``<script>``, ``<style>`` and ``<head>`` content and comments are dropped
- whitespace runs collapse to one space outside ``<pre>``, and whitespace
  touching a block level tag is removed
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from html.parser import HTMLParser
from typing import Iterator, List, Optional, Tuple

from ..exceptions import ParsingError
from ..utils.css import HtmlAttributes, StyleDeclarations
from .tokens import Token, TokenKind

logger = logging.getLogger(__name__)

SKIPPED_TAGS = frozenset({"script", "style", "head", "noscript", "template"})

VOID_TAGS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta",
    "param", "source", "track", "wbr",
})

BLOCK_TAGS = frozenset({
    "address", "article", "aside", "blockquote", "body", "br", "caption", "dd", "div",
    "dl", "dt", "figcaption", "figure", "footer", "h1", "h2", "h3", "h4", "h5", "h6",
    "header", "hr", "html", "li", "ol", "p", "pre", "section", "table", "tbody", "td",
    "tfoot", "th", "thead", "tr", "ul",
})

_WHITESPACE_RE = re.compile(r"\s+")


class _TokenCollector(HTMLParser):
    """Collects tokens, flagging the text found inside ``<pre>``."""

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.items: List[Tuple[Token, bool]] = []
        self._skip_tag: Optional[str] = None
        self._skip_depth = 0
        self._pre_depth = 0

    def handle_starttag(self, tag, attrs):
        self._start(tag, attrs, self_closing=False)

    def handle_startendtag(self, tag, attrs):
        self._start(tag, attrs, self_closing=True)

    def _start(self, tag: str, attrs, self_closing: bool) -> None:
        if self._skip_tag is not None:
            if tag == self._skip_tag and not self_closing:
                self._skip_depth += 1
            return
        if tag in SKIPPED_TAGS and not self_closing:
            self._skip_tag = tag
            self._skip_depth = 1
            return

        attributes = HtmlAttributes()
        for name, value in attrs:
            attributes[name] = value if value is not None else ""
        style = StyleDeclarations.parse(attributes.get("style"))

        if tag == "pre" and not self_closing:
            self._pre_depth += 1
        token = Token(TokenKind.START, tag, attributes, style,
                      self.get_starttag_text() or f"<{tag}>", self_closing)
        self.items.append((token, False))
        if self_closing and tag not in VOID_TAGS:
            # <td/> behaves like <td></td>
            self.items.append((Token(TokenKind.END, tag, raw=f"</{tag}>"), False))

    def handle_endtag(self, tag):
        if self._skip_tag is not None:
            if tag == self._skip_tag:
                self._skip_depth -= 1
                if self._skip_depth == 0:
                    self._skip_tag = None
            return
        if tag in VOID_TAGS:
            return
        if tag == "pre":
            self._pre_depth = max(self._pre_depth - 1, 0)
        self.items.append((Token(TokenKind.END, tag, raw=f"</{tag}>"), False))

    def handle_data(self, data):
        if self._skip_tag is not None or not data:
            return
        self.items.append((Token(TokenKind.TEXT, raw=data), self._pre_depth > 0))


def _breaks_line(items: List[Tuple[Token, bool]], index: int) -> bool:
    if index < 0 or index >= len(items):
        return True
    token = items[index][0]
    return token.is_tag and token.tag in BLOCK_TAGS


def _normalize_whitespace(items: List[Tuple[Token, bool]]) -> List[Token]:
    tokens = []
    for index, (token, preformatted) in enumerate(items):
        if token.kind != TokenKind.TEXT:
            tokens.append(token)
            continue

        if preformatted:
            text = token.raw
            previous = items[index - 1][0] if index > 0 else None
            if previous is not None and previous.is_start and previous.tag == "pre" and text.startswith("\n"):
                text = text[1:]
        else:
            text = _WHITESPACE_RE.sub(" ", token.raw)
            if _breaks_line(items, index - 1):
                text = text.lstrip()
            if _breaks_line(items, index + 1):
                text = text.rstrip()

        if text:
            tokens.append(replace(token, raw=text))
    return tokens


def tokenize(html: str) -> List[Token]:
    """
    Split markup into normalised tokens.

    Raises:
        ParsingError: If the markup is not text
    """
    if not isinstance(html, str):
        raise ParsingError("Markup must be text", type(html).__name__)
    collector = _TokenCollector()
    collector.feed(html)
    collector.close()
    tokens = _normalize_whitespace(collector.items)
    logger.debug(f"Tokenized {len(html)} characters into {len(tokens)} tokens")
    return tokens


class HtmlEnumerator:
    """
    Pull based cursor over the tokens of a markup fragment.

    Example:
        >>> en = HtmlEnumerator("<p>Hi</p>")
        >>> while en.move_until_match(None):
        ...     print(en.current)
    """

    def __init__(self, html: str):
        self._tokens = tokenize(html)
        self._index = -1

    @property
    def current(self) -> Optional[Token]:
        if 0 <= self._index < len(self._tokens):
            return self._tokens[self._index]
        return None

    @property
    def tokens(self) -> List[Token]:
        return list(self._tokens)

    def move_next(self) -> bool:
        """Advance to the next token; False at the end of the stream."""
        if self._index < len(self._tokens):
            self._index += 1
        return self._index < len(self._tokens)

    def move_until_match(self, end_tag: Optional[str]) -> bool:
        """
        Advance one token unless it closes ``end_tag``.

        Args:
            end_tag: Tag name whose closing token stops the iteration, or None
                to run to the end of the stream

        Returns:
            False when the closing tag was reached or the stream is exhausted
        """
        if not self.move_next():
            return False
        if end_tag is None:
            return True
        token = self._tokens[self._index]
        return not (token.is_end and token.tag == end_tag)

    def skip_until_matching_end(self) -> None:
        """Discard the subtree opened by the current start tag."""
        token = self.current
        if token is None or not token.is_start or token.tag in VOID_TAGS:
            return
        depth = 1
        while self.move_next():
            current = self._tokens[self._index]
            if current.tag != token.tag:
                continue
            if current.is_start:
                depth += 1
            elif current.is_end:
                depth -= 1
                if depth == 0:
                    return

    def __iter__(self) -> Iterator[Token]:
        while self.move_next():
            yield self._tokens[self._index]

    def __len__(self) -> int:
        return len(self._tokens)

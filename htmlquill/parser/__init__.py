"""Markup tokenizer feeding the converter."""

from .html_tokenizer import BLOCK_TAGS, VOID_TAGS, HtmlEnumerator, tokenize
from .tokens import Token, TokenKind

__all__ = ["BLOCK_TAGS", "VOID_TAGS", "HtmlEnumerator", "tokenize", "Token", "TokenKind"]

"""
HtmlQuill - HTML to word processing document conversion.

Converts HTML fragments into the paragraphs, tables, lists, images,
hyperlinks and notes of a word processing document:

- Parser: tokenizes markup and parses inline CSS
- Converter: tag handlers driven by a single conversion context
- Styles: style catalog and cascading style stacks
- Numbering: list definitions and instances
- Tables: row and column span resolution
- Media: image fetching, identification and registration
- Export: WordprocessingML serialization with lxml
"""

from .config import AcronymPosition, CaptionPosition, ConverterConfig, DefaultStyles
from .converter import HtmlConverter
from .document import WordDocument
from .exceptions import (
    ConfigurationError,
    FetchError,
    HtmlQuillError,
    MediaError,
    NumberingError,
    ParsingError,
    StyleError,
    TableGridError,
)
from .export import WordprocessingMLExporter
from .media import Fetcher, HttpFetcher, LocalFetcher
from .utils.logger import configure_logging

__version__ = "0.1.0"

__all__ = [
    "AcronymPosition",
    "CaptionPosition",
    "ConverterConfig",
    "DefaultStyles",
    "HtmlConverter",
    "WordDocument",
    "ConfigurationError",
    "FetchError",
    "HtmlQuillError",
    "MediaError",
    "NumberingError",
    "ParsingError",
    "StyleError",
    "TableGridError",
    "WordprocessingMLExporter",
    "Fetcher",
    "HttpFetcher",
    "LocalFetcher",
    "configure_logging",
    "__version__",
]

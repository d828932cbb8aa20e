"""
Pytest configuration for HtmlQuill
"""

import base64
import logging
import sys

import pytest

from htmlquill.config import ConverterConfig
from htmlquill.converter import HtmlConverter
from htmlquill.document import WordDocument
from htmlquill.media import LocalFetcher

# 1x1 transparent PNG
PNG_1X1 = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)

# 4x2 GIF: header, logical screen, two color palette, one image descriptor
GIF_4X2 = (
    b"GIF89a" + b"\x04\x00\x02\x00" + b"\x80\x00\x00"
    + b"\x00\x00\x00\xff\xff\xff"
    + b"\x2c" + b"\x00\x00\x00\x00" + b"\x04\x00\x02\x00" + b"\x00"
    + b"\x02" + b"\x02\x44\x01\x00"
    + b"\x3b"
)


@pytest.fixture(autouse=True)
def configure_logging():
    """Configure logging for tests to avoid file handler issues."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter('%(name)s - %(levelname)s - %(message)s'))

    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.WARNING)

    yield

    root_logger.handlers.clear()


@pytest.fixture
def document():
    """A fresh, empty output document."""
    return WordDocument()


@pytest.fixture
def png_bytes():
    return PNG_1X1


@pytest.fixture
def gif_bytes():
    return GIF_4X2


@pytest.fixture
def png_data_uri():
    return "data:image/png;base64," + base64.b64encode(PNG_1X1).decode("ascii")


@pytest.fixture
def fetcher():
    """In-memory fetcher serving two images; anything else fails."""
    local = LocalFetcher()
    local.add("http://example.com/pixel.png", PNG_1X1, "image/png")
    local.add("http://example.com/wide.gif", GIF_4X2)
    return local


@pytest.fixture
def make_converter(document, fetcher):
    """Factory building converters bound to the shared document and fetcher."""

    def factory(**options):
        config = ConverterConfig(**options) if options else None
        return HtmlConverter(document, fetcher=fetcher, config=config)

    return factory


@pytest.fixture
def converter(make_converter):
    return make_converter()

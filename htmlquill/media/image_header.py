"""
Image format detection and dimensions.

Formats are recognized from declared content types, file extensions or the
leading magic bytes. Dimensions come from the file header only: Pillow opens
raster images lazily without decoding pixels, EMF bounds are read from the
header record.
"""

from io import BytesIO
from pathlib import PurePosixPath
from typing import Optional, Tuple
from urllib.parse import urlparse
import logging
import struct

from PIL import Image, UnidentifiedImageError

from ..utils.enums import ImageFormat

logger = logging.getLogger(__name__)

KNOWN_EXTENSIONS = {
    ".gif": ImageFormat.GIF,
    ".bmp": ImageFormat.BMP,
    ".emf": ImageFormat.EMF,
    ".ico": ImageFormat.ICON,
    ".jpeg": ImageFormat.JPEG,
    ".jpg": ImageFormat.JPEG,
    ".jpe": ImageFormat.JPEG,
    ".pcx": ImageFormat.PCX,
    ".png": ImageFormat.PNG,
    ".tiff": ImageFormat.TIFF,
    ".wmf": ImageFormat.WMF,
}

KNOWN_CONTENT_TYPES = {
    "image/gif": ImageFormat.GIF,
    "image/pjpeg": ImageFormat.JPEG,
    "image/jpg": ImageFormat.JPEG,
    "image/jpeg": ImageFormat.JPEG,
    "image/x-png": ImageFormat.PNG,
    "image/png": ImageFormat.PNG,
    "image/tiff": ImageFormat.TIFF,
    "image/vnd.microsoft.icon": ImageFormat.ICON,
    # non standard icon types still seen in the wild
    "image/x-icon": ImageFormat.ICON,
    "image/icon": ImageFormat.ICON,
    "image/ico": ImageFormat.ICON,
    "text/ico": ImageFormat.ICON,
    "text/application-ico": ImageFormat.ICON,
    "image/bmp": ImageFormat.BMP,
    "image/x-emf": ImageFormat.EMF,
    "image/x-wmf": ImageFormat.WMF,
}

_EMF_SIGNATURE = b" EMF"
_EMF_HEADER = struct.Struct("<II4i4i")

Size = Tuple[int, int]
EMPTY_SIZE: Size = (0, 0)


def format_from_content_type(content_type: Optional[str]) -> Optional[ImageFormat]:
    if not content_type:
        return None
    return KNOWN_CONTENT_TYPES.get(content_type.split(";")[0].strip().lower())


def format_from_uri(uri: str) -> Optional[ImageFormat]:
    """
    Guess the format from the extension of the last path segment, then from
    the whole reference (``image.axd?picture=img1.jpg``).
    """
    parsed = urlparse(uri)
    if parsed.scheme and parsed.path:
        suffix = PurePosixPath(parsed.path).suffix.lower()
        if suffix in KNOWN_EXTENSIONS:
            return KNOWN_EXTENSIONS[suffix]
    suffix = PurePosixPath(uri).suffix.lower()
    return KNOWN_EXTENSIONS.get(suffix)


def sniff_format(data: Optional[bytes]) -> Optional[ImageFormat]:
    """Detect bitmap, EMF, GIF, JPEG or PNG from the leading bytes."""
    if not data:
        return None
    if data.startswith(b"BM"):
        return ImageFormat.BMP
    if data.startswith((b"GIF87a", b"GIF89a")):
        return ImageFormat.GIF
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return ImageFormat.PNG
    if data.startswith(b"\xff\xd8"):
        return ImageFormat.JPEG
    if len(data) >= 44 and data[:4] == b"\x01\x00\x00\x00" and data[40:44] == _EMF_SIGNATURE:
        return ImageFormat.EMF
    return None


def _emf_dimensions(data: bytes) -> Size:
    if len(data) < _EMF_HEADER.size:
        return EMPTY_SIZE
    fields = _EMF_HEADER.unpack_from(data)
    left, top, right, bottom = fields[2:6]
    return (max(right - left + 1, 0), max(bottom - top + 1, 0))


def get_dimensions(data: bytes, image_format: Optional[ImageFormat] = None) -> Size:
    """
    Pixel size of an image read from its header.

    Returns:
        (width, height), or (0, 0) when the header cannot be read
    """
    if image_format == ImageFormat.EMF or (image_format is None and sniff_format(data) == ImageFormat.EMF):
        return _emf_dimensions(data)
    try:
        with Image.open(BytesIO(data)) as image:
            return image.size
    except (UnidentifiedImageError, OSError, ValueError) as e:
        logger.debug(f"Cannot read image dimensions: {e}")
        return EMPTY_SIZE


def keep_aspect_ratio(actual: Size, preferred: Size) -> Size:
    """Complete a preferred size given on one side only."""
    width, height = preferred
    actual_width, actual_height = actual
    if actual_width <= 0 or actual_height <= 0:
        return preferred
    if width > 0 >= height:
        return (width, int(round(width * actual_height / actual_width)))
    if height > 0 >= width:
        return (int(round(height * actual_width / actual_height)), height)
    return preferred

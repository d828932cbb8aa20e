"""Image fetching, identification and registration."""

from .fetch import DataUri, FetchResult, Fetcher, HttpFetcher, LocalFetcher
from .image_header import (
    KNOWN_CONTENT_TYPES,
    KNOWN_EXTENSIONS,
    format_from_content_type,
    format_from_uri,
    get_dimensions,
    keep_aspect_ratio,
    sniff_format,
)
from .pipeline import ImageAsset, ImagePipeline

__all__ = [
    "DataUri",
    "FetchResult",
    "Fetcher",
    "HttpFetcher",
    "LocalFetcher",
    "KNOWN_CONTENT_TYPES",
    "KNOWN_EXTENSIONS",
    "format_from_content_type",
    "format_from_uri",
    "get_dimensions",
    "keep_aspect_ratio",
    "sniff_format",
    "ImageAsset",
    "ImagePipeline",
]

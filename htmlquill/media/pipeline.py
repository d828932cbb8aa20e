"""
Image asset pipeline.

Resolves an ``<img src>`` to an image part of the document: inline data URIs
are decoded, other references go through the injected fetcher. The format is
taken from the declared content type, then the file extension, then the
magic bytes. Results are cached by the literal source for the lifetime of
the pipeline, failures included.
"""

import asyncio
import inspect
import logging
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from ..exceptions import FetchError, MediaError
from ..utils.enums import ImageFormat
from .fetch import DataUri, FetchResult, Fetcher
from .image_header import (
    format_from_content_type,
    format_from_uri,
    get_dimensions,
    sniff_format,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageAsset:
    """Registered image: relationship id, pixel size and format."""

    source: str
    rel_id: str
    width: int
    height: int
    image_format: ImageFormat

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)


async def _await(awaitable):
    return await awaitable


class ImagePipeline:
    """
    Fetches, identifies and registers images with a cache keyed by source.

    Args:
        document: Output sink exposing ``add_image_part``
        fetcher: Fetch capability for non inline sources
        timeout: Seconds to wait for one fetch before dropping the image
    """

    def __init__(self, document, fetcher: Fetcher, timeout: float = 30.0):
        self.document = document
        self.fetcher = fetcher
        self.timeout = timeout
        self._cache: Dict[str, Optional[ImageAsset]] = {}
        self._executor: Optional[ThreadPoolExecutor] = None

    def start(self) -> None:
        """Start the worker used to bound fetch durations."""
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="htmlquill-fetch")

    def shutdown(self, wait: bool = False) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None

    def __contains__(self, source: str) -> bool:
        return source in self._cache

    def resolve(self, source: Optional[str]) -> Optional[ImageAsset]:
        """
        Resolve an image source.

        Args:
            source: URI or data URI as written in the markup

        Returns:
            The registered ImageAsset, or None when the image cannot be used
        """
        if not source:
            return None
        if source in self._cache:
            return self._cache[source]

        try:
            if DataUri.is_well_formed(source):
                asset = self._read_data_uri(source)
            else:
                asset = self._download(source)
        except MediaError as e:
            logger.warning(f"Image dropped: {e}")
            asset = None

        self._cache[source] = asset
        return asset

    # ------------------------------------------------------------------
    def _read_data_uri(self, source: str) -> ImageAsset:
        data_uri = DataUri.parse(source)
        if data_uri is None or not data_uri.data:
            raise MediaError("Malformed data URI")
        image_format = format_from_content_type(data_uri.mime) or sniff_format(data_uri.data)
        if image_format is None:
            raise MediaError("Unknown inline image format", data_uri.mime)
        return self._register(source, data_uri.data, image_format)

    def _download(self, source: str) -> ImageAsset:
        response = self._fetch(source)
        if response is None or not response.content:
            raise FetchError("Empty response", uri=source)

        image_format = (format_from_content_type(response.content_type)
                        or format_from_uri(source)
                        or sniff_format(response.content))
        if image_format is None:
            raise MediaError("Unrecognized image format", source)
        return self._register(source, response.content, image_format)

    def _register(self, source: str, data: bytes, image_format: ImageFormat) -> ImageAsset:
        rel_id = self.document.add_image_part(data, image_format.value)
        width, height = get_dimensions(data, image_format)
        logger.debug(f"Image {rel_id} registered: {image_format.extension} {width}x{height}")
        return ImageAsset(source, rel_id, width, height, image_format)

    def _fetch(self, source: str) -> Optional[FetchResult]:
        self.start()
        future = self._executor.submit(self._call_fetcher, source)
        try:
            return future.result(timeout=self.timeout)
        except FutureTimeoutError:
            future.cancel()
            # the worker is still blocked in the fetcher; later fetches get a new one
            self.shutdown(wait=False)
            raise FetchError("Timed out", f"{self.timeout}s", uri=source) from None
        except CancelledError:
            raise FetchError("Cancelled", uri=source) from None
        except MediaError:
            raise
        except Exception as e:
            # fetchers are host supplied: any failure drops the image
            raise FetchError("Fetch failed", str(e), uri=source) from e

    def _call_fetcher(self, source: str) -> Optional[FetchResult]:
        result = self.fetcher.fetch(source)
        if isinstance(result, Future):
            return result.result(timeout=self.timeout)
        if inspect.isawaitable(result):
            return asyncio.run(_await(result))
        return result

"""
Resource fetching.

Defines the Fetcher interface used by the image pipeline and its
implementations:
- HttpFetcher: default fetcher for http(s) URLs, ``file://`` URLs and local paths
- LocalFetcher: in-memory fetcher for tests and hosts that already hold the bytes

``Fetcher.fetch`` may return a FetchResult directly, a
``concurrent.futures.Future`` or an awaitable resolving to one; the pipeline
waits for it with a timeout.
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional
from urllib.parse import unquote, urljoin, urlparse

import httpx

from ..exceptions import FetchError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>(;[\w-]+=[^;,]*)*)(?P<base64>;base64)?,(?P<data>.*)$",
                          re.IGNORECASE | re.DOTALL)


@dataclass(frozen=True)
class FetchResult:
    """Fetched bytes and the response headers (names lowercased)."""

    content: Optional[bytes]
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def content_type(self) -> Optional[str]:
        value = self.headers.get("content-type")
        if not value:
            return None
        return value.split(";")[0].strip().lower()


@dataclass(frozen=True)
class DataUri:
    """Inline ``data:`` reference."""

    mime: str
    data: bytes

    @staticmethod
    def is_well_formed(uri: Optional[str]) -> bool:
        return bool(uri) and _DATA_URI_RE.match(uri.strip()) is not None

    @classmethod
    def parse(cls, uri: str) -> Optional["DataUri"]:
        """Decode a data URI; None when the payload is malformed."""
        match = _DATA_URI_RE.match(uri.strip())
        if match is None:
            return None
        mime = (match.group("mime") or "text/plain").lower()
        payload = match.group("data")
        try:
            if match.group("base64"):
                data = base64.b64decode(re.sub(r"\s+", "", payload), validate=True)
            else:
                data = unquote(payload).encode("latin-1")
        except (binascii.Error, ValueError, UnicodeEncodeError) as e:
            logger.debug(f"Malformed data URI: {e}")
            return None
        return cls(mime, data)


class Fetcher(ABC):
    """Abstract base class for the resource fetch capability."""

    @abstractmethod
    def fetch(self, uri: str):
        """Fetch a resource.

        Args:
            uri: Absolute or relative URI as written in the markup

        Returns:
            FetchResult, or a Future/awaitable resolving to one

        Raises:
            FetchError: When the resource cannot be retrieved
        """
        ...

    def close(self) -> None:
        """Release resources held by the fetcher."""


class HttpFetcher(Fetcher):
    """
    Default fetcher.

    http(s) URLs are downloaded with httpx; ``file://`` URLs and plain paths
    are read from disk. Relative references are resolved against
    ``base_url`` when one is given.
    """

    def __init__(self, base_url: Optional[str] = None, timeout: float = DEFAULT_TIMEOUT,
                 client: Optional[httpx.Client] = None):
        self.base_url = base_url
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(timeout=self.timeout, follow_redirects=True)
        return self._client

    def resolve(self, uri: str) -> str:
        if self.base_url and not urlparse(uri).scheme:
            return urljoin(self.base_url, uri)
        return uri

    def fetch(self, uri: str) -> FetchResult:
        target = self.resolve(uri)
        parsed = urlparse(target)

        if parsed.scheme in ("http", "https"):
            try:
                response = self.client.get(target)
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                raise FetchError("HTTP error", str(e.response.status_code), uri=target) from e
            except httpx.RequestError as e:
                raise FetchError("Request failed", str(e), uri=target) from e
            headers = {name.lower(): value for name, value in response.headers.items()}
            logger.debug(f"Fetched {target} ({len(response.content)} bytes)")
            return FetchResult(response.content, headers)

        if parsed.scheme == "file":
            path = Path(unquote(parsed.path))
        elif not parsed.scheme or len(parsed.scheme) == 1:
            # plain path, possibly a Windows drive letter
            path = Path(target)
        else:
            raise FetchError("Unsupported scheme", parsed.scheme, uri=target)

        try:
            content = path.read_bytes()
        except OSError as e:
            raise FetchError("Cannot read file", str(e), uri=target) from e
        logger.debug(f"Read {path} ({len(content)} bytes)")
        return FetchResult(content, {})

    def close(self) -> None:
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None


class LocalFetcher(Fetcher):
    """In-memory fetcher serving registered resources."""

    def __init__(self, resources: Optional[Dict[str, FetchResult]] = None):
        self.resources: Dict[str, FetchResult] = dict(resources or {})
        self.requests: list = []

    def add(self, uri: str, content: bytes, content_type: Optional[str] = None) -> None:
        headers = {"content-type": content_type} if content_type else {}
        self.resources[uri] = FetchResult(content, headers)

    def fetch(self, uri: str) -> FetchResult:
        self.requests.append(uri)
        try:
            return self.resources[uri]
        except KeyError:
            raise FetchError("Resource not found", uri=uri) from None

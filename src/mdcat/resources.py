"""Resolve resource URLs referenced by a document into bytes."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol, Sequence
from urllib.parse import ParseResult, urlparse
from urllib.request import url2pathname

import httpx

from .config import ResourceConfig
from .errors import (
    RemoteAccessDisabled,
    ResourceFetchError,
    ResourceLimitExceeded,
    UnsupportedResourceUrl,
)
from .models import ResourceAccess

logger = logging.getLogger(__name__)

REMOTE_SCHEMES = frozenset({"http", "https"})
_CHUNK_SIZE = 8192


def _parse_url(url: str) -> ParseResult:
    try:
        return urlparse(url)
    except ValueError as exc:
        raise UnsupportedResourceUrl(url, f"Malformed resource URL: {url}") from exc


class ResourceUrlHandler(Protocol):
    def read_resource(self, url: str) -> bytes | None:  # pragma: no cover - interface
        """Return the bytes behind ``url``, or ``None`` if the URL is not for this handler.

        Raises a ``ResourceError`` when the handler claims the URL but cannot read it.
        """
        ...


class FileResourceHandler:
    """Reads ``file:`` URLs from the local filesystem."""

    def __init__(self, read_limit: int) -> None:
        self.read_limit = read_limit

    def read_resource(self, url: str) -> bytes | None:
        parsed = _parse_url(url)
        if parsed.scheme != "file" or parsed.netloc not in {"", "localhost"}:
            return None
        path = Path(url2pathname(parsed.path))
        logger.debug("Reading local resource %s", path)
        try:
            with path.open("rb") as handle:
                data = handle.read(self.read_limit + 1)
        except OSError as exc:
            raise ResourceFetchError(url, f"Failed to read {path}: {exc}") from exc
        if len(data) > self.read_limit:
            raise ResourceLimitExceeded(url, f"{path} exceeds the read limit of {self.read_limit} bytes")
        return data


class HttpResourceHandler:
    """Fetches ``http:`` and ``https:`` URLs with a bounded response size."""

    def __init__(
        self,
        read_limit: int,
        user_agent: str,
        *,
        timeout: float = 100.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.read_limit = read_limit
        self._client = httpx.Client(
            headers={"User-Agent": user_agent},
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def read_resource(self, url: str) -> bytes | None:
        if _parse_url(url).scheme not in REMOTE_SCHEMES:
            return None
        logger.debug("Fetching remote resource %s", url)
        try:
            with self._client.stream("GET", url) as response:
                response.raise_for_status()
                declared = response.headers.get("content-length")
                if declared and declared.isdigit() and int(declared) > self.read_limit:
                    raise ResourceLimitExceeded(
                        url, f"Content-Length {declared} exceeds the read limit of {self.read_limit} bytes"
                    )
                chunks: list[bytes] = []
                total = 0
                for chunk in response.iter_bytes(chunk_size=_CHUNK_SIZE):
                    total += len(chunk)
                    if total > self.read_limit:
                        raise ResourceLimitExceeded(
                            url, f"Response exceeded the read limit of {self.read_limit} bytes"
                        )
                    chunks.append(chunk)
        except httpx.HTTPError as exc:
            raise ResourceFetchError(url, f"HTTP request failed for {url}: {exc}") from exc
        logger.debug("Fetched %d bytes from %s", total, url)
        return b"".join(chunks)


class DispatchingResourceHandler:
    """Tries each handler in order; the first one that claims a URL decides the outcome."""

    def __init__(self, handlers: Sequence[ResourceUrlHandler]) -> None:
        self._handlers = list(handlers)

    @property
    def handlers(self) -> list[ResourceUrlHandler]:
        return list(self._handlers)

    def read_resource(self, url: str) -> bytes:
        scheme = _parse_url(url).scheme
        for handler in self._handlers:
            data = handler.read_resource(url)
            if data is not None:
                return data
        if scheme in REMOTE_SCHEMES:
            raise RemoteAccessDisabled(url, f"Remote resource access is disabled: {url}")
        raise UnsupportedResourceUrl(url, f"No handler for resource URL: {url}")

    def close(self) -> None:
        for handler in self._handlers:
            close = getattr(handler, "close", None)
            if callable(close):
                close()


def create_resource_handler(
    access: ResourceAccess,
    config: ResourceConfig | None = None,
) -> DispatchingResourceHandler:
    config = config or ResourceConfig()
    handlers: list[ResourceUrlHandler] = [FileResourceHandler(config.read_limit)]
    if access is ResourceAccess.REMOTE:
        logger.debug(
            "Remote resource access permitted, creating HTTP client with user agent %s",
            config.user_agent,
        )
        handlers.append(HttpResourceHandler(config.read_limit, config.user_agent, timeout=config.timeout_s))
    return DispatchingResourceHandler(handlers)


__all__ = [
    "DispatchingResourceHandler",
    "FileResourceHandler",
    "HttpResourceHandler",
    "REMOTE_SCHEMES",
    "ResourceUrlHandler",
    "create_resource_handler",
]

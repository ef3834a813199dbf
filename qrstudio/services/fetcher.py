"""Guarded download of user-supplied logo images.

The logo URL comes straight from the query string, so the fetcher refuses
plain http, loopback and the RFC1918 private ranges before any socket is
opened, never follows redirects, and caps the body size both on the
declared ``Content-Length`` and on the bytes actually received.

The host blocklist is deliberately small: IPv6 literals, link-local
addresses and DNS names resolving to private addresses are not caught.
"""
from __future__ import annotations

import logging

import httpx

from qrstudio.config import get_settings
from qrstudio.models import RemoteImage

logger = logging.getLogger(__name__)

_BLOCKED_HOSTS = frozenset({"localhost", "127.0.0.1"})
_BLOCKED_PREFIXES = ("192.168.", "10.")


class FetchError(Exception):
    """Base class for every logo download failure."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{reason} ({url})")
        self.url = url
        self.reason = reason


class UrlRejected(FetchError):
    """The URL is not https or points at a private/loopback host."""


class DownloadFailed(FetchError):
    """Non-2xx response, network error or timeout."""


class LogoTooLarge(FetchError):
    """The declared or actual body exceeds the configured cap."""


def _in_private_172_block(host: str) -> bool:
    parts = host.split(".")
    if len(parts) < 2 or parts[0] != "172" or not parts[1].isdigit():
        return False
    return 16 <= int(parts[1]) <= 31


def is_admissible_logo_url(url: str) -> bool:
    """Return True if ``url`` is https and does not target a blocked host."""

    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError):
        return False

    if parsed.scheme != "https":
        return False

    host = parsed.host.lower()
    if not host or host in _BLOCKED_HOSTS:
        return False
    if host.startswith(_BLOCKED_PREFIXES):
        return False
    if _in_private_172_block(host):
        return False
    return True


def _declared_length(response: httpx.Response) -> int | None:
    raw = response.headers.get("content-length")
    if raw is None:
        return None
    try:
        value = int(raw)
    except ValueError:
        return None
    return value if value >= 0 else None


class LogoFetcher:  # pylint: disable=too-few-public-methods
    """Single-shot downloader for logo images.

    A fresh ``httpx.AsyncClient`` is opened for every fetch; nothing is
    pooled or cached between requests.
    """

    def __init__(
        self,
        *,
        max_bytes: int = 500 * 1024,
        timeout: float = 8.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._max_bytes = max_bytes
        self._timeout = timeout
        self._transport = transport

    @property
    def max_bytes(self) -> int:
        return self._max_bytes

    async def fetch(self, url: str) -> RemoteImage:
        """Download ``url`` and return its body.

        Raises
        ------
        UrlRejected
            If the URL fails the scheme/host checks.
        DownloadFailed
            On non-2xx status, transport error or timeout.
        LogoTooLarge
            If the declared or received size exceeds ``max_bytes``.
        """

        if not is_admissible_logo_url(url):
            raise UrlRejected(url, "logo must be an https URL on a public host")

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=False,
                transport=self._transport,
            ) as client:
                async with client.stream("GET", url) as response:
                    return await self._read_body(url, response)
        except httpx.HTTPError as exc:
            raise DownloadFailed(url, f"logo download failed: {exc!r}") from exc

    async def _read_body(self, url: str, response: httpx.Response) -> RemoteImage:
        if not response.is_success:
            raise DownloadFailed(url, f"logo download returned HTTP {response.status_code}")

        declared = _declared_length(response)
        if declared is not None and declared > self._max_bytes:
            raise LogoTooLarge(url, f"declared logo size {declared} exceeds {self._max_bytes} bytes")

        body = bytearray()
        async for chunk in response.aiter_bytes():
            body.extend(chunk)
            # the declared length is advisory; the bytes received are what count
            if len(body) > self._max_bytes:
                raise LogoTooLarge(url, f"logo body exceeds {self._max_bytes} bytes")

        logger.debug("GET %s -> %d bytes", url, len(body))
        return RemoteImage(
            content=bytes(body),
            declared_length=declared,
            content_type=response.headers.get("content-type"),
        )


def get_logo_fetcher() -> LogoFetcher:
    """FastAPI dependency returning a fetcher built from settings."""

    settings = get_settings()
    return LogoFetcher(
        max_bytes=settings.logo_max_bytes,
        timeout=settings.logo_timeout_seconds,
    )

from __future__ import annotations

import asyncio

import httpx
import pytest

from conftest import make_png, mock_fetcher, unreachable
from qrstudio.services.fetcher import (
    DownloadFailed,
    FetchError,
    LogoTooLarge,
    UrlRejected,
    is_admissible_logo_url,
)

LOGO_URL = "https://cdn.example.com/logo.png"
CAP = 500 * 1024


@pytest.mark.parametrize(
    "url",
    [
        "http://cdn.example.com/logo.png",
        "ftp://cdn.example.com/logo.png",
        "https://localhost/logo.png",
        "https://LOCALHOST:8443/logo.png",
        "https://127.0.0.1/logo.png",
        "https://192.168.1.20/logo.png",
        "https://10.0.0.5:9000/a/b/logo.png",
        "https://172.16.0.1/logo.png",
        "https://172.31.255.255/logo.png",
        "http://10.0.0.5/logo.png",
        "not a url",
        "",
    ],
)
def test_rejects_insecure_or_private_urls(url: str) -> None:
    assert not is_admissible_logo_url(url)


@pytest.mark.parametrize(
    "url",
    [
        LOGO_URL,
        "https://172.15.0.1/logo.png",
        "https://172.32.0.1/logo.png",
        "https://8.8.8.8/logo.png",
        "https://10-example.com/logo.png",
    ],
)
def test_accepts_public_https_urls(url: str) -> None:
    assert is_admissible_logo_url(url)


def test_rejected_url_never_hits_network() -> None:
    fetcher = mock_fetcher(unreachable)
    with pytest.raises(UrlRejected):
        asyncio.run(fetcher.fetch("https://192.168.0.1/logo.png"))


def test_fetch_returns_body() -> None:
    body = make_png(16, 16)

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        return httpx.Response(200, content=body, headers={"content-type": "image/png"})

    remote = asyncio.run(mock_fetcher(handler).fetch(LOGO_URL))
    assert remote.content == body
    assert remote.declared_length == len(body)
    assert remote.content_type == "image/png"


@pytest.mark.parametrize("status", [404, 500, 302])
def test_non_success_status_fails(status: int) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, headers={"location": "https://10.0.0.1/"})

    with pytest.raises(DownloadFailed):
        asyncio.run(mock_fetcher(handler).fetch(LOGO_URL))


def test_declared_length_over_cap_fails_fast() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"tiny", headers={"content-length": str(CAP + 1)})

    with pytest.raises(LogoTooLarge) as exc_info:
        asyncio.run(mock_fetcher(handler).fetch(LOGO_URL))
    assert "declared" in str(exc_info.value)


def test_lying_declared_length_does_not_bypass_cap() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"\0" * (CAP + 1), headers={"content-length": "100"})

    with pytest.raises(LogoTooLarge):
        asyncio.run(mock_fetcher(handler).fetch(LOGO_URL))


def test_body_exactly_at_cap_is_accepted() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"\0" * 1024)

    remote = asyncio.run(mock_fetcher(handler, max_bytes=1024).fetch(LOGO_URL))
    assert len(remote.content) == 1024


def test_transport_error_is_wrapped() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(DownloadFailed) as exc_info:
        asyncio.run(mock_fetcher(handler).fetch(LOGO_URL))
    assert isinstance(exc_info.value.__cause__, httpx.ConnectTimeout)
    assert isinstance(exc_info.value, FetchError)

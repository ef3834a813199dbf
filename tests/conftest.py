"""Shared pytest fixtures and helpers for qrstudio tests."""

from __future__ import annotations

import io
import struct
import zlib
from typing import Callable

import httpx
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from qrstudio.main import app
from qrstudio.services.fetcher import LogoFetcher, get_logo_fetcher

Handler = Callable[[httpx.Request], httpx.Response]

RED = (255, 0, 0, 255)


def make_png(width: int, height: int, color: tuple[int, int, int, int] = RED) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGBA", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


def _png_chunk(kind: bytes, payload: bytes) -> bytes:
    return struct.pack(">I", len(payload)) + kind + payload + struct.pack(">I", zlib.crc32(kind + payload))


def make_broken_png(side: int = 64) -> bytes:
    """PNG whose header and first IDAT are valid but whose second data chunk has a bogus type."""
    rows = b"".join(b"\x00" + b"\xff\x00\x00" * side for _ in range(side))
    data = zlib.compress(rows)
    half = len(data) // 2
    return b"".join(
        [
            b"\x89PNG\r\n\x1a\n",
            _png_chunk(b"IHDR", struct.pack(">IIBBBBB", side, side, 8, 2, 0, 0, 0)),
            _png_chunk(b"IDAT", data[:half]),
            _png_chunk(b"\x00\x01\x02\x03", data[half:]),
            _png_chunk(b"IEND", b""),
        ]
    )


def open_png(data: bytes) -> Image.Image:
    img = Image.open(io.BytesIO(data))
    img.load()
    return img


def decode_qr(data: bytes) -> str:
    """Decode a QR code PNG with OpenCV; skips if OpenCV is unavailable."""
    cv2 = pytest.importorskip("cv2")
    np = pytest.importorskip("numpy")
    rgb = np.array(open_png(data).convert("RGB"))
    bgr = np.ascontiguousarray(rgb[:, :, ::-1])
    text, _, _ = cv2.QRCodeDetector().detectAndDecode(bgr)
    return text


def mock_fetcher(handler: Handler, *, max_bytes: int = 500 * 1024) -> LogoFetcher:
    return LogoFetcher(max_bytes=max_bytes, transport=httpx.MockTransport(handler))


def unreachable(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"no request expected, got {request.url}")


@pytest.fixture
def logo_png() -> bytes:
    """Small opaque red square."""
    return make_png(10, 10)


@pytest.fixture
def client() -> TestClient:
    """API client whose logo fetcher never touches the network."""
    app.dependency_overrides[get_logo_fetcher] = lambda: mock_fetcher(unreachable)
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def logo_server(client: TestClient) -> Callable[[Handler], None]:
    """Route logo downloads made by ``client`` through ``handler``."""

    def install(handler: Handler) -> None:
        app.dependency_overrides[get_logo_fetcher] = lambda: mock_fetcher(handler)

    return install

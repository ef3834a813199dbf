"""QR generation pipeline.

    validate -> encode -> [fetch logo -> fit -> composite] -> PNG

The bracketed logo branch is best effort: ``apply_logo`` is the one place
where its failures are caught, logged and turned into "no logo".
"""
from __future__ import annotations

import logging

from fastapi.concurrency import run_in_threadpool
from PIL import Image

from qrstudio.config import get_settings
from qrstudio.models import GenerationRequest
from qrstudio.services.compositor import compose, to_png_bytes
from qrstudio.services.encoder import encode_symbol
from qrstudio.services.fetcher import FetchError, LogoFetcher
from qrstudio.services.overlay import (
    LogoProcessingError,
    build_plate,
    compute_geometry,
    resize_logo,
)

logger = logging.getLogger(__name__)


def _overlay(base: Image.Image, content: bytes) -> Image.Image:
    geometry = compute_geometry(base.width)
    logo = resize_logo(content, geometry.logo_size)
    plate = build_plate(geometry)
    return compose(base, plate, logo, geometry)


async def apply_logo(base: Image.Image, logo_url: str, fetcher: LogoFetcher) -> Image.Image:
    """Overlay the logo at ``logo_url`` onto ``base``.

    Never raises for logo problems: on any fetch or processing failure the
    unmodified ``base`` is returned and the cause is logged.
    """

    try:
        remote = await fetcher.fetch(logo_url)
        result = await run_in_threadpool(_overlay, base, remote.content)
    except (FetchError, LogoProcessingError) as exc:
        logger.warning("Logo skipped for %s: %s", logo_url, exc)
        return base

    logger.info("Logo overlay applied from %s (%d bytes)", logo_url, len(remote.content))
    return result


async def render(request: GenerationRequest, fetcher: LogoFetcher) -> Image.Image:
    """Run the pipeline for an already validated request.

    Raises
    ------
    EncodingError
        If the QR symbol cannot be generated.
    """

    settings = get_settings()
    base = await run_in_threadpool(
        encode_symbol,
        request.payload,
        foreground=request.foreground,
        background=request.background,
        size=request.size,
        quiet_zone=settings.quiet_zone_modules,
    )
    if request.logo_url is None:
        return base
    return await apply_logo(base, request.logo_url, fetcher)


async def render_png(request: GenerationRequest, fetcher: LogoFetcher) -> bytes:
    image = await render(request, fetcher)
    return await run_in_threadpool(to_png_bytes, image)

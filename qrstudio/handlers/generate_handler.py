"""HTTP endpoint that renders QR codes as PNG images."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, Response

from qrstudio.config import get_settings
from qrstudio.services.encoder import EncodingError
from qrstudio.services.fetcher import LogoFetcher, get_logo_fetcher
from qrstudio.services.pipeline import render_png
from qrstudio.services.validator import ValidationError, validate

router = APIRouter()
logger = logging.getLogger(__name__)

GENERIC_ERROR = "failed to generate QR code"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.get("/api/generate")
async def generate(
    url: str | None = Query(None, description="Payload to encode (required)."),
    color: str | None = Query(None, description="Foreground hex color, default #000000."),
    logo: str | None = Query(None, description="https URL of a logo to place at the center."),
    size: str | None = Query(None, description="Side length in pixels, 100-1200, default 400."),
    bg_color: str | None = Query(None, alias="bgColor", description="Background hex color, default #ffffff."),
    download: str | None = Query(None, description='"true" to serve as an attachment.'),
    fetcher: LogoFetcher = Depends(get_logo_fetcher),
):
    settings = get_settings()
    try:
        req = validate(
            {
                "url": url,
                "color": color,
                "logo": logo,
                "size": size,
                "bgColor": bg_color,
                "download": download,
            }
        )
    except ValidationError as exc:
        logger.info("Rejected request: %s", exc.message)
        return _error(400, exc.message)

    logger.debug("Generating %dpx QR for %r (logo=%s)", req.size, req.payload, req.logo_url)
    try:
        png = await render_png(req, fetcher)
    except EncodingError:
        logger.exception("QR encoding failed")
        return _error(500, GENERIC_ERROR)
    except Exception:  # pragma: no cover
        logger.exception("Unexpected error during QR generation")
        return _error(500, GENERIC_ERROR)

    headers = {"Cache-Control": f"public, max-age={settings.cache_max_age_seconds}"}
    if req.force_download:
        headers["Content-Disposition"] = f'attachment; filename="{settings.download_filename}"'
    return Response(content=png, media_type="image/png", headers=headers)

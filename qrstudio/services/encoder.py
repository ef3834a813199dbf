"""QR symbol rendering on top of the ``qrcode`` library.

``qrcode`` is only asked for the module matrix; rasterization is done
here with Pillow so the output is exactly ``size x size`` pixels in RGBA,
whatever version the library picks for the payload.
"""
from __future__ import annotations

import logging

import qrcode
from PIL import Image
from qrcode.constants import ERROR_CORRECT_H

from qrstudio.models import Color

logger = logging.getLogger(__name__)

DEFAULT_QUIET_ZONE = 2


class EncodingError(Exception):
    """Raised when the payload cannot be turned into a QR raster."""


def build_matrix(payload: str, *, quiet_zone: int = DEFAULT_QUIET_ZONE) -> list[list[bool]]:
    """Return the module matrix, quiet zone included.

    Error correction is always ``H`` (~30% recoverable): the logo overlay
    destroys the modules under it and the decoder has to rebuild them.
    """

    qr = qrcode.QRCode(
        version=None,  # let the library pick
        error_correction=ERROR_CORRECT_H,
        box_size=1,
        border=quiet_zone,
    )
    qr.add_data(payload)
    qr.make(fit=True)
    return qr.get_matrix()


def encode_symbol(
    payload: str,
    *,
    foreground: Color,
    background: Color,
    size: int,
    quiet_zone: int = DEFAULT_QUIET_ZONE,
) -> Image.Image:
    """Render ``payload`` as an RGBA QR code of ``size x size`` pixels.

    Raises
    ------
    EncodingError
        If the payload does not fit any QR version or rendering fails.
    """

    try:
        matrix = build_matrix(payload, quiet_zone=quiet_zone)
    except Exception as exc:
        raise EncodingError(f"could not encode payload: {exc}") from exc

    modules = len(matrix)
    mask = Image.new("L", (modules, modules), 0)
    mask.putdata([255 if dark else 0 for row in matrix for dark in row])

    dark = Image.new("RGBA", (modules, modules), foreground.rgba)
    light = Image.new("RGBA", (modules, modules), background.rgba)
    symbol = Image.composite(dark, light, mask)

    logger.debug("Encoded %d chars into %dx%d modules", len(payload), modules, modules)
    # nearest neighbour keeps module edges hard at non-integer scales
    return symbol.resize((size, size), Image.Resampling.NEAREST)

"""Logo overlay geometry, backing plate and logo fitting.

All sizes derive from the canvas side length:

    logo   = 22% of the canvas
    plate  = 115% of the logo
    radius = 15% of the plate

and both squares are centered on the canvas.
"""
from __future__ import annotations

import io
import logging
import math

from PIL import Image, ImageChops, ImageDraw, ImageOps

from qrstudio.models import OverlayGeometry

logger = logging.getLogger(__name__)

LOGO_RATIO = 0.22
PLATE_RATIO = 1.15
CORNER_RATIO = 0.15

_PLATE_FILL = (255, 255, 255, 255)
_TRANSPARENT = (255, 255, 255, 0)


class LogoProcessingError(Exception):
    """Raised when the logo cannot be decoded, fitted or placed."""


def compute_geometry(size: int) -> OverlayGeometry:
    """Return the overlay layout for a ``size x size`` canvas.

    Raises
    ------
    LogoProcessingError
        If the layout is degenerate (no room for even a 1px logo).
    """

    logo_size = math.floor(size * LOGO_RATIO)
    plate_size = math.floor(logo_size * PLATE_RATIO)
    if logo_size < 1 or plate_size > size:
        raise LogoProcessingError(f"canvas of {size}px is too small for a logo overlay")

    return OverlayGeometry(
        canvas_size=size,
        logo_size=logo_size,
        logo_offset=(size - logo_size) // 2,
        plate_size=plate_size,
        plate_offset=(size - plate_size) // 2,
        corner_radius=math.floor(plate_size * CORNER_RATIO),
    )


def rounded_mask(size: int, radius: int) -> Image.Image:
    """Single-channel mask: 255 inside a rounded square, 0 outside."""

    mask = Image.new("L", (size, size), 0)
    draw = ImageDraw.Draw(mask)
    draw.rounded_rectangle((0, 0, size - 1, size - 1), radius=radius, fill=255)
    return mask


def build_plate(geometry: OverlayGeometry) -> Image.Image:
    """White rounded square that sits between the code and the logo.

    A solid white square is generated first, then its alpha channel is
    intersected with the rounded mask ("dest-in"), so only pixels inside
    the rounded rectangle remain opaque.
    """

    side = geometry.plate_size
    plate = Image.new("RGBA", (side, side), _PLATE_FILL)
    mask = rounded_mask(side, geometry.corner_radius)
    plate.putalpha(ImageChops.multiply(plate.getchannel("A"), mask))
    return plate


def resize_logo(content: bytes, logo_size: int) -> Image.Image:
    """Fit the downloaded logo into a transparent ``logo_size`` square.

    The aspect ratio is preserved and the image is centered; non-square
    logos are padded, never cropped or stretched.

    Raises
    ------
    LogoProcessingError
        If Pillow cannot decode the bytes or the fit degenerates.
    """

    try:
        with Image.open(io.BytesIO(content)) as img:
            img.load()
            logo = img.convert("RGBA")
        fitted = ImageOps.contain(logo, (logo_size, logo_size), Image.Resampling.LANCZOS)
    except Exception as exc:  # Pillow plugins also raise SyntaxError, struct.error, ...
        raise LogoProcessingError(f"could not decode or fit logo: {exc}") from exc

    canvas = Image.new("RGBA", (logo_size, logo_size), _TRANSPARENT)
    left = (logo_size - fitted.width) // 2
    top = (logo_size - fitted.height) // 2
    canvas.paste(fitted, (left, top))
    logger.debug("Logo %s fitted into %dx%d", logo.size, logo_size, logo_size)
    return canvas

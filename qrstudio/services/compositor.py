"""Layered "over" compositing of the plate and logo onto the QR raster."""
from __future__ import annotations

import io

from PIL import Image

from qrstudio.models import CompositeLayer, OverlayGeometry
from qrstudio.services.overlay import LogoProcessingError


def overlay_layers(plate: Image.Image, logo: Image.Image, geometry: OverlayGeometry) -> list[CompositeLayer]:
    """Bottom-to-top layer stack; the plate must go down before the logo."""

    return [
        CompositeLayer(raster=plate, top=geometry.plate_offset, left=geometry.plate_offset),
        CompositeLayer(raster=logo, top=geometry.logo_offset, left=geometry.logo_offset),
    ]


def compose(
    base: Image.Image,
    plate: Image.Image,
    logo: Image.Image,
    geometry: OverlayGeometry,
) -> Image.Image:
    """Return a new RGBA image with plate then logo blended over ``base``.

    ``base`` itself is left untouched.

    Raises
    ------
    LogoProcessingError
        If a layer does not fit inside the base raster.
    """

    canvas = base.convert("RGBA") if base.mode != "RGBA" else base.copy()
    for layer in overlay_layers(plate, logo, geometry):
        try:
            canvas.alpha_composite(layer.raster.convert("RGBA"), dest=(layer.left, layer.top))
        except ValueError as exc:
            raise LogoProcessingError(f"layer at ({layer.left}, {layer.top}) does not fit: {exc}") from exc
    return canvas


def to_png_bytes(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()

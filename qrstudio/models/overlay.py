from __future__ import annotations

from PIL import Image
from pydantic import BaseModel, ConfigDict, Field


class OverlayGeometry(BaseModel):
    """Pixel layout of the logo and its backing plate on a square canvas."""

    model_config = ConfigDict(frozen=True)

    canvas_size: int = Field(..., ge=1)
    logo_size: int = Field(..., ge=0)
    logo_offset: int
    plate_size: int = Field(..., ge=0)
    plate_offset: int
    corner_radius: int = Field(..., ge=0)


class CompositeLayer(BaseModel):
    """A raster placed at (left, top) on the canvas beneath it."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    raster: Image.Image
    top: int
    left: int

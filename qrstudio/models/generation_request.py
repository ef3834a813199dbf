from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .color import Color


class GenerationRequest(BaseModel):
    """A fully validated QR generation request.

    Only built by ``qrstudio.services.validator.validate``; handlers never
    construct it from raw query parameters directly.
    """

    model_config = ConfigDict(frozen=True)

    payload: str = Field(..., min_length=1)
    foreground: Color
    background: Color
    size: int = Field(..., ge=100, le=1200)
    logo_url: str | None = None
    force_download: bool = False

from __future__ import annotations

import re

from PIL import ImageColor
from pydantic import BaseModel, ConfigDict, Field

HEX_COLOR_PATTERN = r"^#([0-9A-Fa-f]{3}){1,2}$"
_HEX_COLOR_RE = re.compile(HEX_COLOR_PATTERN)


def is_hex_color(value: str | None) -> bool:
    return value is not None and _HEX_COLOR_RE.fullmatch(value) is not None


class Color(BaseModel):
    """Immutable hex color literal, e.g. ``#fff`` or ``#6366F1``."""

    model_config = ConfigDict(frozen=True)

    hex: str = Field(..., pattern=HEX_COLOR_PATTERN)

    @property
    def rgba(self) -> tuple[int, int, int, int]:
        r, g, b = ImageColor.getrgb(self.hex)[:3]
        return r, g, b, 255

    def __str__(self) -> str:
        return self.hex

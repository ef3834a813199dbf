"""Query-parameter validation for the QR generation endpoint.

Raw query strings come in, a frozen ``GenerationRequest`` comes out. Every
check here runs before any rendering or network work, so a bad request
costs nothing beyond parsing.
"""
from __future__ import annotations

import re
from typing import Mapping

from qrstudio.models import Color, GenerationRequest, is_hex_color

MIN_SIZE = 100
MAX_SIZE = 1200

DEFAULT_FOREGROUND = "#000000"
DEFAULT_BACKGROUND = "#ffffff"
DEFAULT_SIZE = "400"

_INT_RE = re.compile(r"^\s*[+-]?[0-9]+")


class ValidationError(Exception):
    """Raised when a request parameter is missing or malformed."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class MissingPayload(ValidationError):
    def __init__(self) -> None:
        super().__init__("url", 'the "url" parameter is required')


class InvalidColor(ValidationError):
    _MESSAGES = {
        "color": "color must be a hex value (#RGB or #RRGGBB)",
        "bgColor": "bgColor must be a hex value (#RGB or #RRGGBB)",
    }

    def __init__(self, field: str) -> None:
        super().__init__(field, self._MESSAGES.get(field, f"{field} must be a hex value (#RGB or #RRGGBB)"))


class InvalidSize(ValidationError):
    def __init__(self) -> None:
        super().__init__("size", f"size must be between {MIN_SIZE} and {MAX_SIZE} pixels")


def parse_size(raw: str | None) -> int:
    """Parse ``size`` leniently, the way ``parseInt(raw, 10)`` would.

    Leading digits are accepted (``"400px"`` -> 400); anything without them
    is rejected.
    """

    match = _INT_RE.match(raw or "")
    if match is None:
        raise InvalidSize()
    value = int(match.group(0))
    if value < MIN_SIZE or value > MAX_SIZE:
        raise InvalidSize()
    return value


def _param(params: Mapping[str, str | None], name: str, default: str) -> str:
    # an explicitly empty value is kept so that it fails validation
    value = params.get(name)
    return default if value is None else value


def validate(params: Mapping[str, str | None]) -> GenerationRequest:
    """Build a ``GenerationRequest`` from raw query parameters.

    Checks run in a fixed order (url, color, bgColor, size) and the first
    failure is raised.

    Raises
    ------
    MissingPayload, InvalidColor, InvalidSize
    """

    payload = params.get("url")
    if not payload:
        raise MissingPayload()

    color = _param(params, "color", DEFAULT_FOREGROUND)
    if not is_hex_color(color):
        raise InvalidColor("color")

    bg_color = _param(params, "bgColor", DEFAULT_BACKGROUND)
    if not is_hex_color(bg_color):
        raise InvalidColor("bgColor")

    size = parse_size(_param(params, "size", DEFAULT_SIZE))

    return GenerationRequest(
        payload=payload,
        foreground=Color(hex=color),
        background=Color(hex=bg_color),
        size=size,
        logo_url=params.get("logo") or None,
        force_download=params.get("download") == "true",
    )

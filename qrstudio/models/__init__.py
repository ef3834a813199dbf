from .color import Color, HEX_COLOR_PATTERN, is_hex_color
from .generation_request import GenerationRequest
from .overlay import CompositeLayer, OverlayGeometry
from .remote_image import RemoteImage

__all__ = [
    "Color",
    "HEX_COLOR_PATTERN",
    "is_hex_color",
    "GenerationRequest",
    "CompositeLayer",
    "OverlayGeometry",
    "RemoteImage",
]

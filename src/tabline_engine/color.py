"""Hex/RGB conversion and alpha blending for tabline styles."""

from __future__ import annotations

import re
from typing import Any, Tuple

RGB = Tuple[int, int, int]

FALLBACK_RGB: RGB = (192, 202, 245)

_HEX_RE = re.compile(r"[0-9a-fA-F]{6}")


def hex_to_rgb(value: Any) -> RGB:
    """Parse ``#RRGGBB`` into components.

    Anything that is not a six digit hex string (with or without the leading
    ``#``) yields ``FALLBACK_RGB`` instead of raising, so a theme returning an
    odd value never aborts a render pass.
    """

    if not isinstance(value, str):
        return FALLBACK_RGB
    digits = value.replace("#", "")
    if not _HEX_RE.fullmatch(digits):
        return FALLBACK_RGB
    return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)


def rgb_to_hex(red: float, green: float, blue: float) -> str:
    return "#{:02x}{:02x}{:02x}".format(
        _channel(red), _channel(green), _channel(blue)
    )


def _channel(value: float) -> int:
    # floor first, then keep the result formattable as two hex digits
    return min(max(int(value // 1), 0), 255)


def blend_channel(top: int, bottom: int, alpha: float) -> float:
    return top * alpha + bottom * (1 - alpha)


def blend(fg: Any, bg: Any, alpha: float) -> str:
    """Linearly interpolate ``fg`` over ``bg``; ``alpha=1`` is pure ``fg``."""

    fr, fgreen, fb = hex_to_rgb(fg)
    br, bgreen, bb = hex_to_rgb(bg)
    return rgb_to_hex(
        blend_channel(fr, br, alpha),
        blend_channel(fgreen, bgreen, alpha),
        blend_channel(fb, bb, alpha),
    )


def int_to_hex(value: int) -> str:
    """Format a packed ``0xRRGGBB`` integer the way hosts report colors."""

    return "#{:06x}".format(value & 0xFFFFFF)


__all__ = [
    "RGB",
    "FALLBACK_RGB",
    "hex_to_rgb",
    "rgb_to_hex",
    "blend_channel",
    "blend",
    "int_to_hex",
]

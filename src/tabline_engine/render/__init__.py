"""Segment rendering and whole-tabline assembly."""

from .segment import (
    ACTIVE_STYLE,
    CLICK_HANDLER,
    CLOSE_HANDLER,
    INACTIVE_STYLE,
    SEPARATOR_STYLE,
    SegmentRenderer,
    icon_style_name,
)
from .tabline import FILL_STYLE, OVERFLOW_STYLE, TablineAssembler

__all__ = [
    "ACTIVE_STYLE",
    "INACTIVE_STYLE",
    "SEPARATOR_STYLE",
    "OVERFLOW_STYLE",
    "FILL_STYLE",
    "CLICK_HANDLER",
    "CLOSE_HANDLER",
    "SegmentRenderer",
    "TablineAssembler",
    "icon_style_name",
]

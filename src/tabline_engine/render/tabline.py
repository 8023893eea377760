"""Assembly of the full tabline string from the visible segments."""

from __future__ import annotations

from typing import Sequence

from tabline_engine.buffers.snapshot import BufferSnapshot
from tabline_engine.cache.highlights import HighlightCache
from tabline_engine.color import blend
from tabline_engine.layout.selector import VisibleSet

from .segment import SegmentRenderer, style_marker

OVERFLOW_STYLE = "TabLineOverflow"
FILL_STYLE = "TabLineFill"
OVERFLOW_BLEND = 0.4

LEFT_OVERFLOW = "   ‹  "
LEFT_EDGE = "  "
RIGHT_OVERFLOW = "  ›   "
FILL = "%="


class TablineAssembler:
    def __init__(self, segments: SegmentRenderer, highlights: HighlightCache) -> None:
        self._segments = segments
        self._highlights = highlights

    def assemble(
        self,
        snapshot: BufferSnapshot,
        visible: VisibleSet,
        active: int | None,
    ) -> str:
        base_fg, base_bg = self._segments.base_colors()
        overflow = self._highlights.ensure_style(
            OVERFLOW_STYLE, blend(base_fg, base_bg, OVERFLOW_BLEND), base_bg
        )

        parts: list[str] = [style_marker(overflow)]
        parts.append(LEFT_OVERFLOW if visible.has_left_overflow else LEFT_EDGE)
        parts.extend(self.render_all(visible.buffers, snapshot, active))
        if visible.has_right_overflow:
            parts.append(style_marker(overflow))
            parts.append(RIGHT_OVERFLOW)

        fill = self._highlights.ensure_style(FILL_STYLE, base_fg, base_bg)
        parts.append(style_marker(fill))
        parts.append(FILL)
        return "".join(parts)

    def render_all(
        self,
        buffers: Sequence[int],
        snapshot: BufferSnapshot,
        active: int | None,
    ) -> list[str]:
        return [self._segments.render(buffer_id, snapshot, active) for buffer_id in buffers]


__all__ = [
    "OVERFLOW_STYLE",
    "FILL_STYLE",
    "LEFT_OVERFLOW",
    "LEFT_EDGE",
    "RIGHT_OVERFLOW",
    "TablineAssembler",
]

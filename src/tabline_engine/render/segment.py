"""Rendering of a single buffer into a styled, clickable tabline segment.

Segments use the statusline markup understood by editor hosts:

``%N@handler@`` opens a click region bound to buffer ``N``, ``%X`` closes a
click region, ``%#Name#`` switches to style ``Name`` and ``%*`` resets it.
"""

from __future__ import annotations

from typing import Callable, Tuple

from tabline_engine.buffers.snapshot import BufferSnapshot, base_name, extension
from tabline_engine.cache.highlights import HighlightCache
from tabline_engine.cache.icons import IconCache
from tabline_engine.color import blend
from tabline_engine.config import TablineConfig
from tabline_engine.host.boundary import HostBoundary

CLICK_HANDLER = "tabline_click"
CLOSE_HANDLER = "tabline_close"

ACTIVE_STYLE = "TabLineActive"
INACTIVE_STYLE = "TabLineInactive"
SEPARATOR_STYLE = "TabLineSeparator"
ICON_STYLE_PREFIX = "TabLineIcon"
BASE_STYLE = "Normal"

ACTIVE_OVERLAY = "#ffffff"
INACTIVE_ICON_BLEND = 0.7


def style_marker(name: str) -> str:
    return f"%#{name}#"


def click_region(buffer_id: int, handler: str) -> str:
    return f"%{buffer_id}@{handler}@"


def icon_style_name(buffer_id: int, active: bool) -> str:
    return f"{ICON_STYLE_PREFIX}{'Active' if active else 'Inactive'}{buffer_id}"


class SegmentRenderer:
    """Turns one buffer into markup; same inputs always give the same string."""

    def __init__(
        self,
        boundary: HostBoundary,
        highlights: HighlightCache,
        icons: IconCache,
        config: Callable[[], TablineConfig],
        *,
        click_handler: str = CLICK_HANDLER,
        close_handler: str = CLOSE_HANDLER,
    ) -> None:
        self._boundary = boundary
        self._highlights = highlights
        self._icons = icons
        self._config = config
        self.click_handler = click_handler
        self.close_handler = close_handler

    def base_colors(self) -> Tuple[str, str]:
        return self._boundary.style_colors(BASE_STYLE)

    def buffer_style(self, active: bool) -> Tuple[str, str]:
        """Register the active/inactive entry style; returns ``(name, bg)``."""

        style = self._config().style
        base_fg, base_bg = self.base_colors()
        if active:
            bg = blend(ACTIVE_OVERLAY, base_bg, style.active_bg_blend)
            name = self._highlights.ensure_style(
                ACTIVE_STYLE, base_fg, bg, {"bold": False}
            )
            return name, bg
        fg = blend(base_fg, base_bg, style.inactive_fg_blend)
        return self._highlights.ensure_style(INACTIVE_STYLE, fg, base_bg), base_bg

    def separator_style(self) -> str:
        base_fg, base_bg = self.base_colors()
        fg = blend(base_fg, base_bg, self._config().style.separator_opacity)
        return self._highlights.ensure_style(SEPARATOR_STYLE, fg, base_bg)

    def render(self, buffer_id: int, snapshot: BufferSnapshot, active: int | None) -> str:
        config = self._config()
        is_active = buffer_id == active
        is_modified = self._boundary.is_modified(buffer_id).value_or(False)

        path = snapshot.path(buffer_id)
        name = snapshot.display_name(buffer_id)
        filetype = self._boundary.filetype(buffer_id).value_or("")
        glyph, icon_role = self._icons.resolve(base_name(path), extension(path), filetype)

        buffer_style, buffer_bg = self.buffer_style(is_active)
        separator = self.separator_style()

        icon_fg, _ = self._boundary.style_colors(icon_role)
        if not is_active:
            icon_fg = blend(icon_fg, buffer_bg, INACTIVE_ICON_BLEND)
        icon_style = self._highlights.ensure_style(
            icon_style_name(buffer_id, is_active), icon_fg, buffer_bg
        )

        parts = [
            click_region(buffer_id, self.click_handler),
            style_marker(buffer_style),
            config.style.padding,
            style_marker(icon_style),
            f"{glyph} " if glyph else "",
            style_marker(buffer_style),
            name,
        ]
        if is_modified:
            parts.append(" ")
            parts.append(config.modified)
        else:
            parts.append(
                f" {click_region(buffer_id, self.close_handler)}{config.close}%X"
            )
        parts.append(config.style.padding)
        parts.append(style_marker(separator))
        parts.append(config.separator)
        parts.append("%*")
        return "".join(parts)


__all__ = [
    "CLICK_HANDLER",
    "CLOSE_HANDLER",
    "ACTIVE_STYLE",
    "INACTIVE_STYLE",
    "SEPARATOR_STYLE",
    "BASE_STYLE",
    "SegmentRenderer",
    "style_marker",
    "click_region",
    "icon_style_name",
]

"""Textual-facing host and adapter around a ``TablineEngine``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from rich.style import Style
from rich.text import Text

from tabline_engine.engine import TablineEngine
from tabline_engine.host.memory import MemoryHost
from tabline_engine.keymaps import NORMAL_MODE, KeyStroke

from .markup import statusline_to_text


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks the host uses to reach Textual widgets."""

    update_tabline: Callable[[], None]
    notify: Callable[[str, str], None] = _noop
    log: Callable[[str], None] = _noop


class TextualHost(MemoryHost):
    """``MemoryHost`` whose display surface forwards to Textual hooks."""

    def __init__(self, hooks: TextualUIHooks, *, width: int = 120) -> None:
        super().__init__(width=width)
        self.hooks = hooks

    def redraw_tabline(self) -> None:
        super().redraw_tabline()
        self.hooks.update_tabline()

    def notify(self, message: str, level: str = "info") -> None:
        super().notify(message, level)
        self.hooks.notify(message, level)

    def rich_style(self, name: str) -> Style:
        fg, bg = self.get_style(name)
        registered = self.styles.get(name)
        bold = bool(registered.attrs.get("bold")) if registered else False
        return Style(
            color=fg if isinstance(fg, str) else None,
            bgcolor=bg if isinstance(bg, str) else None,
            bold=bold,
        )


class TextualTablineAdapter:
    """Routes Textual keys, clicks and resizes into the engine."""

    def __init__(self, engine: TablineEngine, host: TextualHost) -> None:
        self.engine = engine
        self.host = host

    def handle_key(self, key: str, *, modifiers: Iterable[str] = ()) -> bool:
        """Run the tabline action bound to ``key``; ``False`` when unbound."""

        token = KeyStroke.parse(key).token
        if modifiers:
            token = KeyStroke(key, tuple(modifiers)).token
        action = self.engine.keymaps.lookup(NORMAL_MODE, (token,))
        self.host.hooks.log(f"key -> {token} action={action.id if action else None}")
        if action is None:
            return False
        action()
        return True

    def handle_click(self, handler: str, buffer_id: int) -> bool:
        if handler == self.engine.segments.close_handler:
            return self.engine.handle_close(buffer_id)
        if handler == self.engine.segments.click_handler:
            return self.engine.handle_click(buffer_id)
        return False

    def resize(self, width: int) -> None:
        self.host.resize(width)

    def click_action(self, handler: str, buffer_id: int) -> Optional[str]:
        if handler not in (
            self.engine.segments.click_handler,
            self.engine.segments.close_handler,
        ):
            return None
        return f"app.tabline_click('{handler}', {buffer_id})"

    def render(self) -> Text:
        return statusline_to_text(
            self.host.render_tabline(),
            self.host.rich_style,
            click_action=self.click_action,
            width=self.host.viewport_width(),
        )


__all__ = ["TextualUIHooks", "TextualHost", "TextualTablineAdapter"]

"""In-process host implementation used by tests and the Textual demo."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Mapping, Optional, Sequence, Set, Tuple

from .events import (
    BUFFER_DELETE,
    BUFFER_ENTER,
    BUFFER_MODIFIED,
    BUFFER_WIPEOUT,
    THEME_CHANGED,
    VIEWPORT_RESIZED,
    EventBus,
)

DEFAULT_THEME: Dict[str, Tuple[Optional[object], Optional[object]]] = {
    "Normal": ("#c0caf5", "#1a1b26"),
}


@dataclass(slots=True)
class MemoryBuffer:
    id: int
    path: str = ""
    listed: bool = True
    modified: bool = False
    filetype: str = ""
    text: str = ""


@dataclass(slots=True)
class RegisteredStyle:
    fg: Optional[str]
    bg: Optional[str]
    attrs: Dict[str, object] = field(default_factory=dict)


class MemoryHost:
    """Buffer registry, theme registry and display surface kept in memory.

    ``fail(query, buffer_id=None)`` makes a named query raise, either for
    every call or for one buffer, so callers can exercise failure paths.
    """

    def __init__(
        self,
        *,
        width: int = 120,
        theme: Optional[Mapping[str, Tuple[Optional[object], Optional[object]]]] = None,
    ) -> None:
        self.events = EventBus()
        self._buffers: Dict[int, MemoryBuffer] = {}
        self._next_id = 1
        self._current: Optional[int] = None
        self._width = width
        self.theme: Dict[str, Tuple[Optional[object], Optional[object]]] = dict(
            theme or DEFAULT_THEME
        )
        self.styles: Dict[str, RegisteredStyle] = {}
        self.style_writes: list[str] = []
        self.directories: Set[str] = set()
        self.notifications: list[tuple[str, str]] = []
        self.written: list[int] = []
        self.confirm_answer = 2
        self.confirm_prompts: list[str] = []
        self.tabline_source: Optional[Callable[[], str]] = None
        self.redraw_count = 0
        self._failures: Dict[str, Optional[Set[int]]] = {}

    # scripting helpers -------------------------------------------------------

    def open_buffer(
        self,
        path: str = "",
        *,
        filetype: str = "",
        listed: bool = True,
        modified: bool = False,
        enter: bool = True,
    ) -> int:
        buffer_id = self._next_id
        self._next_id += 1
        self._buffers[buffer_id] = MemoryBuffer(
            id=buffer_id,
            path=path,
            listed=listed,
            modified=modified,
            filetype=filetype,
        )
        if enter or self._current is None:
            self.set_current_buffer(buffer_id)
        return buffer_id

    def buffer(self, buffer_id: int) -> MemoryBuffer:
        try:
            return self._buffers[buffer_id]
        except KeyError as exc:
            raise KeyError(f"E86: Buffer {buffer_id} does not exist") from exc

    def set_modified(self, buffer_id: int, modified: bool = True) -> None:
        self.buffer(buffer_id).modified = modified
        self.events.emit(BUFFER_MODIFIED, buffer_id)

    def resize(self, width: int) -> None:
        self._width = width
        self.events.emit(VIEWPORT_RESIZED)

    def apply_theme(
        self, theme: Mapping[str, Tuple[Optional[object], Optional[object]]]
    ) -> None:
        self.theme = dict(theme)
        self.styles.clear()
        self.events.emit(THEME_CHANGED)

    def wipeout(self, buffer_id: int) -> None:
        self.events.emit(BUFFER_WIPEOUT, buffer_id)
        self._drop(buffer_id)

    def fail(self, query: str, buffer_id: Optional[int] = None) -> None:
        if buffer_id is None:
            self._failures[query] = None
            return
        targets = self._failures.setdefault(query, set())
        if targets is not None:
            targets.add(buffer_id)

    def heal(self, query: Optional[str] = None) -> None:
        if query is None:
            self._failures.clear()
        else:
            self._failures.pop(query, None)

    def render_tabline(self) -> str:
        if self.tabline_source is None:
            return ""
        return self.tabline_source()

    def _check(self, query: str, buffer_id: Optional[int] = None) -> None:
        if query not in self._failures:
            return
        targets = self._failures[query]
        if targets is None or buffer_id in targets:
            raise RuntimeError(f"{query} failed for buffer {buffer_id}")

    def _drop(self, buffer_id: int) -> None:
        self._buffers.pop(buffer_id, None)
        if self._current == buffer_id:
            remaining = [b.id for b in self._buffers.values() if b.listed]
            self._current = remaining[-1] if remaining else None
            if self._current is not None:
                self.events.emit(BUFFER_ENTER, self._current)

    # BufferRegistry ----------------------------------------------------------

    def list_buffers(self) -> Sequence[int]:
        self._check("list_buffers")
        return tuple(self._buffers)

    def is_valid(self, buffer_id: int) -> bool:
        self._check("is_valid", buffer_id)
        return buffer_id in self._buffers

    def is_listed(self, buffer_id: int) -> bool:
        self._check("is_listed", buffer_id)
        return self.buffer(buffer_id).listed

    def get_name(self, buffer_id: int) -> str:
        self._check("get_name", buffer_id)
        return self.buffer(buffer_id).path

    def is_modified(self, buffer_id: int) -> bool:
        self._check("is_modified", buffer_id)
        return self.buffer(buffer_id).modified

    def get_filetype(self, buffer_id: int) -> str:
        self._check("get_filetype", buffer_id)
        return self.buffer(buffer_id).filetype

    def is_directory(self, path: str) -> bool:
        self._check("is_directory")
        return path in self.directories

    def get_current_buffer(self) -> int:
        self._check("get_current_buffer")
        if self._current is None:
            raise RuntimeError("no current buffer")
        return self._current

    def set_current_buffer(self, buffer_id: int) -> None:
        self._check("set_current_buffer", buffer_id)
        self.buffer(buffer_id)
        self._current = buffer_id
        self.events.emit(BUFFER_ENTER, buffer_id)

    def delete_buffer(self, buffer_id: int, *, force: bool = False) -> None:
        self._check("delete_buffer", buffer_id)
        buf = self.buffer(buffer_id)
        if buf.modified and not force:
            raise RuntimeError(
                f"E89: No write since last change for buffer {buffer_id}"
            )
        self.events.emit(BUFFER_DELETE, buffer_id)
        self._drop(buffer_id)

    def write_buffer(self, buffer_id: int) -> None:
        self._check("write_buffer", buffer_id)
        self.buffer(buffer_id).modified = False
        self.written.append(buffer_id)
        self.events.emit(BUFFER_MODIFIED, buffer_id)

    def confirm(self, message: str, choices: Sequence[str], default: int) -> int:
        self._check("confirm")
        self.confirm_prompts.append(message)
        return self.confirm_answer

    # ThemeRegistry -----------------------------------------------------------

    def get_style(self, name: str) -> Tuple[Optional[object], Optional[object]]:
        self._check("get_style")
        registered = self.styles.get(name)
        if registered is not None:
            return registered.fg, registered.bg
        return self.theme.get(name, (None, None))

    def set_style(
        self,
        name: str,
        fg: Optional[str],
        bg: Optional[str],
        attrs: Mapping[str, object],
    ) -> None:
        self._check("set_style")
        self.styles[name] = RegisteredStyle(fg=fg, bg=bg, attrs=dict(attrs))
        self.style_writes.append(name)

    # DisplaySurface ----------------------------------------------------------

    def set_tabline_source(self, source: Optional[Callable[[], str]]) -> None:
        self.tabline_source = source

    def redraw_tabline(self) -> None:
        self._check("redraw_tabline")
        self.redraw_count += 1

    def viewport_width(self) -> int:
        self._check("viewport_width")
        return self._width

    def notify(self, message: str, level: str = "info") -> None:
        self.notifications.append((level, message))


__all__ = ["MemoryHost", "MemoryBuffer", "RegisteredStyle", "DEFAULT_THEME"]

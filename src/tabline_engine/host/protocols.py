"""Capability contracts the engine consumes from its host editor."""

from __future__ import annotations

from typing import Callable, Mapping, Optional, Protocol, Sequence, Tuple

from .events import EventBus

# (foreground, background); hosts may report packed ints or hex strings
StyleColors = Tuple[Optional[object], Optional[object]]


class BufferRegistry(Protocol):
    """Buffer listing, metadata and lifecycle operations."""

    def list_buffers(self) -> Sequence[int]:
        """Return every known buffer handle in host order."""
        ...

    def is_valid(self, buffer_id: int) -> bool:
        ...

    def is_listed(self, buffer_id: int) -> bool:
        ...

    def get_name(self, buffer_id: int) -> str:
        """Return the backing path, or an empty string for unnamed buffers."""
        ...

    def is_modified(self, buffer_id: int) -> bool:
        ...

    def get_filetype(self, buffer_id: int) -> str:
        ...

    def is_directory(self, path: str) -> bool:
        ...

    def get_current_buffer(self) -> int:
        ...

    def set_current_buffer(self, buffer_id: int) -> None:
        ...

    def delete_buffer(self, buffer_id: int, *, force: bool = False) -> None:
        ...

    def write_buffer(self, buffer_id: int) -> None:
        ...

    def confirm(self, message: str, choices: Sequence[str], default: int) -> int:
        """Ask the user to pick one of ``choices``; returns a 1-based index."""
        ...


class ThemeRegistry(Protocol):
    """Named style lookup and registration."""

    def get_style(self, name: str) -> StyleColors:
        ...

    def set_style(
        self,
        name: str,
        fg: Optional[str],
        bg: Optional[str],
        attrs: Mapping[str, object],
    ) -> None:
        ...


class DisplaySurface(Protocol):
    """Where the assembled tabline ends up."""

    def set_tabline_source(self, source: Optional[Callable[[], str]]) -> None:
        """Install (or clear with ``None``) the callable the display pulls from."""
        ...

    def redraw_tabline(self) -> None:
        ...

    def viewport_width(self) -> int:
        ...

    def notify(self, message: str, level: str = "info") -> None:
        ...


class Host(BufferRegistry, ThemeRegistry, DisplaySurface, Protocol):
    """Everything the engine needs from an editor, plus its event bus."""

    events: EventBus


__all__ = [
    "StyleColors",
    "BufferRegistry",
    "ThemeRegistry",
    "DisplaySurface",
    "Host",
]

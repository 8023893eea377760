"""Host capability contracts, the query boundary and the in-memory host."""

from .boundary import HostBoundary, QueryResult
from .events import (
    BUFFER_DELETE,
    BUFFER_ENTER,
    BUFFER_MODIFIED,
    BUFFER_WIPEOUT,
    THEME_CHANGED,
    VIEWPORT_RESIZED,
    EventBus,
    HostEvent,
)
from .memory import MemoryBuffer, MemoryHost
from .protocols import BufferRegistry, DisplaySurface, Host, StyleColors, ThemeRegistry

__all__ = [
    "BufferRegistry",
    "DisplaySurface",
    "ThemeRegistry",
    "Host",
    "StyleColors",
    "HostBoundary",
    "QueryResult",
    "EventBus",
    "HostEvent",
    "BUFFER_ENTER",
    "BUFFER_DELETE",
    "BUFFER_WIPEOUT",
    "BUFFER_MODIFIED",
    "VIEWPORT_RESIZED",
    "THEME_CHANGED",
    "MemoryHost",
    "MemoryBuffer",
]

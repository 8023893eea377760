"""Event bus carrying host notifications that invalidate the tabline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional

BUFFER_ENTER = "buffer.enter"
BUFFER_DELETE = "buffer.delete"
BUFFER_WIPEOUT = "buffer.wipeout"
BUFFER_MODIFIED = "buffer.modified"
VIEWPORT_RESIZED = "viewport.resized"
THEME_CHANGED = "theme.changed"


@dataclass(frozen=True, slots=True)
class HostEvent:
    """Payload delivered to subscribers."""

    name: str
    buffer_id: Optional[int] = None


Subscriber = Callable[[HostEvent], None]


class EventBus:
    """Minimal synchronous pub/sub used by hosts to announce changes."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Subscriber]] = {}

    def subscribe(self, event: str, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback`` and return a function that removes it."""

        self._subscribers.setdefault(event, []).append(callback)
        return lambda: self.unsubscribe(event, callback)

    def unsubscribe(self, event: str, callback: Subscriber) -> None:
        callbacks = self._subscribers.get(event)
        if not callbacks:
            return
        try:
            callbacks.remove(callback)
        except ValueError:
            return
        if not callbacks:
            self._subscribers.pop(event, None)

    def emit(self, event: str, buffer_id: Optional[int] = None) -> None:
        payload = HostEvent(name=event, buffer_id=buffer_id)
        for callback in list(self._subscribers.get(event, [])):
            callback(payload)

    def subscriber_count(self, event: Optional[str] = None) -> int:
        if event is not None:
            return len(self._subscribers.get(event, []))
        return sum(len(callbacks) for callbacks in self._subscribers.values())


__all__ = [
    "BUFFER_ENTER",
    "BUFFER_DELETE",
    "BUFFER_WIPEOUT",
    "BUFFER_MODIFIED",
    "VIEWPORT_RESIZED",
    "THEME_CHANGED",
    "HostEvent",
    "EventBus",
]

"""Single place where host calls are attempted and their failures absorbed.

Every host query goes through ``HostBoundary`` and comes back as a
``QueryResult``. Core algorithms call ``value_or(default)`` and therefore
work on total functions; nothing downstream needs its own try/except.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Mapping, Optional, Sequence, Tuple, TypeVar

from tabline_engine.color import int_to_hex
from tabline_engine.errors import HostQueryFailure
from tabline_engine.runtime import telemetry

from .protocols import Host

T = TypeVar("T")

FALLBACK_FG = "#c0caf5"
FALLBACK_BG = "#1a1b26"
FALLBACK_WIDTH = 80


@dataclass(frozen=True)
class QueryResult(Generic[T]):
    """Either a value or the ``HostQueryFailure`` that prevented it."""

    value: Optional[T] = None
    error: Optional[HostQueryFailure] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def value_or(self, default: T) -> T:
        if self.error is not None or self.value is None:
            return default
        return self.value

    @classmethod
    def success(cls, value: T) -> "QueryResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, query: str, cause: BaseException) -> "QueryResult[T]":
        return cls(error=HostQueryFailure(query, cause))


class HostBoundary:
    """Wraps a ``Host`` so each call yields a ``QueryResult``."""

    def __init__(self, host: Host, *, logger_name: str | None = None) -> None:
        self.host = host
        self.logger = telemetry.get_logger(logger_name or "tabline_engine.host")

    def _query(self, name: str, call: Callable[[], T]) -> QueryResult[T]:
        try:
            return QueryResult.success(call())
        except Exception as exc:
            self.logger.debug(f"host query {name} failed: {exc}")
            return QueryResult.failure(name, exc)

    # buffers -----------------------------------------------------------------

    def list_buffers(self) -> QueryResult[Sequence[int]]:
        return self._query("list_buffers", lambda: tuple(self.host.list_buffers()))

    def is_valid(self, buffer_id: int) -> QueryResult[bool]:
        return self._query("is_valid", lambda: bool(self.host.is_valid(buffer_id)))

    def is_listed(self, buffer_id: int) -> QueryResult[bool]:
        return self._query(
            "is_listed", lambda: bool(self.host.is_listed(buffer_id))
        )

    def buffer_name(self, buffer_id: int) -> QueryResult[str]:
        return self._query("get_name", lambda: self.host.get_name(buffer_id))

    def is_modified(self, buffer_id: int) -> QueryResult[bool]:
        return self._query(
            "is_modified", lambda: bool(self.host.is_modified(buffer_id))
        )

    def filetype(self, buffer_id: int) -> QueryResult[str]:
        return self._query(
            "get_filetype", lambda: self.host.get_filetype(buffer_id) or ""
        )

    def is_directory(self, path: str) -> QueryResult[bool]:
        return self._query("is_directory", lambda: bool(self.host.is_directory(path)))

    def current_buffer(self) -> QueryResult[int]:
        return self._query("get_current_buffer", self.host.get_current_buffer)

    def is_usable(self, buffer_id: int) -> bool:
        """Valid and listed; any failing query counts as not usable."""

        return self.is_valid(buffer_id).value_or(False) and self.is_listed(
            buffer_id
        ).value_or(False)

    # styles ------------------------------------------------------------------

    def style_colors(self, name: str) -> Tuple[str, str]:
        """Return ``(fg, bg)`` hex strings, or the fallback pair.

        Both colors must be present for the style to count, matching how a
        theme that only defines one side is treated as unusable.
        """

        result = self._query("get_style", lambda: self.host.get_style(name))
        if not result.ok or result.value is None:
            return FALLBACK_FG, FALLBACK_BG
        fg, bg = result.value
        if fg is None or bg is None:
            return FALLBACK_FG, FALLBACK_BG
        return _as_hex(fg), _as_hex(bg)

    def set_style(
        self,
        name: str,
        fg: Optional[str],
        bg: Optional[str],
        attrs: Mapping[str, object],
    ) -> QueryResult[None]:
        return self._query(
            "set_style", lambda: self.host.set_style(name, fg, bg, dict(attrs))
        )

    # display -----------------------------------------------------------------

    def viewport_width(self) -> int:
        return self._query("viewport_width", self.host.viewport_width).value_or(
            FALLBACK_WIDTH
        )

    def set_tabline_source(
        self, source: Optional[Callable[[], str]]
    ) -> QueryResult[None]:
        return self._query(
            "set_tabline_source", lambda: self.host.set_tabline_source(source)
        )

    def redraw_tabline(self) -> QueryResult[None]:
        return self._query("redraw_tabline", self.host.redraw_tabline)

    def notify(self, message: str, level: str = "info") -> None:
        result = self._query("notify", lambda: self.host.notify(message, level))
        if not result.ok:
            self.logger.warning(f"notify failed, message was: {message}")

    # actions -----------------------------------------------------------------

    def set_current_buffer(self, buffer_id: int) -> QueryResult[None]:
        return self._query(
            "set_current_buffer", lambda: self.host.set_current_buffer(buffer_id)
        )

    def delete_buffer(self, buffer_id: int, *, force: bool = False) -> QueryResult[None]:
        return self._query(
            "delete_buffer", lambda: self.host.delete_buffer(buffer_id, force=force)
        )

    def write_buffer(self, buffer_id: int) -> QueryResult[None]:
        return self._query("write_buffer", lambda: self.host.write_buffer(buffer_id))

    def confirm(self, message: str, choices: Sequence[str], default: int) -> int:
        return self._query(
            "confirm", lambda: int(self.host.confirm(message, choices, default))
        ).value_or(default)


def _as_hex(value: object) -> str:
    if isinstance(value, int) and not isinstance(value, bool):
        return int_to_hex(value)
    return str(value)


__all__ = [
    "QueryResult",
    "HostBoundary",
    "FALLBACK_FG",
    "FALLBACK_BG",
    "FALLBACK_WIDTH",
]
